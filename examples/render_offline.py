#!/usr/bin/env python3
"""Render a canned analysis without calling the model service.

A MockLLMProvider answers with a fixed X-bar analysis of
"The farmer eats the pig", so this runs without an API key. The
script prints the tree, the growth schedule, and writes static and
animated HTML pages next to it.

Usage:
    python examples/render_offline.py
"""

import asyncio
import json
from pathlib import Path

from arboretum import Viewport, render_scene
from arboretum.config import Settings
from arboretum.llm import MockConfig, MockLLMProvider
from arboretum.parser import SyntaxParser
from arboretum.render import scene_to_html
from arboretum.visualization import print_tree

SENTENCE = "The farmer eats the pig"

ANALYSIS = {
    "tree": {
        "label": "CP",
        "children": [
            {"label": "C", "word": "∅"},
            {
                "label": "InflP",
                "children": [
                    {
                        "label": "DP",
                        "children": [
                            {"label": "D", "word": "The"},
                            {"label": "NP", "children": [{"label": "N", "word": "farmer"}]},
                        ],
                    },
                    {
                        "label": "Infl'",
                        "children": [
                            {"label": "Infl", "word": "∅"},
                            {
                                "label": "VP",
                                "children": [
                                    {"label": "V", "word": "eats"},
                                    {
                                        "label": "DP",
                                        "children": [
                                            {"label": "D", "word": "the"},
                                            {
                                                "label": "NP",
                                                "children": [{"label": "N", "word": "pig"}],
                                            },
                                        ],
                                    },
                                ],
                            },
                        ],
                    },
                ],
            },
        ],
    },
    "explanation": (
        "A simple transitive clause. The subject DP sits in the specifier of "
        "InflP, tense is carried by a null Infl head, and the clause is "
        "headed by a null complementizer."
    ),
    "partsOfSpeech": [
        {"word": "The", "pos": "DET"},
        {"word": "farmer", "pos": "NOUN"},
        {"word": "eats", "pos": "VERB"},
        {"word": "the", "pos": "DET"},
        {"word": "pig", "pos": "NOUN"},
    ],
}


async def main() -> None:
    provider = MockLLMProvider(
        MockConfig(default_response=json.dumps(ANALYSIS, ensure_ascii=False))
    )
    parser = SyntaxParser(Settings(api_key="offline"), provider=provider)
    result = await parser.parse(SENTENCE)

    print_tree(result.tree)

    viewport = Viewport(1280, 800)
    growth = render_scene(result.tree, animated=True, viewport=viewport)
    print(f"\nGrowth schedule ({growth.schedule.total_duration_ms:.0f}ms total):")
    for entry in sorted(growth.schedule, key=lambda e: (e.delay_ms, e.element_id)):
        print(f"  {entry.delay_ms:6.0f}ms  {entry.kind:<9} {entry.element_id}")

    out_dir = Path(__file__).parent
    static = render_scene(result.tree, animated=False, viewport=viewport)
    (out_dir / "farmer_tree.html").write_text(
        scene_to_html(static, SENTENCE), encoding="utf-8"
    )
    (out_dir / "farmer_growth.html").write_text(
        scene_to_html(growth, SENTENCE), encoding="utf-8"
    )
    print(f"\nWrote farmer_tree.html and farmer_growth.html to {out_dir}")


if __name__ == "__main__":
    asyncio.run(main())
