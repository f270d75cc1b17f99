#!/usr/bin/env python3
"""Parse a sentence with the Gemini service and print the analysis.

Prerequisites:
1. Get an API key for the Gemini API.
2. Export it: export API_KEY=... (GEMINI_API_KEY also works)

Usage:
    python examples/parse_sentence.py
    python examples/parse_sentence.py "The old farmer quickly ate the pig"
    python examples/parse_sentence.py --html tree.html --growth
"""

import argparse
import asyncio
import sys
from pathlib import Path

from arboretum import ParseError, Viewport, render_scene
from arboretum.config import settings
from arboretum.metrics import calculate_stats
from arboretum.parser import SyntaxParser
from arboretum.render import scene_to_html
from arboretum.visualization import (
    format_parts_of_speech,
    print_tree,
    to_bracket_notation,
)


async def main(sentence: str, html_path: str | None, growth: bool) -> None:
    parser = SyntaxParser(settings)

    print(f"Parsing with model: {settings.model_name}")
    print(f"Sentence: {sentence}")
    print("-" * 40)

    try:
        result = await parser.parse(sentence)
    except ParseError as e:
        print(f"{e.kind}: {e.message}")
        if e.needs_credentials:
            print("\nSet API_KEY (or GEMINI_API_KEY) to a valid key.")
        sys.exit(1)

    print_tree(result.tree)
    print()
    print(to_bracket_notation(result.tree))
    print()
    print(result.explanation)
    print()
    print(format_parts_of_speech(result), end="")

    stats = calculate_stats(result.tree)
    print("-" * 40)
    print(
        f"Depth: {stats['layers']} layers | Nodes: {stats['node_count']} | "
        f"Complexity: {stats['complexity']}"
    )

    if html_path:
        scene = render_scene(
            result.tree,
            animated=growth,
            viewport=Viewport(settings.viewport_width, settings.viewport_height),
        )
        Path(html_path).write_text(scene_to_html(scene, sentence), encoding="utf-8")
        print(f"Wrote {html_path}")


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Parse a sentence with Gemini")
    arg_parser.add_argument(
        "sentence", nargs="?", default="The farmer eats the pig", help="Sentence"
    )
    arg_parser.add_argument("--html", help="Write the rendered tree to this file")
    arg_parser.add_argument(
        "--growth", action="store_true", help="Animate the tree growing"
    )
    args = arg_parser.parse_args()

    asyncio.run(main(args.sentence, args.html, args.growth))
