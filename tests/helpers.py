"""Shared test helpers for arboretum tests.

This module provides fixture trees and payloads. The farmer tree is the
analysis of "The farmer eats the pig" used throughout the suite:

    CP
    ├── C: ∅
    └── InflP
        ├── N: farmer
        └── VP
            ├── V: eats
            └── N: pig
"""

from __future__ import annotations

import json
from typing import Any

from arboretum.syntax import Phrasal, SyntaxNode, Terminal

FARMER_SENTENCE = "The farmer eats the pig"


def farmer_tree_dict() -> dict[str, Any]:
    return {
        "label": "CP",
        "children": [
            {"label": "C", "word": "∅"},
            {
                "label": "InflP",
                "children": [
                    {"label": "N", "word": "farmer"},
                    {
                        "label": "VP",
                        "children": [
                            {"label": "V", "word": "eats"},
                            {"label": "N", "word": "pig"},
                        ],
                    },
                ],
            },
        ],
    }


def farmer_payload() -> dict[str, Any]:
    return {
        "tree": farmer_tree_dict(),
        "explanation": "A transitive clause with a null complementizer.",
        "partsOfSpeech": [
            {"word": "The", "pos": "DET"},
            {"word": "farmer", "pos": "NOUN"},
            {"word": "eats", "pos": "VERB"},
            {"word": "the", "pos": "DET"},
            {"word": "pig", "pos": "NOUN"},
        ],
    }


def farmer_json() -> str:
    return json.dumps(farmer_payload(), ensure_ascii=False)


def farmer_tree() -> SyntaxNode:
    return Phrasal(
        "CP",
        (
            Terminal("C", "∅"),
            Phrasal(
                "InflP",
                (
                    Terminal("N", "farmer"),
                    Phrasal("VP", (Terminal("V", "eats"), Terminal("N", "pig"))),
                ),
            ),
        ),
    )


def chain(depth: int, label: str = "XP") -> SyntaxNode:
    """Build a unary chain with one terminal at the given depth."""
    node: SyntaxNode = Terminal("X", "x")
    for _ in range(depth):
        node = Phrasal(label, (node,))
    return node


def lopsided_tree() -> SyntaxNode:
    """An unbalanced tree: a deep left branch beside a shallow head."""
    return Phrasal(
        "CP",
        (
            Phrasal(
                "DP",
                (
                    Phrasal(
                        "D'",
                        (
                            Terminal("D", "the"),
                            Phrasal(
                                "NP",
                                (
                                    Phrasal(
                                        "N'",
                                        (
                                            Terminal("N", "old"),
                                            Terminal("N", "farmer"),
                                        ),
                                    ),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
            Terminal("C", "∅"),
            Phrasal("VP", (Terminal("V", "sleeps"),)),
        ),
    )
