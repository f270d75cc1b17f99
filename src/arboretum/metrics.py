"""Metrics and analysis for syntax trees."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from arboretum.hierarchy import build_hierarchy
from arboretum.syntax import SyntaxNode


def _complexity(layers: int) -> str:
    if layers > 8:
        return "High-Density"
    if layers > 5:
        return "Moderate"
    return "Low"


def calculate_stats(tree: SyntaxNode) -> dict[str, Any]:
    """Calculate summary statistics for a syntax tree.

    Args:
        tree: Root of a validated syntax tree.

    Returns:
        Dictionary with counts, depth figures and a complexity band.
        ``max_depth`` counts edges from the root (root = 0); ``layers``
        counts levels (max_depth + 1), which is what users see as depth.
    """
    root = build_hierarchy(tree)

    terminal_count = 0
    null_head_count = 0
    by_label: dict[str, int] = defaultdict(int)

    for node in root.descendants():
        by_label[node.label] += 1
        if node.is_terminal:
            terminal_count += 1
            if node.node.is_null_head:
                null_head_count += 1

    node_count = root.descendant_count + 1
    layers = root.max_depth + 1

    return {
        "node_count": node_count,
        "terminal_count": terminal_count,
        "phrasal_count": node_count - terminal_count,
        "word_count": terminal_count - null_head_count,
        "null_head_count": null_head_count,
        "max_depth": root.max_depth,
        "layers": layers,
        "by_label": dict(by_label),
        "complexity": _complexity(layers),
    }
