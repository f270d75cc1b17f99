from __future__ import annotations

from arboretum.metrics import calculate_stats
from arboretum.syntax import Terminal

from .helpers import chain, farmer_tree


def test_calculate_stats_for_farmer_tree():
    stats = calculate_stats(farmer_tree())

    assert stats["node_count"] == 7
    assert stats["terminal_count"] == 4
    assert stats["phrasal_count"] == 3
    assert stats["word_count"] == 3
    assert stats["null_head_count"] == 1
    assert stats["max_depth"] == 3
    assert stats["layers"] == 4
    assert stats["by_label"] == {"CP": 1, "C": 1, "InflP": 1, "N": 2, "VP": 1, "V": 1}
    assert stats["complexity"] == "Low"


def test_complexity_bands():
    assert calculate_stats(chain(4))["complexity"] == "Low"
    assert calculate_stats(chain(5))["complexity"] == "Moderate"
    assert calculate_stats(chain(7))["complexity"] == "Moderate"
    assert calculate_stats(chain(8))["complexity"] == "High-Density"


def test_single_terminal():
    stats = calculate_stats(Terminal("C", "∅"))
    assert stats["node_count"] == 1
    assert stats["max_depth"] == 0
    assert stats["layers"] == 1
    assert stats["word_count"] == 0
