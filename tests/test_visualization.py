"""Tests for arboretum text visualization."""

import io

import pytest

from arboretum.syntax import ParseResult, PartOfSpeech, Terminal
from arboretum.visualization import (
    Colors,
    _supports_color,
    format_parts_of_speech,
    format_tree,
    print_tree,
    to_bracket_notation,
)

from .helpers import farmer_tree


def test_format_tree_plain():
    """Tree view uses box-drawing connectors and label: word for heads."""
    assert format_tree(farmer_tree()) == (
        "CP\n"
        "├── C: ∅\n"
        "└── InflP\n"
        "    ├── N: farmer\n"
        "    └── VP\n"
        "        ├── V: eats\n"
        "        └── N: pig\n"
    )


def test_format_tree_color():
    output = format_tree(farmer_tree(), use_color=True)
    assert Colors.GREEN in output
    assert Colors.RESET in output


def test_print_tree_to_file():
    buffer = io.StringIO()
    print_tree(Terminal("C", "∅"), file=buffer, use_color=False)
    assert buffer.getvalue() == "C: ∅\n"


def test_bracket_notation():
    assert to_bracket_notation(farmer_tree()) == (
        "[CP [C ∅] [InflP [N farmer] [VP [V eats] [N pig]]]]"
    )


def test_parts_of_speech_table():
    result = ParseResult(
        tree=Terminal("C", "∅"),
        explanation="x",
        parts_of_speech=(PartOfSpeech("farmer", "NOUN"), PartOfSpeech("eats", "VERB")),
    )
    assert format_parts_of_speech(result) == "farmer  NOUN\neats    VERB\n"


def test_parts_of_speech_empty():
    result = ParseResult(tree=Terminal("C", "∅"), explanation="x")
    assert "no parts of speech" in format_parts_of_speech(result)


def test_supports_color_respects_no_color(monkeypatch):
    """NO_COLOR disables colors even when FORCE_COLOR is set."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("FORCE_COLOR", "1")
    assert _supports_color(io.StringIO()) is False


@pytest.mark.parametrize("force", ["1", ""])
def test_supports_color_force(monkeypatch, force):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("FORCE_COLOR", force)
    assert _supports_color(io.StringIO()) is bool(force)
