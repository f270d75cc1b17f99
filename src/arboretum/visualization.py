"""Text-based visualization for syntax trees.

This module provides functions to display parse results in
human-readable terminal output, including a tree view, labelled
bracket notation and a parts-of-speech table.
"""

from __future__ import annotations

import os
import sys
from io import StringIO
from typing import TextIO

from .syntax import ParseResult, Phrasal, SyntaxNode, Terminal


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[32m"
    CYAN = "\033[36m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    ITALIC = "\033[3m"
    RESET = "\033[0m"


def _supports_color(file: TextIO) -> bool:
    """Check if the output file supports ANSI colors."""
    # Respect NO_COLOR environment variable
    if os.environ.get("NO_COLOR"):
        return False

    if os.environ.get("FORCE_COLOR"):
        return True

    if hasattr(file, "isatty") and file.isatty():
        return True

    return False


def _node_text(node: SyntaxNode, use_color: bool) -> str:
    if isinstance(node, Terminal):
        if use_color:
            return (
                f"{Colors.BOLD}{node.label}{Colors.RESET}: "
                f"{Colors.GREEN}{Colors.ITALIC}{node.word}{Colors.RESET}"
            )
        return f"{node.label}: {node.word}"
    if use_color:
        return f"{Colors.BOLD}{Colors.CYAN}{node.label}{Colors.RESET}"
    return node.label


def print_tree(
    tree: SyntaxNode,
    file: TextIO | None = None,
    use_color: bool | None = None,
) -> None:
    """Print a syntax tree with box-drawing connectors.

    Args:
        tree: Root of the syntax tree.
        file: Output file (defaults to sys.stdout).
        use_color: Whether to use ANSI colors. Auto-detected if None.

    Example output:
        CP
        ├── C: ∅
        └── InflP
            ├── N: farmer
            └── VP
    """
    if file is None:
        file = sys.stdout

    if use_color is None:
        use_color = _supports_color(file)

    print(_node_text(tree, use_color), file=file)
    if isinstance(tree, Phrasal):
        _print_children(tree, "", file, use_color)


def _print_children(
    node: Phrasal, prefix: str, file: TextIO, use_color: bool
) -> None:
    for i, child in enumerate(node.children):
        is_last = i == len(node.children) - 1
        connector = "└── " if is_last else "├── "
        print(f"{prefix}{connector}{_node_text(child, use_color)}", file=file)
        if isinstance(child, Phrasal):
            continuation = "    " if is_last else "│   "
            _print_children(child, prefix + continuation, file, use_color)


def format_tree(tree: SyntaxNode, use_color: bool = False) -> str:
    """Format a syntax tree as a string.

    Same as print_tree but returns a string instead of printing.
    """
    buffer = StringIO()
    print_tree(tree, file=buffer, use_color=use_color)
    return buffer.getvalue()


def to_bracket_notation(tree: SyntaxNode) -> str:
    """Return labelled bracket notation, e.g. ``[CP [C ∅] [InflP ...]]``."""
    if isinstance(tree, Terminal):
        return f"[{tree.label} {tree.word}]"
    inner = " ".join(to_bracket_notation(child) for child in tree.children)
    return f"[{tree.label} {inner}]"


def format_parts_of_speech(result: ParseResult) -> str:
    """Format the parts-of-speech list as an aligned two-column table."""
    if not result.parts_of_speech:
        return "  (no parts of speech)\n"

    width = max(len(item.word) for item in result.parts_of_speech)
    width = min(width, 20)
    lines = [
        f"{item.word[:width].ljust(width)}  {item.pos}"
        for item in result.parts_of_speech
    ]
    return "\n".join(lines) + "\n"
