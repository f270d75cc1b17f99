"""Syntax tree data structures.

This module provides the typed tree the rest of Arboretum works with:
- Phrasal: A phrase or bar-level projection (label + ordered children)
- Terminal: A head carrying a surface word (or the null-head symbol)
- ParseResult: A complete analysis returned by the linguistic model

The two node variants are closed: a node either has children or a word,
never both and never neither. Invalid nodes cannot be constructed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Union

NULL_HEAD = "∅"


@dataclass(frozen=True)
class Phrasal:
    """A phrasal node (XP or X') with ordered children.

    Attributes:
        label: Category label (e.g., "CP", "N'").
        children: Child nodes in left-to-right surface order.
    """

    label: str
    children: tuple[SyntaxNode, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not self.label.strip():
            raise ValueError("Phrasal node requires a non-empty label")
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if not self.children:
            raise ValueError(f"Phrasal node {self.label!r} requires children")

    @property
    def is_terminal(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape used by the model."""
        return {
            "label": self.label,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class Terminal:
    """A terminal node carrying a word.

    Attributes:
        label: Category label of the head (e.g., "N", "C").
        word: Surface word, or NULL_HEAD for a silent head.
    """

    label: str
    word: str

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not self.label.strip():
            raise ValueError("Terminal node requires a non-empty label")
        if not isinstance(self.word, str) or not self.word:
            raise ValueError(f"Terminal node {self.label!r} requires a word")

    @property
    def is_terminal(self) -> bool:
        return True

    @property
    def is_null_head(self) -> bool:
        return self.word == NULL_HEAD

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape used by the model."""
        return {"label": self.label, "word": self.word}


SyntaxNode = Union[Phrasal, Terminal]


@dataclass(frozen=True)
class PartOfSpeech:
    """A surface token and its part-of-speech tag."""

    word: str
    pos: str

    def to_dict(self) -> dict[str, str]:
        return {"word": self.word, "pos": self.pos}


@dataclass(frozen=True)
class ParseResult:
    """A complete syntactic analysis of one sentence.

    Attributes:
        tree: Root of the syntax tree (conventionally labelled "CP").
        explanation: Free-text derivation note from the model.
        parts_of_speech: Tokens in sentence order (not tree order).
    """

    tree: SyntaxNode
    explanation: str
    parts_of_speech: tuple[PartOfSpeech, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape used by the model."""
        return {
            "tree": self.tree.to_dict(),
            "explanation": self.explanation,
            "partsOfSpeech": [item.to_dict() for item in self.parts_of_speech],
        }


def iter_nodes(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield every node of the tree in preorder."""
    stack: list[SyntaxNode] = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, Phrasal):
            stack.extend(reversed(current.children))


def surface_words(node: SyntaxNode, include_null: bool = False) -> list[str]:
    """Return the terminal words left to right.

    Args:
        node: Root of the (sub)tree.
        include_null: Whether to keep null-head placeholders.
    """
    return [
        n.word
        for n in iter_nodes(node)
        if isinstance(n, Terminal) and (include_null or not n.is_null_head)
    ]
