"""Positioned hierarchy built from a validated syntax tree.

The hierarchy is the skeleton the layout engine fills in: depth, parent
links, node kind and subtree sizes are computed once here and reused by
layout and rendering so both passes agree on every node's classification.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator

from arboretum.syntax import Phrasal, SyntaxNode, Terminal


class PositionedNode:
    """A syntax node annotated for layout and rendering.

    The tree owns its nodes top-down through ``children``. The parent link
    is a weak reference, used only to draw edges and compare siblings.

    Attributes:
        node_id: Stable identifier ("n0" for the root, preorder numbering).
        node: The underlying SyntaxNode.
        depth: Distance from the root (root = 0).
        is_terminal: True if the node carries a word.
        children: Positioned children in input order.
        descendant_count: Number of nodes below this one.
        height: Distance to the deepest leaf below (0 for leaves).
        x, y: Layout coordinates (canvas space once laid out).
        extent: (min_x, max_x) of the laid-out subtree.
    """

    __slots__ = (
        "node_id",
        "node",
        "depth",
        "is_terminal",
        "children",
        "descendant_count",
        "height",
        "x",
        "y",
        "prelim",
        "extent",
        "_parent",
        "__weakref__",
    )

    def __init__(
        self,
        node_id: str,
        node: SyntaxNode,
        depth: int,
        parent: PositionedNode | None = None,
    ) -> None:
        self.node_id = node_id
        self.node = node
        self.depth = depth
        self.is_terminal = isinstance(node, Terminal)
        self.children: list[PositionedNode] = []
        self.descendant_count = 0
        self.height = 0
        self.x = 0.0
        self.y = 0.0
        self.prelim = 0.0
        self.extent: tuple[float, float] = (0.0, 0.0)
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return (
            f"PositionedNode("
            f"id={self.node_id!r}, "
            f"label={self.label!r}, "
            f"depth={self.depth}, "
            f"x={self.x:.1f}, y={self.y:.1f})"
        )

    @property
    def parent(self) -> PositionedNode | None:
        return self._parent() if self._parent is not None else None

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def word(self) -> str | None:
        return self.node.word if isinstance(self.node, Terminal) else None

    @property
    def max_depth(self) -> int:
        """Depth of the deepest node in the whole tree below this one."""
        return self.depth + self.height

    def descendants(self) -> Iterator[PositionedNode]:
        """Yield this node and everything below it in preorder."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def leaves(self) -> list[PositionedNode]:
        return [n for n in self.descendants() if not n.children]

    def links(self) -> list[tuple[PositionedNode, PositionedNode]]:
        """Return (source, target) pairs for every edge in preorder."""
        return [(n, child) for n in self.descendants() for child in n.children]

    def to_syntax(self) -> SyntaxNode:
        """Rebuild the SyntaxNode this subtree was built from."""
        if self.is_terminal:
            return self.node
        return Phrasal(
            label=self.node.label,
            children=tuple(child.to_syntax() for child in self.children),
        )


def build_hierarchy(tree: SyntaxNode) -> PositionedNode:
    """Build a positioned hierarchy from a syntax tree.

    Args:
        tree: Root of a validated syntax tree.

    Returns:
        The positioned root, with depths, parent links and subtree sizes
        filled in. Coordinates are left at zero for the layout engine.
    """
    counter = 0

    def build(node: SyntaxNode, depth: int, parent: PositionedNode | None):
        nonlocal counter
        positioned = PositionedNode(f"n{counter}", node, depth, parent)
        counter += 1
        if isinstance(node, Phrasal):
            for child in node.children:
                positioned.children.append(build(child, depth + 1, positioned))
            positioned.descendant_count = sum(
                c.descendant_count + 1 for c in positioned.children
            )
            positioned.height = 1 + max(c.height for c in positioned.children)
        return positioned

    return build(tree, 0, None)
