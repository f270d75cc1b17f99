"""Tree layout for the syntax tree visualizer.

Computes deterministic x/y positions for every node of a PositionedNode
hierarchy with a tidy-tree layout:
- Children keep their left-to-right input order
- Adjacent subtrees are pushed apart by a kind-dependent separation
- Parents are centred above their first and last child
- Depth controls y position, one fixed band per level

Separation is measured in abstract units and the finished layout is
scaled into the canvas, so only the relative order of the separation
values matters: cousin > head_phrase > sibling.
"""

from __future__ import annotations

from dataclasses import dataclass

from arboretum.hierarchy import PositionedNode


@dataclass(frozen=True)
class LayoutConfig:
    # Minimum horizontal room reserved per node on the canvas.
    node_width: int = 280

    # Vertical band per depth level (label text plus the branch below it).
    level_height: int = 300

    # Canvas margins around the drawn tree.
    margin_top: int = 120
    margin_right: int = 250
    margin_bottom: int = 250
    margin_left: int = 250

    # Same parent, same kind (two phrases or two heads).
    sibling_separation: float = 2.2

    # Same parent, one head and one phrase.
    head_phrase_separation: float = 3.2

    # Nodes with different parents.
    cousin_separation: float = 4.0

    min_zoom: float = 0.1
    max_zoom: float = 8.0

    # Initial view shows the root near the top centre, slightly zoomed out.
    initial_zoom_factor: float = 0.7
    initial_offset_y: float = 140.0

    def __post_init__(self) -> None:
        if not (
            self.cousin_separation
            > self.head_phrase_separation
            > self.sibling_separation
            > 0
        ):
            raise ValueError(
                "separations must satisfy cousin > head_phrase > sibling > 0"
            )
        if not 0 < self.min_zoom <= 1 <= self.max_zoom:
            raise ValueError("zoom extent must contain 1.0")

    @property
    def zoom_extent(self) -> tuple[float, float]:
        return (self.min_zoom, self.max_zoom)


@dataclass(frozen=True)
class Viewport:
    """Size of the visible drawing area."""

    width: float
    height: float


@dataclass(frozen=True)
class ViewTransform:
    """Pan/zoom transform applied on top of layout coordinates.

    A point (x, y) in layout space is shown at (x * k + tx, y * k + ty).
    The transform never changes the layout itself.
    """

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.k + self.x, y * self.k + self.y)

    def translate(self, dx: float, dy: float) -> ViewTransform:
        return ViewTransform(self.x + dx, self.y + dy, self.k)

    def clamped(self, extent: tuple[float, float]) -> ViewTransform:
        low, high = extent
        return ViewTransform(self.x, self.y, min(max(self.k, low), high))

    def scale_by(
        self,
        factor: float,
        center: tuple[float, float],
        extent: tuple[float, float] = (0.1, 8.0),
    ) -> ViewTransform:
        """Zoom by ``factor`` keeping the screen point ``center`` fixed."""
        low, high = extent
        k = min(max(self.k * factor, low), high)
        cx, cy = center
        wx = (cx - self.x) / self.k
        wy = (cy - self.y) / self.k
        return ViewTransform(cx - wx * k, cy - wy * k, k)

    def to_svg(self) -> str:
        return f"translate({self.x:.2f},{self.y:.2f}) scale({self.k:.4f})"

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "k": self.k}


@dataclass
class TreeLayout:
    """Result of a layout pass."""

    root: PositionedNode
    width: float
    height: float
    viewport: Viewport
    transform: ViewTransform

    @property
    def nodes(self) -> list[PositionedNode]:
        return list(self.root.descendants())


def separation(a: PositionedNode, b: PositionedNode, config: LayoutConfig) -> float:
    """Return the minimum gap between two horizontally adjacent nodes."""
    if a.parent is not None and a.parent is b.parent:
        if a.is_terminal != b.is_terminal:
            return config.head_phrase_separation
        return config.sibling_separation
    return config.cousin_separation


def canvas_size(
    root: PositionedNode, viewport: Viewport, config: LayoutConfig
) -> tuple[float, float]:
    """Return the drawable canvas size for a tree.

    The canvas grows with content so nodes never overlap; large trees
    need pan/zoom to be seen in full.
    """
    node_count = root.descendant_count + 1
    width = max(viewport.width, node_count * config.node_width)
    height = max(viewport.height, (root.max_depth + 1) * config.level_height)
    return width, height


def layout_tree(
    root: PositionedNode,
    viewport: Viewport,
    config: LayoutConfig | None = None,
) -> TreeLayout:
    """Assign canvas coordinates to every node of the hierarchy.

    Args:
        root: Root of a hierarchy from build_hierarchy().
        viewport: Size of the visible area.
        config: Layout tunables (defaults to LayoutConfig()).

    Returns:
        TreeLayout with positioned nodes, canvas size and initial transform.

    Raises:
        ValueError: If the viewport has no area.
    """
    if config is None:
        config = LayoutConfig()
    if viewport.width <= 0 or viewport.height <= 0:
        raise ValueError("viewport must have a positive width and height")

    width, height = canvas_size(root, viewport, config)
    inner_width = max(
        width - config.margin_left - config.margin_right, config.node_width
    )
    inner_height = max(
        height - config.margin_top - config.margin_bottom, config.level_height
    )
    width = inner_width + config.margin_left + config.margin_right
    height = inner_height + config.margin_top + config.margin_bottom

    _first_walk(root, config)
    _second_walk(root, 0.0)
    _fit(root, inner_width, inner_height, config)
    _compute_extents(root)

    transform = initial_transform(root, width, viewport, config)
    return TreeLayout(
        root=root,
        width=width,
        height=height,
        viewport=viewport,
        transform=transform,
    )


def initial_transform(
    root: PositionedNode,
    canvas_width: float,
    viewport: Viewport,
    config: LayoutConfig,
) -> ViewTransform:
    """Fit the root into the top centre of the viewport at scale <= 1."""
    k = min(1.0, viewport.width / canvas_width) * config.initial_zoom_factor
    k = min(max(k, config.min_zoom), config.max_zoom)
    return ViewTransform(
        x=viewport.width / 2 - root.x * k,
        y=config.initial_offset_y,
        k=k,
    )


# Contour entries per level, relative to the subtree root: (x, node).
_Contour = list[tuple[float, PositionedNode]]


def _first_walk(
    node: PositionedNode, config: LayoutConfig
) -> tuple[_Contour, _Contour, float, float]:
    """Lay out a subtree relative to its root.

    Stores each child's offset from its parent in ``prelim`` and returns
    the subtree's left and right contours plus its horizontal bounds.
    """
    if not node.children:
        return [(0.0, node)], [(0.0, node)], 0.0, 0.0

    acc_left: _Contour = []
    acc_right: _Contour = []
    acc_max = 0.0
    offsets: list[float] = []
    bounds_min = 0.0
    previous: PositionedNode | None = None

    for child in node.children:
        left, right, child_min, child_max = _first_walk(child, config)
        if previous is None:
            shift = 0.0
            acc_left = list(left)
            acc_right = list(right)
            bounds_min = child_min
            acc_max = child_max
        else:
            # Whole subtrees never overlap horizontally.
            shift = acc_max + separation(previous, child, config) - child_min
            # Facing nodes on every shared level keep their separation.
            for (rx, rnode), (lx, lnode) in zip(acc_right, left):
                shift = max(shift, rx + separation(rnode, lnode, config) - lx)

            acc_left.extend((x + shift, n) for x, n in left[len(acc_left) :])
            shifted_right = [(x + shift, n) for x, n in right]
            acc_right = shifted_right + acc_right[len(shifted_right) :]
            acc_max = child_max + shift

        offsets.append(shift)
        previous = child

    mid = (offsets[0] + offsets[-1]) / 2
    for child, offset in zip(node.children, offsets):
        child.prelim = offset - mid

    left = [(0.0, node)] + [(x - mid, n) for x, n in acc_left]
    right = [(0.0, node)] + [(x - mid, n) for x, n in acc_right]
    return left, right, min(0.0, bounds_min - mid), max(0.0, acc_max - mid)


def _second_walk(node: PositionedNode, x: float) -> None:
    node.x = x
    for child in node.children:
        _second_walk(child, x + child.prelim)


def _fit(
    root: PositionedNode,
    inner_width: float,
    inner_height: float,
    config: LayoutConfig,
) -> None:
    """Scale relative coordinates into the inner canvas box."""
    nodes = list(root.descendants())
    leftmost = min(nodes, key=lambda n: n.x)
    rightmost = max(nodes, key=lambda n: n.x)

    if leftmost is rightmost:
        pad = 1.0
    else:
        pad = separation(leftmost, rightmost, config) / 2
    tx = pad - leftmost.x
    kx = inner_width / (rightmost.x + pad + tx)
    ky = inner_height / (root.max_depth or 1)

    for n in nodes:
        n.x = (n.x + tx) * kx + config.margin_left
        n.y = n.depth * ky + config.margin_top


def _compute_extents(node: PositionedNode) -> tuple[float, float]:
    low, high = node.x, node.x
    for child in node.children:
        child_low, child_high = _compute_extents(child)
        low = min(low, child_low)
        high = max(high, child_high)
    node.extent = (low, high)
    return node.extent
