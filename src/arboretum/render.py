"""Scene construction and SVG rendering for syntax trees.

render_scene() is a pure function of (tree, animated flag, viewport):
every call builds a fresh hierarchy, layout and animation schedule, so
a new render pass never inherits animations from a previous one.

The scene is plain data. scene_to_svg() and scene_to_html() turn it into
markup, playing the growth schedule back with CSS animations.
"""

from __future__ import annotations

import html
import math
from dataclasses import dataclass, field
from typing import Any

from arboretum.animation import (
    AnimationSchedule,
    AnimationTiming,
    ScheduleEntry,
    branch_id,
    build_schedule,
    connector_id,
    label_id,
)
from arboretum.hierarchy import PositionedNode, build_hierarchy
from arboretum.layout import LayoutConfig, ViewTransform, Viewport, layout_tree
from arboretum.syntax import SyntaxNode

BRANCH_COLOR = "#593a0e"
WORD_COLOR = "#10b981"
LABEL_COLOR = "#ffffff"
OUTLINE_COLOR = "#050a08"
FONT_FAMILY = "'Quicksand', sans-serif"

# Word connector runs from this far below a terminal node to its word.
CONNECTOR_TOP = 45
CONNECTOR_BOTTOM = 105
CONNECTOR_DASH = "12,8"


@dataclass(frozen=True)
class Branch:
    """Edge from a node to one of its children."""

    element_id: str
    source_id: str
    target_id: str
    path: str
    length: float


@dataclass(frozen=True)
class NodeLabel:
    """Label group for one node.

    Phrasal nodes show only their category above the node position.
    Terminal nodes show the category at the node position and the word
    below it.
    """

    element_id: str
    node_id: str
    x: float
    y: float
    label: str
    word: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.word is not None


@dataclass(frozen=True)
class Connector:
    """Dashed line from a terminal node down to its word."""

    element_id: str
    node_id: str
    x: float
    y1: float
    y2: float


@dataclass
class Scene:
    """Everything needed to draw one tree."""

    width: float
    height: float
    viewport: Viewport
    transform: ViewTransform
    zoom_extent: tuple[float, float]
    branches: list[Branch] = field(default_factory=list)
    phrasal_labels: list[NodeLabel] = field(default_factory=list)
    terminal_labels: list[NodeLabel] = field(default_factory=list)
    connectors: list[Connector] = field(default_factory=list)
    schedule: AnimationSchedule = field(
        default_factory=lambda: AnimationSchedule(animated=False)
    )

    @property
    def animated(self) -> bool:
        return self.schedule.animated

    def to_dict(self) -> dict[str, Any]:
        """Convert scene to a dictionary for JSON clients."""
        return {
            "width": self.width,
            "height": self.height,
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
            "transform": self.transform.to_dict(),
            "zoom_extent": list(self.zoom_extent),
            "branches": [
                {
                    "id": b.element_id,
                    "source": b.source_id,
                    "target": b.target_id,
                    "d": b.path,
                    "length": b.length,
                }
                for b in self.branches
            ],
            "labels": [
                {
                    "id": label.element_id,
                    "node": label.node_id,
                    "x": label.x,
                    "y": label.y,
                    "label": label.label,
                    "word": label.word,
                }
                for label in self.phrasal_labels + self.terminal_labels
            ],
            "connectors": [
                {"id": c.element_id, "x": c.x, "y1": c.y1, "y2": c.y2}
                for c in self.connectors
            ],
            "schedule": self.schedule.to_dict(),
        }


def render_scene(
    tree: SyntaxNode,
    animated: bool,
    viewport: Viewport,
    config: LayoutConfig | None = None,
    timing: AnimationTiming | None = None,
) -> Scene:
    """Build a drawable scene for a syntax tree.

    Args:
        tree: Validated syntax tree.
        animated: True for growth mode, False for a static render.
        viewport: Size of the visible area.
        config: Layout tunables.
        timing: Growth animation timing.

    Returns:
        Scene with branches, labels, connectors and the reveal schedule.
    """
    if config is None:
        config = LayoutConfig()

    root = build_hierarchy(tree)
    layout = layout_tree(root, viewport, config)
    schedule = build_schedule(root, animated, timing)

    scene = Scene(
        width=layout.width,
        height=layout.height,
        viewport=viewport,
        transform=layout.transform,
        zoom_extent=config.zoom_extent,
        schedule=schedule,
    )

    for source, target in root.links():
        path = vertical_link_path(source.x, source.y, target.x, target.y)
        scene.branches.append(
            Branch(
                element_id=branch_id(target),
                source_id=source.node_id,
                target_id=target.node_id,
                path=path,
                length=vertical_link_length(source.x, source.y, target.x, target.y),
            )
        )

    for node in root.descendants():
        _add_node(scene, node)

    return scene


def _add_node(scene: Scene, node: PositionedNode) -> None:
    label = NodeLabel(
        element_id=label_id(node),
        node_id=node.node_id,
        x=node.x,
        y=node.y,
        label=node.label,
        word=node.word,
    )
    if not node.is_terminal:
        scene.phrasal_labels.append(label)
        return

    scene.terminal_labels.append(label)
    scene.connectors.append(
        Connector(
            element_id=connector_id(node),
            node_id=node.node_id,
            x=node.x,
            y1=node.y + CONNECTOR_TOP,
            y2=node.y + CONNECTOR_BOTTOM,
        )
    )


def vertical_link_path(sx: float, sy: float, tx: float, ty: float) -> str:
    """Return an SVG path for a vertical cubic link between two nodes."""
    my = (sy + ty) / 2
    return f"M{sx:.2f},{sy:.2f}C{sx:.2f},{my:.2f} {tx:.2f},{my:.2f} {tx:.2f},{ty:.2f}"


def vertical_link_length(
    sx: float, sy: float, tx: float, ty: float, samples: int = 32
) -> float:
    """Approximate the arc length of a vertical link by sampling."""
    my = (sy + ty) / 2
    points = [(sx, sy), (sx, my), (tx, my), (tx, ty)]

    def point(t: float) -> tuple[float, float]:
        u = 1 - t
        weights = (u**3, 3 * u * u * t, 3 * u * t * t, t**3)
        return (
            sum(w * p[0] for w, p in zip(weights, points)),
            sum(w * p[1] for w, p in zip(weights, points)),
        )

    length = 0.0
    previous = point(0.0)
    for i in range(1, samples + 1):
        current = point(i / samples)
        length += math.dist(previous, current)
        previous = current
    return length


# -----------------------------------------------------------------------------
# SVG output
# -----------------------------------------------------------------------------

_KEYFRAMES = """
@keyframes arb-draw { to { stroke-dashoffset: 0; } }
@keyframes arb-fade { from { opacity: 0; } to { opacity: 1; } }
"""

_TEXT_STYLE = (
    f"font-family: {FONT_FAMILY}; paint-order: stroke; stroke: {OUTLINE_COLOR}; "
    "stroke-linecap: round; stroke-linejoin: round;"
)


def _animation_style(entry: ScheduleEntry | None, keyframes: str) -> str:
    if entry is None:
        return ""
    return (
        f"animation: {keyframes} {entry.duration_ms:.0f}ms {entry.easing} "
        f"{entry.delay_ms:.0f}ms both;"
    )


def _branch_svg(branch: Branch, schedule: AnimationSchedule) -> str:
    entry = schedule.for_element(branch.element_id)
    style = ""
    if entry is not None:
        length = f"{branch.length:.2f}"
        style = (
            f' style="stroke-dasharray: {length} {length}; '
            f'stroke-dashoffset: {length}; {_animation_style(entry, "arb-draw")}"'
        )
    return (
        f'<path id="{branch.element_id}" class="branch" d="{branch.path}" '
        f'fill="none" stroke="{BRANCH_COLOR}" stroke-width="6" '
        f'stroke-linecap="round"{style}/>'
    )


def _label_svg(label: NodeLabel, schedule: AnimationSchedule) -> str:
    fade = _animation_style(schedule.for_element(label.element_id), "arb-fade")
    style = f' style="{fade}"' if fade else ""
    parts = [
        f'<g id="{label.element_id}" class="node" '
        f'transform="translate({label.x:.2f},{label.y:.2f})"{style}>'
    ]
    text = html.escape(label.label)
    if label.is_terminal:
        word = html.escape(label.word or "")
        parts.append(
            f'<text class="terminal-label" dy="0.7em" text-anchor="middle" '
            f'font-size="40px" font-weight="900" fill="{LABEL_COLOR}" '
            f'style="{_TEXT_STYLE} stroke-width: 12px;">{text}</text>'
        )
        parts.append(
            f'<text class="word" dy="2.6em" text-anchor="middle" '
            f'font-size="56px" font-weight="700" fill="{WORD_COLOR}" '
            f'style="{_TEXT_STYLE} font-style: italic; stroke-width: 14px;">'
            f"{word}</text>"
        )
    else:
        parts.append(
            f'<text class="phrasal-label" dy="-0.7em" text-anchor="middle" '
            f'font-size="46px" font-weight="900" fill="{LABEL_COLOR}" '
            f'style="{_TEXT_STYLE} stroke-width: 16px;">{text}</text>'
        )
    parts.append("</g>")
    return "".join(parts)


def _connector_svg(connector: Connector, schedule: AnimationSchedule) -> str:
    fade = _animation_style(schedule.for_element(connector.element_id), "arb-fade")
    style = f' style="{fade}"' if fade else ""
    return (
        f'<line id="{connector.element_id}" class="connector" '
        f'x1="{connector.x:.2f}" y1="{connector.y1:.2f}" '
        f'x2="{connector.x:.2f}" y2="{connector.y2:.2f}" '
        f'stroke="{BRANCH_COLOR}" stroke-width="5" '
        f'stroke-dasharray="{CONNECTOR_DASH}"{style}/>'
    )


def scene_to_svg(scene: Scene) -> str:
    """Render a scene as a standalone SVG document."""
    schedule = scene.schedule
    body: list[str] = []
    body.extend(_branch_svg(b, schedule) for b in scene.branches)
    body.extend(_connector_svg(c, schedule) for c in scene.connectors)
    body.extend(_label_svg(label, schedule) for label in scene.phrasal_labels)
    body.extend(_label_svg(label, schedule) for label in scene.terminal_labels)

    low, high = scene.zoom_extent
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" class="syntax-tree" '
        f'width="100%" height="100%" '
        f'data-canvas-width="{scene.width:.0f}" '
        f'data-canvas-height="{scene.height:.0f}" '
        f'data-min-zoom="{low}" data-max-zoom="{high}">'
        f"<style>{_KEYFRAMES}</style>"
        f'<g class="viewport" transform="{scene.transform.to_svg()}">'
        + "".join(body)
        + "</g></svg>"
    )


PAN_ZOOM_SCRIPT = """
(function () {
  const svg = document.querySelector("svg.syntax-tree");
  if (!svg) return;
  const g = svg.querySelector("g.viewport");
  const minK = parseFloat(svg.dataset.minZoom);
  const maxK = parseFloat(svg.dataset.maxZoom);
  const m = /translate\\(([-\\d.]+),([-\\d.]+)\\) scale\\(([-\\d.]+)\\)/
    .exec(g.getAttribute("transform"));
  let x = parseFloat(m[1]), y = parseFloat(m[2]), k = parseFloat(m[3]);
  const apply = () => g.setAttribute("transform",
    `translate(${x},${y}) scale(${k})`);
  svg.addEventListener("wheel", (e) => {
    e.preventDefault();
    const rect = svg.getBoundingClientRect();
    const cx = e.clientX - rect.left, cy = e.clientY - rect.top;
    const nk = Math.min(maxK, Math.max(minK, k * Math.pow(2, -e.deltaY / 500)));
    x = cx - (cx - x) / k * nk;
    y = cy - (cy - y) / k * nk;
    k = nk;
    apply();
  }, { passive: false });
  let drag = null;
  svg.addEventListener("pointerdown", (e) => { drag = [e.clientX, e.clientY]; });
  window.addEventListener("pointerup", () => { drag = null; });
  window.addEventListener("pointermove", (e) => {
    if (!drag) return;
    x += e.clientX - drag[0];
    y += e.clientY - drag[1];
    drag = [e.clientX, e.clientY];
    apply();
  });
})();
"""


def scene_to_html(scene: Scene, title: str = "Syntax Tree") -> str:
    """Render a scene as a full HTML page with pan/zoom support."""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{html.escape(title)}</title>
    <style>
        html, body {{ margin: 0; height: 100%; background: #0b1410; }}
        .canvas {{ width: 100vw; height: 100vh; overflow: hidden; cursor: grab; }}
    </style>
</head>
<body>
    <div class="canvas">{scene_to_svg(scene)}</div>
    <script>{PAN_ZOOM_SCRIPT}</script>
</body>
</html>
"""
