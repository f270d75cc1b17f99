"""Growth animation schedule for the syntax tree visualizer.

In growth mode the tree is revealed from the leaves upward: elements
nearer the bottom of the tree start first and the root branch starts
last. The schedule is computed up front as plain data (element id ->
delay, duration) so any renderer can play it back.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from arboretum.hierarchy import PositionedNode

BRANCH = "branch"
LABEL = "label"
CONNECTOR = "connector"


@dataclass(frozen=True)
class AnimationTiming:
    """Timing constants for growth mode, in milliseconds.

    Attributes:
        step_ms: Delay added per level of distance from the deepest leaf.
        branch_duration_ms: Time to draw one branch stroke.
        label_offset_ms: Label fade-in starts this long after its level.
        label_duration_ms: Label fade-in time.
        connector_offset_ms: Word connector fade-in start, after the label.
        connector_duration_ms: Word connector fade-in time.
        branch_easing: CSS easing for the branch stroke (cubic-out).
    """

    step_ms: float = 800.0
    branch_duration_ms: float = 1000.0
    label_offset_ms: float = 400.0
    label_duration_ms: float = 800.0
    connector_offset_ms: float = 600.0
    connector_duration_ms: float = 500.0
    branch_easing: str = "cubic-bezier(0.33, 1, 0.68, 1)"
    fade_easing: str = "ease-in-out"

    def __post_init__(self) -> None:
        if self.step_ms < 0:
            raise ValueError("step_ms must not be negative")
        if self.connector_offset_ms < self.label_offset_ms:
            raise ValueError("connectors must not start before their label")


@dataclass(frozen=True)
class ScheduleEntry:
    """One scheduled reveal.

    Attributes:
        element_id: Scene element id ("branch-n3", "label-n3", ...).
        kind: One of "branch", "label", "connector".
        depth: Tree depth used for the delay (source depth for branches).
        delay_ms: Start time relative to the beginning of the animation.
        duration_ms: Length of the reveal.
        easing: CSS timing function.
    """

    element_id: str
    kind: str
    depth: int
    delay_ms: float
    duration_ms: float
    easing: str

    @property
    def end_ms(self) -> float:
        return self.delay_ms + self.duration_ms

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "kind": self.kind,
            "depth": self.depth,
            "delay_ms": self.delay_ms,
            "duration_ms": self.duration_ms,
            "easing": self.easing,
        }


@dataclass
class AnimationSchedule:
    """Every reveal of one render pass, keyed by element id."""

    animated: bool
    entries: list[ScheduleEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._by_id = {entry.element_id: entry for entry in self.entries}

    def __iter__(self) -> Iterator[ScheduleEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def for_element(self, element_id: str) -> ScheduleEntry | None:
        return self._by_id.get(element_id)

    def of_kind(self, kind: str) -> list[ScheduleEntry]:
        return [e for e in self.entries if e.kind == kind]

    @property
    def total_duration_ms(self) -> float:
        return max((e.end_ms for e in self.entries), default=0.0)

    def is_monotonic(self) -> bool:
        """Check that deeper elements never start after shallower ones."""
        for kind in (BRANCH, LABEL, CONNECTOR):
            entries = sorted(self.of_kind(kind), key=lambda e: e.depth)
            for shallow, deep in zip(entries, entries[1:]):
                if deep.depth > shallow.depth and deep.delay_ms > shallow.delay_ms:
                    return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "animated": self.animated,
            "total_duration_ms": self.total_duration_ms,
            "entries": [e.to_dict() for e in self.entries],
        }


def branch_id(target: PositionedNode) -> str:
    return f"branch-{target.node_id}"


def label_id(node: PositionedNode) -> str:
    return f"label-{node.node_id}"


def connector_id(node: PositionedNode) -> str:
    return f"connector-{node.node_id}"


def build_schedule(
    root: PositionedNode,
    animated: bool,
    timing: AnimationTiming | None = None,
) -> AnimationSchedule:
    """Compute the reveal schedule for a positioned tree.

    Static mode returns an empty schedule: everything is visible at once.
    In growth mode a branch whose source sits at depth d starts after
    (D - d) steps, where D is the tree's maximum depth, so leaf-adjacent
    branches grow first. A node's label starts after the branches growing
    out of it, and a terminal's word connector fades in after its label.
    """
    if not animated:
        return AnimationSchedule(animated=False)
    if timing is None:
        timing = AnimationTiming()

    max_depth = root.max_depth
    entries: list[ScheduleEntry] = []

    for source, target in root.links():
        entries.append(
            ScheduleEntry(
                element_id=branch_id(target),
                kind=BRANCH,
                depth=source.depth,
                delay_ms=(max_depth - source.depth) * timing.step_ms,
                duration_ms=timing.branch_duration_ms,
                easing=timing.branch_easing,
            )
        )

    for node in root.descendants():
        level_start = (max_depth - node.depth) * timing.step_ms
        entries.append(
            ScheduleEntry(
                element_id=label_id(node),
                kind=LABEL,
                depth=node.depth,
                delay_ms=level_start + timing.label_offset_ms,
                duration_ms=timing.label_duration_ms,
                easing=timing.fade_easing,
            )
        )
        if node.is_terminal:
            entries.append(
                ScheduleEntry(
                    element_id=connector_id(node),
                    kind=CONNECTOR,
                    depth=node.depth,
                    delay_ms=level_start + timing.connector_offset_ms,
                    duration_ms=timing.connector_duration_ms,
                    easing=timing.fade_easing,
                )
            )

    return AnimationSchedule(animated=True, entries=entries)
