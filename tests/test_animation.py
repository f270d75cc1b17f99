"""Tests for the growth animation schedule."""

from __future__ import annotations

import pytest

from arboretum.animation import (
    BRANCH,
    CONNECTOR,
    LABEL,
    AnimationTiming,
    build_schedule,
)
from arboretum.hierarchy import build_hierarchy

from .helpers import chain, farmer_tree, lopsided_tree


def test_static_mode_has_no_schedule():
    schedule = build_schedule(build_hierarchy(farmer_tree()), animated=False)
    assert schedule.animated is False
    assert len(schedule) == 0
    assert schedule.total_duration_ms == 0.0


def test_entry_counts():
    schedule = build_schedule(build_hierarchy(farmer_tree()), animated=True)
    assert len(schedule.of_kind(BRANCH)) == 6
    assert len(schedule.of_kind(LABEL)) == 7
    assert len(schedule.of_kind(CONNECTOR)) == 4


def test_branch_delays_follow_distance_from_bottom():
    root = build_hierarchy(farmer_tree())
    schedule = build_schedule(root, animated=True)
    by_target = {t.node_id: s for s, t in root.links()}

    for entry in schedule.of_kind(BRANCH):
        target_id = entry.element_id.removeprefix("branch-")
        source = by_target[target_id]
        assert entry.depth == source.depth
        assert entry.delay_ms == (3 - source.depth) * 800
        assert entry.duration_ms == 1000


def test_root_branches_start_last():
    root = build_hierarchy(farmer_tree())
    schedule = build_schedule(root, animated=True)
    branches = schedule.of_kind(BRANCH)
    root_delays = [e.delay_ms for e in branches if e.depth == 0]
    assert min(root_delays) == max(e.delay_ms for e in branches)


@pytest.mark.parametrize(
    "tree", [farmer_tree(), lopsided_tree(), chain(7)]
)
def test_deeper_branches_never_start_later(tree):
    schedule = build_schedule(build_hierarchy(tree), animated=True)
    branches = schedule.of_kind(BRANCH)
    for shallow in branches:
        for deep in branches:
            if deep.depth > shallow.depth:
                assert deep.delay_ms <= shallow.delay_ms
    assert schedule.is_monotonic()


def test_labels_follow_their_level_and_connectors_follow_labels():
    root = build_hierarchy(farmer_tree())
    schedule = build_schedule(root, animated=True)

    for node in root.descendants():
        label = schedule.for_element(f"label-{node.node_id}")
        assert label is not None
        assert label.delay_ms == (3 - node.depth) * 800 + 400

        connector = schedule.for_element(f"connector-{node.node_id}")
        if node.is_terminal:
            assert connector is not None
            assert connector.delay_ms > label.delay_ms
        else:
            assert connector is None


def test_labels_start_after_branches_growing_out_of_them():
    root = build_hierarchy(farmer_tree())
    schedule = build_schedule(root, animated=True)
    for source, target in root.links():
        branch = schedule.for_element(f"branch-{target.node_id}")
        label = schedule.for_element(f"label-{source.node_id}")
        assert label.delay_ms > branch.delay_ms


def test_custom_timing():
    timing = AnimationTiming(step_ms=100, branch_duration_ms=50)
    schedule = build_schedule(build_hierarchy(chain(2)), animated=True, timing=timing)
    delays = sorted(e.delay_ms for e in schedule.of_kind(BRANCH))
    assert delays == [100, 200]
    # The root label is the last thing to finish.
    assert schedule.total_duration_ms == (
        2 * timing.step_ms + timing.label_offset_ms + timing.label_duration_ms
    )


def test_timing_rejects_connectors_before_labels():
    with pytest.raises(ValueError):
        AnimationTiming(label_offset_ms=400, connector_offset_ms=200)


def test_to_dict():
    schedule = build_schedule(build_hierarchy(chain(1)), animated=True)
    data = schedule.to_dict()
    assert data["animated"] is True
    assert {e["kind"] for e in data["entries"]} == {BRANCH, LABEL, CONNECTOR}
