"""Keyed join and transition behaviour shared by both charts."""

from __future__ import annotations

import pytest

from linked_charts.core.datasets import Row
from linked_charts.core.marks import Mark, MarkLayer, Transition, ease_cubic_in_out

pytestmark = pytest.mark.unit


def test_easing_endpoints() -> None:
    assert ease_cubic_in_out(0.0) == 0.0
    assert ease_cubic_in_out(0.5) == 0.5
    assert ease_cubic_in_out(1.0) == 1.0


def test_transition_interpolates_and_settles() -> None:
    tr = Transition({"cx": 0.0}, {"cx": 100.0}, started_at=0.0, duration=1000.0)
    assert tr.value_at(0.0) == {"cx": 0.0}
    assert tr.value_at(500.0) == {"cx": 50.0}
    assert tr.value_at(5000.0) == {"cx": 100.0}
    assert tr.running(999.0)
    assert not tr.running(1000.0)


def test_retarget_mid_flight_starts_from_current_position() -> None:
    mark = Mark(key=1, row=Row(1, {}))
    mark.place({"cx": 0.0})
    assert mark.retarget({"cx": 100.0}, now=0.0)
    assert mark.retarget({"cx": 200.0}, now=500.0)
    assert mark.transition.start == {"cx": 50.0}
    assert mark.transition.started_at == 500.0
    assert mark.attrs == {"cx": 200.0}


def test_retarget_to_same_target_keeps_running_transition() -> None:
    mark = Mark(key=1, row=Row(1, {}))
    mark.place({"cx": 0.0})
    mark.retarget({"cx": 100.0}, now=0.0)
    before = mark.transition
    assert not mark.retarget({"cx": 100.0}, now=300.0)
    assert mark.transition is before


def test_join_splits_enter_update_exit_by_key() -> None:
    a, b, c = Row(0, {"k": "a"}), Row(1, {"k": "b"}), Row(2, {"k": "c"})
    layer = MarkLayer()
    first = layer.join([a, b], key=lambda r: r["k"])
    assert [m.key for m in first.entered] == ["a", "b"]

    b2 = b.replace(extra=1)
    second = layer.join([c, b2], key=lambda r: r["k"])
    assert [m.key for m in second.entered] == ["c"]
    assert [m.key for m in second.updated] == ["b"]
    assert [m.key for m in second.exited] == ["a"]
    assert layer.get("b").row is b2
    assert layer.keys() == ["c", "b"]
    assert len(layer) == 2


def test_join_keeps_first_row_for_duplicate_keys() -> None:
    rows = [Row(0, {"k": "a"}), Row(1, {"k": "a"})]
    layer = MarkLayer()
    layer.join(rows, key=lambda r: r["k"])
    assert len(layer) == 1
    assert layer.get("a").row.row_id == 0
