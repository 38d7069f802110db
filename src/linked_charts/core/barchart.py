from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Hashable, Optional

from linked_charts.core.datasets import Dataset, Row, extent, format_value
from linked_charts.core.marks import (
    DEFAULT_DURATION_MS,
    Axis,
    Clock,
    JoinResult,
    MarkLayer,
    band_axis,
    linear_axis,
    monotonic_ms,
)
from linked_charts.core.scales import BandScale, LinearScale

HoverHandler = Callable[[Row], None]

BAND_PADDING = 0.1


@dataclass(frozen=True)
class BarDims:
    left_margin: int = 200
    bottom_margin: int = 30
    width: int = 300
    height: int = 700


def _noop(row: Row) -> None:
    return None


def _descending_key(attr: str):
    # NaN sorts last; sorted() is stable so equal values keep dataset order
    def key(row: Row):
        v = float(row[attr])
        if math.isnan(v):
            return (1, 0.0)
        return (0, -v)

    return key


def sort_descending(dataset: Dataset, attr: str) -> list[Row]:
    return sorted(dataset, key=_descending_key(attr))


class BarChart:
    """Horizontal bars, one per row, ordered by value (largest on top).

    Bars are keyed by the name attribute rather than the row, because every
    update sorts into a fresh sequence.
    """

    def __init__(
        self,
        mount: str,
        dims: BarDims = BarDims(),
        on_enter: HoverHandler = _noop,
        on_leave: HoverHandler = _noop,
        clock: Clock = monotonic_ms,
        duration: float = DEFAULT_DURATION_MS,
        padding: float = BAND_PADDING,
    ) -> None:
        self.mount = mount
        self.dims = dims
        self.on_enter = on_enter
        self.on_leave = on_leave
        self.clock = clock
        self.duration = duration
        self.xscale = LinearScale(range=(0.0, float(dims.width)))
        self.yscale = BandScale(range=(0.0, float(dims.height)), padding_inner=padding)
        self.marks = MarkLayer()
        self.xaxis = Axis("bottom")
        self.yaxis = Axis("left")
        self.name_attr = ""
        self.value_attr = ""
        self.order: list[Row] = []
        self.last_join = JoinResult()
        self.moved: list = []

    def update(self, dataset: Dataset, name_attr: str, value_attr: str, selection: Optional[Row]) -> None:
        now = self.clock()
        self.name_attr, self.value_attr = name_attr, value_attr
        rows = sort_descending(dataset, value_attr)
        self.order = rows

        self.xscale.set_domain(*extent(dataset, value_attr))
        self.yscale.set_domain(row[name_attr] for row in rows)

        join = self.marks.join(rows, key=lambda row: row[name_attr])
        for mark in join.entered:
            target = self._target(mark.row)
            mark.place({"x": 0.0, "width": 0.0, "y": target["y"], "height": target["height"]})
            mark.retarget(target, now, self.duration)
        self.moved = [
            mark.key for mark in join.updated if mark.retarget(self._target(mark.row), now, self.duration)
        ]
        for mark in self.marks:
            mark.highlighted = mark.row.same_as(selection)
            mark.title = f"{format_value(mark.row[name_attr])}: {format_value(mark.row[value_attr])}"
        self.last_join = join

        self.xaxis.redraw(linear_axis(self.xscale), self.duration)
        self.yaxis.redraw(band_axis(self.yscale), self.duration)

    def _target(self, row: Row) -> dict[str, float]:
        return {
            "x": 0.0,
            "width": self.xscale(row[self.value_attr]),
            "y": self.yscale(row[self.name_attr]),
            "height": float(self.yscale.bandwidth),
        }

    def handle_enter(self, key: Hashable) -> None:
        mark = self.marks.get(key)
        if mark is not None:
            self.on_enter(mark.row)

    def handle_leave(self, key: Hashable) -> None:
        mark = self.marks.get(key)
        if mark is not None:
            self.on_leave(mark.row)

    @property
    def highlighted(self) -> list:
        return [m for m in self.marks if m.highlighted]


def create_bar_chart(mount: str, **kwargs) -> Callable[[Dataset, str, str, Optional[Row]], None]:
    """Build a bar chart and hand back only its ``update`` function."""
    return BarChart(mount, **kwargs).update
