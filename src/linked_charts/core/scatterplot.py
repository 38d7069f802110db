from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Optional

from linked_charts.core.datasets import Dataset, Row, extent, format_value
from linked_charts.core.marks import (
    DEFAULT_DURATION_MS,
    Axis,
    Clock,
    JoinResult,
    MarkLayer,
    linear_axis,
    monotonic_ms,
)
from linked_charts.core.scales import LinearScale

HoverHandler = Callable[[Row], None]


@dataclass(frozen=True)
class ScatterDims:
    margin: int = 40
    width: int = 300
    height: int = 300
    radius: int = 5


def _noop(row: Row) -> None:
    return None


class Scatterplot:
    """Two numeric attributes per row mapped onto a 2-D plane.

    Marks are keyed by ``row_id``; the mark whose row is the current
    selection is flagged as highlighted.
    """

    def __init__(
        self,
        mount: str,
        dims: ScatterDims = ScatterDims(),
        on_enter: HoverHandler = _noop,
        on_leave: HoverHandler = _noop,
        clock: Clock = monotonic_ms,
        duration: float = DEFAULT_DURATION_MS,
    ) -> None:
        self.mount = mount
        self.dims = dims
        self.on_enter = on_enter
        self.on_leave = on_leave
        self.clock = clock
        self.duration = duration
        self.xscale = LinearScale(range=(0.0, float(dims.width)))
        self.yscale = LinearScale(range=(float(dims.height), 0.0))
        self.marks = MarkLayer()
        self.xaxis = Axis("bottom")
        self.yaxis = Axis("left")
        self.x_attr = ""
        self.y_attr = ""
        self.last_join = JoinResult()
        self.moved: list = []

    def update(self, dataset: Dataset, x_attr: str, y_attr: str, selection: Optional[Row]) -> None:
        now = self.clock()
        self.x_attr, self.y_attr = x_attr, y_attr
        self.xscale.set_domain(*extent(dataset, x_attr))
        self.yscale.set_domain(*extent(dataset, y_attr))

        join = self.marks.join(dataset, key=lambda row: row.row_id)
        for mark in join.entered:
            mark.place(self._target(mark.row))
        self.moved = [
            mark.key for mark in join.updated if mark.retarget(self._target(mark.row), now, self.duration)
        ]
        for mark in self.marks:
            mark.highlighted = mark.row.same_as(selection)
            mark.title = f"{format_value(mark.row[x_attr])} / {format_value(mark.row[y_attr])}"
        self.last_join = join

        self.xaxis.redraw(linear_axis(self.xscale))
        self.yaxis.redraw(linear_axis(self.yscale))

    def _target(self, row: Row) -> dict[str, float]:
        return {"cx": self.xscale(row[self.x_attr]), "cy": self.yscale(row[self.y_attr])}

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


def create_scatter_plot(mount: str, **kwargs) -> Callable[[Dataset, str, str, Optional[Row]], None]:
    """Build a scatterplot and hand back only its ``update`` function."""
    return Scatterplot(mount, **kwargs).update
