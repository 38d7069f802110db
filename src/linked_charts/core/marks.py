from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Optional

from linked_charts.core.datasets import Row
from linked_charts.core.scales import BandScale, LinearScale

DEFAULT_DURATION_MS = 1000.0

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def _lerp(a: Any, b: Any, t: float) -> Any:
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        if isinstance(a, float) and math.isnan(a):
            return b
        return a + (b - a) * t
    return b if t >= 1 else a


@dataclass
class Transition:
    start: dict[str, Any]
    end: dict[str, Any]
    started_at: float
    duration: float = DEFAULT_DURATION_MS

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.started_at) / self.duration))

    def value_at(self, now: float) -> dict[str, Any]:
        t = ease_cubic_in_out(self.progress(now))
        out = dict(self.end)
        for key, target in self.end.items():
            if key in self.start:
                out[key] = _lerp(self.start[key], target, t)
        return out

    def running(self, now: float) -> bool:
        return self.progress(now) < 1.0


@dataclass
class Mark:
    """One drawn shape bound to one row.

    ``attrs`` is the committed end state; what is on screen at a given moment
    comes from ``state_at``.
    """

    key: Hashable
    row: Row
    attrs: dict[str, Any] = field(default_factory=dict)
    transition: Optional[Transition] = None
    highlighted: bool = False
    title: str = ""

    def state_at(self, now: float) -> dict[str, Any]:
        if self.transition is None:
            return dict(self.attrs)
        return self.transition.value_at(now)

    def animating(self, now: float) -> bool:
        return self.transition is not None and self.transition.running(now)

    def place(self, attrs: dict[str, Any]) -> None:
        """Jump straight to ``attrs`` with no animation."""
        self.attrs = dict(attrs)
        self.transition = None

    def retarget(self, attrs: dict[str, Any], now: float, duration: float = DEFAULT_DURATION_MS) -> bool:
        """Animate from the current on-screen state to ``attrs``.

        Returns False when the target is unchanged; the running transition (if
        any) is then left alone.
        """
        target = dict(attrs)
        if _same_attrs(target, self.attrs):
            return False
        current = self.state_at(now)
        self.attrs = target
        self.transition = Transition(current, target, now, duration)
        return True


def _same_attrs(a: dict[str, Any], b: dict[str, Any]) -> bool:
    if a.keys() != b.keys():
        return False
    for k, v in a.items():
        w = b[k]
        if isinstance(v, float) and isinstance(w, float) and math.isnan(v) and math.isnan(w):
            continue
        if v != w:
            return False
    return True


@dataclass
class JoinResult:
    entered: list[Mark] = field(default_factory=list)
    updated: list[Mark] = field(default_factory=list)
    exited: list[Mark] = field(default_factory=list)


class MarkLayer:
    """Keyed collection of marks, reconciled against each new row sequence."""

    def __init__(self) -> None:
        self._marks: dict[Hashable, Mark] = {}

    def __len__(self) -> int:
        return len(self._marks)

    def __iter__(self):
        return iter(self._marks.values())

    def get(self, key: Hashable) -> Optional[Mark]:
        return self._marks.get(key)

    def keys(self) -> list[Hashable]:
        return list(self._marks.keys())

    def join(self, rows: Iterable[Row], key: Callable[[Row], Hashable]) -> JoinResult:
        result = JoinResult()
        new_marks: dict[Hashable, Mark] = {}
        for row in rows:
            k = key(row)
            if k in new_marks:
                # duplicate key: first row keeps the mark
                continue
            mark = self._marks.get(k)
            if mark is None:
                mark = Mark(key=k, row=row)
                result.entered.append(mark)
            else:
                mark.row = row
                result.updated.append(mark)
            new_marks[k] = mark
        result.exited = [m for k, m in self._marks.items() if k not in new_marks]
        self._marks = new_marks
        return result


@dataclass(frozen=True)
class Tick:
    value: Any
    position: float
    label: str


@dataclass
class Axis:
    """Tick layout of one chart axis and how long it takes to move there."""

    orient: str
    ticks: list[Tick] = field(default_factory=list)
    duration: float = 0.0

    def redraw(self, ticks: list[Tick], duration: float = 0.0) -> None:
        self.ticks = list(ticks)
        self.duration = duration

    @property
    def tickvals(self) -> list[float]:
        return [t.position for t in self.ticks]

    @property
    def ticktext(self) -> list[str]:
        return [t.label for t in self.ticks]


def linear_axis(scale: LinearScale) -> list[Tick]:
    values = scale.ticks()
    fmt = scale.tick_format(values)
    return [Tick(v, scale(v), fmt(v)) for v in values]


def band_axis(scale: BandScale) -> list[Tick]:
    """One tick per key, centred in its band."""
    half = scale.bandwidth / 2
    return [Tick(k, scale(k) + half, str(k)) for k in scale.domain]
