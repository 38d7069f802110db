from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Sequence

import numpy as np

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / (10 ** power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power < 0:
        inc = (10 ** -power) / factor
        i1 = _round_half_up(start * inc)
        i2 = _round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = (10 ** power) * factor
        i1 = _round_half_up(start / inc)
        i2 = _round_half_up(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def nice_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    """Round-number ticks (1, 2 or 5 times a power of ten) covering [start, stop]."""
    if not (math.isfinite(start) and math.isfinite(stop)) or count <= 0:
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, count)
    if i2 < i1:
        return []
    n = i2 - i1 + 1
    if inc < 0:
        out = [(i1 + i) / -inc for i in range(n)]
    else:
        out = [(i1 + i) * inc for i in range(n)]
    return out[::-1] if reverse else out


def choose_decimals_from_ticks(ticks, max_decimals=4) -> int:
    ticks = np.asarray(ticks, dtype=float)
    ticks = np.unique(ticks[np.isfinite(ticks)])
    if ticks.size < 2:
        return 0

    diffs = np.diff(np.sort(ticks))
    diffs = diffs[diffs > 1e-12]
    if diffs.size == 0:
        return 0

    step = float(np.min(diffs))
    decimals = int(np.ceil(-np.log10(step)))
    decimals = max(0, min(decimals, max_decimals))
    return decimals


@dataclass
class LinearScale:
    """Continuous mapping from a numeric domain onto a pixel range.

    A zero-width domain maps everything to the middle of the range, and a NaN
    domain or input gives NaN instead of raising.
    """

    domain: tuple[float, float] = (0.0, 1.0)
    range: tuple[float, float] = (0.0, 1.0)

    def set_domain(self, lo: float, hi: float) -> "LinearScale":
        self.domain = (float(lo), float(hi))
        return self

    def __call__(self, value) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        try:
            v = float(value)
        except (TypeError, ValueError):
            return math.nan
        span = d1 - d0
        if math.isnan(span) or math.isnan(v):
            return math.nan
        t = 0.5 if span == 0 else (v - d0) / span
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 10) -> list[float]:
        return nice_ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, ticks: Sequence[float]):
        decimals = choose_decimals_from_ticks(ticks)
        return lambda v: f"{v:,.{decimals}f}"


@dataclass
class BandScale:
    """Discrete keys mapped onto evenly spaced slots of a rounded pixel range."""

    range: tuple[float, float] = (0.0, 1.0)
    padding_inner: float = 0.1
    padding_outer: float = 0.0
    align: float = 0.5
    round: bool = True
    domain: tuple[Hashable, ...] = ()
    step: float = field(default=0.0, init=False)
    bandwidth: float = field(default=0.0, init=False)
    _index: dict = field(default_factory=dict, init=False, repr=False)
    _starts: list = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._rescale()

    def set_domain(self, keys: Iterable[Hashable]) -> "BandScale":
        index: dict = {}
        ordered = []
        for k in keys:
            if k not in index:
                index[k] = len(ordered)
                ordered.append(k)
        self.domain = tuple(ordered)
        self._index = index
        self._rescale()
        return self

    def _rescale(self) -> None:
        n = len(self.domain)
        r0, r1 = self.range
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)
        step = (stop - start) / max(1.0, n - self.padding_inner + self.padding_outer * 2)
        if self.round:
            step = math.floor(step)
        start += (stop - start - step * (n - self.padding_inner)) * self.align
        bandwidth = step * (1 - self.padding_inner)
        if self.round:
            start = _round_half_up(start)
            bandwidth = _round_half_up(bandwidth)
        starts = [start + step * i for i in range(n)]
        self.step = step
        self.bandwidth = bandwidth
        self._starts = starts[::-1] if reverse else starts

    def __call__(self, key: Hashable) -> float:
        i = self._index.get(key)
        if i is None:
            return math.nan
        return float(self._starts[i])
