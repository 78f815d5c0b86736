"""
Scales mapping data values to surface coordinates and colours.

The tick/nice arithmetic follows the usual "1-2-5" rule: a tick step is a
power of ten times 1, 2 or 5, and a nice domain is widened outwards to whole
multiples of that step.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

import matplotlib
import numpy as np
from matplotlib.colors import to_hex

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def tick_increment(start: float, stop: float, count: int) -> float:
    """
    Signed tick step for [start, stop] aiming at `count` ticks.

    Positive results are the step itself; negative results -k mean a step
    of 1/k, which keeps sub-unit steps exact.
    """
    step = (stop - start) / max(1, count)
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
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def nice_domain(start: float, stop: float, count: int = 10) -> Tuple[float, float]:
    """Widen [start, stop] to multiples of the tick step (stable after a few passes)."""
    if not (math.isfinite(start) and math.isfinite(stop)) or stop <= start:
        return start, stop

    prestep = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return float(start), float(stop)


def linear_ticks(start: float, stop: float, count: int = 10) -> List[float]:
    if not (math.isfinite(start) and math.isfinite(stop)) or count <= 0:
        return []
    if start == stop:
        return [float(start)]
    lo, hi = min(start, stop), max(start, stop)
    inc = tick_increment(lo, hi, count)
    if inc > 0:
        i0, i1 = math.ceil(lo / inc), math.floor(hi / inc)
        ticks = [i * inc for i in range(i0, i1 + 1)]
    else:
        inv = -inc
        i0, i1 = math.ceil(lo * inv), math.floor(hi * inv)
        ticks = [i / inv for i in range(i0, i1 + 1)]
    return [float(t) for t in (ticks if start <= stop else ticks[::-1])]


def _normalize(value: float, d0: float, d1: float) -> float:
    if d1 == d0:
        return 0.5
    return (value - d0) / (d1 - d0)


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        t = _normalize(value, *self.domain)
        r0, r1 = self.range
        return r0 + t * (r1 - r0)

    def invert(self, px: float) -> float:
        r0, r1 = self.range
        d0, d1 = self.domain
        if r1 == r0:
            return d0
        return d0 + (px - r0) / (r1 - r0) * (d1 - d0)

    def nice(self, count: int = 10) -> "LinearScale":
        return LinearScale(nice_domain(*self.domain, count=count), self.range)

    def ticks(self, count: int = 10) -> List[float]:
        return linear_ticks(*self.domain, count=count)


@dataclass(frozen=True)
class LogScale:
    """Base-10 log scale; undefined (NaN) for non-positive input."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __post_init__(self) -> None:
        if min(self.domain) <= 0:
            raise ValueError(f"Log scale domain must be strictly positive, got {self.domain}")

    def __call__(self, value: float) -> float:
        if not value > 0:
            return float("nan")
        d0, d1 = (math.log10(v) for v in self.domain)
        t = _normalize(math.log10(value), d0, d1)
        r0, r1 = self.range
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 10) -> List[float]:
        lo, hi = sorted(self.domain)
        p0, p1 = math.floor(math.log10(lo)), math.ceil(math.log10(hi))
        multiples = (1, 2, 5) if (p1 - p0) < count / 2 else (1,)
        ticks = [
            float(k * 10 ** p)
            for p in range(p0, p1 + 1)
            for k in multiples
            if lo <= k * 10 ** p <= hi
        ]
        if not ticks:
            ticks = linear_ticks(lo, hi, max(2, count // 3))
        return ticks


@dataclass(frozen=True)
class SqrtScale:
    """Square-root scale, so that circle *area* is proportional to the value."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        if not math.isfinite(value) or value < 0:
            return float("nan")
        d0, d1 = (math.sqrt(max(0.0, v)) for v in self.domain)
        t = _normalize(math.sqrt(value), d0, d1)
        r0, r1 = self.range
        return r0 + t * (r1 - r0)


@dataclass(frozen=True)
class SequentialColorScale:
    """Maps [d0, d1] onto a matplotlib colormap, clamped; NaN -> None."""

    domain: Tuple[float, float]
    palette: str = "turbo"

    def __post_init__(self) -> None:
        if self.palette not in matplotlib.colormaps:
            raise ValueError(f"Unknown palette {self.palette!r}")

    def __call__(self, value: float) -> Optional[str]:
        if value is None or not math.isfinite(value):
            return None
        t = min(1.0, max(0.0, _normalize(value, *self.domain)))
        return to_hex(matplotlib.colormaps[self.palette](t))

    def stops(self, n: int = 11) -> List[Tuple[float, str]]:
        """(offset in [0, 1], colour) pairs for a legend gradient."""
        d0, d1 = self.domain
        return [
            (float(t), self(d0 + float(t) * (d1 - d0)) or "#000000")
            for t in np.linspace(0.0, 1.0, n)
        ]


@dataclass(frozen=True)
class BandScale:
    """
    Categorical scale giving each value an equal-width band.

    `padding` is the gap between bands (and at both ends) as a fraction of
    the step; bands are centred within the range.
    """

    domain: Tuple[Hashable, ...]
    range: Tuple[float, float]
    padding: float = 0.1
    _index: Dict[Hashable, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "domain", tuple(self.domain))
        object.__setattr__(self, "_index", {v: i for i, v in enumerate(self.domain)})

    @property
    def step(self) -> float:
        n = len(self.domain)
        r0, r1 = self.range
        if n == 0:
            return 0.0
        return (r1 - r0) / max(1.0, n - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def _start(self) -> float:
        r0, r1 = self.range
        n = len(self.domain)
        return r0 + (r1 - r0 - self.step * (n - self.padding)) * 0.5

    def __call__(self, value: Hashable) -> Optional[float]:
        i = self._index.get(value)
        if i is None:
            return None
        return self._start() + self.step * i

    def __contains__(self, value: Hashable) -> bool:
        return value in self._index

    def invert_extent(self, x0: float, x1: float) -> List[Hashable]:
        """Domain values whose band centre falls inside [x0, x1]."""
        lo, hi = min(x0, x1), max(x0, x1)
        half = self.bandwidth / 2
        return [v for v in self.domain if lo <= self(v) + half <= hi]


def extent(values: Sequence[float]) -> Optional[Tuple[float, float]]:
    """(min, max) of the finite values, or None if there are none."""
    finite = [v for v in values if v is not None and math.isfinite(v)]
    if not finite:
        return None
    return min(finite), max(finite)


__all__ = [
    "tick_increment",
    "nice_domain",
    "linear_ticks",
    "extent",
    "LinearScale",
    "LogScale",
    "SqrtScale",
    "SequentialColorScale",
    "BandScale",
]
