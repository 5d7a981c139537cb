"""Escape-time evaluation of the Mandelbrot map ``z <- z**2 + c``."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Optional

BOUND_RADIUS = 2.0

_LOG2 = math.log(2.0)
_SMOOTHING_MAX = math.nextafter(1.0, 0.0)


@dataclass(frozen=True)
class EscapeResult:
    """Outcome of iterating a single point.

    ``iteration`` is the index of the step at which the orbit left the bound
    disk, or ``None`` when it stayed inside for the whole iteration cap.
    ``smoothing`` is a fractional term in ``[0, 1)`` for continuous coloring.
    """

    iteration: Optional[int]
    smoothing: float = 0.0

    BOUNDED: ClassVar["EscapeResult"]

    @property
    def escaped(self) -> bool:
        return self.iteration is not None

    @property
    def bounded(self) -> bool:
        return self.iteration is None

    @classmethod
    def escaped_at(cls, iteration: int, smoothing: float = 0.0) -> "EscapeResult":
        return cls(iteration=int(iteration), smoothing=smoothing)

    @classmethod
    def from_orbit(cls, iteration: int, zr: float, zi: float, iteration_cap: int, bound_radius: float) -> "EscapeResult":
        """Build a result from a vectorised kernel's raw output."""

        if iteration >= iteration_cap:
            return cls.BOUNDED
        return cls.escaped_at(iteration, smoothing_term(float(zr), float(zi), bound_radius))


EscapeResult.BOUNDED = EscapeResult(iteration=None)


def smoothing_term(zr: float, zi: float, bound_radius: float) -> float:
    """Fractional escape term ``1 - ln(ln|z| / ln R) / ln 2`` clamped into ``[0, 1)``."""

    if bound_radius <= 1.0:
        return 0.0
    log_abs_z = 0.5 * math.log(zr * zr + zi * zi)
    ratio = log_abs_z / math.log(bound_radius)
    if ratio <= 0.0:
        return 0.0
    value = 1.0 - math.log(ratio) / _LOG2
    return min(max(value, 0.0), _SMOOTHING_MAX)


def escape_time(c: complex, iteration_cap: int, bound_radius: float = BOUND_RADIUS) -> EscapeResult:
    """Iterate ``z <- z**2 + c`` from ``z = 0`` for at most ``iteration_cap`` steps.

    Returns ``EscapeResult.escaped_at(i, ...)`` for the first step ``i`` whose
    squared magnitude exceeds ``bound_radius ** 2``, or ``EscapeResult.BOUNDED``
    if the orbit never leaves the disk.
    """

    cr = c.real
    ci = c.imag
    zr = 0.0
    zi = 0.0
    radius_sq = bound_radius * bound_radius
    for i in range(iteration_cap):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > radius_sq:
            return EscapeResult.escaped_at(i, smoothing_term(zr, zi, bound_radius))
    return EscapeResult.BOUNDED
