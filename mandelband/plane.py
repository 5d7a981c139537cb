"""Mapping between image pixels and points on the complex plane."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

import numpy as np

from .errors import InvalidViewport

T = TypeVar("T")


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane covered by the image."""

    upper_left: complex
    lower_right: complex

    def validate(self) -> None:
        corners = (self.upper_left, self.lower_right)
        if not all(math.isfinite(p.real) and math.isfinite(p.imag) for p in corners):
            raise InvalidViewport(f"viewport corners must be finite, got {self.upper_left} and {self.lower_right}")
        if not self.upper_left.real < self.lower_right.real:
            raise InvalidViewport(
                f"upper-left real part {self.upper_left.real} must be less than lower-right real part {self.lower_right.real}"
            )
        if not self.upper_left.imag > self.lower_right.imag:
            raise InvalidViewport(
                f"upper-left imaginary part {self.upper_left.imag} must be greater than lower-right imaginary part {self.lower_right.imag}"
            )


def pixel_to_complex(row: int, col: int, width: int, height: int, viewport: Viewport) -> complex:
    """Return the point of the plane sampled by pixel ``(row, col)``.

    Rows grow downwards while the imaginary axis grows upwards, so row 0 maps
    onto ``viewport.upper_left.imag`` and the imaginary part decreases with
    each row.
    """

    ul = viewport.upper_left
    lr = viewport.lower_right
    real = ul.real + (col / width) * (lr.real - ul.real)
    imag = ul.imag + (row / height) * (lr.imag - ul.imag)
    return complex(real, imag)


def plane_grid(rows: range, width: int, height: int, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary coordinates of every pixel in ``rows``.

    Uses the same arithmetic as :func:`pixel_to_complex`, element by element,
    so both produce bit-identical points.
    """

    ul = viewport.upper_left
    lr = viewport.lower_right
    cols = np.arange(width, dtype=np.float64) / width
    row_fracs = np.arange(rows.start, rows.stop, dtype=np.float64) / height
    real = ul.real + cols * (lr.real - ul.real)
    imag = ul.imag + row_fracs * (lr.imag - ul.imag)
    real_grid, imag_grid = np.meshgrid(real, imag)
    return real_grid, imag_grid


def parse_pair(s: str, separator: str, kind: Callable[[str], T] = float) -> Optional[tuple[T, T]]:
    """Parse ``s`` as ``<left><separator><right>``, e.g. ``"400x600"`` or ``"1.0,0.5"``.

    Both halves are converted with ``kind``; surrounding whitespace and digit
    separators (``_``) are rejected. Returns ``None`` when ``s`` does not have
    that form.
    """

    index = s.find(separator)
    if index < 0:
        return None
    left, right = s[:index], s[index + 1:]
    for half in (left, right):
        if half != half.strip() or "_" in half:
            return None
    try:
        return kind(left), kind(right)
    except ValueError:
        return None


def parse_complex(s: str) -> Optional[complex]:
    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    re, im = pair
    return complex(re, im)
