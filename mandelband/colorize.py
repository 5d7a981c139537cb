"""Colorizers mapping an :class:`EscapeResult` onto a pixel color."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from matplotlib import colormaps as _mpl_colormaps

from .escape import EscapeResult

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)

# Upper bound (inclusive) of each escape intensity band and its color.
RAINBOW_BANDS = (
    (35, (148, 0, 211)),  # violet
    (70, (75, 0, 130)),  # indigo
    (105, (0, 0, 255)),  # blue
    (140, (0, 255, 0)),  # green
    (175, (255, 255, 0)),  # yellow
    (210, (255, 127, 0)),  # orange
    (254, (255, 0, 0)),  # red
)


def escape_intensity(result: EscapeResult, iteration_cap: int) -> int:
    """8-bit intensity of a result: 0 when bounded, 255 for an immediate escape.

    Later escapes get lower intensities; an escaped point never maps to 0.
    """

    if result.bounded:
        return 0
    return 255 - (result.iteration * 255) // iteration_cap


def get_colormap(name: str):
    try:
        return _mpl_colormaps[name]
    except KeyError as exc:
        raise ValueError(f"Unknown matplotlib colormap '{name}'.") from exc


def parse_hex_color(hex_color: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` into an RGB byte triple."""

    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('color must be in the form #RRGGBB.')
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('color must contain only hexadecimal digits.') from exc


@dataclass(frozen=True)
class GrayscaleColorizer:
    """One channel: black inside the set, brighter for faster escapes."""

    def __call__(self, result: EscapeResult, iteration_cap: int) -> tuple[int]:
        return (escape_intensity(result, iteration_cap),)


@dataclass(frozen=True)
class PaletteColorizer:
    """Seven-band rainbow palette over the grayscale intensity."""

    def __call__(self, result: EscapeResult, iteration_cap: int) -> tuple[int, int, int]:
        value = escape_intensity(result, iteration_cap)
        if value == 0:
            return BLACK
        for upper, color in RAINBOW_BANDS:
            if value <= upper:
                return color
        return WHITE


@dataclass(frozen=True)
class ColormapColorizer:
    """Continuous gradient sampled from a matplotlib colormap.

    The escape position ``(iteration + smoothing) / iteration_cap`` indexes a
    256-entry lookup table, so later escapes never move backwards along the
    colormap. Bounded points take ``inside_color``.
    """

    name: str = "twilight_shifted"
    invert: bool = False
    inside_color: tuple[int, int, int] = BLACK
    _table: tuple[tuple[int, int, int], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        cmap = get_colormap(self.name)
        positions = np.linspace(0.0, 1.0, 256)
        if self.invert:
            positions = 1.0 - positions
        rgba = np.uint8(np.clip(np.asarray(cmap(positions)) * 255, 0, 255))
        table = tuple(tuple(int(v) for v in entry[:3]) for entry in rgba)
        object.__setattr__(self, "_table", table)

    def __call__(self, result: EscapeResult, iteration_cap: int) -> tuple[int, int, int]:
        if result.bounded:
            return tuple(self.inside_color)
        position = (result.iteration + result.smoothing) / iteration_cap
        index = int(min(max(position, 0.0), 1.0) * 255)
        return self._table[index]


COLORIZERS = {
    "gray": GrayscaleColorizer,
    "rainbow": PaletteColorizer,
    "colormap": ColormapColorizer,
}


def build_colorizer(kind: str, **options):
    """Instantiate the colorizer registered under ``kind``."""

    try:
        factory = COLORIZERS[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown colorizer '{kind}'. Valid choices: {', '.join(sorted(COLORIZERS))}.") from exc
    return factory(**options)
