"""Public API for band-parallel Mandelbrot rendering."""

from .bands import RenderParameters, RenderResult, render_band, render_frame, split_rows
from .colorize import (
    ColormapColorizer,
    GrayscaleColorizer,
    PaletteColorizer,
    build_colorizer,
    parse_hex_color,
)
from .errors import InvalidDimensions, InvalidViewport, RenderError
from .escape import BOUND_RADIUS, EscapeResult, escape_time
from .plane import Viewport, parse_complex, parse_pair, pixel_to_complex

__all__ = [
    "BOUND_RADIUS",
    "ColormapColorizer",
    "EscapeResult",
    "GrayscaleColorizer",
    "InvalidDimensions",
    "InvalidViewport",
    "PaletteColorizer",
    "RenderError",
    "RenderParameters",
    "RenderResult",
    "Viewport",
    "build_colorizer",
    "escape_time",
    "parse_complex",
    "parse_hex_color",
    "parse_pair",
    "pixel_to_complex",
    "render_band",
    "render_frame",
    "split_rows",
]
