"""Band-parallel rendering of Mandelbrot frames into a flat pixel buffer."""

from __future__ import annotations

import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

import numpy as np

from .errors import InvalidDimensions, RenderError
from .escape import BOUND_RADIUS, EscapeResult, escape_time
from .plane import Viewport, pixel_to_complex, plane_grid

Colorizer = Callable[[EscapeResult, int], Sequence[int]]


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    viewport: Viewport
    max_iterations: int
    bound_radius: float = BOUND_RADIUS

    def validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise InvalidDimensions(f"image dimensions must be positive, got {self.width}x{self.height}")
        self.viewport.validate()
        if self.max_iterations < 1:
            raise RenderError(f"iteration cap must be positive, got {self.max_iterations}")
        radius = self.bound_radius
        if not (math.isfinite(radius) and radius > 0.0 and math.isfinite(radius * radius)):
            raise RenderError(f"bound radius must be positive and its square finite, got {radius}")


@dataclass(frozen=True)
class RenderResult:
    """A finished frame: the row-major pixel buffer and its layout."""

    pixels: np.ndarray
    width: int
    height: int
    channels: int
    bands: tuple[range, ...]

    def to_array(self) -> np.ndarray:
        if self.channels == 1:
            return self.pixels.reshape(self.height, self.width)
        return self.pixels.reshape(self.height, self.width, self.channels)


def split_rows(total_rows: int, worker_count: int) -> list[range]:
    """Divide ``range(total_rows)`` into contiguous, disjoint bands.

    At most ``worker_count`` bands are produced and none is empty. Band sizes
    differ by at most one row; the first ``total_rows % bands`` bands take the
    extra rows.
    """

    if total_rows < 1:
        raise ValueError(f"total_rows must be positive, got {total_rows}")
    if worker_count < 1:
        raise ValueError(f"worker_count must be positive, got {worker_count}")

    count = min(worker_count, total_rows)
    base, remainder = divmod(total_rows, count)
    bands = []
    start = 0
    for index in range(count):
        stop = start + base + (1 if index < remainder else 0)
        bands.append(range(start, stop))
        start = stop
    return bands


def _python_rows(rows: range, params: RenderParameters) -> Iterator[list[EscapeResult]]:
    for row in rows:
        yield [
            escape_time(
                pixel_to_complex(row, col, params.width, params.height, params.viewport),
                params.max_iterations,
                params.bound_radius,
            )
            for col in range(params.width)
        ]


def _tensor_rows(rows: range, params: RenderParameters) -> Iterator[list[EscapeResult]]:
    from .kernel import escape_band

    real, imag = plane_grid(rows, params.width, params.height, params.viewport)
    iterations, zr, zi = escape_band(real, imag, params.max_iterations, params.bound_radius)
    for it_row, zr_row, zi_row in zip(iterations.tolist(), zr.tolist(), zi.tolist()):
        yield [
            EscapeResult.from_orbit(it, re, im, params.max_iterations, params.bound_radius)
            for it, re, im in zip(it_row, zr_row, zi_row)
        ]


BACKENDS = {
    "python": _python_rows,
    "tensor": _tensor_rows,
}


def _resolve_backend(backend: str):
    try:
        return BACKENDS[backend]
    except KeyError as exc:
        raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(sorted(BACKENDS))}.") from exc


def render_band(
    pixels: np.ndarray,
    rows: range,
    params: RenderParameters,
    colorizer: Colorizer,
    channels: int,
    backend: str = "python",
) -> None:
    """Render ``rows`` into their slice of the flat ``pixels`` buffer.

    Only the elements ``[rows.start * stride, rows.stop * stride)`` are
    written, with ``stride = width * channels``.
    """

    escape_rows = _resolve_backend(backend)
    stride = params.width * channels
    cap = params.max_iterations
    for row, results in zip(rows, escape_rows(rows, params)):
        colors = [colorizer(result, cap) for result in results]
        pixels[row * stride:(row + 1) * stride] = np.asarray(colors, dtype=np.uint8).reshape(stride)


def render_frame(
    params: RenderParameters,
    colorizer: Colorizer,
    *,
    workers: Optional[int] = None,
    backend: str = "python",
) -> RenderResult:
    """Render a Mandelbrot frame, splitting its rows across ``workers`` threads.

    Raises :class:`~mandelband.errors.RenderError` before any pixel work when
    the parameters are invalid. A failure in any band propagates to the caller
    once all bands have stopped.

    The ``"python"`` backend holds the GIL for every pixel, so its bands run
    one at a time even on several threads; the ``"tensor"`` backend releases
    the GIL inside TensorFlow ops and is the one that renders bands in parallel.
    """

    params.validate()
    _resolve_backend(backend)

    channels = len(colorizer(EscapeResult.BOUNDED, params.max_iterations))
    pixels = np.zeros(params.width * params.height * channels, dtype=np.uint8)

    if workers is None:
        workers = os.cpu_count() or 1
    bands = split_rows(params.height, workers)

    if len(bands) == 1:
        render_band(pixels, bands[0], params, colorizer, channels, backend)
    else:
        with ThreadPoolExecutor(max_workers=len(bands)) as executor:
            futures = [
                executor.submit(render_band, pixels, band, params, colorizer, channels, backend)
                for band in bands
            ]
            for future in futures:
                future.result()

    return RenderResult(
        pixels=pixels,
        width=params.width,
        height=params.height,
        channels=channels,
        bands=tuple(bands),
    )
