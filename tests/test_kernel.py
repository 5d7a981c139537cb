import numpy as np
import pytest

from mandelband import GrayscaleColorizer, RenderParameters, Viewport, escape_time, render_frame
from mandelband.kernel import escape_band

VIEW = Viewport(upper_left=complex(-2.0, 1.0), lower_right=complex(1.0, -1.0))


def test_escape_band_known_points():
    real = np.array([[3.0, 0.0, -1.0, 0.5]])
    imag = np.array([[0.0, 0.0, 0.0, 0.5]])
    iterations, zr, zi = escape_band(real, imag, 100, 2.0)
    assert iterations.shape == (1, 4)
    assert iterations[0, 0] == 0
    assert iterations[0, 1] == 100
    assert iterations[0, 2] == 100
    assert iterations[0, 3] == escape_time(complex(0.5, 0.5), 100).iteration
    assert zr[0, 0] == 3.0


def test_escape_band_freezes_escaped_orbit():
    real = np.array([[3.0]])
    imag = np.array([[0.0]])
    _, zr, zi = escape_band(real, imag, 50, 2.0)
    assert zr[0, 0] == 3.0
    assert zi[0, 0] == 0.0


@pytest.mark.parametrize("c", [complex(3.0, 0.0), complex(0.3, 0.0), complex(-2.5, 0.4), complex(0.5, 0.5)])
def test_escape_band_agrees_with_scalar_evaluation(c):
    iterations, _, _ = escape_band(np.array([[c.real]]), np.array([[c.imag]]), 500, 2.0)
    assert iterations[0, 0] == escape_time(c, 500).iteration


def test_tensor_backend_parallel_matches_sequential():
    params = RenderParameters(width=32, height=24, viewport=VIEW, max_iterations=64)
    sequential = render_frame(params, GrayscaleColorizer(), workers=1, backend="tensor")
    parallel = render_frame(params, GrayscaleColorizer(), workers=3, backend="tensor")
    assert sequential.pixels.tobytes() == parallel.pixels.tobytes()


def test_tensor_backend_bounded_pixels_are_black():
    view = Viewport(upper_left=complex(-0.1, 0.1), lower_right=complex(0.1, -0.1))
    params = RenderParameters(width=8, height=8, viewport=view, max_iterations=50)
    result = render_frame(params, GrayscaleColorizer(), workers=2, backend="tensor")
    assert not result.pixels.any()
