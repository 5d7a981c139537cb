import numpy as np
import pytest

from mandelband import InvalidViewport, Viewport, parse_complex, parse_pair, pixel_to_complex
from mandelband.plane import plane_grid

VIEW = Viewport(upper_left=complex(-2.0, 1.0), lower_right=complex(1.0, -1.0))


def test_pixel_to_complex_origin_is_upper_left():
    assert pixel_to_complex(0, 0, 64, 48, VIEW) == VIEW.upper_left


@pytest.mark.parametrize("width,height", [(1, 1), (3, 7), (64, 48), (1000, 750)])
def test_last_pixel_within_one_step_of_lower_right(width, height):
    point = pixel_to_complex(height - 1, width - 1, width, height, VIEW)
    step_re = (VIEW.lower_right.real - VIEW.upper_left.real) / width
    step_im = (VIEW.upper_left.imag - VIEW.lower_right.imag) / height
    assert abs(point.real - VIEW.lower_right.real) <= step_re + 1e-12
    assert abs(point.imag - VIEW.lower_right.imag) <= step_im + 1e-12


def test_pixel_to_complex_interpolates():
    view = Viewport(upper_left=complex(-1.0, 1.0), lower_right=complex(1.0, -1.0))
    assert pixel_to_complex(175, 25, 100, 200, view) == complex(-0.5, -0.75)


def test_imaginary_part_decreases_with_row():
    points = [pixel_to_complex(row, 5, 10, 10, VIEW) for row in range(10)]
    imags = [p.imag for p in points]
    assert imags == sorted(imags, reverse=True)


def test_plane_grid_matches_pixel_to_complex():
    rows = range(3, 9)
    real, imag = plane_grid(rows, 11, 13, VIEW)
    assert real.shape == (6, 11)
    for i, row in enumerate(rows):
        for col in range(11):
            point = pixel_to_complex(row, col, 11, 13, VIEW)
            assert real[i, col] == point.real
            assert imag[i, col] == point.imag


@pytest.mark.parametrize(
    "corners",
    [
        (complex(1.0, 1.0), complex(-2.0, -1.0)),
        (complex(-2.0, -1.0), complex(1.0, 1.0)),
        (complex(-2.0, 1.0), complex(-2.0, -1.0)),
        (complex(-2.0, 1.0), complex(1.0, 1.0)),
        (complex(float("nan"), 1.0), complex(1.0, -1.0)),
        (complex(-2.0, 1.0), complex(float("inf"), -1.0)),
    ],
)
def test_viewport_validate_rejects_bad_orientation(corners):
    with pytest.raises(InvalidViewport):
        Viewport(*corners).validate()


def test_viewport_validate_accepts_screen_orientation():
    VIEW.validate()


@pytest.mark.parametrize(
    "s,sep,kind,expected",
    [
        ("", ",", int, None),
        ("10", ",", int, None),
        (",10", ",", int, None),
        ("10,20", ",", int, (10, 20)),
        ("10,20xy", ",", int, None),
        ("0.5x", ",", float, None),
        ("0.5x1.5", "x", float, (0.5, 1.5)),
        ("1000x750", "x", int, (1000, 750)),
        (" 10, 20", ",", int, None),
        ("10 ,20", ",", int, None),
        ("1_0x2_0", "x", int, None),
        ("1_000.5,2", ",", float, None),
    ],
)
def test_parse_pair(s, sep, kind, expected):
    assert parse_pair(s, sep, kind) == expected


def test_parse_complex():
    assert parse_complex("1.25,-0.0625") == complex(1.25, -0.0625)
    assert parse_complex(",-0.0625") is None
    assert parse_complex("-1.20,0.35") == complex(-1.2, 0.35)
