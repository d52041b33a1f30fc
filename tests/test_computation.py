"""Escape-time, coordinate mapping and render loop behaviour."""

import cmath

import numpy as np
import pytest

from mandelraster.computation import (
    DEFAULT_LIMIT,
    allocate_pixels,
    escape_time,
    intensity,
    pixel_to_point,
    render,
    render_rows,
)

UPPER_LEFT = complex(-1.0, 1.0)
LOWER_RIGHT = complex(1.0, -1.0)


@pytest.mark.parametrize("limit", [1, 2, 10, 255, 1000])
def test_origin_never_escapes(limit):
    assert escape_time(0j, limit) is None


@pytest.mark.parametrize("c", [5 + 0j, -5 + 0j, 3j, 2.5 - 2.5j])
def test_far_points_escape_immediately(c):
    assert escape_time(c, 1) == 0
    assert escape_time(c, DEFAULT_LIMIT) == 0


def test_threshold_is_strict():
    # |z|^2 == 4.0 exactly keeps iterating
    assert escape_time(-2 + 0j, 1000) is None
    assert escape_time(2 + 0j, 1) is None
    assert escape_time(2 + 0j, 2) == 1
    assert escape_time(2j, 10) == 1


def test_escape_iteration_is_stable_once_limit_exceeds_it():
    assert escape_time(0.5 + 0j, 4) is None
    for limit in (5, 6, 50, 255, 10_000):
        assert escape_time(0.5 + 0j, limit) == 4


def test_pixel_to_point_exact_scenario():
    point = pixel_to_point((100, 100), (25, 75), UPPER_LEFT, LOWER_RIGHT)
    assert point == complex(-0.5, -0.5)


def test_pixel_to_point_origin_pixel_is_upper_left():
    upper_left = complex(-1.20, 0.35)
    assert pixel_to_point((1000, 750), (0, 0), upper_left, complex(-1.0, 0.20)) == upper_left


def test_pixel_to_point_far_edge_stops_short_of_lower_right():
    point = pixel_to_point((4, 4), (3, 3), UPPER_LEFT, LOWER_RIGHT)
    assert point == complex(0.5, -0.5)
    midpoint = pixel_to_point((4, 4), (2, 2), UPPER_LEFT, LOWER_RIGHT)
    assert midpoint == 0j


def test_pixel_to_point_rows_go_down_the_imaginary_axis():
    top = pixel_to_point((10, 10), (5, 0), UPPER_LEFT, LOWER_RIGHT)
    bottom = pixel_to_point((10, 10), (5, 9), UPPER_LEFT, LOWER_RIGHT)
    assert top.imag > bottom.imag
    assert top.real == bottom.real


def test_pixel_to_point_zero_bounds_is_not_finite():
    point = pixel_to_point((0, 0), (0, 0), UPPER_LEFT, LOWER_RIGHT)
    assert not cmath.isfinite(point)


def test_intensity_mapping():
    assert intensity(None) == 0
    assert intensity(0) == 255
    assert intensity(254) == 1
    assert intensity(100) == 155
    assert intensity(999, 1000) == 1
    assert intensity(0, 1000) == 255


def test_render_single_origin_pixel():
    pixels = allocate_pixels((1, 1))
    render(pixels, (1, 1), 0j, 0j)
    assert pixels.tolist() == [0]


def test_render_matches_per_pixel_evaluation():
    bounds = (7, 5)
    upper_left, lower_right = complex(-2.0, 1.2), complex(0.5, -1.2)
    pixels = allocate_pixels(bounds)
    render(pixels, bounds, upper_left, lower_right)

    width, height = bounds
    for row in range(height):
        for column in range(width):
            point = pixel_to_point(bounds, (column, row), upper_left, lower_right)
            expected = intensity(escape_time(point, DEFAULT_LIMIT))
            assert pixels[row * width + column] == expected


def test_render_is_idempotent():
    bounds = (32, 24)
    first = allocate_pixels(bounds)
    second = allocate_pixels(bounds)
    render(first, bounds, complex(-2.2, 1.3), complex(0.75, -1.3))
    render(second, bounds, complex(-2.2, 1.3), complex(0.75, -1.3))
    np.testing.assert_array_equal(first, second)
    assert 0 in first and first.max() > 0


def test_render_rows_clamps_and_leaves_other_rows_untouched():
    bounds = (4, 3)
    pixels = np.full(12, 7, dtype=np.uint8)
    written = render_rows(pixels, bounds, 0j, 0j, 2, 10)
    assert written == (2, 3)
    assert pixels[:8].tolist() == [7] * 8
    assert pixels[8:].tolist() == [0] * 4


def test_render_accepts_two_dimensional_buffer():
    pixels = np.zeros((3, 4), dtype=np.uint8)
    render(pixels, (4, 3), complex(3, 3), complex(4, 2))
    assert (pixels == 255).all()


@pytest.mark.parametrize(
    "pixels",
    [np.zeros(11, dtype=np.uint8), np.zeros(13, dtype=np.uint8), np.zeros(12, dtype=np.int32)],
)
def test_render_rejects_mismatched_buffer(pixels):
    with pytest.raises(ValueError):
        render(pixels, (4, 3), UPPER_LEFT, LOWER_RIGHT)
