from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numba import njit

__all__ = [
    "DEFAULT_LIMIT",
    "allocate_pixels",
    "pixel_to_point",
    "escape_time",
    "intensity",
    "render_rows",
    "render",
]

DEFAULT_LIMIT = 255
ESCAPE_RADIUS_SQR = 4.0
_NOT_ESCAPED = -1


def allocate_pixels(bounds: Tuple[int, int]) -> np.ndarray:
    width, height = bounds
    return np.zeros(width * height, dtype=np.uint8)


@njit(error_model="numpy")
def _pixel_to_point(
    width: int,
    height: int,
    column: int,
    row: int,
    upper_left: complex,
    lower_right: complex,
) -> complex:
    plane_width = lower_right.real - upper_left.real
    plane_height = upper_left.imag - lower_right.imag
    return complex(
        upper_left.real + column * plane_width / width,
        upper_left.imag - row * plane_height / height,
    )


def pixel_to_point(
    bounds: Tuple[int, int],
    pixel: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Map a ``(column, row)`` pixel onto the viewport spanned by the two corners.

    Row 0 is the top of the image, so the imaginary part decreases as the row
    grows. Zero-sized bounds give non-finite coordinates rather than an error.
    """
    width, height = bounds
    column, row = pixel
    return _pixel_to_point(
        width, height, column, row, complex(upper_left), complex(lower_right)
    )


@njit
def _escape_time(c: complex, limit: int) -> int:
    z = 0.0 + 0.0j
    for i in range(limit):
        z = z * z + c
        if z.real * z.real + z.imag * z.imag > ESCAPE_RADIUS_SQR:
            return i
    return _NOT_ESCAPED


def escape_time(c: complex, limit: int = DEFAULT_LIMIT) -> Optional[int]:
    """Return the iteration at which ``c`` leaves the radius-2 disc, or ``None``.

    ``None`` means the orbit stayed bounded for ``limit`` iterations and the
    point is treated as a member of the set.
    """
    count = _escape_time(complex(c), limit)
    if count == _NOT_ESCAPED:
        return None
    return count


@njit
def _intensity(count: int, limit: int) -> int:
    return 255 - (count * 255) // limit


def intensity(count: Optional[int], limit: int = DEFAULT_LIMIT) -> int:
    """Grayscale byte for an escape result; black for points that never escape."""
    if count is None:
        return 0
    return _intensity(count, limit)


@njit(error_model="numpy")
def _render_rows(
    pixels: np.ndarray,
    width: int,
    height: int,
    upper_left: complex,
    lower_right: complex,
    start_row: int,
    end_row: int,
    limit: int,
) -> None:
    for row in range(start_row, end_row):
        for column in range(width):
            point = _pixel_to_point(width, height, column, row, upper_left, lower_right)
            count = _escape_time(point, limit)
            if count == _NOT_ESCAPED:
                pixels[row * width + column] = 0
            else:
                pixels[row * width + column] = _intensity(count, limit)


def _check_buffer(pixels: np.ndarray, bounds: Tuple[int, int]) -> None:
    width, height = bounds
    if pixels.dtype != np.uint8:
        raise ValueError(f"pixel buffer must be uint8, got {pixels.dtype}")
    if pixels.size != width * height:
        raise ValueError(
            f"pixel buffer holds {pixels.size} bytes, bounds {width}x{height} "
            f"need {width * height}"
        )
    if not pixels.flags.c_contiguous:
        raise ValueError("pixel buffer must be C-contiguous")


def render_rows(
    pixels: np.ndarray,
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    start_row: int,
    end_row: int,
    limit: int = DEFAULT_LIMIT,
) -> Tuple[int, int]:
    """Render rows ``[start_row, end_row)`` into ``pixels`` in place.

    Returns the clamped row range that was actually written.
    """
    _check_buffer(pixels, bounds)
    width, height = bounds
    start_row = max(0, min(start_row, height))
    end_row = max(start_row, min(end_row, height))
    _render_rows(
        pixels.reshape(-1),
        width,
        height,
        complex(upper_left),
        complex(lower_right),
        start_row,
        end_row,
        limit,
    )
    return start_row, end_row


def render(
    pixels: np.ndarray,
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = DEFAULT_LIMIT,
) -> None:
    """Fill the row-major ``pixels`` buffer with the rendered viewport."""
    render_rows(pixels, bounds, upper_left, lower_right, 0, bounds[1], limit)
