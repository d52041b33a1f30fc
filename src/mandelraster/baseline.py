"""Baseline Mandelbrot renderer in plain Python."""

from __future__ import annotations

from typing import Tuple

import numpy as np


def render_reference(
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = 255,
) -> np.ndarray:
    """Render the viewport without numba, returning a fresh row-major buffer."""
    width, height = bounds
    pixels = np.zeros(width * height, dtype=np.uint8)

    plane_width = lower_right.real - upper_left.real
    plane_height = upper_left.imag - lower_right.imag

    for row in range(height):
        for column in range(width):
            c = complex(
                upper_left.real + column * plane_width / width,
                upper_left.imag - row * plane_height / height,
            )
            z = 0j
            for i in range(limit):
                z = z * z + c
                if z.real * z.real + z.imag * z.imag > 4.0:
                    pixels[row * width + column] = 255 - (i * 255) // limit
                    break

    return pixels
