"""Grayscale PNG output for rendered pixel buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image


def write_image(path: str | Path, pixels: np.ndarray, bounds: Tuple[int, int]) -> Path:
    """Encode ``pixels`` as an 8-bit grayscale PNG of the given bounds."""
    width, height = bounds
    if pixels.size != width * height:
        raise ValueError(
            f"cannot write {pixels.size} pixels as a {width}x{height} image"
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    frame = np.ascontiguousarray(pixels, dtype=np.uint8).reshape(height, width)
    Image.fromarray(frame).save(path, format="PNG")
    return path
