"""Structured results returned from a render run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class RenderReport:
    """Container for outputs produced by ``run_render``."""

    pixels: np.ndarray
    bounds: Tuple[int, int]
    timing: Dict[str, Any]
    chunks: Optional[List[Dict[str, Any]]]

    @property
    def image(self) -> np.ndarray:
        """The pixel buffer viewed as ``(height, width)`` rows."""
        width, height = self.bounds
        return self.pixels.reshape(height, width)

    @property
    def inside_fraction(self) -> float:
        """Share of pixels whose point never escaped."""
        if self.pixels.size == 0:
            return 0.0
        return float(np.count_nonzero(self.pixels == 0)) / self.pixels.size

    def copy_chunks(self) -> Optional[List[Dict[str, Any]]]:
        if self.chunks is None:
            return None
        return [record.copy() for record in self.chunks]
