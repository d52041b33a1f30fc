"""Wall-clock bookkeeping for chunked renders."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple


@dataclass
class RenderTimer:
    """Times each chunk of a render against the wall clock of the whole run."""

    started: float = field(default_factory=time.perf_counter)
    chunk_times: List[float] = field(default_factory=list)

    def time_chunk(self, func: Callable[..., Any], *args, **kwargs) -> Tuple[Any, float]:
        """Call ``func`` and record its duration as one chunk."""
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        duration = time.perf_counter() - t0
        self.chunk_times.append(duration)
        return result, duration

    def summary(self) -> Dict[str, Any]:
        return {
            "wall_time": time.perf_counter() - self.started,
            "comp_total": sum(self.chunk_times),
            "total_chunks": len(self.chunk_times),
        }
