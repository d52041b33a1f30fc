"""Execution helpers for Mandelbrot CLI workflows."""

from __future__ import annotations

import os
import shlex
import sys
from typing import Any, Dict, List, Optional

import numpy as np

from .computation import allocate_pixels, render_rows
from .config import RenderConfig
from .imaging import write_image
from .report import RenderReport
from .timing import RenderTimer


def _chunk_record(chunk_id: int, start: int, end: int, comp_time: float, inside: int) -> Dict:
    """Create a uniform chunk metadata record."""
    return {
        "chunk_id": int(chunk_id),
        "start_row": int(start),
        "end_row": int(end),
        "comp_time": comp_time,
        "inside": int(inside),
    }


def compute_render(config: RenderConfig) -> RenderReport:
    """Render ``config`` chunk by chunk in row order, timing each chunk."""
    width, height = config.bounds
    pixels = allocate_pixels(config.bounds)
    chunk_records: List[Dict[str, Any]] = []

    timer = RenderTimer()
    for chunk_id in range(config.total_chunks):
        start_row = chunk_id * config.chunk_size
        (start, end), comp_time = timer.time_chunk(
            render_rows,
            pixels,
            config.bounds,
            config.upper_left,
            config.lower_right,
            start_row,
            start_row + config.chunk_size,
            config.limit,
        )
        inside = np.count_nonzero(pixels[start * width : end * width] == 0)
        chunk_records.append(_chunk_record(chunk_id, start, end, comp_time, inside))

    return RenderReport(pixels, (width, height), timer.summary(), chunk_records or None)


def run_render(
    config: RenderConfig,
    batch_name: Optional[str] = None,
    *,
    track: bool = False,
) -> RenderReport:
    """Render a single configuration, write its PNG and optionally track it."""
    print(
        f"[Render] Starting '{config.run_name}' "
        f"(size={config.image_size}, limit={config.limit}, chunks={config.total_chunks})",
        flush=True,
    )

    report = compute_render(config)
    path = write_image(config.output, report.pixels, report.bounds)
    print(f"[Render] Wrote {path}", flush=True)

    if track and os.environ.get("SKIP_MLFLOW"):
        print("[Render] SKIP_MLFLOW set - skipping MLflow logging.", flush=True)
    elif track:
        from mlflow.exceptions import MlflowException

        from .tracking import log_to_mlflow

        print("[Render] Logging to MLflow...", flush=True)
        try:
            log_to_mlflow(config, report, batch_name or "default")
        except MlflowException as exc:
            # the PNG is already on disk; a tracking outage does not fail the render
            print(f"[MLflow] Tracking failed: {exc}", file=sys.stderr, flush=True)

    print(f"[Timing] Total: {report.timing['wall_time']:.4f}s")
    return report


def run_batch(
    configs: List[RenderConfig],
    descriptor: str = "batch",
    batch_name: Optional[str] = None,
    *,
    task_id: Optional[int] = None,
    track: bool = False,
) -> int:
    """Run a list of renders, or only ``configs[task_id]`` when given."""
    if not configs:
        print("ERROR: No configurations found in batch", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        print(f"[Task {task_id}] Running: {config.run_name}")
        return 0 if _run_guarded(config, batch_name, track) else 1

    print("=" * 70)
    print(f"Running {len(configs)} renders from {descriptor}")
    print("=" * 70)

    successes = 0
    failures: list[tuple[int, str]] = []

    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        if _run_guarded(cfg, batch_name, track):
            successes += 1
        else:
            failures.append((idx, cfg.run_name))

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {successes}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed renders:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0


def reproduce_command(config: RenderConfig) -> str:
    """Shell command line that renders ``config`` on its own."""
    return shlex.join(["mandelraster", *config.to_cli_args()])


def _run_guarded(config: RenderConfig, batch_name: Optional[str], track: bool) -> bool:
    try:
        run_render(config, batch_name, track=track)
    except (OSError, ValueError) as exc:
        print(f"    ✗ FAILED: {exc}", file=sys.stderr)
        print(f"    Reproduce: {reproduce_command(config)}", file=sys.stderr)
        return False
    return True
