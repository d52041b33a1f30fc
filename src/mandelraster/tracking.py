"""MLflow tracking for Mandelbrot renders."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

import mlflow
import pandas as pd
from matplotlib import pyplot as plt

from .config import RenderConfig
from .report import RenderReport

DEFAULT_TRACKING_URI = "sqlite:///mlflow.db"
EXPERIMENT_NAME = "mandelraster"


def log_to_mlflow(
    config: RenderConfig,
    report: RenderReport,
    batch_name: str = "default",
) -> None:
    """Log a render to MLflow with the rendered artifact and raw metrics.

    Args:
        config: Render configuration
        report: Combined outputs (pixels, timing stats, chunk table)
        batch_name: Name of the render group, used for tagging/filtering
    """
    if os.environ.get("SKIP_MLFLOW"):
        return

    mlflow.set_tracking_uri(_resolve_tracking_uri())
    mlflow.set_experiment(EXPERIMENT_NAME)

    with mlflow.start_run(run_name=config.run_name) as run:
        mlflow.set_tags({"node_name": os.uname().nodename, "batch": batch_name})

        chunk_records = report.copy_chunks()
        if chunk_records:
            mlflow.log_table(_records_to_table(chunk_records), "chunks.json")

        mlflow.log_params(config.to_dict())

        timing_stats = report.timing or {}
        metrics = {
            "wall_time": float(timing_stats.get("wall_time", 0.0)),
            "comp_total": float(timing_stats.get("comp_total", 0.0)),
            "total_chunks": float(timing_stats.get("total_chunks", 0)),
            "inside_fraction": report.inside_fraction,
        }
        for key, value in metrics.items():
            mlflow.log_metric(key, value)

        fig, ax = plt.subplots(figsize=(6, 6))
        ax.imshow(report.image, cmap="gray", vmin=0, vmax=255)
        ax.set_axis_off()
        mlflow.log_figure(fig, "figures/mandelbrot.png")
        plt.close(fig)

        if Path(config.output).exists():
            mlflow.log_artifact(config.output, "renders")

        print(f"[MLflow] Logged run: {config.run_name} (batch: {batch_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _records_to_table(chunk_records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise chunk records into MLflow table format."""

    frame = pd.DataFrame.from_records(chunk_records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> str:
    return os.environ.get("MLFLOW_TRACKING_URI") or DEFAULT_TRACKING_URI
