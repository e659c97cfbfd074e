"""MLflow logging for fractal renders."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import mlflow
import pandas as pd
from matplotlib import pyplot as plt

from .config import RenderConfig
from .report import RenderReport
from .surface import to_rgba_array

DEFAULT_TRACKING_URI = "sqlite:///mlflow.db"
DEFAULT_EXPERIMENT_NAME = "fractals_local"


def log_to_mlflow(
    config: RenderConfig,
    report: RenderReport,
    suite_name: str = "default",
    image_path: Optional[Path] = None,
) -> None:
    """Log a render to MLflow with its parameters, timings and image.

    Args:
        config: Render configuration
        report: Buffer, timing stats and chunk table
        suite_name: Name of the sweep suite, used for tagging/filtering
        image_path: PNG written by the caller, logged as an artifact if given
    """
    if os.environ.get("SKIP_MLFLOW"):
        return

    mlflow.set_tracking_uri(_resolve_tracking_uri())
    mlflow.set_experiment(_resolve_experiment_name())

    with mlflow.start_run(run_name=config.run_name) as run:
        mlflow.set_tags({"node_name": os.uname().nodename, "suite": suite_name, "mode": config.mode})
        mlflow.log_params(config.to_dict())

        chunk_records = report.copy_chunks()
        if chunk_records:
            mlflow.log_table(_records_to_table(chunk_records), "chunks.json")

        timing_stats = report.timing or {}
        for key in ("wall_time", "comp_total", "total_chunks"):
            mlflow.log_metric(key, float(timing_stats.get(key, 0.0)))

        if image_path is not None:
            mlflow.log_artifact(str(image_path), "images")
        elif report.buffer:
            fig, ax = plt.subplots(figsize=(6, 6))
            ax.imshow(to_rgba_array(report.buffer, config.width, config.height))
            ax.set_axis_off()
            mlflow.log_figure(fig, f"figures/{config.mode}.png")
            plt.close(fig)

        print(f"[MLflow] Logged run: {config.run_name} (suite: {suite_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _records_to_table(chunk_records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise chunk records into MLflow table format."""
    frame = pd.DataFrame.from_records(chunk_records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> str:
    return os.environ.get("MLFLOW_TRACKING_URI") or DEFAULT_TRACKING_URI


def _resolve_experiment_name() -> str:
    return os.environ.get("FRACTALS_EXPERIMENT") or DEFAULT_EXPERIMENT_NAME
