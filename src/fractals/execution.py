"""Execution helpers for fractal CLI workflows."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from mlflow.exceptions import MlflowException

from .computation import allocate_buffer, compute_chunk
from .config import RenderConfig
from .report import RenderReport
from .surface import save_png, validate_buffer


def _chunk_record(chunk_id: int, start: int, end: int, comp_time: float) -> Dict[str, Any]:
    """Create a uniform chunk metadata record."""
    return {
        "chunk_id": int(chunk_id),
        "start_col": int(start),
        "end_col": int(end - 1) if end > start else int(end),
        "comp_time": comp_time,
    }


def render(config: RenderConfig) -> RenderReport:
    """Render every chunk into its slot of the buffer, timing each one."""
    start_time = time.perf_counter()

    buffer = allocate_buffer(config)
    stride = config.height * 4
    chunk_records: List[Dict[str, Any]] = []
    comp_total = 0.0

    for chunk_id in range(config.total_chunks):
        t0 = time.perf_counter()
        start, end, chunk = compute_chunk(config, chunk_id)
        comp_time = time.perf_counter() - t0
        buffer[start * stride:end * stride] = chunk
        comp_total += comp_time
        chunk_records.append(_chunk_record(chunk_id, start, end, comp_time))

    data = buffer.tobytes()
    validate_buffer(data, config.width, config.height)

    timing = {
        "wall_time": time.perf_counter() - start_time,
        "comp_total": comp_total,
        "total_chunks": config.total_chunks,
    }
    return RenderReport(data, timing, chunk_records or None)


def render_buffer(config: RenderConfig) -> bytes:
    return render(config).buffer


def run_single_render(
    config: RenderConfig,
    suite_name: Optional[str],
    output: str | Path | None = None,
) -> RenderReport:
    """Render a single configuration, save it and log it to MLflow."""
    print(
        f"[Run] Starting render '{config.run_name}' "
        f"(mode={config.mode}, size={config.image_size}, "
        f"iterations={config.iterations}, chunks={config.total_chunks})",
        flush=True,
    )

    report = render(config)

    image_path = None
    if output is not None and report.buffer:
        image_path = save_png(report.buffer, config.width, config.height, output)
        print(f"[Run] Image written to {image_path}", flush=True)

    suite = suite_name or os.environ.get("FRACTALS_SUITE") or "default"

    if os.environ.get("SKIP_MLFLOW"):
        print("[Run] SKIP_MLFLOW set - skipping MLflow logging.", flush=True)
    else:
        from .tracking import log_to_mlflow

        print("[Run] Render finished, logging to MLflow...", flush=True)
        log_to_mlflow(config, report, suite, image_path)

    wall_time = report.timing.get("wall_time", 0.0)
    print(f"[Timing] Total: {wall_time:.4f}s")
    return report


def run_sweep(
    configs: List[RenderConfig],
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    descriptor: Optional[str] = None,
    output_dir: str | Path | None = None,
) -> int:
    """Run a list of configurations and return a process exit code."""
    descriptor = descriptor or "sweep"

    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        print(f"[Task {task_id}] Running: {config.run_name}")
        try:
            run_single_render(config, suite_name, _output_path(output_dir, config))
        except (OSError, ValueError, MlflowException) as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        return 0

    print("=" * 70)
    print(f"Running {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    successes = 0
    failures: list[tuple[int, str]] = []

    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        try:
            run_single_render(cfg, suite_name, _output_path(output_dir, cfg))
        except (OSError, ValueError, MlflowException) as exc:
            print(f"    ✗ FAILED: {exc}", file=sys.stderr)
            failures.append((idx, cfg.run_name))
            continue
        successes += 1
        print("    ✓ Completed")

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {successes}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed configurations:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0


def _output_path(output_dir: str | Path | None, config: RenderConfig) -> Path | None:
    if output_dir is None:
        return None
    return Path(output_dir) / f"{config.run_name}.png"
