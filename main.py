from __future__ import annotations

import argparse
import sys
from pathlib import Path

from fractals.config import (
    JULIA_PRESETS,
    MODES,
    default_render_config,
    load_named_sweep_configs,
)
from fractals.execution import run_single_render, run_sweep


def parse_args():
    parser = argparse.ArgumentParser(description="Render Mandelbrot and Julia set images.")
    parser.add_argument("--sweep", type=str, help="Path to sweep YAML file")
    parser.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    parser.add_argument("--list-presets", action="store_true", help="List Julia presets")
    parser.add_argument("--task-id", type=int, help="Run specific config index (for HPC arrays)")
    parser.add_argument("--output", type=str, help="PNG path (direct run) or directory (sweep)")

    # Direct run parameters
    parser.add_argument("--mode", type=str, choices=MODES, help="Fractal to render")
    parser.add_argument("--image-size", type=str, help="Image size as WIDTHxHEIGHT")
    parser.add_argument("--iterations", type=int, help="Iteration cap per pixel")
    parser.add_argument("--zoom", type=float, help="Zoom level")
    parser.add_argument("--offset-x", type=float, help="Horizontal pan offset")
    parser.add_argument("--offset-y", type=float, help="Vertical pan offset")
    parser.add_argument("--real", type=float, help="Real part of the Julia constant")
    parser.add_argument("--imaginary", type=float, help="Imaginary part of the Julia constant")
    parser.add_argument("--preset", type=str, help="Named Julia constant (see --list-presets)")
    parser.add_argument("--chunk-size", type=int, help="Columns rendered per chunk")

    return parser.parse_args()


def main():
    args = parse_args()

    if args.list_presets:
        for name, (real, imaginary) in JULIA_PRESETS.items():
            print(f"{name}: real={real}, imaginary={imaginary}")
        return 0

    if not args.sweep:
        if args.suite:
            sys.exit("ERROR: --suite requires --sweep")
        if args.list_suites:
            sys.exit("ERROR: --list-suites requires --sweep")
        if args.task_id is not None:
            sys.exit("ERROR: --task-id requires --sweep")

    # Handle sweep runs
    if args.sweep:
        sweep_path = Path(args.sweep)

        if args.list_suites:
            try:
                suites = load_named_sweep_configs(sweep_path)
            except ValueError as exc:
                sys.exit(f"ERROR: {exc}")
            for name, configs in suites:
                print(f"{name or sweep_path.stem}: {len(configs)} configurations")
            return 0

        if args.task_id is not None and args.suite is None:
            sys.exit("ERROR: --task-id requires --suite")

        try:
            suites = load_named_sweep_configs(sweep_path, args.suite)
        except ValueError as exc:
            sys.exit(f"ERROR: {exc}")

        exit_code = 0
        for suite_name, configs in suites:
            descriptor = f"{sweep_path}::{suite_name}" if suite_name else str(sweep_path)
            rc = run_sweep(configs, args.task_id, suite_name, descriptor, args.output)
            exit_code = exit_code or rc
        return exit_code

    if not args.mode:
        sys.exit("ERROR: Direct run requires --mode (or use --sweep)")

    overrides = {
        "mode": args.mode,
        "image_size": args.image_size,
        "iterations": args.iterations,
        "zoom": args.zoom,
        "offset_x": args.offset_x,
        "offset_y": args.offset_y,
        "real": args.real,
        "imaginary": args.imaginary,
        "preset": args.preset,
        "chunk_size": args.chunk_size,
    }
    try:
        config = default_render_config(**{k: v for k, v in overrides.items() if v is not None})
    except ValueError as exc:
        sys.exit(f"ERROR: {exc}")

    run_single_render(config, None, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
