"""Accelerated renderer must match the baseline byte for byte."""

from pathlib import Path

import numpy as np
import pytest

from fractals.baseline import render_julia, render_mandelbrot
from fractals.computation import chunk_bounds, compute_chunk
from fractals.execution import render_buffer
from fractals.config import default_render_config, load_sweep_configs

TEST_CONFIGS = load_sweep_configs(Path(__file__).parent / "test_configs.yaml")


def baseline_buffer(config):
    if config.mode == "mandelbrot":
        return render_mandelbrot(
            config.width, config.height, config.iterations,
            config.zoom, config.offset_x, config.offset_y,
        )
    return render_julia(
        config.width, config.height, config.real, config.imaginary,
        config.iterations, config.zoom, config.offset_x, config.offset_y,
    )


@pytest.mark.parametrize("config", TEST_CONFIGS, ids=lambda c: f"{c.run_name}_o{c.offset_x:g}_{c.offset_y:g}")
def test_chunked_matches_baseline(config):
    fast = render_buffer(config)
    reference = baseline_buffer(config)

    np.testing.assert_array_equal(
        np.frombuffer(fast, dtype=np.uint8),
        np.frombuffer(reference, dtype=np.uint8),
        err_msg=f"Mismatch: {config.run_name}",
    )


def test_configs_reach_inside_the_set():
    # At least some views must contain non-escaping points.
    capped = [
        c for c in TEST_CONFIGS
        if bytes([(c.iterations // 4) & 0xFF, (c.iterations // 2) & 0xFF, c.iterations & 0xFF, 255])
        in render_buffer(c)
    ]
    assert capped


def test_chunks_tile_the_columns():
    config = default_render_config(mode="mandelbrot", image_size="23x4", chunk_size=5, iterations=5)
    bounds = [chunk_bounds(config, i) for i in range(config.total_chunks)]
    assert bounds == [(0, 5), (5, 10), (10, 15), (15, 20), (20, 23)]

    start, end, chunk = compute_chunk(config, 4)
    assert (start, end) == (20, 23)
    assert chunk.dtype == np.uint8
    assert chunk.shape == (3 * 4 * 4,)

    start, end, chunk = compute_chunk(config, 99)
    assert start == end and chunk.size == 0


@pytest.mark.parametrize("image_size", ["0x0", "0x9", "9x0"])
def test_empty_images(image_size):
    config = default_render_config(mode="julia", image_size=image_size)
    assert render_buffer(config) == b""


def test_negative_chunk_rejected():
    config = default_render_config(mode="mandelbrot", image_size="8x4", chunk_size=2)
    with pytest.raises(ValueError):
        chunk_bounds(config, -1)
    with pytest.raises(ValueError):
        compute_chunk(config, -1)
