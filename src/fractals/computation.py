from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit, prange

from .config import RenderConfig
from .geometry import GRAPH_HEIGHT, GRAPH_WIDTH
from .stability import ESCAPE_NORM

__all__ = ["allocate_buffer", "chunk_bounds", "compute_chunk"]


@njit
def _allocate_buffer(width: int, height: int) -> np.ndarray:
    return np.zeros(width * height * 4, dtype=np.uint8)


def allocate_buffer(config: RenderConfig) -> np.ndarray:
    return _allocate_buffer(config.width, config.height)


@njit
def _escape_count(iterations: int, zr: float, zi: float, cr: float, ci: float) -> int:
    count = 0
    while count < iterations:
        real = (zr * zr) - (zi * zi)
        imaginary = 2.0 * zr * zi
        zr = real + cr
        zi = imaginary + ci
        if (zr * zr) + (zi * zi) > ESCAPE_NORM:
            break
        count += 1
    return count


@njit
def _plane_point(x: int, y: int, canvas_width: int, zoom: float, offset_x: float, offset_y: float) -> Tuple[float, float]:
    param_r = 100.0 + offset_x + (zoom * 0.5)
    param_i = -200.0 + offset_y + (zoom * 0.25)
    pixel_scale = 1.0 + (zoom * 0.001)
    screen_x = x * pixel_scale - param_i
    screen_y = y * pixel_scale - param_r

    scale = GRAPH_WIDTH / canvas_width
    return (screen_x * scale) - (GRAPH_WIDTH / 2.0), (GRAPH_HEIGHT / 2.0) - (screen_y * scale)


@njit
def _write_pixel(out: np.ndarray, col: int, y: int, stability: int) -> None:
    out[col, y, 0] = (stability // 4) & 0xFF
    out[col, y, 1] = (stability // 2) & 0xFF
    out[col, y, 2] = stability & 0xFF
    out[col, y, 3] = 255


@njit(parallel=True)
def _mandelbrot_columns(
    width: int,
    height: int,
    start_col: int,
    end_col: int,
    iterations: int,
    zoom: float,
    offset_x: float,
    offset_y: float,
) -> np.ndarray:
    out = np.zeros((end_col - start_col, height, 4), dtype=np.uint8)
    for col in prange(end_col - start_col):
        for y in range(height):
            cr, ci = _plane_point(start_col + col, y, width, zoom, offset_x, offset_y)
            _write_pixel(out, col, y, _escape_count(iterations, 0.0, 0.0, cr, ci))
    return out


@njit(parallel=True)
def _julia_columns(
    width: int,
    height: int,
    start_col: int,
    end_col: int,
    iterations: int,
    zoom: float,
    offset_x: float,
    offset_y: float,
    real: float,
    imaginary: float,
) -> np.ndarray:
    out = np.zeros((end_col - start_col, height, 4), dtype=np.uint8)
    for col in prange(end_col - start_col):
        for y in range(height):
            zr, zi = _plane_point(start_col + col, y, width, zoom, offset_x, offset_y)
            _write_pixel(out, col, y, _escape_count(iterations, zr, zi, real, imaginary))
    return out


def chunk_bounds(config: RenderConfig, chunk_id: int) -> Tuple[int, int]:
    if chunk_id < 0:
        raise ValueError(f"chunk_id must be non-negative, got {chunk_id}")
    start_col = min(chunk_id * config.chunk_size, config.width)
    end_col = min(start_col + config.chunk_size, config.width)
    return start_col, end_col


def compute_chunk(config: RenderConfig, chunk_id: int) -> Tuple[int, int, np.ndarray]:
    """Render the columns of one chunk as a flat RGBA byte array."""
    start_col, end_col = chunk_bounds(config, chunk_id)
    if end_col <= start_col:
        return start_col, start_col, np.zeros(0, dtype=np.uint8)

    if config.mode == "mandelbrot":
        chunk = _mandelbrot_columns(
            config.width,
            config.height,
            start_col,
            end_col,
            config.iterations,
            float(config.zoom),
            float(config.offset_x),
            float(config.offset_y),
        )
    else:
        chunk = _julia_columns(
            config.width,
            config.height,
            start_col,
            end_col,
            config.iterations,
            float(config.zoom),
            float(config.offset_x),
            float(config.offset_y),
            float(config.real),
            float(config.imaginary),
        )
    return start_col, end_col, chunk.reshape(-1)
