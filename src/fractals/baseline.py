"""Baseline (pure Python) fractal image generator."""

from __future__ import annotations

from typing import Callable, Tuple

from .geometry import ComplexNumber
from .stability import julia_stability, mandelbrot_stability

__all__ = ["pixel_color", "generate_image", "render_mandelbrot", "render_julia"]


def pixel_color(stability: int) -> Tuple[int, int, int, int]:
    """RGBA for a stability value; channels wrap to 8 bits rather than clamp."""
    return (stability // 4) & 0xFF, (stability // 2) & 0xFF, stability & 0xFF, 255


def generate_image(
    width: int,
    height: int,
    zoom: float,
    offset_x: float,
    offset_y: float,
    stability_function: Callable[[float, float], int],
) -> bytes:
    """Build the RGBA buffer column by column (x outer, y inner)."""
    data = bytearray()

    for x in range(width):
        for y in range(height):
            # Real parameter offsets y and imaginary offsets x.
            param_r = 100.0 + offset_x + (zoom * 0.5)
            param_i = -200.0 + offset_y + (zoom * 0.25)
            scale = 1.0 + (zoom * 0.001)

            stability = stability_function(x * scale - param_i, y * scale - param_r)
            data.extend(pixel_color(stability))

    return bytes(data)


def render_mandelbrot(
    width: int,
    height: int,
    iterations: int,
    zoom: float,
    offset_x: float,
    offset_y: float,
) -> bytes:
    return generate_image(
        width,
        height,
        zoom,
        offset_x,
        offset_y,
        mandelbrot_stability(width, iterations),
    )


def render_julia(
    width: int,
    height: int,
    real: float,
    imaginary: float,
    iterations: int,
    zoom: float,
    offset_x: float,
    offset_y: float,
) -> bytes:
    return generate_image(
        width,
        height,
        zoom,
        offset_x,
        offset_y,
        julia_stability(width, iterations, ComplexNumber(real, imaginary)),
    )
