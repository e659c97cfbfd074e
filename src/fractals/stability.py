"""Escape-time evaluation and the per-mode stability strategies."""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import ComplexNumber, coord_to_complex

__all__ = [
    "ESCAPE_NORM",
    "point_stability",
    "MandelbrotStability",
    "JuliaStability",
    "mandelbrot_stability",
    "julia_stability",
]

# Squared escape radius (|z| > 2).
ESCAPE_NORM = 4.0


def point_stability(iterations: int, start: ComplexNumber, constant: ComplexNumber) -> int:
    """Count iterations of ``z = z**2 + constant`` that stay within the bound.

    The escaping iteration itself is not counted, so the result lies in
    ``[0, iterations]``.
    """
    z = start
    count = 0
    while count < iterations:
        z = z.square() + constant
        if z.norm() > ESCAPE_NORM:
            break
        count += 1
    return count


@dataclass(frozen=True)
class MandelbrotStability:
    """Mandelbrot strategy: the mapped pixel is the constant, ``z`` starts at 0."""

    canvas_width: int
    iterations: int

    def __call__(self, x: float, y: float) -> int:
        return point_stability(
            self.iterations,
            ComplexNumber(0.0, 0.0),
            coord_to_complex(x, y, self.canvas_width),
        )


@dataclass(frozen=True)
class JuliaStability:
    """Julia strategy: the mapped pixel is the starting point."""

    canvas_width: int
    iterations: int
    constant: ComplexNumber

    def __call__(self, x: float, y: float) -> int:
        return point_stability(
            self.iterations,
            coord_to_complex(x, y, self.canvas_width),
            self.constant,
        )


def mandelbrot_stability(canvas_width: int, iterations: int) -> MandelbrotStability:
    return MandelbrotStability(canvas_width, iterations)


def julia_stability(canvas_width: int, iterations: int, constant: ComplexNumber) -> JuliaStability:
    return JuliaStability(canvas_width, iterations, constant)
