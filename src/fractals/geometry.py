"""Complex numbers and the screen-to-plane coordinate mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

__all__ = ["ComplexNumber", "GRAPH_WIDTH", "GRAPH_HEIGHT", "screen_to_cartesian", "coord_to_complex"]

# Logical plane onto which every canvas is framed.
GRAPH_WIDTH = 4.0
GRAPH_HEIGHT = 3.0


@dataclass(frozen=True)
class ComplexNumber:
    """Immutable complex value with the few operations the iteration needs."""

    real: float
    imaginary: float

    def square(self) -> ComplexNumber:
        real = (self.real * self.real) - (self.imaginary * self.imaginary)
        imaginary = 2.0 * self.real * self.imaginary
        return ComplexNumber(real, imaginary)

    def norm(self) -> float:
        """Squared magnitude."""
        return (self.real * self.real) + (self.imaginary * self.imaginary)

    def __add__(self, other: Union[ComplexNumber, float]) -> ComplexNumber:
        if isinstance(other, ComplexNumber):
            return ComplexNumber(self.real + other.real, self.imaginary + other.imaginary)
        if isinstance(other, (int, float)):
            return ComplexNumber(self.real + other, self.imaginary)
        return NotImplemented


def screen_to_cartesian(
    x: float,
    y: float,
    logical_width: float,
    logical_height: float,
    canvas_width: float,
) -> Tuple[float, float]:
    """Map a screen position to zero-centered Cartesian coordinates.

    Only ``canvas_width`` drives the scale, so the framing of the logical
    plane depends on the canvas width alone. The Y axis is flipped.
    """
    scale = logical_width / canvas_width
    scaled_x = x * scale
    scaled_y = y * scale
    return scaled_x - (logical_width / 2.0), (logical_height / 2.0) - scaled_y


def coord_to_complex(x: float, y: float, canvas_width: int) -> ComplexNumber:
    cartesian_x, cartesian_y = screen_to_cartesian(
        x, y, GRAPH_WIDTH, GRAPH_HEIGHT, float(canvas_width)
    )
    return ComplexNumber(0.0, cartesian_y) + cartesian_x
