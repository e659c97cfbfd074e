"""Escape-time fractal rendering (Mandelbrot and Julia sets) to RGBA buffers."""

__version__ = "1.0.0"

# Core computation and config - lightweight, no tracking stack
from .baseline import generate_image, render_julia, render_mandelbrot
from .computation import compute_chunk
from .config import RenderConfig, default_render_config
from .geometry import ComplexNumber, screen_to_cartesian
from .report import RenderReport
from .stability import point_stability


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "render":
        from .execution import render

        return render
    elif name == "render_buffer":
        from .execution import render_buffer

        return render_buffer
    elif name == "load_sweep_configs":
        from .config import load_sweep_configs

        return load_sweep_configs
    elif name == "log_to_mlflow":
        from .tracking import log_to_mlflow

        return log_to_mlflow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ComplexNumber",
    "RenderConfig",
    "RenderReport",
    "compute_chunk",
    "default_render_config",
    "generate_image",
    "load_sweep_configs",
    "log_to_mlflow",
    "point_stability",
    "render",
    "render_buffer",
    "render_julia",
    "render_mandelbrot",
    "screen_to_cartesian",
]
