"""Mandelbrot set rasterizer producing grayscale PNG images."""

__version__ = "1.0.0"

# Core computation and config - lightweight, no plotting or tracking imports
from .computation import DEFAULT_LIMIT, allocate_pixels, escape_time, pixel_to_point, render
from .config import RenderConfig, default_render_config
from .parsing import parse_bounds, parse_complex, parse_pair
from .report import RenderReport


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "log_to_mlflow":
        from .tracking import log_to_mlflow

        return log_to_mlflow
    elif name == "write_image":
        from .imaging import write_image

        return write_image
    elif name == "run_render":
        from .execution import run_render

        return run_render
    elif name == "run_batch":
        from .execution import run_batch

        return run_batch
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DEFAULT_LIMIT",
    "RenderConfig",
    "RenderReport",
    "default_render_config",
    "allocate_pixels",
    "escape_time",
    "pixel_to_point",
    "render",
    "parse_pair",
    "parse_complex",
    "parse_bounds",
    "write_image",
    "run_render",
    "log_to_mlflow",
    "run_batch",
]
