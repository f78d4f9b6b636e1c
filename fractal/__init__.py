"""Public API for Mandelbrot escape-time rendering."""

from .config import (
    PRESETS,
    CenteredViewport,
    ChannelMode,
    ConfigError,
    FixedBounds,
    RenderConfig,
    lenient_float,
    lenient_int,
    resolve_config,
)
from .compose import compose
from .escape import escape_step_count, escape_steps, evaluate, raw_intensity
from .normalize import DEGENERATE_LEVEL, IntensityRange, normalize, reduce_ranges
from .output import to_image, write_image
from .renderer import RenderResult, render, split_rows
from .viewport import ViewportBounds, pixel_to_complex, resolve_bounds, sample_rows

__all__ = [
    "DEGENERATE_LEVEL",
    "PRESETS",
    "CenteredViewport",
    "ChannelMode",
    "ConfigError",
    "FixedBounds",
    "IntensityRange",
    "RenderConfig",
    "RenderResult",
    "ViewportBounds",
    "compose",
    "escape_step_count",
    "escape_steps",
    "evaluate",
    "lenient_float",
    "lenient_int",
    "normalize",
    "pixel_to_complex",
    "raw_intensity",
    "reduce_ranges",
    "render",
    "resolve_bounds",
    "resolve_config",
    "sample_rows",
    "split_rows",
    "to_image",
    "write_image",
]
