"""Render configuration: viewport variants, validation and presets."""

from __future__ import annotations

import enum
import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Union

import numpy as np


class ConfigError(ValueError):
    """Raised when a configuration cannot describe a valid render."""


class ChannelMode(enum.Enum):
    GRAY = "gray"
    RGB = "rgb"


@dataclass(frozen=True)
class FixedBounds:
    """A viewport given by its absolute bounds in the complex plane."""

    cxmin: float
    cxmax: float
    cymin: float
    cymax: float


@dataclass(frozen=True)
class CenteredViewport:
    """A viewport given by a center point, a zoom factor and a per-axis span.

    The span is divided by ``zoom`` before the bounds are derived.
    """

    center_x: float = 0.746999
    center_y: float = 0.249991
    zoom: float = 1.0
    span_x: float = 2.0
    span_y: float = 2.0


Viewport = Union[FixedBounds, CenteredViewport]


@dataclass(frozen=True)
class RenderConfig:
    """Fully resolved parameters for a single render."""

    viewport: Viewport = field(default_factory=CenteredViewport)
    size: int = 400
    max_iterations: int = 40
    threshold: float = 2.0
    channels: ChannelMode = ChannelMode.RGB
    crosshairs: bool = False
    output: Path = Path("fractal.png")
    workers: int = 1

    def __post_init__(self) -> None:
        validate(self)


def check_size(size: int) -> None:
    if size <= 0:
        raise ConfigError(f"image size must be positive, got {size}")


def _centered_axis(center: float, span: float, zoom: float) -> tuple[float, float]:
    # The center is halved before the span is applied, so the image is only
    # centered on the requested point when that point is near zero.
    half_span = np.float64(span) / np.float64(zoom)
    offset = np.float64(center) / 2.0
    return float(-half_span + offset), float(half_span + offset)


def resolve_bounds(viewport: Viewport) -> tuple[float, float, float, float]:
    """Return ``(cxmin, cxmax, cymin, cymax)`` for ``viewport``.

    Raises :class:`ConfigError` when the viewport cannot produce a finite,
    non-empty region of the plane.
    """

    if isinstance(viewport, CenteredViewport):
        if not viewport.zoom > 0:
            raise ConfigError(f"zoom must be positive, got {viewport.zoom}")
        if not (viewport.span_x > 0 and viewport.span_y > 0):
            raise ConfigError(f"span must be positive, got ({viewport.span_x}, {viewport.span_y})")
        cxmin, cxmax = _centered_axis(viewport.center_x, viewport.span_x, viewport.zoom)
        cymin, cymax = _centered_axis(viewport.center_y, viewport.span_y, viewport.zoom)
    elif isinstance(viewport, FixedBounds):
        cxmin, cxmax = float(viewport.cxmin), float(viewport.cxmax)
        cymin, cymax = float(viewport.cymin), float(viewport.cymax)
        if not cxmax > cxmin:
            raise ConfigError(f"cxmax ({cxmax}) must be greater than cxmin ({cxmin})")
        if not cymax > cymin:
            raise ConfigError(f"cymax ({cymax}) must be greater than cymin ({cymin})")
    else:
        raise ConfigError(f"unsupported viewport type {type(viewport).__name__}")

    if not (cxmax > cxmin and cymax > cymin):
        raise ConfigError(f"viewport has an empty span: x [{cxmin}, {cxmax}], y [{cymin}, {cymax}]")
    if not (math.isfinite(cxmax - cxmin) and math.isfinite(cymax - cymin)):
        raise ConfigError(f"viewport is not finite: x [{cxmin}, {cxmax}], y [{cymin}, {cymax}]")
    return cxmin, cxmax, cymin, cymax


def validate(config: RenderConfig) -> None:
    """Check the structural preconditions of ``config``."""

    check_size(config.size)
    if config.max_iterations <= 0:
        raise ConfigError(f"iteration budget must be positive, got {config.max_iterations}")
    if not (config.threshold > 0 and math.isfinite(config.threshold)):
        raise ConfigError(f"escape threshold must be positive and finite, got {config.threshold}")
    if config.workers <= 0:
        raise ConfigError(f"worker count must be positive, got {config.workers}")
    resolve_bounds(config.viewport)


def default_workers() -> int:
    return max(os.cpu_count() or 1, 1)


PRESETS: dict[str, RenderConfig] = {
    "explorer": RenderConfig(),
    # Large escape radius standing in for "infinity".
    "classic": RenderConfig(
        viewport=FixedBounds(cxmin=-2.2, cxmax=1.0, cymin=-1.6, cymax=1.6),
        size=200,
        max_iterations=40,
        threshold=100.0,
        channels=ChannelMode.GRAY,
    ),
}


def lenient_float(text: str | None, default: float) -> float:
    """Parse ``text`` as a float, falling back to ``default`` silently."""

    if text is None:
        return float(default)
    try:
        return float(text)
    except (TypeError, ValueError):
        return float(default)


def lenient_int(text: str | None, default: int) -> int:
    """Parse ``text`` as an int, falling back to ``default`` silently."""

    if text is None:
        return int(default)
    try:
        return int(text)
    except (TypeError, ValueError):
        return int(default)


_VIEWPORT_FIELDS = {
    CenteredViewport: ("center_x", "center_y", "zoom", "span_x", "span_y"),
    FixedBounds: ("cxmin", "cxmax", "cymin", "cymax"),
}


def resolve_config(preset: str = "explorer", *, viewport: Viewport | None = None, **overrides: Any) -> RenderConfig:
    """Build a validated :class:`RenderConfig` from ``preset`` and overrides.

    Overrides whose value is ``None`` keep the preset's value. Viewport
    fields (``zoom``, ``center_x``, ``cxmin``...) are applied to the preset
    viewport, or to ``viewport`` when one is passed explicitly.
    """

    try:
        base = PRESETS[preset]
    except KeyError:
        raise ConfigError(f"unknown preset '{preset}', choose from {', '.join(sorted(PRESETS))}") from None

    values = {key: value for key, value in overrides.items() if value is not None}
    target = viewport if viewport is not None else base.viewport

    viewport_values = {}
    for name in _VIEWPORT_FIELDS[type(target)]:
        if name in values:
            viewport_values[name] = float(values.pop(name))

    unknown = set(values) - {"size", "max_iterations", "threshold", "channels", "crosshairs", "output", "workers"}
    if unknown:
        raise ConfigError(f"unknown configuration options: {', '.join(sorted(unknown))}")

    if "channels" in values and not isinstance(values["channels"], ChannelMode):
        try:
            values["channels"] = ChannelMode(str(values["channels"]).lower())
        except ValueError:
            raise ConfigError(f"unknown channel mode '{values['channels']}'") from None
    if "output" in values:
        values["output"] = Path(values["output"])
    values.setdefault("workers", default_workers())

    return replace(base, viewport=replace(target, **viewport_values), **values)
