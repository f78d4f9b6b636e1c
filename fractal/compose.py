"""Assembly of the final pixel buffer from normalized intensities."""

from __future__ import annotations

import numpy as np

from .config import ChannelMode


def crosshair_mask(rows: int, size: int, row_offset: int = 0) -> np.ndarray:
    """Boolean mask of the pixels on the image's center lines.

    ``rows`` rows starting at ``row_offset`` of a ``size`` x ``size`` image.
    Only even sizes have exact center lines.
    """

    x = np.arange(size)
    y = np.arange(row_offset, row_offset + rows)
    on_column = (2 * x == size)[np.newaxis, :]
    on_row = (2 * y == size)[:, np.newaxis]
    return np.logical_or(on_column, on_row)


def accent(normalized: np.ndarray) -> np.ndarray:
    """The crosshair hue ``(0, n, 255 - n)`` for each normalized byte."""

    normalized = np.asarray(normalized, dtype=np.uint8)
    return np.stack((np.zeros_like(normalized), normalized, 255 - normalized), axis=-1)


def compose(
    normalized: np.ndarray,
    channels: ChannelMode,
    *,
    crosshairs: bool = False,
    size: int | None = None,
    row_offset: int = 0,
) -> np.ndarray:
    """Build pixels for a block of rows of normalized intensities.

    ``size`` is the side of the whole image and defaults to the block's
    width; ``row_offset`` is the index of the block's first row in it.
    """

    normalized = np.asarray(normalized, dtype=np.uint8)
    if channels is ChannelMode.GRAY:
        return normalized.copy()

    rgb = np.repeat(normalized[..., np.newaxis], 3, axis=-1)
    if crosshairs:
        side = normalized.shape[1] if size is None else size
        mask = crosshair_mask(normalized.shape[0], side, row_offset)
        rgb[mask] = accent(normalized[mask])
    return rgb
