"""Encoding of finished pixel buffers with Pillow."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import PIL.Image

DEFAULT_FORMAT = "png"


def _pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(pixels: np.ndarray) -> PIL.Image.Image:
    """Wrap a ``(size, size)`` or ``(size, size, 3)`` buffer in an image."""

    pixels = np.asarray(pixels)
    if pixels.dtype != np.uint8:
        raise ValueError(f"pixel buffer must be uint8, got {pixels.dtype}")
    if pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] == 3):
        return PIL.Image.fromarray(pixels)
    raise ValueError(f"unsupported pixel buffer shape {pixels.shape}")


def resolve_format(output_path: Path, image_format: Optional[str] = None) -> str:
    if image_format:
        return image_format.lower().lstrip(".")
    suffix = Path(output_path).suffix
    return suffix.lower().lstrip(".") if suffix else DEFAULT_FORMAT


def write_image(image: PIL.Image.Image, output_path: Path, image_format: Optional[str] = None) -> Path:
    """Write ``image`` to ``output_path``; the format follows the suffix by default."""

    output_path = Path(output_path)
    pil_format = _pil_format_name(resolve_format(output_path, image_format))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)
    return output_path
