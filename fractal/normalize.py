"""Stretching of raw intensities onto the full output range."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Iterable

import numpy as np

MAX_LEVEL = 255
DEGENERATE_LEVEL = 128


@dataclass(frozen=True)
class IntensityRange:
    """Observed minimum and maximum raw intensity."""

    minimum: int
    maximum: int

    @classmethod
    def observe(cls, raw: np.ndarray) -> "IntensityRange":
        """The range of one block of raw intensities."""

        raw = np.asarray(raw)
        if raw.size == 0:
            raise ValueError("cannot observe the range of an empty block")
        return cls(minimum=int(raw.min()), maximum=int(raw.max()))

    def merge(self, other: "IntensityRange") -> "IntensityRange":
        return IntensityRange(
            minimum=min(self.minimum, other.minimum),
            maximum=max(self.maximum, other.maximum),
        )

    @property
    def degenerate(self) -> bool:
        return self.maximum == self.minimum


def reduce_ranges(ranges: Iterable[IntensityRange]) -> IntensityRange:
    """Combine per-band partial ranges into the global range."""

    ranges = list(ranges)
    if not ranges:
        raise ValueError("no partial ranges to reduce")
    return reduce(IntensityRange.merge, ranges)


def normalize(raw: np.ndarray, intensity_range: IntensityRange) -> np.ndarray:
    """Rescale ``raw`` so ``intensity_range`` spans ``[0, 255]``.

    When every pixel shares a single raw value there is no range to stretch
    and the result is filled with ``DEGENERATE_LEVEL``.
    """

    raw = np.asarray(raw)
    if intensity_range.degenerate:
        return np.full(raw.shape, DEGENERATE_LEVEL, dtype=np.uint8)

    low = np.float64(intensity_range.minimum)
    span = np.float64(intensity_range.maximum) - low
    scaled = np.rint((raw.astype(np.float64) - low) / span * np.float64(MAX_LEVEL))
    return np.clip(scaled, 0, MAX_LEVEL).astype(np.uint8)
