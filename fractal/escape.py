"""Escape-time evaluation of the Mandelbrot iteration ``z <- z**2 + c``."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

MAX_LUMA = 255
CPU_DEVICE = "/CPU:0"


def escape_step_count(c: complex, max_iterations: int, threshold: float) -> int:
    """Return the last completed iteration step for the sample ``c``.

    Iteration starts from ``z = 0`` and stops before the update at which
    ``abs(z)`` first exceeds ``threshold``. A sample that never escapes
    returns ``max_iterations - 1``.
    """

    z = 0j
    t_stop = 0
    for t in range(max_iterations):
        if abs(z) > threshold:
            break
        z = z * z + c
        t_stop = t
    return t_stop


def raw_intensity(t_stop, max_iterations: int) -> np.ndarray:
    """Convert stopping steps into raw ``uint8`` intensities.

    ``255 - round(t_stop / max_iterations * 255)``; samples that escape
    quickly get high values and samples that exhaust the budget get low ones.
    """

    steps = np.asarray(t_stop, dtype=np.float64)
    scaled = np.rint(steps / np.float64(max_iterations) * np.float64(MAX_LUMA))
    return np.clip(MAX_LUMA - scaled, 0, MAX_LUMA).astype(np.uint8)


@tf.function(reduce_retracing=True)
def _escape_step(
    zs: tf.Tensor,
    cs: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
    threshold: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every sample whose magnitude has not exceeded the threshold."""

    # A NaN magnitude has not exceeded the threshold either.
    active = tf.logical_and(active, tf.logical_not(tf.abs(zs) > threshold))
    zs = tf.where(active, zs * zs + cs, zs)
    ns = ns + tf.cast(active, tf.int32)
    return zs, ns, active


@tf.function(reduce_retracing=True)
def _escape_run(cs: tf.Tensor, max_iterations: tf.Tensor, threshold: tf.Tensor) -> tf.Tensor:
    """Iterate with a TensorFlow while loop and count the completed updates."""

    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
    active = tf.ones(tf.shape(cs), dtype=tf.bool)

    def cond(i, zs, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zs, ns, active):
        zs, ns, active = _escape_step(zs, cs, ns, active, threshold)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def escape_steps(cx: np.ndarray, cy: np.ndarray, max_iterations: int, threshold: float, *, device: Optional[str] = None) -> np.ndarray:
    """Vectorized :func:`escape_step_count` over grids of sample components."""

    cx = np.asarray(cx, dtype=np.float64)
    cy = np.asarray(cy, dtype=np.float64)
    if cx.size == 0:
        return np.zeros(cx.shape, dtype=np.int64)

    with tf.device(device if device is not None else CPU_DEVICE):
        cs = tf.complex(tf.convert_to_tensor(cx, dtype=tf.float64), tf.convert_to_tensor(cy, dtype=tf.float64))
        updates = _escape_run(
            cs,
            tf.constant(max_iterations, dtype=tf.int32),
            tf.constant(threshold, dtype=tf.float64),
        )

    # Every sample completes at least the first update since z starts at 0.
    return updates.numpy().astype(np.int64) - 1


def evaluate(cx: np.ndarray, cy: np.ndarray, max_iterations: int, threshold: float, *, device: Optional[str] = None) -> np.ndarray:
    """Raw ``uint8`` intensities for grids of samples."""

    return raw_intensity(escape_steps(cx, cy, max_iterations, threshold, device=device), max_iterations)
