"""TensorFlow escape-time kernel operating on a whole band at once."""

from __future__ import annotations

import numpy as np
import tensorflow as tf


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    active: tf.Tensor,
    iterations: tf.Tensor,
    i: tf.Tensor,
    radius_sq: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped yet by one iteration."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = tf.constant(2.0, dtype=zr.dtype) * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    escaped = tf.logical_and(active, zr * zr + zi * zi > radius_sq)
    iterations = tf.where(escaped, tf.fill(tf.shape(iterations), i), iterations)
    active = tf.logical_and(active, tf.logical_not(escaped))
    return zr, zi, active, iterations


@tf.function
def _escape_run(
    cr: tf.Tensor,
    ci: tf.Tensor,
    max_iterations: tf.Tensor,
    radius_sq: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Iterate the Mandelbrot map using a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    active = tf.ones_like(cr, tf.bool)
    iterations = tf.fill(tf.shape(cr), max_iterations)

    def cond(i, zr, zi, active, iterations):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, active, iterations):
        zr, zi, active, iterations = _escape_step(zr, zi, cr, ci, active, iterations, i, radius_sq)
        return i + 1, zr, zi, active, iterations

    return tf.while_loop(cond, body, (i, zr, zi, active, iterations))


def escape_band(
    real: np.ndarray,
    imag: np.ndarray,
    max_iterations: int,
    bound_radius: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Escape iterations and final orbit points for a grid of ``c`` values.

    Returns ``(iterations, zr, zi)`` with the shape of ``real``. Points that
    never escaped carry ``iterations == max_iterations``; for the others
    ``zr``/``zi`` hold the first orbit point outside the bound disk.
    """

    with tf.device("/CPU:0"):
        cr = tf.convert_to_tensor(real, dtype=tf.float64)
        ci = tf.convert_to_tensor(imag, dtype=tf.float64)
        radius_sq = tf.constant(bound_radius * bound_radius, dtype=tf.float64)
        max_tensor = tf.constant(max_iterations, dtype=tf.int32)
        _, zr, zi, _, iterations = _escape_run(cr, ci, max_tensor, radius_sq)

    return iterations.numpy(), zr.numpy(), zi.numpy()
