from __future__ import annotations

from functools import lru_cache

import numpy as np

from coloring.color_spaces import lch_to_rgb
from utils.enums import PixelFormat

# Pulls low iteration counts apart so they still get distinct colors.
ITERATION_EXPONENT = 0.01


def iterations_to_lch(iterations, max_iterations: int) -> np.ndarray:
    """
    Maps escape iteration counts onto LCH, shape (..., 3).
    Interior points (iterations == max_iterations) are LCH black.
    """
    iterations = np.asarray(iterations, dtype=np.float64)
    shape = iterations.shape
    flat = iterations.reshape(-1)
    lch = np.zeros((flat.size, 3), dtype=np.float64)
    exterior = flat != max_iterations
    if max_iterations > 0 and np.any(exterior):
        s = (flat[exterior] / float(max_iterations)) ** ITERATION_EXPONENT
        v = 1.0 - np.cos(s * np.pi) ** 2
        luminance = 75.0 - 75.0 * v
        lch[exterior, 0] = luminance
        lch[exterior, 1] = 28.0 + luminance
        lch[exterior, 2] = np.fmod((360.0 * s) ** 1.5, 360.0)
    return lch.reshape(shape + (3,))


@lru_cache(maxsize=32)
def color_table(pixel_format: PixelFormat, max_iterations: int) -> np.ndarray:
    """
    Lookup table indexed by iteration count (0..max_iterations), shape
    (max_iterations + 1, channels). Built once per (format, bound) and
    frozen so render threads can share it.
    """
    iterations = np.arange(max_iterations + 1)
    if pixel_format is PixelFormat.MONO:
        table = (iterations == max_iterations)[:, None]
    else:
        rgb = lch_to_rgb(iterations_to_lch(iterations, max_iterations))
        if pixel_format is PixelFormat.RGBA:
            alpha = np.full((rgb.shape[0], 1), 0xFF, dtype=np.uint8)
            table = np.concatenate([rgb, alpha], axis=1)
        else:
            table = rgb
    table = np.ascontiguousarray(table, dtype=pixel_format.dtype)
    table.flags.writeable = False
    return table
