from enum import Enum, auto

import numpy as np


class PixelFormat(Enum):
    MONO = auto()
    RGB = auto()
    RGBA = auto()

    @property
    def channels(self) -> int:
        return {PixelFormat.MONO: 1, PixelFormat.RGB: 3, PixelFormat.RGBA: 4}[self]

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.bool_) if self is PixelFormat.MONO else np.dtype(np.uint8)

    @classmethod
    def from_name(cls, name: str) -> "PixelFormat":
        try:
            return cls[name.upper()]
        except KeyError as e:
            raise ValueError(f"Unknown pixel format '{name}'") from e


class SetKind(Enum):
    # Values are passed straight into the CPU kernels.
    MANDELBROT = 0
    JULIA = 1
