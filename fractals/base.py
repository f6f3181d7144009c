from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from utils.enums import PixelFormat, SetKind


@dataclass
class RenderSettings:
    """
    Holds the rendering settings for a session.
    Max_iterations bounds the escape test and sizes the color lookup table.
    Pixel_format selects the buffer layout (mono, RGB or RGBA).
    Num_threads counts the calling thread; None means one per CPU.
    """
    max_iterations: int = 500
    pixel_format: PixelFormat = PixelFormat.RGBA
    num_threads: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if isinstance(self.pixel_format, str):
            self.pixel_format = PixelFormat.from_name(self.pixel_format)
        if self.num_threads is not None and self.num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {self.num_threads}")

    def resolved_threads(self) -> int:
        return self.num_threads or os.cpu_count() or 1


@dataclass
class ViewerSettings:
    """
    Interaction tuning for the viewer session.
    Zoom factors multiply the pixel scale per wheel notch, steps are the
    seconds an animation moves per key press while paused.
    """
    coarse_zoom: float = 0.9
    fine_zoom: float = 0.99
    coarse_step: float = 0.010
    fine_step: float = 0.001
    high_res_scale: int = 6
    save_location: str = "out.png"


class EscapeTimeSet(ABC):
    """
    An abstract base class for escape-time sets.
    Instances are immutable and may be shared by any number of render threads.
    """
    kind: SetKind

    @abstractmethod
    def iterations_before_escape(self, max_iterations: int, point: complex) -> int:
        ...

    @abstractmethod
    def kernel_args(self) -> Tuple[int, float, float]:
        """(kind, constant.real, constant.imag) as consumed by the CPU kernels."""
        ...


# Elapsed seconds -> fresh set replacing the active one.
SetGenerator = Callable[[float], EscapeTimeSet]
