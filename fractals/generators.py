from __future__ import annotations

import math
from dataclasses import dataclass

from fractals.base import EscapeTimeSet, SetGenerator
from fractals.julia import QuadraticJuliaSet


@dataclass(frozen=True)
class DiskJuliaGenerator:
    """
    Julia sets whose constants walk the outer edge of the Mandelbrot disk
    centered on -1 (radius 0.25), one lap every `period` seconds.
    """
    period: float = 240.0

    def __call__(self, elapsed: float) -> QuadraticJuliaSet:
        theta = 2.0 * math.pi * (elapsed / self.period)
        return QuadraticJuliaSet(complex(0.25 * math.cos(theta) - 1.0,
                                         0.25 * math.sin(theta)))


class SetAnimation:
    """
    Time state of a generated set. The generator is asked for a whole new
    set whenever the elapsed time changes; nothing is mutated in place.
    """

    def __init__(self, generator: SetGenerator) -> None:
        self.generator = generator
        self.paused = False
        self.elapsed = 0.0

    def generate_set(self) -> EscapeTimeSet:
        return self.generator(self.elapsed)

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    def move_forward(self, seconds: float) -> EscapeTimeSet:
        self.elapsed += seconds
        return self.generate_set()

    def move_backward(self, seconds: float) -> EscapeTimeSet:
        self.elapsed -= seconds
        return self.generate_set()
