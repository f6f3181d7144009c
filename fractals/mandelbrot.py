from dataclasses import dataclass, field
from typing import Tuple

from fractals.base import EscapeTimeSet
from kernel_sources.cpu.escape import mandelbrot_escape
from utils.enums import SetKind


@dataclass(frozen=True)
class MandelbrotSet(EscapeTimeSet):
    """z <- z^2 + c starting from z = 0, c being the queried point."""
    kind: SetKind = field(default=SetKind.MANDELBROT, init=False)

    def iterations_before_escape(self, max_iterations: int, point: complex) -> int:
        return int(mandelbrot_escape(int(max_iterations), float(point.real), float(point.imag)))

    def kernel_args(self) -> Tuple[int, float, float]:
        return self.kind.value, 0.0, 0.0


mandelbrot_set = MandelbrotSet()
