from dataclasses import dataclass, field
from typing import Tuple

from fractals.base import EscapeTimeSet
from kernel_sources.cpu.escape import julia_escape
from utils.enums import SetKind


@dataclass(frozen=True)
class QuadraticJuliaSet(EscapeTimeSet):
    """z <- z^2 + constant starting from the queried point."""
    constant: complex
    kind: SetKind = field(default=SetKind.JULIA, init=False)

    def iterations_before_escape(self, max_iterations: int, point: complex) -> int:
        return int(julia_escape(int(max_iterations),
                                float(point.real), float(point.imag),
                                float(self.constant.real), float(self.constant.imag)))

    def kernel_args(self) -> Tuple[int, float, float]:
        return self.kind.value, float(self.constant.real), float(self.constant.imag)
