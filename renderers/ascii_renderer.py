from __future__ import annotations

import sys
from typing import Optional, TextIO

from renderers.renderer_core import FrameRenderer
from utils.coords import Frame, Resolution
from utils.enums import PixelFormat

OFF_CHARACTER = "."
ON_CHARACTER = "#"


class AsciiRenderer(FrameRenderer):
    """Mono renderer: a pixel is on when its point never escaped."""

    def __init__(self, resolution: Resolution, frame: Optional[Frame] = None,
                 *, max_iterations: int = 500):
        super().__init__(resolution, frame, pixel_format=PixelFormat.MONO,
                         max_iterations=max_iterations)

    def build_chars(self) -> str:
        """One line per pixel row, each terminated by a newline."""
        rows = self.pixels()[:, :, 0]
        return "".join(
            "".join(ON_CHARACTER if on else OFF_CHARACTER for on in row) + "\n"
            for row in rows
        )

    def print(self, stream: Optional[TextIO] = None) -> None:
        (stream or sys.stdout).write(self.build_chars())
