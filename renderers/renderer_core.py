from __future__ import annotations

from typing import Optional, Union

import numpy as np
from PIL import Image

from coloring.color_spaces import Rgb, Rgba
from coloring.palettes import color_table
from fractals.base import EscapeTimeSet
from kernel_sources.cpu.render import (render_index_list, render_index_range,
                                       shift_pixels)
from utils.coords import Coords, Frame, Resolution, ScreenRegion, region_indices
from utils.enums import PixelFormat

Color = Union[bool, Rgb, Rgba]


class FrameRenderer:
    """
    Owns a dense pixel buffer plus the frame it shows.

    The buffer is a (area, channels) array indexed by y * width + x.
    Coordinates handed to get_pixel / set_pixel are trusted; nothing is
    bounds-checked on the per-pixel path.
    """

    def __init__(self,
                 resolution: Resolution,
                 frame: Optional[Frame] = None,
                 *,
                 pixel_format: PixelFormat = PixelFormat.RGBA,
                 max_iterations: int = 500):
        self.pixel_format = pixel_format
        self.max_iterations = int(max_iterations)
        self._resolution = resolution
        self._frame = frame if frame is not None else Frame.complete(resolution)
        self._pixels = np.zeros((resolution.area, pixel_format.channels),
                                dtype=pixel_format.dtype)
        # Shared read-only with every other renderer of the same format and bound
        self._colors = color_table(pixel_format, self.max_iterations)

    # ----------------------------
    # State
    # ----------------------------

    def resolution(self) -> Resolution:
        return self._resolution

    def frame(self) -> Frame:
        return self._frame

    def pixels(self) -> np.ndarray:
        """Read-only view of the buffer, shape (height, width, channels)."""
        view = self._pixels.reshape(self._resolution.height,
                                    self._resolution.width,
                                    self.pixel_format.channels)
        view.flags.writeable = False
        return view

    def resize(self, resolution: Resolution) -> None:
        """Reallocates the buffer; previous contents are gone."""
        self._resolution = resolution
        self._pixels = np.zeros((resolution.area, self.pixel_format.channels),
                                dtype=self.pixel_format.dtype)

    def _as_color(self, value: np.ndarray) -> Color:
        if self.pixel_format is PixelFormat.MONO:
            return bool(value[0])
        if self.pixel_format is PixelFormat.RGB:
            return Rgb(*(int(v) for v in value))
        return Rgba(*(int(v) for v in value))

    def get_pixel(self, coords: Coords) -> Color:
        return self._as_color(self._pixels[coords[1] * self._resolution.width + coords[0]])

    def set_pixel(self, coords: Coords, color: Color) -> None:
        self._pixels[coords[1] * self._resolution.width + coords[0]] = color

    def color_for_iterations(self, iterations: int) -> Color:
        return self._as_color(self._colors[iterations])

    # ----------------------------
    # Frame manipulation
    # ----------------------------

    def set_complete_frame(self) -> None:
        self._frame = Frame.complete(self._resolution)

    def translate_frame(self, offset_x: int, offset_y: int) -> None:
        """Moves the view by a pixel offset; the center moves the other way."""
        self._frame = self._frame.translated(offset_x, offset_y)

    def translate_pixels(self, offset_x: int, offset_y: int) -> None:
        """
        Shifts the buffer contents in place. Exposed border pixels keep stale
        values and must be re-rendered by the caller. Offsets spanning the
        whole screen leave the buffer untouched.
        """
        width, height = self._resolution
        if abs(offset_x) >= width or abs(offset_y) >= height:
            return
        if offset_x == 0 and offset_y == 0:
            return
        shift_pixels(self._pixels, width, height, int(offset_x), int(offset_y))

    def scale_pixel_width(self, amount: float) -> None:
        self._frame = self._frame.scaled(amount)

    def unscale_pixel_width(self, amount: float) -> None:
        self._frame = self._frame.unscaled(amount)

    # ----------------------------
    # Rendering (single thread; see RenderExecutor for the pooled versions)
    # ----------------------------

    def _kernel_args(self, fractal: EscapeTimeSet):
        kind, kr, ki = fractal.kernel_args()
        return (self._pixels,
                self._resolution.width, self._resolution.height,
                float(self._frame.center.real), float(self._frame.center.imag),
                float(self._frame.pixel_scale),
                kind, kr, ki,
                self.max_iterations, self._colors)

    def render_index_range(self, fractal: EscapeTimeSet, start: int, end: int) -> None:
        render_index_range(*self._kernel_args(fractal), int(start), int(end))

    def render_indices(self, fractal: EscapeTimeSet, indices: np.ndarray) -> None:
        if len(indices):
            render_index_list(*self._kernel_args(fractal),
                              np.ascontiguousarray(indices, dtype=np.int64))

    def render_at(self, coords: Coords, fractal: EscapeTimeSet) -> None:
        number = self._frame.number_at(self._resolution, coords)
        iterations = fractal.iterations_before_escape(self.max_iterations, number)
        self._pixels[coords[1] * self._resolution.width + coords[0]] = self._colors[iterations]

    def render(self, fractal: EscapeTimeSet) -> None:
        self.render_index_range(fractal, 0, self._resolution.area)

    def render_region(self, region: ScreenRegion, fractal: EscapeTimeSet) -> None:
        self.render_indices(fractal, region_indices(region, self._resolution.width))

    # ----------------------------
    # Export
    # ----------------------------

    def save_png(self, path: str) -> None:
        """Hands the raw buffer to Pillow; encoder errors reach the caller."""
        if self.pixel_format is PixelFormat.MONO:
            raise ValueError("Mono buffers cannot be exported as PNG")
        # (H, W, 3) uint8 -> RGB, (H, W, 4) uint8 -> RGBA
        Image.fromarray(np.ascontiguousarray(self.pixels())).save(path, format="PNG")


class RgbRenderer(FrameRenderer):
    def __init__(self, resolution: Resolution, frame: Optional[Frame] = None,
                 *, max_iterations: int = 500):
        super().__init__(resolution, frame, pixel_format=PixelFormat.RGB,
                         max_iterations=max_iterations)


class RgbaRenderer(FrameRenderer):
    def __init__(self, resolution: Resolution, frame: Optional[Frame] = None,
                 *, max_iterations: int = 500):
        super().__init__(resolution, frame, pixel_format=PixelFormat.RGBA,
                         max_iterations=max_iterations)
