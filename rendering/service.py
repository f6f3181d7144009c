from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Union

import numpy as np

from fractals.base import EscapeTimeSet, RenderSettings, SetGenerator, ViewerSettings
from fractals.generators import SetAnimation
from renderers.renderer_core import FrameRenderer, RgbRenderer
from rendering.events import FrameEvent, LogEvent
from rendering.executor import RenderExecutor
from utils.coords import Frame, Resolution, ScreenRegion

logger = logging.getLogger(__name__)


class RenderService:
    """
    UI-facing facade that owns:
      - the pixel-buffer renderer and its frame,
      - the worker pool,
      - the active set, or the animation generating it,
      - event dispatch (frame/log).

    Every call runs on the caller's thread and returns once the buffer is
    complete, so resizes and set swaps never race a render.
    """

    def __init__(
        self,
        width: int,
        height: int,
        set_or_generator: Union[EscapeTimeSet, SetGenerator],
        *,
        settings: Optional[RenderSettings] = None,
        viewer_settings: Optional[ViewerSettings] = None,
        executor: Optional[RenderExecutor] = None,
    ) -> None:
        self.settings = settings or RenderSettings()
        self.viewer_settings = viewer_settings or ViewerSettings()

        # ----- Active set -----
        self.animation: Optional[SetAnimation] = None
        if isinstance(set_or_generator, EscapeTimeSet):
            self.fractal = set_or_generator
        else:
            self.animation = SetAnimation(set_or_generator)
            self.fractal = self.animation.generate_set()

        # ----- Rendering -----
        self.renderer = FrameRenderer(Resolution(int(width), int(height)),
                                      pixel_format=self.settings.pixel_format,
                                      max_iterations=self.settings.max_iterations)
        self.executor = executor or RenderExecutor(self.settings.resolved_threads())

        self.fine_controls = False
        self._render_seq = 0
        self._last_tick: Optional[float] = None

        # Callbacks
        self.on_frame: Optional[Callable[[FrameEvent], None]] = None
        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # State
    # ---------------------------------------------------------------------

    @property
    def is_animated(self) -> bool:
        return self.animation is not None

    @property
    def paused(self) -> bool:
        return self.animation is None or self.animation.paused

    def resolution(self) -> Resolution:
        return self.renderer.resolution()

    def frame(self) -> Frame:
        return self.renderer.frame()

    def pixels(self) -> np.ndarray:
        return self.renderer.pixels()

    def _log(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        if self.on_log:
            self.on_log(LogEvent(message, level=level))

    # ---------------------------------------------------------------------
    # View manipulation
    # ---------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Pixels are not kept across a resize; callers draw afterwards."""
        self.renderer.resize(Resolution(int(width), int(height)))
        logger.debug("Resized to %dx%d", width, height)

    def reset_frame(self) -> None:
        self.renderer.set_complete_frame()

    def toggle_fine_controls(self) -> None:
        self.fine_controls = not self.fine_controls

    def _zoom_factor(self) -> float:
        if self.fine_controls:
            return self.viewer_settings.fine_zoom
        return self.viewer_settings.coarse_zoom

    def zoom_in(self) -> None:
        self.renderer.scale_pixel_width(self._zoom_factor())

    def zoom_out(self) -> None:
        self.renderer.unscale_pixel_width(self._zoom_factor())

    def translate(self, offset_x: int, offset_y: int) -> bool:
        """
        Pans the view by a pixel offset. Returns whether a full draw is still
        needed; otherwise the surviving pixels were shifted, the exposed
        edges rendered and a frame event emitted.
        """
        self.renderer.translate_frame(offset_x, offset_y)

        # A running animation redraws every tick anyway.
        if not self.paused:
            return True

        width, height = self.resolution()
        if abs(offset_x) >= width or abs(offset_y) >= height:
            return True

        self.renderer.translate_pixels(offset_x, offset_y)
        self.executor.render_missing_edges(self.renderer, self.fractal, offset_x, offset_y)
        self._emit_frame()
        return False

    def center_on(self, x: int, y: int) -> bool:
        """Brings screen pixel (x, y) to the middle of the view."""
        width, height = self.resolution()
        return self.translate(width // 2 - int(x), height // 2 - int(y))

    # ---------------------------------------------------------------------
    # Animation
    # ---------------------------------------------------------------------

    def set_fractal(self, fractal: EscapeTimeSet) -> None:
        self.fractal = fractal

    def toggle_pause(self) -> None:
        if self.animation is None:
            return
        self.animation.toggle_pause()
        self._log("Paused" if self.animation.paused else "Resumed")

    def step(self, backward: bool = False) -> bool:
        """
        Moves a paused animation by one coarse or fine step.
        Returns whether a draw is needed.
        """
        if self.animation is None or not self.animation.paused:
            return False
        seconds = self.viewer_settings.fine_step if self.fine_controls else self.viewer_settings.coarse_step
        if backward:
            self.fractal = self.animation.move_backward(seconds)
        else:
            self.fractal = self.animation.move_forward(seconds)
        return True

    def tick(self, now: Optional[float] = None) -> bool:
        """
        Advances a running animation by the wall time since the last tick.
        Returns whether a draw is needed.
        """
        now = time.perf_counter() if now is None else now
        last, self._last_tick = self._last_tick, now
        if self.animation is None or self.animation.paused or last is None:
            return False
        self.fractal = self.animation.move_forward(now - last)
        return True

    # ---------------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------------

    def _emit_frame(self) -> None:
        self._render_seq += 1
        if self.on_frame:
            width, height = self.resolution()
            self.on_frame(FrameEvent(self.pixels(), width, height, self._render_seq))

    def draw(self) -> None:
        t0 = time.perf_counter()
        self.executor.render(self.renderer, self.fractal)
        self._emit_frame()
        logger.debug("Draw %d took %.2f ms", self._render_seq, (time.perf_counter() - t0) * 1000.0)

    def render_region(self, region: ScreenRegion) -> None:
        self.executor.render_region(self.renderer, region, self.fractal)
        self._emit_frame()

    def save(self, path: Optional[str] = None) -> str:
        path = path or self.viewer_settings.save_location
        self.renderer.save_png(path)
        self._log(f"Saved {self.resolution().width}x{self.resolution().height} image to {path}")
        return path

    def high_res_save(self, path: Optional[str] = None) -> str:
        """
        Renders the current view at high_res_scale times the resolution into
        a separate RGB buffer and saves it. The on-screen buffer is untouched.
        """
        path = path or self.viewer_settings.save_location
        scale = self.viewer_settings.high_res_scale
        frame = self.frame()
        renderer = RgbRenderer(self.resolution().scale(scale),
                               Frame(frame.center, frame.pixel_scale / float(scale)),
                               max_iterations=self.settings.max_iterations)
        self.executor.render(renderer, self.fractal)
        renderer.save_png(path)
        self._log(f"Saved {renderer.resolution().width}x{renderer.resolution().height} image to {path}")
        return path

    def close(self) -> None:
        self.executor.close()
