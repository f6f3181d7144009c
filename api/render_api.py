from typing import Optional, Tuple, Union

from fractals.base import EscapeTimeSet, RenderSettings, SetGenerator, ViewerSettings
from fractals.mandelbrot import mandelbrot_set
from rendering.service import RenderService
from utils.enums import PixelFormat


class RenderConfigBuilder:
    """
    Fluent builder assembling a RenderService from loose options.
    """
    def __init__(self):
        self._size: Tuple[int, int] = (512, 512)
        self._set: Union[EscapeTimeSet, SetGenerator] = mandelbrot_set
        self._settings = RenderSettings()
        self._viewer = ViewerSettings()

    def resolution(self, preset: str) -> 'RenderConfigBuilder':
        """
        Sets the image size from a preset ("720p") or an explicit "WxH".

        Args:
            preset (str): Resolution preset or size string.
        """
        self._size = self._compute_size(preset)
        return self

    def size(self, width: int, height: int) -> 'RenderConfigBuilder':
        self._size = (int(width), int(height))
        return self

    def fractal(self, set_or_generator: Union[EscapeTimeSet, SetGenerator]) -> 'RenderConfigBuilder':
        """
        Sets a static set, or a generator called with elapsed seconds.

        Args:
            set_or_generator: An escape-time set or a set generator.
        """
        self._set = set_or_generator
        return self

    def max_iterations(self, value: int) -> 'RenderConfigBuilder':
        self._settings = RenderSettings(max_iterations=value,
                                        pixel_format=self._settings.pixel_format,
                                        num_threads=self._settings.num_threads)
        return self

    def pixel_format(self, fmt: Union[PixelFormat, str]) -> 'RenderConfigBuilder':
        self._settings = RenderSettings(max_iterations=self._settings.max_iterations,
                                        pixel_format=fmt,
                                        num_threads=self._settings.num_threads)
        return self

    def threads(self, value: Optional[int]) -> 'RenderConfigBuilder':
        self._settings = RenderSettings(max_iterations=self._settings.max_iterations,
                                        pixel_format=self._settings.pixel_format,
                                        num_threads=value)
        return self

    def zoom_factors(self, coarse: float, fine: float) -> 'RenderConfigBuilder':
        self._viewer.coarse_zoom = float(coarse)
        self._viewer.fine_zoom = float(fine)
        return self

    def save_location(self, path: str, high_res_scale: Optional[int] = None) -> 'RenderConfigBuilder':
        self._viewer.save_location = path
        if high_res_scale:
            self._viewer.high_res_scale = int(high_res_scale)
        return self

    def build(self) -> RenderService:
        width, height = self._size
        return RenderService(width, height, self._set,
                             settings=self._settings,
                             viewer_settings=self._viewer)

    @staticmethod
    def _compute_size(preset: str) -> Tuple[int, int]:
        mapping = {
            "2160p": 3840,
            "1440p": 2560,
            "1080p": 1920,
            "720p": 1280,
            "480p": 854,
            "360p": 640,
        }
        preset = preset.strip().lower()
        if "x" in preset:
            w, h = preset.split("x", 1)
            return int(w), int(h)
        if preset not in mapping:
            raise ValueError(f"Unknown resolution preset '{preset}'")
        return mapping[preset], int(preset.replace("p", ""))
