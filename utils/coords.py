from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple, Union

import numpy as np


class Coords(NamedTuple):
    """Integer pixel position, origin at the top-left of the screen."""
    x: int
    y: int


@dataclass(frozen=True)
class Resolution:
    """
    Pixel-space bounds of a frame.
    Width and height are expected to be positive; this is not checked.
    """
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def min_length(self) -> int:
        return min(self.width, self.height)

    def scale(self, factor: int) -> Resolution:
        return Resolution(factor * self.width, factor * self.height)

    def x_coords(self) -> range:
        return range(self.width)

    def y_coords(self) -> range:
        return range(self.height)

    def screen_coords(self) -> Rectangle:
        return Rectangle(Coords(0, 0), Coords(self.width, self.height))

    def to_graphwise(self, coords: Coords) -> Coords:
        """
        Pixel offset from the center of the screen.
        For even dimensions the center is biased toward the top-left: the
        plane center lands on pixel (width // 2, height // 2), so the
        geometric middle sits half a pixel up and to its left.
        """
        return Coords(coords.x - self.width // 2, coords.y - self.height // 2)

    def __iter__(self) -> Iterator[int]:
        yield self.width
        yield self.height


@dataclass(frozen=True)
class Rectangle:
    """
    Half-open rectangle of screen coordinates: top_left is included,
    bottom_right is not. Iterates row-major (y outer, x inner).
    """
    top_left: Coords
    bottom_right: Coords

    @property
    def width(self) -> int:
        return max(0, self.bottom_right.x - self.top_left.x)

    @property
    def height(self) -> int:
        return max(0, self.bottom_right.y - self.top_left.y)

    def __len__(self) -> int:
        return self.width * self.height

    def __iter__(self) -> Iterator[Coords]:
        for y in range(self.top_left.y, self.bottom_right.y):
            for x in range(self.top_left.x, self.bottom_right.x):
                yield Coords(x, y)

    def __contains__(self, coords) -> bool:
        x, y = coords
        return (self.top_left.x <= x < self.bottom_right.x and
                self.top_left.y <= y < self.bottom_right.y)

    def indices(self, screen_width: int) -> np.ndarray:
        """Flat buffer indices (y * screen_width + x) in iteration order."""
        xs = np.arange(self.top_left.x, self.bottom_right.x, dtype=np.int64)
        ys = np.arange(self.top_left.y, self.bottom_right.y, dtype=np.int64)
        return (ys[:, None] * screen_width + xs[None, :]).ravel()


ScreenRegion = Union[Rectangle, Iterable[Coords]]


def region_indices(region: ScreenRegion, screen_width: int) -> np.ndarray:
    """
    Converts any screen region into flat buffer indices, preserving its order.
    """
    if isinstance(region, Rectangle):
        return region.indices(screen_width)
    flat = [y * screen_width + x for x, y in region]
    return np.asarray(flat, dtype=np.int64)


@dataclass(frozen=True)
class Frame:
    """
    Maps screen pixels onto the complex plane. Immutable; every view change
    builds a new frame.
    Center is the plane value under the center pixel, pixel_scale is the
    plane distance between two neighbouring pixels.
    """
    center: complex
    pixel_scale: float

    @classmethod
    def complete(cls, resolution: Resolution) -> Frame:
        """Frame where the shorter screen side spans 4 plane units around 0."""
        return cls(0j, 4.0 / float(resolution.min_length))

    def number_at(self, resolution: Resolution, coords: Coords) -> complex:
        gx, gy = resolution.to_graphwise(coords)
        # Per component, so the result matches the CPU kernels bit for bit.
        return complex(self.center.real + self.pixel_scale * float(gx),
                       self.center.imag + self.pixel_scale * float(gy))

    def translated(self, offset_x: int, offset_y: int) -> Frame:
        """
        Frame after the view was dragged by (offset_x, offset_y) pixels.
        The center moves the opposite way.
        """
        return Frame(complex(self.center.real - self.pixel_scale * float(offset_x),
                             self.center.imag - self.pixel_scale * float(offset_y)),
                     self.pixel_scale)

    def scaled(self, amount: float) -> Frame:
        """Same center, pixel_scale multiplied by amount (< 1 zooms in)."""
        return Frame(self.center, self.pixel_scale * amount)

    def unscaled(self, amount: float) -> Frame:
        return Frame(self.center, self.pixel_scale / amount)

