"""
LCH -> Lab -> CIE XYZ -> gamma corrected sRGB.

Every conversion takes array-likes whose last axis holds the three components,
so the same functions serve single colors and whole lookup tables.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple

import numpy as np


class Rgb(NamedTuple):
    red: int
    green: int
    blue: int

    @classmethod
    def gray(cls, brightness: int) -> Rgb:
        return cls(brightness, brightness, brightness)

    def rgba(self) -> Rgba:
        return Rgba(self.red, self.green, self.blue, 0xFF)


class Rgba(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int = 0xFF

    @classmethod
    def gray(cls, brightness: int) -> Rgba:
        return cls(brightness, brightness, brightness, 0xFF)


Rgb.WHITE = Rgb(0xFF, 0xFF, 0xFF)
Rgb.BLACK = Rgb(0x00, 0x00, 0x00)
Rgba.WHITE = Rgba(0xFF, 0xFF, 0xFF, 0xFF)
Rgba.BLACK = Rgba(0x00, 0x00, 0x00, 0xFF)


@dataclass(frozen=True)
class WhitePoint:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class RgbSpace:
    """Chromaticities (x, y) of the red, green and blue primaries."""
    xr: float
    yr: float
    xg: float
    yg: float
    xb: float
    yb: float


D65 = WhitePoint(0.95047, 1.0, 1.08883)
SRGB = RgbSpace(0.64, 0.33,
                0.30, 0.60,
                0.15, 0.06)

LCH_WHITE = (100.0, 0.0, 0.0)
LCH_BLACK = (0.0, 0.0, 0.0)

# CIE Lab companding constants
LAB_EPSILON = 6.0 / 29.0
LAB_DELTA = 4.0 / 29.0
LAB_KAPPA = 108.0 / 841.0  # 3 * LAB_EPSILON ** 2


def lch_to_lab(lch) -> np.ndarray:
    lch = np.asarray(lch, dtype=np.float64)
    l, c, h = lch[..., 0], lch[..., 1], np.deg2rad(lch[..., 2])
    return np.stack([l, c * np.cos(h), c * np.sin(h)], axis=-1)


def _lab_inverse_compand(t: np.ndarray) -> np.ndarray:
    return np.where(t > LAB_EPSILON, t ** 3, LAB_KAPPA * (t - LAB_DELTA))


def lab_to_xyz(lab, white: WhitePoint = D65) -> np.ndarray:
    lab = np.asarray(lab, dtype=np.float64)
    fy = (lab[..., 0] + 16.0) / 116.0
    fx = fy + lab[..., 1] / 500.0
    fz = fy - lab[..., 2] / 200.0
    return np.stack([white.x * _lab_inverse_compand(fx),
                     white.y * _lab_inverse_compand(fy),
                     white.z * _lab_inverse_compand(fz)], axis=-1)


@lru_cache(maxsize=None)
def xyz_to_linear_rgb_matrix(white: WhitePoint = D65, space: RgbSpace = SRGB) -> np.ndarray:
    """
    XYZ -> linear RGB for the given primaries and reference white.
    See http://brucelindbloom.com/index.html?Eqn_RGB_XYZ_Matrix.html
    """
    primaries = np.array([
        [space.xr / space.yr, space.xg / space.yg, space.xb / space.yb],
        [1.0, 1.0, 1.0],
        [(1.0 - space.xr - space.yr) / space.yr,
         (1.0 - space.xg - space.yg) / space.yg,
         (1.0 - space.xb - space.yb) / space.yb],
    ], dtype=np.float64)
    s = np.linalg.inv(primaries) @ np.array([white.x, white.y, white.z], dtype=np.float64)
    matrix = np.linalg.inv(primaries * s[None, :])
    matrix.flags.writeable = False
    return matrix


def linear_to_gamma(linear) -> np.ndarray:
    linear = np.asarray(linear, dtype=np.float64)
    # Negative components are clamped by to_octet; keep pow() real here.
    curved = 1.055 * np.power(np.maximum(linear, 0.0031308), 1.0 / 2.4) - 0.055
    return np.where(linear <= 0.0031308, 12.92 * linear, curved)


def to_octet(component) -> np.ndarray:
    """
    [0, 1] -> [0, 255], clamped then rounded to nearest (ties to even),
    so that LCH white lands exactly on 255.
    """
    scaled = 255.0 * np.clip(np.asarray(component, dtype=np.float64), 0.0, 1.0)
    return np.rint(scaled).astype(np.uint8)


def xyz_to_rgb(xyz, space: RgbSpace = SRGB, white: WhitePoint = D65) -> np.ndarray:
    """XYZ -> 8-bit gamma corrected RGB, shape (..., 3) uint8."""
    xyz = np.asarray(xyz, dtype=np.float64)
    linear = xyz @ xyz_to_linear_rgb_matrix(white, space).T
    return to_octet(linear_to_gamma(linear))


def lch_to_rgb(lch, space: RgbSpace = SRGB, white: WhitePoint = D65) -> np.ndarray:
    return xyz_to_rgb(lab_to_xyz(lch_to_lab(lch), white), space, white)


def lch_to_rgb_color(l: float, c: float, h: float) -> Rgb:
    r, g, b = lch_to_rgb((l, c, h))
    return Rgb(int(r), int(g), int(b))
