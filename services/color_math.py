"""
Stateless colour math shared by the filters.

Every function accepts plain numbers or numpy arrays of equal shape and
returns floats for scalar input, arrays otherwise.
"""
from __future__ import annotations
import numpy as np
from models.color_triples import HSV, XYZ, Lab

LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)

# sRGB → XYZ, D65
SRGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])

# D65 reference white
WHITE_XN, WHITE_YN, WHITE_ZN = 95.047, 100.000, 108.883

LAB_DELTA = 6 / 29
LAB_THRESHOLD = LAB_DELTA ** 3


def _out(value):
    value = np.asarray(value, dtype=np.float64)
    return float(value) if value.ndim == 0 else value


def luminance(r, g, b):
    wr, wg, wb = LUMINANCE_WEIGHTS
    return _out(wr * np.asarray(r, dtype=np.float64)
                + wg * np.asarray(g, dtype=np.float64)
                + wb * np.asarray(b, dtype=np.float64))


def clamp(value, lo: float = 0, hi: float = 255):
    return _out(np.clip(np.asarray(value, dtype=np.float64), lo, hi))


def round_half_up(value):
    """Rounds .5 towards +inf, like the browser's Math.round."""
    return _out(np.floor(np.asarray(value, dtype=np.float64) + 0.5))


def to_channel(value) -> np.ndarray:
    """
    Stores floats into 8-bit samples: clamp, then round half to even.
    Matches what an 8-bit clamped canvas does with a fractional write.
    """
    return np.rint(np.clip(np.asarray(value, dtype=np.float64), 0, 255)).astype(np.uint8)


def contrast_curve(value, factor: float):
    """
    S-shaped contrast: values above mid-gray are lifted, values below pushed down.
    factor > 1 increases contrast.
    """
    if factor <= 0:
        raise ValueError(f"Contrast factor must be > 0, got {factor}")
    x = np.asarray(value, dtype=np.float64) / 255
    enhanced = np.where(x > 0.5, np.power(x, 1 / factor), np.power(x, factor))
    return clamp(enhanced * 255)


def rgb_to_hsv(r, g, b) -> HSV:
    r = np.asarray(r, dtype=np.float64) / 255
    g = np.asarray(g, dtype=np.float64) / 255
    b = np.asarray(b, dtype=np.float64) / 255

    c_max = np.maximum(np.maximum(r, g), b)
    c_min = np.minimum(np.minimum(r, g), b)
    delta = c_max - c_min
    safe_delta = np.where(delta == 0, 1.0, delta)

    # fmod keeps the sign of the dividend; negatives are wrapped below.
    hue = np.select(
        [c_max == r, c_max == g],
        [np.fmod((g - b) / safe_delta, 6), (b - r) / safe_delta + 2],
        default=(r - g) / safe_delta + 4,
    ) * 60
    hue = np.where(delta == 0, 0.0, hue)
    hue = np.where(hue < 0, hue + 360, hue)

    s = np.where(c_max == 0, 0.0, delta / np.where(c_max == 0, 1.0, c_max))

    return HSV(h=_out(hue), s=_out(s * 100), v=_out(c_max * 100))


def _srgb_to_linear(c: np.ndarray) -> np.ndarray:
    return np.where(c > 0.04045, np.power((c + 0.055) / 1.055, 2.4), c / 12.92)


def rgb_to_xyz(r, g, b) -> XYZ:
    r_lin = _srgb_to_linear(np.asarray(r, dtype=np.float64) / 255)
    g_lin = _srgb_to_linear(np.asarray(g, dtype=np.float64) / 255)
    b_lin = _srgb_to_linear(np.asarray(b, dtype=np.float64) / 255)
    x, y, z = (m[0] * r_lin + m[1] * g_lin + m[2] * b_lin for m in SRGB_TO_XYZ)
    return XYZ(x=_out(x * 100), y=_out(y * 100), z=_out(z * 100))


def _lab_f(t: np.ndarray) -> np.ndarray:
    return np.where(t > LAB_THRESHOLD,
                    np.cbrt(t),
                    t / (3 * LAB_DELTA * LAB_DELTA) + 4 / 29)


def xyz_to_lab(x, y, z) -> Lab:
    fx = _lab_f(np.asarray(x, dtype=np.float64) / WHITE_XN)
    fy = _lab_f(np.asarray(y, dtype=np.float64) / WHITE_YN)
    fz = _lab_f(np.asarray(z, dtype=np.float64) / WHITE_ZN)
    return Lab(
        l=_out(116 * fy - 16),
        a=_out(500 * (fx - fy)),
        b=_out(200 * (fy - fz)),
    )


def rgb_to_lab(r, g, b) -> Lab:
    xyz = rgb_to_xyz(r, g, b)
    return xyz_to_lab(xyz.x, xyz.y, xyz.z)
