from __future__ import annotations
import logging
from typing import Iterable, Tuple
import numpy as np
from models.effect_config import RegionMode
from models.pixel_buffer import PixelBuffer
from models.region import Region
from repositories.pixel_buffer_repository import PixelBufferRepository
from services import color_math
from services.filter_service import FilterService

logger = logging.getLogger(__name__)

BLUR_RADIUS = 3
PIXEL_BLOCK = 5

Bounds = Tuple[int, int, int, int]  # x0, y0, x1, y1 (half-open, already clipped)


def _clipped_window_sum(values: np.ndarray, radius: int, axis: int):
    """
    Sum over [i - radius, i + radius] ∩ [0, n) along one axis.
    Returns the sums and the number of samples each window covered.
    """
    n = values.shape[axis]
    zero_shape = list(values.shape)
    zero_shape[axis] = 1
    cumulative = np.concatenate([np.zeros(zero_shape, dtype=np.int64),
                                 np.cumsum(values, axis=axis, dtype=np.int64)], axis=axis)
    idx = np.arange(n)
    hi = np.minimum(idx + radius + 1, n)
    lo = np.maximum(idx - radius, 0)
    return np.take(cumulative, hi, axis=axis) - np.take(cumulative, lo, axis=axis), hi - lo


class RegionEffectService:
    """
    Localised effects restricted to detected regions.

    The output starts as a copy of the base. Regions are applied in the order
    given, each one on the working copy, so a later region sees (and
    overwrites) what an earlier one did where they overlap.
    """

    def __init__(self):
        self.buffer_repository = PixelBufferRepository()

    def apply(self, base: PixelBuffer, regions: Iterable[Region], mode: RegionMode) -> PixelBuffer:
        out = self.buffer_repository.copy(base)
        if mode is RegionMode.OUTLINE:
            return out

        effect = {
            RegionMode.GRAYSCALE: self._grayscale,
            RegionMode.BLUR: self._blur,
            RegionMode.HSV: self._hsv,
        }.get(mode)

        for region in regions:
            bounds = region.clip(out.width, out.height)
            if bounds is None:
                logger.debug(f"Region {region} lies outside the frame, skipped")
                continue
            if mode is RegionMode.PIXELATE:
                x, y, _, _ = region.floored()
                self._pixelate(out.pixels, bounds, origin=(x, y))
            else:
                effect(out.pixels, bounds)
        return out

    # ─── Effects (in place on the working pixels) ────────────────────
    @staticmethod
    def _grayscale(pixels: np.ndarray, bounds: Bounds) -> None:
        x0, y0, x1, y1 = bounds
        patch = pixels[y0:y1, x0:x1]
        gray = color_math.to_channel(color_math.luminance(patch[..., 0], patch[..., 1], patch[..., 2]))
        patch[..., 0] = gray
        patch[..., 1] = gray
        patch[..., 2] = gray

    @staticmethod
    def _blur(pixels: np.ndarray, bounds: Bounds) -> None:
        """
        Box blur of radius BLUR_RADIUS. The kernel only takes samples inside
        the region and each mean divides by the number of samples used.
        """
        x0, y0, x1, y1 = bounds
        snapshot = pixels[y0:y1, x0:x1, :3].astype(np.int64)
        row_sums, row_counts = _clipped_window_sum(snapshot, BLUR_RADIUS, axis=0)
        sums, col_counts = _clipped_window_sum(row_sums, BLUR_RADIUS, axis=1)
        counts = (row_counts[:, None] * col_counts[None, :])[..., None]
        pixels[y0:y1, x0:x1, :3] = color_math.to_channel(sums / counts)

    @staticmethod
    def _hsv(pixels: np.ndarray, bounds: Bounds) -> None:
        x0, y0, x1, y1 = bounds
        patch = pixels[y0:y1, x0:x1]
        h, s, v = FilterService.hsv_planes(patch[..., 0], patch[..., 1], patch[..., 2])
        patch[..., 0] = h
        patch[..., 1] = s
        patch[..., 2] = v

    def _pixelate(self, pixels: np.ndarray, bounds: Bounds, origin: Tuple[int, int] | None = None) -> None:
        """
        Grayscale the region, then replace every PIXEL_BLOCK x PIXEL_BLOCK block
        with its mean. The block grid starts at the region origin.
        """
        self._grayscale(pixels, bounds)
        x0, y0, x1, y1 = bounds
        ox, oy = origin if origin is not None else (x0, y0)

        for by in range(oy, y1, PIXEL_BLOCK):
            top, bottom = max(by, y0), min(by + PIXEL_BLOCK, y1)
            if top >= bottom:
                continue
            for bx in range(ox, x1, PIXEL_BLOCK):
                left, right = max(bx, x0), min(bx + PIXEL_BLOCK, x1)
                if left >= right:
                    continue
                block = pixels[top:bottom, left:right]
                mean = color_math.to_channel(block[..., 0].mean())
                block[..., :3] = mean
