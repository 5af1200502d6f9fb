from __future__ import annotations
from typing import Iterable, Tuple
import numpy as np
import cv2
from models.pixel_buffer import PixelBuffer
from models.region import Region
from repositories.pixel_buffer_repository import PixelBufferRepository

FONT = cv2.FONT_HERSHEY_SIMPLEX

LOADING_TEXT = "Loading Face Detection..."
ERROR_TEXT = "Face Detection Error"
NO_REGIONS_TEXT = "No faces detected"

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 0)
GREEN = (0, 255, 0)
YELLOW = (255, 255, 0)


class OverlayService:
    """
    Draws the region slot's status placeholders and detection outlines.
    Each method returns a new buffer; the input is never touched.
    """

    def __init__(self):
        self.buffer_repository = PixelBufferRepository()

    # ─── Drawing helpers ───────────────────────────────────────────
    @staticmethod
    def _veil(pixels: np.ndarray, color: Tuple[int, int, int], opacity: float,
              x0: int = 0, y0: int = 0, x1: int | None = None, y1: int | None = None) -> None:
        """Alpha-blend a solid rectangle over the RGB channels."""
        patch = pixels[y0:y1, x0:x1, :3]
        blended = patch * (1 - opacity) + np.array(color, dtype=np.float64) * opacity
        patch[...] = np.rint(np.clip(blended, 0, 255)).astype(np.uint8)

    @staticmethod
    def _keep_alpha(out: PixelBuffer, source: PixelBuffer) -> PixelBuffer:
        """cv2 drawing writes the alpha channel too; put the source alpha back."""
        out.pixels[..., 3] = source.pixels[..., 3]
        return out

    @staticmethod
    def _centered_text(pixels: np.ndarray, text: str, color, scale: float) -> None:
        (text_w, text_h), _ = cv2.getTextSize(text, FONT, scale, 1)
        height, width = pixels.shape[:2]
        org = ((width - text_w) // 2, (height + text_h) // 2)
        cv2.putText(pixels, text, org, FONT, scale, (*color, 255), 1, cv2.LINE_AA)

    # ─── Placeholders ──────────────────────────────────────────────
    def loading(self, base: PixelBuffer) -> PixelBuffer:
        out = self.buffer_repository.copy(base)
        self._veil(out.pixels, BLACK, 0.7)
        self._centered_text(out.pixels, LOADING_TEXT, WHITE, 0.35)
        return self._keep_alpha(out, base)

    def error(self, base: PixelBuffer) -> PixelBuffer:
        out = self.buffer_repository.copy(base)
        self._veil(out.pixels, RED, 0.7)
        self._centered_text(out.pixels, ERROR_TEXT, WHITE, 0.3)
        return self._keep_alpha(out, base)

    def no_regions(self, base: PixelBuffer) -> PixelBuffer:
        """Base image with a small yellow label in the top-left corner."""
        out = self.buffer_repository.copy(base)
        self._veil(out.pixels, YELLOW, 0.7, 5, 5, 105, 35)
        cv2.putText(out.pixels, NO_REGIONS_TEXT, (10, 20), FONT, 0.3, (*BLACK, 255), 1, cv2.LINE_AA)
        return self._keep_alpha(out, base)

    # ─── Outlines ──────────────────────────────────────────────────
    def outline(self, buffer: PixelBuffer, regions: Iterable[Region]) -> PixelBuffer:
        """Light green fill plus a 2 px green frame around every region."""
        out = self.buffer_repository.copy(buffer)
        for region in regions:
            bounds = region.clip(out.width, out.height)
            if bounds is None:
                continue
            x0, y0, x1, y1 = bounds
            self._veil(out.pixels, GREEN, 0.1, x0, y0, x1, y1)
            x, y, w, h = region.floored()
            cv2.rectangle(out.pixels, (x, y), (x + w - 1, y + h - 1), (*GREEN, 255), 2)
        return self._keep_alpha(out, buffer)
