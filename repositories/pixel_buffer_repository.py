from __future__ import annotations
from pathlib import Path
from typing import Union
import numpy as np
import cv2
from PIL import Image as PILImage
from models.pixel_buffer import PixelBuffer


class PixelBufferRepository:
    """
    Creates, copies and freezes PixelBuffer entities.
    """

    @staticmethod
    def create(width: int, height: int) -> PixelBuffer:
        return PixelBuffer(np.zeros((height, width, 4), dtype=np.uint8))

    @staticmethod
    def copy(source: PixelBuffer) -> PixelBuffer:
        """Writable deep copy, also of a frozen buffer."""
        return PixelBuffer(np.array(source.pixels, dtype=np.uint8, copy=True))

    @staticmethod
    def from_flat(data, width: int, height: int) -> PixelBuffer:
        arr = np.asarray(data, dtype=np.uint8)
        if arr.size != width * height * 4:
            raise ValueError(f"Sample array of length {arr.size} does not match {width}x{height}x4")
        return PixelBuffer(arr.reshape(height, width, 4).copy())

    @staticmethod
    def from_bgr(pixels_bgr: np.ndarray, size: tuple[int, int] | None = None) -> PixelBuffer:
        """(H, W, 3) BGR camera frame → RGBA, optionally scaled to size=(width, height)."""
        if size is not None and (pixels_bgr.shape[1], pixels_bgr.shape[0]) != size:
            pixels_bgr = cv2.resize(pixels_bgr, size, interpolation=cv2.INTER_AREA)
        return PixelBuffer(cv2.cvtColor(pixels_bgr, cv2.COLOR_BGR2RGBA))

    @staticmethod
    def load(path: Union[str, Path], size: tuple[int, int] | None = None) -> PixelBuffer:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        with PILImage.open(path) as pil_img:
            pixels = np.array(pil_img.convert("RGBA"), dtype=np.uint8)
        # cv2 scales every channel on its own; colour samples are not weighted by alpha
        if size is not None and (pixels.shape[1], pixels.shape[0]) != size:
            pixels = cv2.resize(pixels, size, interpolation=cv2.INTER_LINEAR)
        return PixelBuffer(pixels)

    @staticmethod
    def freeze(buffer: PixelBuffer) -> PixelBuffer:
        """Mark the pixels read-only; writes raise ValueError afterwards."""
        buffer.pixels.flags.writeable = False
        return buffer
