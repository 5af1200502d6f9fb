from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class PixelBuffer:
    """
    Simple data object: RGBA pixels of one captured frame or one filter output.
    No filter logic in this file.
    """
    pixels: np.ndarray # Shape (H, W, 4), dtype uint8, RGBA order.

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) RGBA pixels, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def data(self) -> np.ndarray:
        """Flat row-major RGBA view of length W*H*4."""
        return self.pixels.reshape(-1)

    @property
    def is_frozen(self) -> bool:
        return not self.pixels.flags.writeable

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        self._check_bounds(x, y)
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, rgba) -> None:
        self._check_bounds(x, y)
        self.pixels[y, x] = np.clip(np.asarray(rgba), 0, 255).astype(np.uint8)
