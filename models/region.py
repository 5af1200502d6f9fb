from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Optional, Tuple


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle in base-buffer pixel coordinates."""
    x: float
    y: float
    width: float
    height: float
    score: float | None = None  # detection confidence, when the detector reports one

    @classmethod
    def from_insightface(cls, raw_face) -> "Region":
        x1, y1, x2, y2 = (float(v) for v in raw_face.bbox[:4])
        return cls(
            x=x1,
            y=y1,
            width=x2 - x1,
            height=y2 - y1,
            score=float(raw_face.det_score),
        )

    def floored(self) -> Tuple[int, int, int, int]:
        """(x, y, width, height) floored to integers, not yet clipped."""
        return (math.floor(self.x), math.floor(self.y),
                math.floor(self.width), math.floor(self.height))

    def clip(self, buffer_width: int, buffer_height: int) -> Optional[Tuple[int, int, int, int]]:
        """
        Returns the (x0, y0, x1, y1) half-open bounds of the region inside the
        buffer, or None when nothing of the region is visible.
        """
        x, y, w, h = self.floored()
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, buffer_width), min(y + h, buffer_height)
        if x0 >= x1 or y0 >= y1:
            return None
        return x0, y0, x1, y1
