from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional
from models.pixel_buffer import PixelBuffer
from models.detection_result import DetectionResult


@dataclass
class FrameContext:
    """
    Everything derived from one captured frame.
    Created on capture, discarded when the next capture replaces it.
    """
    frame_id: int
    base: PixelBuffer                                           # frozen
    outputs: Dict[str, PixelBuffer] = field(default_factory=dict)  # effect name → rendered buffer
    detection: Optional[DetectionResult] = None

    def output(self, effect_name: str) -> Optional[PixelBuffer]:
        return self.outputs.get(effect_name)
