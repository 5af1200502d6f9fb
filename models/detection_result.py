from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List
from models.region import Region


class DetectionStatus(Enum):
    SUCCESS = "success"
    NOT_READY = "not_ready"
    ERROR = "error"


@dataclass(frozen=True)
class DetectionResult:
    """
    Outcome of one region-detection request, tagged with the frame it was made for.
    """
    frame_id: int
    status: DetectionStatus
    regions: List[Region] = field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is DetectionStatus.SUCCESS

    @classmethod
    def success(cls, frame_id: int, regions: List[Region]) -> "DetectionResult":
        return cls(frame_id=frame_id, status=DetectionStatus.SUCCESS, regions=list(regions))

    @classmethod
    def not_ready(cls, frame_id: int) -> "DetectionResult":
        return cls(frame_id=frame_id, status=DetectionStatus.NOT_READY)

    @classmethod
    def error(cls, frame_id: int, message: str) -> "DetectionResult":
        return cls(frame_id=frame_id, status=DetectionStatus.ERROR, message=message)
