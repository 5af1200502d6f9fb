from typing import List
import numpy as np
from models.face_engine import FaceEngine
from models.pixel_buffer import PixelBuffer
from models.region import Region


class DetectorNotReadyError(RuntimeError):
    """Detection was requested before the model finished loading."""


class FaceEngineRepository:
    """
    Thin wrapper around FaceEngine that turns raw InsightFace faces into Regions.
    """

    def __init__(self, engine: FaceEngine | None = None):
        self.engine = engine or FaceEngine()  # Singleton is handled inside

    def is_ready(self) -> bool:
        return self.engine.is_ready

    def load(self) -> None:
        self.engine.load()

    def infer_regions(self, buffer: PixelBuffer) -> List[Region]:
        if not self.engine.is_ready:
            raise DetectorNotReadyError("Face detection model is still loading")
        img_bgr = np.ascontiguousarray(buffer.pixels[:, :, 2::-1])
        faces = self.engine.app.get(img_bgr)
        return [Region.from_insightface(f) for f in faces
                if float(f.det_score) >= self.engine.det_thresh]
