from __future__ import annotations
import logging
import numpy as np
import cv2

logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """The video device could not be opened or returned no frame."""


class CaptureRepository:
    """
    Thin wrapper around cv2.VideoCapture. Returns raw BGR frames.
    """

    def __init__(self, device_index: int = 0):
        self.device_index = device_index
        self._cap: cv2.VideoCapture | None = None

    def open(self) -> None:
        if self._cap is not None and self._cap.isOpened():
            return
        cap = cv2.VideoCapture(self.device_index)
        if not cap.isOpened():
            cap.release()
            raise CaptureError(f"Webcam access failed: cannot open device {self.device_index}")
        self._cap = cap
        logger.info(f"Opened video device {self.device_index}")

    def read_frame(self) -> np.ndarray:
        self.open()
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise CaptureError(f"Webcam access failed: no frame from device {self.device_index}")
        return frame

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
