from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import os
from dotenv import load_dotenv
from models.pixel_buffer import PixelBuffer
from repositories.capture_repository import CaptureError, CaptureRepository
from repositories.pixel_buffer_repository import PixelBufferRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class CaptureService:
    """
    Produces the frozen base buffer of a frame, scaled to the session size.
    A failed capture is reported and yields None: there is no base buffer.
    """

    def __init__(self, capture_repository: CaptureRepository | None = None):
        self.WIDTH = int(os.getenv("CAPTURE_WIDTH", "160"))
        self.HEIGHT = int(os.getenv("CAPTURE_HEIGHT", "120"))
        self.capture_repository = capture_repository or CaptureRepository(
            int(os.getenv("CAPTURE_DEVICE_INDEX", "0")))
        self.buffer_repository = PixelBufferRepository()

    @property
    def size(self) -> tuple[int, int]:
        return self.WIDTH, self.HEIGHT

    def preview(self):
        """Raw BGR frame for the live preview window, or None."""
        try:
            return self.capture_repository.read_frame()
        except CaptureError as err:
            logger.error(str(err))
            return None

    def snapshot(self) -> PixelBuffer | None:
        try:
            frame_bgr = self.capture_repository.read_frame()
        except CaptureError as err:
            logger.error(str(err))
            return None
        base = self.buffer_repository.from_bgr(frame_bgr, self.size)
        logger.info(f"Captured {base.width}x{base.height} frame")
        return self.buffer_repository.freeze(base)

    def from_file(self, path: Union[str, Path]) -> PixelBuffer | None:
        """Use a still image as the captured frame."""
        try:
            base = self.buffer_repository.load(path, self.size)
        except (FileNotFoundError, OSError) as err:
            logger.error(f"Could not load {path}: {err}")
            return None
        logger.info(f"Loaded {base.width}x{base.height} frame from {path}")
        return self.buffer_repository.freeze(base)

    def release(self) -> None:
        self.capture_repository.release()
