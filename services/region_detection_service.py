from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
import logging
import os
from typing import List, Protocol
from dotenv import load_dotenv
from models.detection_result import DetectionResult
from models.pixel_buffer import PixelBuffer
from models.region import Region
from repositories.face_engine_repository import DetectorNotReadyError, FaceEngineRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class RegionDetector(Protocol):
    def is_ready(self) -> bool: ...

    def load(self) -> None: ...

    def infer_regions(self, buffer: PixelBuffer) -> List[Region]: ...


class RegionDetectionService:
    """
    Runs the region detector off the render thread.

    *   `submit()` returns a Future that always resolves to a DetectionResult;
        detector failures become ERROR results, never exceptions.
    *   The model is loaded in the background by `warm_up()`; requests made
        before it is ready resolve to NOT_READY immediately.
    *   A timed-out job is abandoned with its worker; the next request gets
        a fresh one.
    """

    def __init__(self, detector: RegionDetector | None = None, timeout: float | None = None):
        self.detector = detector or FaceEngineRepository()
        self.timeout = timeout if timeout is not None else float(os.getenv("DETECTION_TIMEOUT_S", "10"))
        self._executor = self._new_executor()
        self._loader = ThreadPoolExecutor(max_workers=1, thread_name_prefix="detector-loader")
        self._load_future: Future | None = None
        self._load_error: str | None = None

    # ─── Model lifecycle ───────────────────────────────────────────
    def warm_up(self) -> Future:
        """Start loading the model once; later calls return the same Future."""
        if self._load_future is None:
            self._load_future = self._loader.submit(self._load)
        return self._load_future

    def _load(self) -> None:
        try:
            self.detector.load()
        except Exception as err:
            self._load_error = f"Detector failed to load: {err}"
            logger.error(self._load_error)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
        self._loader.shutdown(wait=True)

    # ─── Detection ─────────────────────────────────────────────────
    @staticmethod
    def _resolved(result: DetectionResult) -> Future:
        future: Future = Future()
        future.set_result(result)
        return future

    def submit(self, frame_id: int, buffer: PixelBuffer) -> Future:
        if self._load_error is not None:
            return self._resolved(DetectionResult.error(frame_id, self._load_error))
        if not self.detector.is_ready():
            logger.info(f"Frame {frame_id}: detector not ready yet")
            return self._resolved(DetectionResult.not_ready(frame_id))
        return self._executor.submit(self._detect, frame_id, buffer)

    def _detect(self, frame_id: int, buffer: PixelBuffer) -> DetectionResult:
        try:
            regions = self.detector.infer_regions(buffer)
        except DetectorNotReadyError:
            return DetectionResult.not_ready(frame_id)
        except Exception as err:
            logger.error(f"Frame {frame_id}: region detection failed: {err}")
            return DetectionResult.error(frame_id, str(err))
        logger.info(f"Frame {frame_id}: {len(regions)} region(s) detected")
        return DetectionResult.success(frame_id, regions)

    def wait(self, future: Future, frame_id: int) -> DetectionResult:
        """Block until the detection for frame_id is available (or the timeout expires)."""
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            logger.warning(f"Frame {frame_id}: region detection timed out after {self.timeout}s")
            self._abandon_executor()
            return DetectionResult.error(frame_id, f"timed out after {self.timeout}s")

    def _abandon_executor(self) -> None:
        """
        Detach the worker still busy with a timed-out job so the next frame
        is not queued behind it. Its late result is never read.
        """
        stale = self._executor
        self._executor = self._new_executor()
        stale.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="region-detector")
