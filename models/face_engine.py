from __future__ import annotations
import logging
import os
import threading
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class FaceEngine:
    """
    Singleton wrapper around InsightFace's FaceAnalysis (detection module only).

    The model is loaded once per process, on demand. Until `load()` has
    finished, `is_ready` is False and callers must not run detection.
    """

    _instance: FaceEngine | None = None  # Class-level cache for singleton

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_engine(*args, **kwargs)
        return cls._instance

    def _init_engine(self, model_name: str = None, ctx_id: int = None, det_thresh: float = None):
        """
        Args:
            model_name (str): Model name from the InsightFace model zoo. Defaults to env var.
            ctx_id (int): -1 = CPU, 0+ = GPU index. Defaults to env var.
            det_thresh (float): Minimum detection confidence. Defaults to env var.
        """
        self.model_name = model_name or os.getenv("FACE_ENGINE_MODEL", "buffalo_l")
        self.ctx_id = ctx_id if ctx_id is not None else int(os.getenv("FACE_ENGINE_CTX_ID", "0"))
        self.det_thresh = det_thresh if det_thresh is not None else float(os.getenv("DET_CONF_THR", "0.5"))
        det_side = int(os.getenv("FACE_ENGINE_DET_SIZE", "320"))
        self.det_size = (det_side, det_side)
        self.app = None
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self.app is not None

    def load(self) -> None:
        """Heavy model load. Raises whatever InsightFace raises (missing package, download failure)."""
        with self._lock:
            if self.app is not None:
                return
            # Deferred so the filters run on machines without the detector installed.
            from insightface.app import FaceAnalysis

            logger.info(f"Loading InsightFace model '{self.model_name}' (ctx_id={self.ctx_id})")
            app = FaceAnalysis(name=self.model_name, allowed_modules=["detection"])
            app.prepare(ctx_id=self.ctx_id, det_thresh=self.det_thresh, det_size=self.det_size)
            self.app = app
            logger.info("InsightFace model ready")
