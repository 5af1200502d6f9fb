import threading
from types import SimpleNamespace

import numpy as np
import pytest

from models.detection_result import DetectionStatus
from models.region import Region
from repositories.face_engine_repository import DetectorNotReadyError, FaceEngineRepository
from helpers import FakeDetector, FirstCallBlocksDetector, solid


class BlockingDetector(FakeDetector):
    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def infer_regions(self, buffer):
        self.release.wait(timeout=5)
        return super().infer_regions(buffer)


class TestSubmit:
    def test_success_carries_regions_and_frame_id(self, detection_service_factory):
        regions = [Region(1, 2, 3, 4, score=0.9)]
        service = detection_service_factory(FakeDetector(regions))
        result = service.wait(service.submit(7, solid(8, 8, (0, 0, 0, 255))), 7)
        assert result.status is DetectionStatus.SUCCESS
        assert result.ok
        assert result.frame_id == 7
        assert result.regions == regions

    def test_empty_result_is_success(self, detection_service_factory):
        service = detection_service_factory(FakeDetector([]))
        result = service.wait(service.submit(1, solid(8, 8, (0, 0, 0, 255))), 1)
        assert result.status is DetectionStatus.SUCCESS
        assert result.regions == []

    def test_not_ready_resolves_immediately(self, detection_service_factory):
        detector = FakeDetector(ready=False)
        service = detection_service_factory(detector)
        future = service.submit(3, solid(8, 8, (0, 0, 0, 255)))
        assert future.done()
        assert future.result().status is DetectionStatus.NOT_READY
        assert detector.calls == 0

    def test_not_ready_raised_by_detector(self, detection_service_factory):
        service = detection_service_factory(FakeDetector(error=DetectorNotReadyError("loading")))
        result = service.wait(service.submit(3, solid(8, 8, (0, 0, 0, 255))), 3)
        assert result.status is DetectionStatus.NOT_READY

    def test_detector_failure_becomes_error_result(self, detection_service_factory):
        service = detection_service_factory(FakeDetector(error=RuntimeError("onnx exploded")))
        result = service.wait(service.submit(4, solid(8, 8, (0, 0, 0, 255))), 4)
        assert result.status is DetectionStatus.ERROR
        assert "onnx exploded" in result.message

    def test_timeout_becomes_error_result(self, detection_service_factory):
        detector = BlockingDetector()
        service = detection_service_factory(detector, timeout=0.05)
        try:
            result = service.wait(service.submit(5, solid(8, 8, (0, 0, 0, 255))), 5)
        finally:
            detector.release.set()
        assert result.status is DetectionStatus.ERROR
        assert result.frame_id == 5

    def test_timed_out_job_does_not_delay_next_frame(self, detection_service_factory):
        detector = FirstCallBlocksDetector([Region(1, 1, 2, 2)])
        service = detection_service_factory(detector, timeout=0.2)
        try:
            first = service.wait(service.submit(1, solid(8, 8, (0, 0, 0, 255))), 1)
            second = service.wait(service.submit(2, solid(8, 8, (0, 0, 0, 255))), 2)
        finally:
            detector.release.set()
        assert first.status is DetectionStatus.ERROR
        assert second.status is DetectionStatus.SUCCESS
        assert second.frame_id == 2
        assert second.regions == [Region(1, 1, 2, 2)]


class TestWarmUp:
    def test_loads_model_once(self, detection_service_factory):
        detector = FakeDetector(ready=False)
        service = detection_service_factory(detector)
        first = service.warm_up()
        assert service.warm_up() is first
        first.result(timeout=5)
        assert detector.is_ready()
        result = service.wait(service.submit(1, solid(8, 8, (0, 0, 0, 255))), 1)
        assert result.ok

    def test_load_failure_reports_error(self, detection_service_factory):
        detector = FakeDetector(ready=False, load_error=ImportError("No module named 'insightface'"))
        service = detection_service_factory(detector)
        service.warm_up().result(timeout=5)
        result = service.submit(2, solid(8, 8, (0, 0, 0, 255))).result()
        assert result.status is DetectionStatus.ERROR
        assert "insightface" in result.message


class FakeApp:
    def __init__(self, faces):
        self.faces = faces
        self.seen = None

    def get(self, img_bgr):
        self.seen = img_bgr
        return self.faces


class FakeEngine:
    def __init__(self, faces, ready=True):
        self.app = FakeApp(faces) if ready else None
        self.det_thresh = 0.5

    @property
    def is_ready(self):
        return self.app is not None


class TestFaceEngineRepository:
    def test_converts_and_filters_faces(self):
        faces = [
            SimpleNamespace(bbox=np.array([1.5, 2.0, 11.5, 12.0]), det_score=0.9),
            SimpleNamespace(bbox=np.array([0.0, 0.0, 4.0, 4.0]), det_score=0.3),
        ]
        engine = FakeEngine(faces)
        repository = FaceEngineRepository(engine=engine)
        regions = repository.infer_regions(solid(16, 16, (10, 20, 30, 255)))

        assert regions == [Region(1.5, 2.0, 10.0, 10.0, score=0.9)]
        assert engine.app.seen.shape == (16, 16, 3)
        assert tuple(engine.app.seen[0, 0]) == (30, 20, 10)

    def test_not_ready_engine_raises(self):
        repository = FaceEngineRepository(engine=FakeEngine([], ready=False))
        assert repository.is_ready() is False
        with pytest.raises(DetectorNotReadyError):
            repository.infer_regions(solid(4, 4, (0, 0, 0, 255)))
