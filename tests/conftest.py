import numpy as np
import pytest

from models.pixel_buffer import PixelBuffer
from repositories.pixel_buffer_repository import PixelBufferRepository
from services.region_detection_service import RegionDetectionService


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8))


@pytest.fixture
def frozen_random_buffer(random_buffer):
    return PixelBufferRepository.freeze(random_buffer)


@pytest.fixture
def detection_service_factory():
    services = []

    def make(detector, timeout=5.0):
        service = RegionDetectionService(detector=detector, timeout=timeout)
        services.append(service)
        return service

    yield make
    for service in services:
        service.shutdown()
