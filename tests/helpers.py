import threading

import numpy as np

from models.pixel_buffer import PixelBuffer


def solid(width, height, rgba):
    """Buffer filled with one RGBA colour."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return PixelBuffer(pixels)


def from_rows(rows):
    """Buffer from nested lists of RGBA tuples, one list per row."""
    return PixelBuffer(np.array(rows, dtype=np.uint8))


class FakeDetector:
    """In-memory stand-in for the face engine repository."""

    def __init__(self, regions=(), ready=True, error=None, load_error=None):
        self.regions = list(regions)
        self.ready = ready
        self.error = error
        self.load_error = load_error
        self.calls = 0

    def is_ready(self):
        return self.ready

    def load(self):
        if self.load_error is not None:
            raise self.load_error
        self.ready = True

    def infer_regions(self, buffer):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.regions)


class FirstCallBlocksDetector(FakeDetector):
    """Hangs on the first frame until released, answers later frames at once."""

    def __init__(self, regions=()):
        super().__init__(regions)
        self.release = threading.Event()

    def infer_regions(self, buffer):
        if self.calls == 0:
            self.calls += 1
            self.release.wait(timeout=5)
            return []
        return super().infer_regions(buffer)
