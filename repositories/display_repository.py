from typing import Dict, Iterable
import numpy as np
import cv2
from models.pixel_buffer import PixelBuffer


class MemoryDisplaySink:
    """
    Keeps the last buffer written to each known slot. Used headless and in tests.
    """

    def __init__(self, slot_names: Iterable[str]):
        self.slot_names = set(slot_names)
        self.frames: Dict[str, PixelBuffer] = {}

    def has_slot(self, slot_name: str) -> bool:
        return slot_name in self.slot_names

    def render(self, slot_name: str, buffer: PixelBuffer) -> None:
        self.frames[slot_name] = buffer


class WindowDisplaySink:
    """
    One OpenCV HighGUI window per slot.
    """

    def __init__(self, slot_names: Iterable[str], scale: int = 1):
        self.slot_names = list(slot_names)
        self.scale = max(1, int(scale))
        for name in self.slot_names:
            cv2.namedWindow(name, cv2.WINDOW_AUTOSIZE)

    def has_slot(self, slot_name: str) -> bool:
        return slot_name in self.slot_names

    def render(self, slot_name: str, buffer: PixelBuffer) -> None:
        frame_bgr = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGBA2BGR)
        if self.scale > 1:
            frame_bgr = cv2.resize(frame_bgr, None, fx=self.scale, fy=self.scale,
                                   interpolation=cv2.INTER_NEAREST)
        cv2.imshow(slot_name, frame_bgr)

    def add_trackbar(self, slot_name: str, label: str, initial: int, on_change) -> None:
        cv2.createTrackbar(label, slot_name, int(initial), 255, on_change)

    @staticmethod
    def close() -> None:
        cv2.destroyAllWindows()
