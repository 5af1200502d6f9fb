import logging
from typing import Protocol
from models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class DisplaySink(Protocol):
    def has_slot(self, slot_name: str) -> bool: ...

    def render(self, slot_name: str, buffer: PixelBuffer) -> None: ...


class DisplayService:
    """
    Routes rendered buffers to named slots. Unknown slots are ignored.
    """

    def __init__(self, sink: DisplaySink):
        self.sink = sink

    def show(self, slot_name: str, buffer: PixelBuffer) -> bool:
        if not self.sink.has_slot(slot_name):
            logger.debug(f"No display slot named '{slot_name}', output dropped")
            return False
        self.sink.render(slot_name, buffer)
        logger.debug(f"Rendered {slot_name}")
        return True
