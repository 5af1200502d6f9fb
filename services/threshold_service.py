import numpy as np
from models.pixel_buffer import PixelBuffer
from services import color_math
from services.filter_service import compose


class ThresholdService:
    """
    Binarisation of a channel or of a luminance. Pure: same inputs, same output.
    A sample strictly above the threshold becomes white, anything else black.
    """

    @staticmethod
    def validate_threshold(threshold: int) -> int:
        if isinstance(threshold, bool) or int(threshold) != threshold or not 0 <= threshold <= 255:
            raise ValueError(f"Threshold must be an integer in [0, 255], got {threshold!r}")
        return int(threshold)

    @staticmethod
    def _binary(values: np.ndarray, threshold: int) -> np.ndarray:
        return np.where(values > threshold, 255, 0).astype(np.uint8)

    def channel_threshold(self, base: PixelBuffer, channel: int, threshold: int) -> PixelBuffer:
        """
        Args:
            base (PixelBuffer): The captured frame.
            channel (int): 0 = red, 1 = green, 2 = blue.
            threshold (int): Cut-off in [0, 255].

        Returns:
            A black/white buffer, alpha copied from base.
        """
        if channel not in (0, 1, 2):
            raise ValueError(f"Channel index must be 0, 1 or 2, got {channel}")
        threshold = self.validate_threshold(threshold)
        binary = self._binary(base.pixels[..., channel], threshold)
        return compose(base, binary, binary, binary)

    def luminance_threshold(self, source: PixelBuffer, threshold: int) -> PixelBuffer:
        """
        Thresholds the luminance of *source* as it is encoded, which for the HSV
        and Lab slots means the false-colour values, not the true colour.
        Alpha comes from source.
        """
        threshold = self.validate_threshold(threshold)
        px = source.pixels
        gray = color_math.luminance(px[..., 0], px[..., 1], px[..., 2])
        binary = self._binary(gray, threshold)
        return compose(source, binary, binary, binary)
