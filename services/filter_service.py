import logging
import os
import numpy as np
from dotenv import load_dotenv
from models.pixel_buffer import PixelBuffer
from services import color_math

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

GRAYSCALE_BOOST = 1.2
XRAY_CONTRAST = 1.5
XRAY_NOISE_AMPLITUDE = 4.0        # noise is uniform in [-4, +4)
XRAY_TINT = (0.7, 0.8, 1.0)


def _rgb_planes(buffer: PixelBuffer):
    px = buffer.pixels
    return px[..., 0], px[..., 1], px[..., 2]


def compose(source: PixelBuffer, r, g, b) -> PixelBuffer:
    """New buffer from three uint8-ready planes, alpha copied from source."""
    out = np.empty_like(source.pixels)
    out[..., 0] = r
    out[..., 1] = g
    out[..., 2] = b
    out[..., 3] = source.pixels[..., 3]
    return PixelBuffer(out)


class FilterService:
    """
    Full-frame filters. Every method reads the buffer it is given and
    returns a *new* buffer of the same size.
    """

    def __init__(self, rng: np.random.Generator | None = None):
        if rng is None:
            seed = os.getenv("RANDOM_SEED")
            rng = np.random.default_rng(int(seed) if seed else None)
        self.rng = rng

    @staticmethod
    def grayscale(buffer: PixelBuffer, boost: float = GRAYSCALE_BOOST) -> PixelBuffer:
        r, g, b = _rgb_planes(buffer)
        gray = color_math.to_channel(color_math.clamp(color_math.luminance(r, g, b) * boost))
        return compose(buffer, gray, gray, gray)

    def xray(self, buffer: PixelBuffer, noise_amplitude: float = XRAY_NOISE_AMPLITUDE) -> PixelBuffer:
        """
        Inverted, contrast-enhanced luminance with a little grain and a blue tint.

        Args:
            buffer (PixelBuffer): Source frame.
            noise_amplitude (float): Half-width of the uniform noise. 0 makes the filter deterministic.
        """
        r, g, b = _rgb_planes(buffer)
        gray = color_math.contrast_curve(color_math.luminance(r, g, b), XRAY_CONTRAST)
        inverted = 255 - gray

        if noise_amplitude:
            noise = (self.rng.random(inverted.shape) - 0.5) * 2 * noise_amplitude
        else:
            noise = 0.0
        noisy = color_math.clamp(inverted + noise)

        tint_r, tint_g, _ = XRAY_TINT
        return compose(
            buffer,
            color_math.round_half_up(noisy * tint_r).astype(np.uint8),
            color_math.round_half_up(noisy * tint_g).astype(np.uint8),
            color_math.to_channel(noisy),
        )

    @staticmethod
    def isolate_channel(buffer: PixelBuffer, channel: int) -> PixelBuffer:
        """Keep one of R (0), G (1), B (2); zero the other two."""
        if channel not in (0, 1, 2):
            raise ValueError(f"Channel index must be 0, 1 or 2, got {channel}")
        out = np.zeros_like(buffer.pixels)
        out[..., channel] = buffer.pixels[..., channel]
        out[..., 3] = buffer.pixels[..., 3]
        return PixelBuffer(out)

    @staticmethod
    def hsv_planes(r, g, b):
        """HSV false-colour: hue → R, saturation → G, value → B."""
        hsv = color_math.rgb_to_hsv(r, g, b)
        return (
            color_math.round_half_up(hsv.h / 360 * 255).astype(np.uint8),
            color_math.round_half_up(hsv.s / 100 * 255).astype(np.uint8),
            color_math.round_half_up(hsv.v / 100 * 255).astype(np.uint8),
        )

    @staticmethod
    def hsv_false_color(buffer: PixelBuffer) -> PixelBuffer:
        return compose(buffer, *FilterService.hsv_planes(*_rgb_planes(buffer)))

    @staticmethod
    def lab_false_color(buffer: PixelBuffer) -> PixelBuffer:
        """
        Lab false-colour: L → R, a → G, b → B.
        a and b are shifted by 128 without a prior clamp; the clamp happens
        on the scaled value, before rounding.
        """
        lab = color_math.rgb_to_lab(*_rgb_planes(buffer))
        new_r = color_math.clamp(lab.l / 100 * 255)
        new_g = color_math.clamp((lab.a + 128) / 256 * 255)
        new_b = color_math.clamp((lab.b + 128) / 256 * 255)
        return compose(
            buffer,
            color_math.round_half_up(new_r).astype(np.uint8),
            color_math.round_half_up(new_g).astype(np.uint8),
            color_math.round_half_up(new_b).astype(np.uint8),
        )
