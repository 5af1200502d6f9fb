import numpy as np
import pytest

from models.pixel_buffer import PixelBuffer
from repositories.pixel_buffer_repository import PixelBufferRepository
from helpers import solid


class TestPixelBuffer:
    def test_dimensions_and_flat_view(self):
        buffer = PixelBufferRepository.create(4, 3)
        assert (buffer.width, buffer.height) == (4, 3)
        assert buffer.data.shape == (4 * 3 * 4,)

    def test_row_major_layout(self):
        buffer = PixelBufferRepository.create(4, 3)
        buffer.set_pixel(1, 2, (9, 8, 7, 6))
        i = (2 * 4 + 1) * 4
        assert list(buffer.data[i:i + 4]) == [9, 8, 7, 6]

    def test_set_pixel_clamps(self):
        buffer = PixelBufferRepository.create(1, 1)
        buffer.set_pixel(0, 0, (300, -5, 10, 255))
        assert buffer.get_pixel(0, 0) == (255, 0, 10, 255)

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 3)])
    def test_bounds_checked(self, x, y):
        buffer = PixelBufferRepository.create(4, 3)
        with pytest.raises(IndexError):
            buffer.get_pixel(x, y)
        with pytest.raises(IndexError):
            buffer.set_pixel(x, y, (0, 0, 0, 0))

    @pytest.mark.parametrize("pixels", [
        np.zeros((3, 4, 3), dtype=np.uint8),
        np.zeros((3, 4), dtype=np.uint8),
        np.zeros((3, 4, 4), dtype=np.float32),
    ])
    def test_rejects_malformed_pixels(self, pixels):
        with pytest.raises(ValueError):
            PixelBuffer(pixels)


class TestPixelBufferRepository:
    def test_from_flat_checks_length(self):
        buffer = PixelBufferRepository.from_flat(list(range(24)), 3, 2)
        assert buffer.get_pixel(2, 1) == (20, 21, 22, 23)
        with pytest.raises(ValueError):
            PixelBufferRepository.from_flat(list(range(23)), 3, 2)

    def test_freeze_blocks_writes(self):
        buffer = PixelBufferRepository.freeze(solid(2, 2, (1, 2, 3, 4)))
        assert buffer.is_frozen
        with pytest.raises(ValueError):
            buffer.set_pixel(0, 0, (0, 0, 0, 0))

    def test_copy_of_frozen_is_writable(self):
        frozen = PixelBufferRepository.freeze(solid(2, 2, (1, 2, 3, 4)))
        copy = PixelBufferRepository.copy(frozen)
        copy.set_pixel(0, 0, (9, 9, 9, 9))
        assert frozen.get_pixel(0, 0) == (1, 2, 3, 4)

    def test_from_bgr_scales_and_adds_opaque_alpha(self):
        frame = np.zeros((240, 320, 3), dtype=np.uint8)
        frame[..., 0] = 200  # blue in BGR
        buffer = PixelBufferRepository.from_bgr(frame, (160, 120))
        assert (buffer.width, buffer.height) == (160, 120)
        assert buffer.get_pixel(80, 60) == (0, 0, 200, 255)

    def test_load_image_file(self, tmp_path):
        from PIL import Image as PILImage
        path = tmp_path / "frame.png"
        PILImage.new("RGB", (32, 24), (10, 20, 30)).save(path)
        buffer = PixelBufferRepository.load(path, (16, 12))
        assert (buffer.width, buffer.height) == (16, 12)
        assert buffer.get_pixel(3, 3) == (10, 20, 30, 255)

    def test_load_keeps_colour_of_translucent_pixels(self, tmp_path):
        from PIL import Image as PILImage
        pixels = np.empty((2, 8, 4), dtype=np.uint8)
        pixels[...] = (1, 2, 3, 255)
        pixels[:, :4, 3] = 0
        path = tmp_path / "translucent.png"
        PILImage.fromarray(pixels).save(path)
        buffer = PixelBufferRepository.load(path, (4, 1))
        np.testing.assert_array_equal(buffer.pixels[..., :3], np.full((1, 4, 3), (1, 2, 3)))
        assert buffer.get_pixel(0, 0)[3] == 0
        assert buffer.get_pixel(3, 0)[3] == 255

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PixelBufferRepository.load(tmp_path / "nope.png")
