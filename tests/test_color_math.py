import numpy as np
import pytest

from services import color_math


class TestScalarHelpers:
    def test_luminance_weights(self):
        assert color_math.luminance(255, 255, 255) == pytest.approx(255.0)
        assert color_math.luminance(10, 20, 30) == pytest.approx(18.15)

    def test_luminance_does_not_clamp(self):
        assert color_math.luminance(1000, 0, 0) == pytest.approx(299.0)

    def test_clamp(self):
        assert color_math.clamp(300) == 255
        assert color_math.clamp(-5) == 0
        assert color_math.clamp(12.5) == 12.5
        assert color_math.clamp(7, lo=10, hi=20) == 10

    def test_round_half_up_vs_channel_store(self):
        assert color_math.round_half_up(2.5) == 3
        assert color_math.round_half_up(178.5) == 179
        assert int(color_math.to_channel(2.5)) == 2
        assert int(color_math.to_channel(3.5)) == 4
        assert int(color_math.to_channel(300)) == 255
        assert int(color_math.to_channel(-4)) == 0


class TestContrastCurve:
    def test_extremes_are_fixed_points(self):
        assert color_math.contrast_curve(0, 1.5) == 0
        assert color_math.contrast_curve(255, 1.5) == pytest.approx(255)

    def test_dark_values_are_pushed_down(self):
        assert color_math.contrast_curve(51, 1.5) == pytest.approx(0.2 ** 1.5 * 255)

    def test_bright_values_are_lifted(self):
        assert color_math.contrast_curve(204, 1.5) == pytest.approx(0.8 ** (1 / 1.5) * 255)

    def test_midpoint_uses_lower_branch(self):
        assert color_math.contrast_curve(127.5, 2) == pytest.approx(0.25 * 255)

    @pytest.mark.parametrize("factor", [0, -1.5])
    def test_non_positive_factor_rejected(self, factor):
        with pytest.raises(ValueError):
            color_math.contrast_curve(100, factor)

    def test_array_input(self):
        out = color_math.contrast_curve(np.array([0, 255]), 1.5)
        assert out.shape == (2,)
        np.testing.assert_allclose(out, [0, 255])


class TestRgbToHsv:
    @pytest.mark.parametrize("rgb, expected", [
        ((255, 0, 0), (0, 100, 100)),
        ((0, 0, 0), (0, 0, 0)),
        ((255, 255, 255), (0, 0, 100)),
        ((0, 255, 0), (120, 100, 100)),
        ((0, 0, 255), (240, 100, 100)),
        ((255, 0, 255), (300, 100, 100)),
        ((128, 64, 64), (0, 50, 128 / 255 * 100)),
    ])
    def test_reference_triples(self, rgb, expected):
        hsv = color_math.rgb_to_hsv(*rgb)
        assert (hsv.h, hsv.s, hsv.v) == pytest.approx(expected)

    def test_hue_stays_below_360(self):
        hsv = color_math.rgb_to_hsv(255, 0, 1)
        assert 0 <= hsv.h < 360

    def test_vectorised(self):
        hsv = color_math.rgb_to_hsv(np.array([255, 0]), np.array([0, 255]), np.array([0, 0]))
        np.testing.assert_allclose(hsv.h, [0, 120])
        np.testing.assert_allclose(hsv.s, [100, 100])


class TestLab:
    def test_white_to_xyz_is_d65_white(self):
        xyz = color_math.rgb_to_xyz(255, 255, 255)
        assert (xyz.x, xyz.y, xyz.z) == pytest.approx((95.047, 100.0, 108.883), abs=1e-3)

    def test_black_to_xyz(self):
        xyz = color_math.rgb_to_xyz(0, 0, 0)
        assert (xyz.x, xyz.y, xyz.z) == (0, 0, 0)

    def test_gamma_linear_segment(self):
        # 10 / 255 is below the 0.04045 knee
        xyz = color_math.rgb_to_xyz(0, 10, 0)
        assert xyz.y == pytest.approx(10 / 255 / 12.92 * 0.7151522 * 100)

    def test_white_point_to_lab(self):
        lab = color_math.xyz_to_lab(95.047, 100.0, 108.883)
        assert (lab.l, lab.a, lab.b) == pytest.approx((100, 0, 0), abs=1e-9)

    def test_black_to_lab(self):
        lab = color_math.rgb_to_lab(0, 0, 0)
        assert (lab.l, lab.a, lab.b) == (pytest.approx(0, abs=1e-12), 0, 0)

    def test_red_to_lab(self):
        lab = color_math.rgb_to_lab(255, 0, 0)
        assert (lab.l, lab.a, lab.b) == pytest.approx((53.24, 80.09, 67.20), abs=0.01)
