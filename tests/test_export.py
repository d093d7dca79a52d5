"""Tests for pixel encoding and image export.

Tests cover:
- Averaging, gamma 2 and clamping in encode_image
- Single-color encoding
- Plain-text PPM output
- PNG output through Pillow
"""

import io

import numpy as np
import pytest
from PIL import Image as PILImage

from src.pathtracer.core.vec3 import Color
from src.pathtracer.preview.export import (
    encode_color,
    encode_image,
    save_image,
    write_ppm,
)


class TestEncodeImage:
    """Tests for the summed-radiance to 8-bit conversion."""

    def test_black_and_white(self):
        summed = np.array([[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]])
        encoded = encode_image(summed, 1)
        assert encoded.dtype == np.uint8
        assert encoded.tolist() == [[[0, 0, 0], [255, 255, 255]]]

    def test_gamma_two(self):
        """0.25 encodes as sqrt(0.25) = 0.5 -> int(256 * 0.5) = 128."""
        assert encode_color(Color(0.25, 0.25, 0.25)) == (128, 128, 128)

    def test_divides_by_sample_count(self):
        assert encode_color(Color(1.0, 2.0, 4.0), samples_per_pixel=4) == (128, 181, 255)

    def test_clamps_above_one(self):
        assert encode_color(Color(5.0, 100.0, 1.0)) == (255, 255, 255)

    def test_negative_values_clamp_to_zero(self):
        assert encode_color(Color(-1.0, 0.0, -0.5)) == (0, 0, 0)

    def test_sky_color(self):
        """The zenith sky (0.5, 0.7, 1.0) at one sample."""
        assert encode_color(Color(0.5, 0.7, 1.0)) == (181, 214, 255)

    def test_shape_preserved(self):
        summed = np.zeros((4, 7, 3))
        assert encode_image(summed, 10).shape == (4, 7, 3)

    def test_invalid_sample_count(self):
        with pytest.raises(ValueError, match="samples_per_pixel"):
            encode_image(np.zeros((2, 2, 3)), 0)

    def test_invalid_shape(self):
        with pytest.raises(ValueError, match="shape"):
            encode_image(np.zeros((2, 2)), 1)


class TestWritePpm:
    """Tests for plain-text PPM output."""

    def test_header_and_pixel_order(self):
        image = np.array(
            [
                [[255, 0, 0], [0, 255, 0]],
                [[0, 0, 255], [10, 20, 30]],
            ],
            dtype=np.uint8,
        )
        stream = io.StringIO()
        write_ppm(image, stream)

        lines = stream.getvalue().splitlines()
        assert lines[:3] == ["P3", "2 2", "255"]
        assert lines[3:] == ["255 0 0", "0 255 0", "0 0 255", "10 20 30"]

    def test_save_ppm(self, tmp_path):
        image = np.full((3, 4, 3), 7, dtype=np.uint8)
        path = save_image(image, tmp_path / "out.ppm")

        text = path.read_text(encoding="ascii").splitlines()
        assert text[0] == "P3"
        assert text[1] == "4 3"
        assert len(text) == 3 + 12


class TestSavePng:
    """Tests for Pillow-backed output."""

    def test_png_round_trip(self, tmp_path):
        image = np.zeros((5, 6, 3), dtype=np.uint8)
        image[0, 0] = (200, 100, 50)
        path = save_image(image, str(tmp_path / "out.png"))

        with PILImage.open(path) as loaded:
            assert loaded.size == (6, 5)
            assert loaded.mode == "RGB"
            assert loaded.getpixel((0, 0)) == (200, 100, 50)
