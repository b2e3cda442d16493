"""
Tests for rotation/mirroring and EXIF orientation handling.
"""

import numpy as np
import pytest
from PIL import Image

from vizor.convert import exif_transform, load_oriented_image, rotate_and_flip
from vizor.convert.orientation import EXIF_ORIENTATION_TAG

IMAGE = np.arange(6).reshape(2, 3)


class TestRotateAndFlip:
    def test_identity_returns_input(self):
        assert rotate_and_flip(IMAGE, 0) is IMAGE

    @pytest.mark.parametrize(
        "degrees,expected",
        [
            (90, [[3, 0], [4, 1], [5, 2]]),
            (180, [[5, 4, 3], [2, 1, 0]]),
            (270, [[2, 5], [1, 4], [0, 3]]),
            (-90, [[2, 5], [1, 4], [0, 3]]),
        ],
    )
    def test_clockwise_rotation(self, degrees, expected):
        assert rotate_and_flip(IMAGE, degrees).tolist() == expected

    def test_flip_x_mirrors_columns(self):
        assert rotate_and_flip(IMAGE, 0, flip_x=True).tolist() == [[2, 1, 0], [5, 4, 3]]

    def test_flip_y_mirrors_rows(self):
        assert rotate_and_flip(IMAGE, 0, flip_y=True).tolist() == [[3, 4, 5], [0, 1, 2]]

    def test_rotation_applied_before_flip(self):
        assert rotate_and_flip(IMAGE, 90, flip_x=True).tolist() == [[0, 3], [1, 4], [2, 5]]

    def test_result_is_a_new_array(self):
        out = rotate_and_flip(IMAGE, 180)
        assert out is not IMAGE
        assert out.flags["C_CONTIGUOUS"]

    def test_color_channels_untouched(self):
        rgb = np.zeros((2, 3, 3), dtype=np.uint8)
        rgb[0, 0] = [1, 2, 3]
        out = rotate_and_flip(rgb, 90)
        assert out.shape == (3, 2, 3)
        assert out[0, 1].tolist() == [1, 2, 3]

    def test_invalid_angle_raises(self):
        with pytest.raises(ValueError):
            rotate_and_flip(IMAGE, 45)


class TestExifOrientation:
    @pytest.mark.parametrize(
        "orientation,expected",
        [
            (1, (0, False, False)),
            (2, (0, True, False)),
            (3, (180, False, False)),
            (4, (0, False, True)),
            (5, (90, True, False)),
            (6, (90, False, False)),
            (7, (-90, True, False)),
            (8, (-90, False, False)),
            (0, (0, False, False)),
        ],
    )
    def test_transform_table(self, orientation, expected):
        assert exif_transform(orientation) == expected

    def test_load_applies_orientation(self, tmp_path):
        path = tmp_path / "rotated.jpg"
        img = Image.new("RGB", (4, 2), (200, 10, 10))
        exif = img.getexif()
        exif[EXIF_ORIENTATION_TAG] = 6
        img.save(path, exif=exif)

        rgb = load_oriented_image(path)
        assert rgb.shape == (4, 2, 3)

    def test_load_without_exif(self, tmp_path):
        path = tmp_path / "plain.png"
        Image.new("RGB", (4, 2), (0, 0, 0)).save(path)
        assert load_oriented_image(path).shape == (2, 4, 3)
