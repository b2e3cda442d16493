"""
Tests for the ARGB bitmap to NV21/YV12 encoders.
"""

import numpy as np
import pytest

from vizor.convert import argb_from_rgb, nv21_from_bitmap, yv12_from_bitmap
from vizor.errors import InvalidBufferSize

RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
WHITE = 0xFFFFFFFF


class TestNv21FromBitmap:
    def test_pure_red_known_values(self):
        nv21 = nv21_from_bitmap([RED] * 4, 2, 2)
        # Y = ((66*255 + 128) >> 8) + 16, V and U follow the same integer formulas.
        assert list(nv21.data) == [82, 82, 82, 82, 240, 90]

    def test_white_maps_to_studio_range(self):
        nv21 = nv21_from_bitmap([WHITE] * 4, 2, 2)
        assert list(nv21.data) == [235, 235, 235, 235, 128, 128]

    def test_alpha_is_ignored(self):
        opaque = nv21_from_bitmap([RED] * 4, 2, 2)
        transparent = nv21_from_bitmap([0x00FF0000] * 4, 2, 2)
        assert opaque.data == transparent.data

    def test_negative_words_are_accepted(self):
        # Signed 32-bit ARGB, as handed out by some pixel APIs.
        signed_red = RED - (1 << 32)
        assert nv21_from_bitmap([signed_red] * 4, 2, 2).data == nv21_from_bitmap([RED] * 4, 2, 2).data

    def test_chroma_sampled_at_even_row_and_column(self):
        pixels = [RED, GREEN, BLUE, GREEN,
                  GREEN, GREEN, GREEN, GREEN]
        nv21 = nv21_from_bitmap(pixels, 4, 2)
        # One VU pair from (0, 0) = red and one from (0, 2) = blue.
        assert list(nv21.data[8:]) == [240, 90, 110, 240]

    @pytest.mark.parametrize("width,height", [(1, 1), (3, 3), (5, 2), (4, 7)])
    def test_size_for_odd_dimensions(self, width, height):
        nv21 = nv21_from_bitmap([BLUE] * (width * height), width, height)
        cw, ch = -(-width // 2), -(-height // 2)
        assert len(nv21) == width * height + 2 * cw * ch

    def test_pixel_count_mismatch_raises(self):
        with pytest.raises(InvalidBufferSize):
            nv21_from_bitmap([RED] * 3, 2, 2)


class TestYv12FromBitmap:
    def test_planes_are_contiguous(self):
        pixels = [RED, GREEN, BLUE, GREEN,
                  GREEN, GREEN, GREEN, GREEN]
        yv12 = yv12_from_bitmap(pixels, 4, 2)
        assert list(yv12.data[8:]) == [240, 110, 90, 240]

    def test_same_length_as_nv21(self):
        assert len(yv12_from_bitmap([RED] * 15, 5, 3)) == len(nv21_from_bitmap([RED] * 15, 5, 3))


class TestArgbFromRgb:
    def test_packs_opaque_words(self):
        rgb = np.array([[[255, 0, 0], [1, 2, 3]]], dtype=np.uint8)
        assert argb_from_rgb(rgb).tolist() == [RED, 0xFF010203]

    def test_rejects_grayscale(self):
        with pytest.raises(InvalidBufferSize):
            argb_from_rgb(np.zeros((2, 2), dtype=np.uint8))
