"""
Tests for mask polarity conversion and the alpha-preserving compositor.

Tests cover:
- Binarization and inversion
- Polarity conversion
- Full-cover and empty masks
- Mismatched edited/mask sizes
- merge_inpainted transparency handling
"""

import unittest

import numpy as np
from PIL import Image

from LF_Libs.ImageEditingLib.image_models import RasterImage
from LF_Libs.MaskLib.mask_compositor import (
    composite_preserving_alpha,
    convert_polarity,
    merge_inpainted,
    to_polarity,
)
from LF_Libs.MaskLib.mask_models import Mask, MaskPolarity, MaskStroke
from LF_Libs.MaskLib.mask_rasterizer import rasterize_strokes


def _half_transparent_logo():
    """16x16 red logo whose left half is transparent."""
    data = np.zeros((16, 16, 4), dtype=np.uint8)
    data[:, :, 0] = 255
    data[:, 8:, 3] = 255
    return RasterImage.from_array(data)


class TestToPolarity(unittest.TestCase):
    """Test to_polarity binarization."""

    def setUp(self):
        self.soft = Mask.from_array(np.array([[0, 100, 128], [200, 255, 127]]))

    def test_thresholds_at_midpoint(self):
        result = to_polarity(self.soft)

        np.testing.assert_array_equal(
            result.to_array(), np.array([[0, 0, 255], [255, 255, 0]])
        )
        self.assertTrue(result.is_binary())
        self.assertEqual(result.polarity, MaskPolarity.PAINT_ON_WHITE)

    def test_inverted_swaps_values_and_polarity(self):
        result = to_polarity(self.soft, inverted=True)

        np.testing.assert_array_equal(
            result.to_array(), np.array([[255, 255, 0], [0, 0, 255]])
        )
        self.assertEqual(result.polarity, MaskPolarity.PAINT_ON_BLACK)

    def test_double_inversion_is_identity_for_binary_masks(self):
        binary = Mask.from_array(np.array([[0, 255], [255, 0]]))

        once = to_polarity(binary, inverted=True)
        twice = to_polarity(once, inverted=True)

        self.assertEqual(twice, binary)

    def test_inversion_keeps_painted_region(self):
        mask = rasterize_strokes([MaskStroke(points=((8, 8),), brush_radius=3)], (16, 16))

        inverted = to_polarity(mask, inverted=True)

        np.testing.assert_array_equal(inverted.painted_region(), mask.painted_region())

    def test_convert_polarity(self):
        mask = Mask.from_array(np.array([[0, 255]]))

        converted = convert_polarity(mask, MaskPolarity.PAINT_ON_BLACK)
        self.assertEqual(converted.polarity, MaskPolarity.PAINT_ON_BLACK)
        np.testing.assert_array_equal(converted.to_array(), np.array([[255, 0]]))

        unchanged = convert_polarity(mask, MaskPolarity.PAINT_ON_WHITE)
        self.assertEqual(unchanged, mask)


class TestCompositePreservingAlpha(unittest.TestCase):
    """Test composite_preserving_alpha."""

    def setUp(self):
        self.original = _half_transparent_logo()
        self.edited = RasterImage.new(16, 16, (0, 255, 0, 255))

    def test_full_cover_takes_edited_rgb_and_original_alpha(self):
        mask = Mask.from_array(np.full((16, 16), 255))

        result = composite_preserving_alpha(self.original, self.edited, mask)
        pixels = result.to_array()

        np.testing.assert_array_equal(pixels[:, :, :3], self.edited.to_array()[:, :, :3])
        np.testing.assert_array_equal(pixels[:, :, 3], self.original.to_array()[:, :, 3])

    def test_full_cover_brush_stroke_with_scaled_canvas(self):
        """A stroke drawn on a half-size canvas still covers every pixel."""
        original_data = np.zeros((20, 30, 4), dtype=np.uint8)
        original_data[:, :, 0] = 255
        original_data[:, 15:, 3] = 255
        original_data[:5, :15, 3] = 128
        original = RasterImage.from_array(original_data)
        edited = RasterImage.new(60, 40, (0, 255, 0, 255))

        stroke = MaskStroke(points=((7, 5),), brush_radius=20)
        mask = rasterize_strokes([stroke], (30, 20), source_size=(15, 10))
        self.assertTrue(mask.painted_region().all())

        result = composite_preserving_alpha(original, edited, mask)
        pixels = result.to_array()

        self.assertEqual(result.size, (30, 20))
        self.assertTrue((pixels[:, :, :3] == (0, 255, 0)).all())
        np.testing.assert_array_equal(pixels[:, :, 3], original_data[:, :, 3])

    def test_empty_mask_returns_original(self):
        mask = rasterize_strokes([], (16, 16))

        result = composite_preserving_alpha(self.original, self.edited, mask)

        self.assertEqual(result, self.original)

    def test_partial_mask(self):
        mask_data = np.zeros((16, 16))
        mask_data[:4, :] = 255
        mask = Mask.from_array(mask_data)

        result = composite_preserving_alpha(self.original, self.edited, mask)

        self.assertEqual(result.pixel(12, 1), (0, 255, 0, 255))
        self.assertEqual(result.pixel(2, 1), (0, 255, 0, 0))
        self.assertEqual(result.pixel(12, 10), (255, 0, 0, 255))

    def test_paint_on_black_mask(self):
        mask = Mask.from_array(np.zeros((16, 16)), polarity=MaskPolarity.PAINT_ON_BLACK)

        result = composite_preserving_alpha(self.original, self.edited, mask)

        self.assertEqual(result.pixel(12, 12), (0, 255, 0, 255))

    def test_mismatched_sizes_are_sampled(self):
        """A larger edited image and a smaller mask still map by position."""
        edited_data = np.zeros((32, 32, 4), dtype=np.uint8)
        edited_data[:, :, 2] = 255
        edited_data[:, :, 3] = 255
        edited = RasterImage.from_array(edited_data)

        mask_data = np.zeros((8, 8))
        mask_data[:, 4:] = 255
        mask = Mask.from_array(mask_data)

        result = composite_preserving_alpha(self.original, edited, mask)

        self.assertEqual(result.size, (16, 16))
        self.assertEqual(result.pixel(15, 0), (0, 0, 255, 255))
        self.assertEqual(result.pixel(0, 0), self.original.pixel(0, 0))

    def test_wrong_types_raise(self):
        mask = Mask.blank(16, 16)
        with self.assertRaises(TypeError):
            composite_preserving_alpha(Image.new("RGBA", (16, 16)), self.edited, mask)
        with self.assertRaises(TypeError):
            composite_preserving_alpha(self.original, self.edited, "mask")


class TestMergeInpainted(unittest.TestCase):
    """Test merge_inpainted."""

    def setUp(self):
        self.edited = RasterImage.new(16, 16, (0, 255, 0, 255))
        self.mask = Mask.from_array(np.full((16, 16), 255))

    def test_transparent_original_keeps_alpha(self):
        original = _half_transparent_logo()

        result = merge_inpainted(original, self.edited, self.mask)

        self.assertEqual(result.pixel(0, 0)[3], 0)
        self.assertEqual(result.pixel(0, 0)[:3], (0, 255, 0))

    def test_opaque_original_returns_inpainted(self):
        original = RasterImage.new(16, 16, (255, 0, 0, 255))

        result = merge_inpainted(original, self.edited, self.mask)

        self.assertIs(result, self.edited)

    def test_preserve_disabled(self):
        result = merge_inpainted(_half_transparent_logo(), self.edited, self.mask,
                                 preserve_transparency=False)

        self.assertIs(result, self.edited)


if __name__ == "__main__":
    unittest.main()
