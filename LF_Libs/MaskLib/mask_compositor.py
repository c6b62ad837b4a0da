"""
Mask Polarity Conversion and Alpha-Preserving Compositor.

Image-generation back-ends disagree on which mask color means "paint here".
Masks carry an explicit MaskPolarity and are only ever converted through the
named functions below.

The compositor blends an externally edited (often flattened, fully opaque)
image back into the original: painted pixels take the edited RGB but keep
the original alpha, every other pixel is the original untouched.

Functions:
    to_polarity: Binarize a mask, optionally swapping black and white
    convert_polarity: Binarize a mask into a requested polarity
    composite_preserving_alpha: Blend edited RGB into the original by mask
    merge_inpainted: Composite only when the original has transparency
"""

import logging
from typing import Tuple

import numpy as np
from PIL import Image

from LF_Libs.ImageEditingLib.image_models import RasterImage
from LF_Libs.MaskLib.mask_models import Mask, MaskPolarity

logger = logging.getLogger(__name__)


def to_polarity(mask: Mask, inverted: bool = False) -> Mask:
    """
    Produce a strictly binary mask.

    Pixels brighter than the midpoint are classified "painted". Painted
    pixels become 255 and all others 0; with inverted=True the mapping is
    swapped and the polarity label flips with it.

    Args:
        mask: Source mask (soft or binary)
        inverted: Swap black and white in the output

    Returns:
        New Mask containing only 0 and 255
    """
    bright = mask.bright_region()
    if inverted:
        bright = ~bright

    values = np.where(bright, 255, 0).astype(np.uint8)
    polarity = mask.polarity.opposite() if inverted else mask.polarity
    return Mask(Image.fromarray(values), polarity=polarity)


def convert_polarity(mask: Mask, target: MaskPolarity) -> Mask:
    """
    Binarize a mask into the target polarity.

    The painted region is preserved; pixels are inverted only when the
    mask's current polarity differs from the target.
    """
    return to_polarity(mask, inverted=mask.polarity is not target)


def composite_preserving_alpha(
    original: RasterImage,
    edited: RasterImage,
    mask: Mask,
) -> RasterImage:
    """
    Blend an edited image into the original using a mask.

    - Painted pixels: RGB from edited, alpha from original
    - Other pixels: original pixel entirely (RGB and alpha)

    When edited or mask have other pixel dimensions than original, they are
    sampled by proportional nearest index.

    Args:
        original: Image being edited; defines the output size
        edited: Externally produced result
        mask: Region to take from edited, interpreted by its polarity

    Returns:
        New RasterImage at the original size

    Raises:
        TypeError: If inputs are of the wrong type
    """
    if not isinstance(original, RasterImage) or not isinstance(edited, RasterImage):
        raise TypeError("original and edited must be RasterImage instances")
    if not isinstance(mask, Mask):
        raise TypeError(f"Expected Mask, got {type(mask)}")

    width, height = original.size
    base = original.to_array()
    edited_pixels = _sample_nearest(edited.to_array(), (width, height))
    painted = _sample_nearest(mask.painted_region(), (width, height))

    result = base.copy()
    result[painted, :3] = edited_pixels[painted, :3]

    logger.debug(f"Composited {int(painted.sum())} of {width * height} pixels from edited image")
    return RasterImage(Image.fromarray(result), has_alpha=original.has_alpha)


def merge_inpainted(
    original: RasterImage,
    inpainted: RasterImage,
    mask: Mask,
    preserve_transparency: bool = True,
) -> RasterImage:
    """
    Merge an inpainting result with its source image.

    The alpha-preserving composite is only applied when requested and the
    original actually contains transparent pixels; otherwise the inpainted
    result is returned as delivered.
    """
    if preserve_transparency and original.has_transparency:
        return composite_preserving_alpha(original, inpainted, mask)
    return inpainted


def _sample_nearest(array: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """Resample rows/columns of array to (width, height) by proportional index."""
    width, height = size
    src_height, src_width = array.shape[:2]
    if (src_width, src_height) == (width, height):
        return array

    cols = np.arange(width) * src_width // width
    rows = np.arange(height) * src_height // height
    return array[rows[:, None], cols[None, :]]
