"""
Core image editing operations for Logo Forge.

This module provides the raster transform engine: pure geometric edits over
RasterImage buffers. Each function returns a new image and never mutates its
input.

Edits are always applied in this order:
    crop -> rotate -> flip horizontal -> flip vertical -> pad -> background

Functions:
    apply_edits: Apply every edit in EditParameters in the fixed order
    crop_normalized: Crop to a normalized rectangle
    rotate_image: Rotate clockwise by a multiple of 90 degrees
    flip_image: Mirror along the horizontal or vertical axis
    pad_image: Grow the canvas with a transparent border
    composite_background: Paint a solid color behind the image
    parse_hex_color: Parse "#RRGGBB" / "#RRGGBBAA" into an RGBA tuple
    format_hex_color: Format an RGB(A) tuple as "#RRGGBB"
"""

import logging
from typing import Optional, Sequence, Tuple

from PIL import Image

from LF_Libs.ImageEditingLib.image_models import (
    CropRect,
    EditParameters,
    RasterImage,
    RgbaColor,
    Rotation,
)
from LF_Libs.constants import MAX_CHANNEL_VALUE, TRANSPARENT

logger = logging.getLogger(__name__)

# Pillow's ROTATE_* transpositions turn counter-clockwise
_CLOCKWISE_TRANSPOSE = {
    Rotation.CLOCKWISE_90: Image.Transpose.ROTATE_270,
    Rotation.CLOCKWISE_180: Image.Transpose.ROTATE_180,
    Rotation.CLOCKWISE_270: Image.Transpose.ROTATE_90,
}


def apply_edits(image: RasterImage, params: EditParameters) -> RasterImage:
    """
    Apply all edits from EditParameters to an image.

    Args:
        image: Source image (left untouched)
        params: Edits to apply

    Returns:
        A new RasterImage with every edit applied, or the input itself when
        no edit changes anything
    """
    result = image

    if params.crop_rect is not None:
        result = crop_normalized(result, params.crop_rect)

    if params.rotation != Rotation.NONE:
        result = rotate_image(result, params.rotation)

    if params.flip_horizontal:
        result = flip_image(result, horizontal=True)

    if params.flip_vertical:
        result = flip_image(result, horizontal=False)

    if params.padding > 0:
        result = pad_image(result, params.padding)

    if params.background_color is not None:
        result = composite_background(result, params.background_color)

    return result


def crop_box_for(size: Tuple[int, int], rect: CropRect) -> Optional[Tuple[int, int, int, int]]:
    """
    Convert a normalized crop rectangle to a pixel box clamped to the image.

    Args:
        size: (width, height) of the image in pixels
        rect: Normalized (x, y, width, height)

    Returns:
        (left, top, right, bottom) pixel box, or None if the clamped box is empty
    """
    width, height = size
    x, y, w, h = rect

    left = max(0, min(width, int(round(x * width))))
    top = max(0, min(height, int(round(y * height))))
    right = max(0, min(width, int(round((x + w) * width))))
    bottom = max(0, min(height, int(round((y + h) * height))))

    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom


def crop_normalized(image: RasterImage, rect: CropRect) -> RasterImage:
    """
    Crop an image to a normalized rectangle.

    The rectangle is multiplied by the pixel dimensions of the image and
    intersected with its bounds. An empty intersection leaves the image
    unchanged.
    """
    box = crop_box_for(image.size, rect)
    if box is None:
        logger.debug(f"Crop {rect} is empty after clamping, skipping")
        return image

    if box == (0, 0, image.width, image.height):
        return image

    return RasterImage(image.to_pil().crop(box), has_alpha=image.has_alpha)


def rotate_image(image: RasterImage, rotation: Rotation) -> RasterImage:
    """
    Rotate an image clockwise by a multiple of 90 degrees.

    For 90 and 270 degrees the output width and height are swapped. Right
    angle rotations map every pixel onto a pixel, so no resampling happens.

    Raises:
        ValueError: If rotation is not 0, 90, 180 or 270
    """
    rotation = Rotation(int(rotation))
    if rotation == Rotation.NONE:
        return image

    rotated = image.to_pil().transpose(_CLOCKWISE_TRANSPOSE[rotation])
    return RasterImage(rotated, has_alpha=image.has_alpha)


def flip_image(image: RasterImage, horizontal: bool = True) -> RasterImage:
    """
    Mirror an image.

    Args:
        image: Source image
        horizontal: True mirrors left-right, False mirrors top-bottom
    """
    method = Image.Transpose.FLIP_LEFT_RIGHT if horizontal else Image.Transpose.FLIP_TOP_BOTTOM
    return RasterImage(image.to_pil().transpose(method), has_alpha=image.has_alpha)


def pad_image(image: RasterImage, padding: int) -> RasterImage:
    """
    Add a transparent border of `padding` pixels on all four sides.

    Raises:
        ValueError: If padding is negative
    """
    if padding < 0:
        raise ValueError(f"padding must be >= 0, got {padding}")
    if padding == 0:
        return image

    canvas = Image.new(
        "RGBA",
        (image.width + padding * 2, image.height + padding * 2),
        TRANSPARENT,
    )
    canvas.paste(image.to_pil(), (padding, padding))
    return RasterImage(canvas, has_alpha=True)


def composite_background(image: RasterImage, color: Optional[Sequence[int]]) -> RasterImage:
    """
    Paint a solid color behind the image using source-over compositing.

    A missing or fully transparent color leaves the image unchanged.
    """
    if color is None:
        return image

    rgba = _to_rgba(color)
    if rgba[3] == 0:
        return image

    background = Image.new("RGBA", image.size, rgba)
    result = Image.alpha_composite(background, image.to_pil())
    return RasterImage(result, has_alpha=rgba[3] < MAX_CHANNEL_VALUE)


def parse_hex_color(value: str) -> RgbaColor:
    """
    Parse a hex color string into an RGBA tuple.

    Accepts "#RGB", "#RRGGBB" and "#RRGGBBAA" with or without the leading '#'.

    Raises:
        ValueError: If the string is not a valid hex color
    """
    clean = value.strip().lstrip("#")
    if len(clean) == 3:
        clean = "".join(ch * 2 for ch in clean)
    if len(clean) == 6:
        clean += "ff"
    if len(clean) != 8:
        raise ValueError(f"Invalid hex color: {value!r}")

    try:
        channels = [int(clean[i:i + 2], 16) for i in range(0, 8, 2)]
    except ValueError:
        raise ValueError(f"Invalid hex color: {value!r}")
    return tuple(channels)


def format_hex_color(color: Sequence[int]) -> str:
    """Format the RGB part of a color as an uppercase "#RRGGBB" string."""
    r, g, b = (int(c) for c in color[:3])
    return f"#{r:02X}{g:02X}{b:02X}"


def _to_rgba(color: Sequence[int]) -> RgbaColor:
    channels = tuple(int(c) for c in color)
    if len(channels) == 3:
        channels = channels + (MAX_CHANNEL_VALUE,)
    if len(channels) != 4:
        raise ValueError(f"Expected RGB or RGBA color, got {color}")
    return channels
