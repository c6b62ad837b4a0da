"""
ImageEditingLib - Core image editing functionality

This module provides the raster image model, the geometric transform
engine and edit history for the Logo Forge imaging core.
"""

from LF_Libs.ImageEditingLib.image_models import (
    CropRect,
    EditParameters,
    RasterImage,
    RgbaColor,
    Rotation,
)
from LF_Libs.ImageEditingLib.image_editing_ops import (
    apply_edits,
    crop_normalized,
    rotate_image,
    flip_image,
    pad_image,
    composite_background,
    parse_hex_color,
    format_hex_color,
)
from LF_Libs.ImageEditingLib.edit_history import EditHistory

__all__ = [
    "CropRect",
    "EditParameters",
    "RasterImage",
    "RgbaColor",
    "Rotation",
    "apply_edits",
    "crop_normalized",
    "rotate_image",
    "flip_image",
    "pad_image",
    "composite_background",
    "parse_hex_color",
    "format_hex_color",
    "EditHistory",
]
