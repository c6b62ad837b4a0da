"""
MaskLib - Brush masks and mask-based compositing

This module turns freehand strokes into pixel masks, converts masks between
polarity conventions and blends edited regions back into an original image.
"""

from LF_Libs.MaskLib.mask_models import (
    Mask,
    MaskCanvasState,
    MaskPolarity,
    MaskStroke,
)
from LF_Libs.MaskLib.mask_rasterizer import rasterize_strokes, stroke_scale
from LF_Libs.MaskLib.mask_compositor import (
    to_polarity,
    convert_polarity,
    composite_preserving_alpha,
    merge_inpainted,
)

__all__ = [
    "Mask",
    "MaskCanvasState",
    "MaskPolarity",
    "MaskStroke",
    "rasterize_strokes",
    "stroke_scale",
    "to_polarity",
    "convert_polarity",
    "composite_preserving_alpha",
    "merge_inpainted",
]
