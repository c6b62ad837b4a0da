"""
Brush Stroke Mask Rasterizer.

Converts freehand strokes recorded at display scale into a pixel-exact mask
at the size of the image being edited. The mask starts black ("keep") and
every stroke is drawn in order:

- Paint strokes are drawn white, erase strokes black, so a later stroke
  always wins over an earlier one at the same pixel.
- A single-point stroke is a filled circle of the scaled brush radius.
- A multi-point stroke is a polyline with round caps and round joins whose
  width is twice the scaled brush radius.
- Soft edges add wider, fainter passes around a paint stroke's core to
  feather its outline. They are skipped for erasers and single points.

Example:
    >>> stroke = MaskStroke(points=((10, 10), (40, 40)), brush_radius=5)
    >>> mask = rasterize_strokes([stroke], target_size=(200, 200), source_size=(100, 100))
    >>> mask.size
    (200, 200)
"""

import logging
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from LF_Libs.MaskLib.mask_models import Mask, MaskPolarity, MaskStroke, Point, Size
from LF_Libs.constants import (
    SOFT_EDGE_BASE_OPACITY,
    SOFT_EDGE_OPACITY_STEP,
    SOFT_EDGE_PASSES,
    SOFT_EDGE_WIDTH_STEP,
)

logger = logging.getLogger(__name__)

PAINT_VALUE = 255
KEEP_VALUE = 0


def stroke_scale(target_size: Size, source_size: Optional[Sequence[float]] = None) -> float:
    """
    Scale factor from stroke space to mask pixels.

    Returns 1.0 when no source size is given or its width is not positive.
    """
    if source_size is None or source_size[0] <= 0:
        return 1.0
    return target_size[0] / float(source_size[0])


def rasterize_strokes(
    strokes: Sequence[MaskStroke],
    target_size: Size,
    source_size: Optional[Sequence[float]] = None,
) -> Mask:
    """
    Rasterize brush strokes into a paint-on-white mask.

    Args:
        strokes: Committed strokes, oldest first
        target_size: (width, height) of the mask in pixels
        source_size: (width, height) of the space the strokes were drawn in.
                     Points and brush radii are scaled by
                     target_width / source_width. None means no scaling.

    Returns:
        Mask at target_size; white = paint, black = keep

    Raises:
        ValueError: If target_size is not at least 1x1
    """
    width, height = int(target_size[0]), int(target_size[1])
    if width < 1 or height < 1:
        raise ValueError(f"target_size must be at least 1x1, got {target_size}")

    scale = stroke_scale((width, height), source_size)
    canvas = Image.new("L", (width, height), KEEP_VALUE)

    logger.debug(f"Rasterizing {len(strokes)} strokes at {width}x{height} (scale {scale:.3f})")

    for stroke in strokes:
        points = [(x * scale, y * scale) for x, y in stroke.points]
        core_width = stroke.brush_radius * scale * 2

        core = _stroke_layer((width, height), points, core_width)
        canvas.paste(KEEP_VALUE if stroke.erase else PAINT_VALUE, mask=core)

        if stroke.soft_edges and not stroke.erase and len(points) > 1:
            for opacity, pass_width in _soft_edge_passes(core_width, scale):
                feather = _stroke_layer((width, height), points, pass_width)
                feather = feather.point(lambda v, a=opacity: int(round(v * a)))
                canvas.paste(PAINT_VALUE, mask=feather)

    return Mask(canvas, polarity=MaskPolarity.PAINT_ON_WHITE)


def _soft_edge_passes(core_width: float, scale: float) -> List[Tuple[float, float]]:
    """(opacity, width) for each feathering pass, innermost first."""
    passes = []
    for i in range(1, SOFT_EDGE_PASSES + 1):
        opacity = SOFT_EDGE_BASE_OPACITY - i * SOFT_EDGE_OPACITY_STEP
        if opacity <= 0:
            continue
        passes.append((opacity, core_width + i * SOFT_EDGE_WIDTH_STEP * scale))
    return passes


def _stroke_layer(size: Size, points: List[Point], stroke_width: float) -> "Image.Image":
    """Draw one stroke shape at full strength onto a fresh L layer."""
    layer = Image.new("L", size, 0)
    draw = ImageDraw.Draw(layer)
    radius = stroke_width / 2.0

    if len(points) > 1:
        draw.line(points, fill=255, width=max(1, int(round(stroke_width))), joint="curve")

    # Round caps and joins
    for x, y in points:
        draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=255)

    return layer
