"""
Mask data models for Logo Forge.

Classes:
    MaskPolarity: Which brightness means "paint here"
    MaskStroke: One committed freehand brush stroke
    Mask: Single-channel mask buffer tagged with its polarity
    MaskCanvasState: Stroke authoring session (append, undo, clear)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from LF_Libs.constants import DEFAULT_BRUSH_RADIUS, MASK_MIDPOINT

Point = Tuple[float, float]
Size = Tuple[int, int]


class MaskPolarity(Enum):
    """Convention mapping "paint here" to a mask color."""
    PAINT_ON_WHITE = "paint_on_white"
    PAINT_ON_BLACK = "paint_on_black"

    def opposite(self) -> "MaskPolarity":
        if self is MaskPolarity.PAINT_ON_WHITE:
            return MaskPolarity.PAINT_ON_BLACK
        return MaskPolarity.PAINT_ON_WHITE


@dataclass(frozen=True)
class MaskStroke:
    """A single committed brush stroke.

    Attributes:
        points: Stroke points in the coordinate space they were drawn in
        brush_radius: Brush radius in that same space
        erase: Clear previously painted area instead of painting
        soft_edges: Feather the stroke outline (paint strokes only)
    """
    points: Tuple[Point, ...]
    brush_radius: float = DEFAULT_BRUSH_RADIUS
    erase: bool = False
    soft_edges: bool = False

    def __post_init__(self):
        points = tuple((float(x), float(y)) for x, y in self.points)
        if not points:
            raise ValueError("MaskStroke requires at least one point")
        if self.brush_radius <= 0:
            raise ValueError(f"brush_radius must be > 0, got {self.brush_radius}")
        object.__setattr__(self, "points", points)


@dataclass(frozen=True, eq=False)
class Mask:
    """
    Single-channel (L mode) mask at the pixel size of its target image.

    Attributes:
        polarity: Whether white or black marks the painted region
    """
    _image: Any = field(repr=False)
    polarity: MaskPolarity = MaskPolarity.PAINT_ON_WHITE

    @classmethod
    def from_image(
        cls,
        image: Any,
        polarity: MaskPolarity = MaskPolarity.PAINT_ON_WHITE,
    ) -> "Mask":
        """
        Create a mask from a Pillow image of any mode.

        Color images are reduced to their luminance.
        """
        if not isinstance(image, Image.Image):
            raise TypeError(f"Expected PIL Image for mask, got {type(image)}")
        if image.mode in ("RGBA", "LA"):
            image = image.convert("RGB")
        return cls(image.convert("L"), polarity=polarity)

    @classmethod
    def from_array(
        cls,
        array: Any,
        polarity: MaskPolarity = MaskPolarity.PAINT_ON_WHITE,
    ) -> "Mask":
        data = np.asarray(array)
        if data.ndim != 2:
            raise ValueError(f"Expected (H, W) array, got shape {data.shape}")
        return cls(Image.fromarray(np.clip(data, 0, 255).astype(np.uint8)), polarity=polarity)

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        polarity: MaskPolarity = MaskPolarity.PAINT_ON_WHITE,
    ) -> "Mask":
        """Create a mask that keeps everything."""
        keep = 0 if polarity is MaskPolarity.PAINT_ON_WHITE else 255
        return cls(Image.new("L", (width, height), keep), polarity=polarity)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> Size:
        return self._image.size

    def to_pil(self) -> Any:
        """Return an L mode Pillow copy of the mask."""
        return self._image.copy()

    def to_array(self) -> np.ndarray:
        """Return an (H, W) uint8 copy of the mask values."""
        return np.array(self._image, dtype=np.uint8)

    def bright_region(self) -> np.ndarray:
        """Boolean array of pixels brighter than the midpoint."""
        return self.to_array().astype(np.float32) > MASK_MIDPOINT

    def painted_region(self) -> np.ndarray:
        """Boolean array of pixels marked "paint here" under this polarity."""
        bright = self.bright_region()
        if self.polarity is MaskPolarity.PAINT_ON_WHITE:
            return bright
        return ~bright

    def is_binary(self) -> bool:
        values = np.unique(self.to_array())
        return bool(np.all(np.isin(values, (0, 255))))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mask):
            return NotImplemented
        return (
            self.polarity is other.polarity
            and self.size == other.size
            and self._image.tobytes() == other._image.tobytes()
        )

    def __hash__(self) -> int:
        return hash((self.polarity, self.size, self._image.tobytes()))


class MaskCanvasState:
    """
    Tracks a mask painting session: brush settings and committed strokes.

    Strokes are append-only. A stroke is built point by point while the
    brush is down and becomes an immutable MaskStroke on finish_stroke().
    """

    def __init__(
        self,
        brush_radius: float = DEFAULT_BRUSH_RADIUS,
        erasing: bool = False,
        soft_edges: bool = True,
    ):
        self.brush_radius = brush_radius
        self.erasing = erasing
        self.soft_edges = soft_edges
        self._strokes: List[MaskStroke] = []
        self._current_points: Optional[List[Point]] = None

    @property
    def strokes(self) -> Tuple[MaskStroke, ...]:
        return tuple(self._strokes)

    @property
    def has_mask(self) -> bool:
        """Whether any stroke is committed or in progress."""
        return bool(self._strokes) or self._current_points is not None

    def begin_stroke(self, point: Point) -> None:
        """Start a new stroke, committing any stroke still in progress."""
        if self._current_points is not None:
            self.finish_stroke()
        self._current_points = [point]

    def add_point(self, point: Point) -> None:
        if self._current_points is None:
            self.begin_stroke(point)
        else:
            self._current_points.append(point)

    def finish_stroke(self) -> Optional[MaskStroke]:
        """Commit the stroke in progress with the current brush settings."""
        if self._current_points is None:
            return None

        stroke = MaskStroke(
            points=tuple(self._current_points),
            brush_radius=self.brush_radius,
            erase=self.erasing,
            soft_edges=self.soft_edges,
        )
        self._strokes.append(stroke)
        self._current_points = None
        return stroke

    def add_stroke(self, stroke: MaskStroke) -> None:
        self._strokes.append(stroke)

    def undo_last_stroke(self) -> Optional[MaskStroke]:
        """Remove and return the most recent committed stroke."""
        if not self._strokes:
            return None
        return self._strokes.pop()

    def clear(self) -> None:
        self._strokes.clear()
        self._current_points = None

    def generate_mask(self, target_size: Size, source_size: Optional[Sequence[float]] = None) -> Mask:
        """Rasterize the committed strokes at the target pixel size."""
        from LF_Libs.MaskLib.mask_rasterizer import rasterize_strokes

        return rasterize_strokes(self._strokes, target_size, source_size)
