"""
Image editing data models for Logo Forge.

This module defines core data structures used throughout the imaging core.

Classes:
    RasterImage: Immutable RGBA pixel buffer shared by every pipeline stage
    Rotation: Clockwise rotation in 90 degree steps
    EditParameters: Geometric and background edits applied to an image

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    CropRect: A normalized (x, y, width, height) tuple, each in [0, 1]
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np
from PIL import Image

from LF_Libs.constants import MAX_CHANNEL_VALUE

RgbaColor = Tuple[int, int, int, int]
CropRect = Tuple[float, float, float, float]

_ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


@dataclass(frozen=True, eq=False)
class RasterImage:
    """
    Owned RGBA pixel buffer.

    The wrapped Pillow image is always in RGBA mode and is never handed out
    directly: constructors copy their input and accessors return copies, so
    two RasterImage instances never share pixel memory.

    Attributes:
        has_alpha: Whether the buffer carries a meaningful alpha channel.
                   False for images decoded from opaque formats or produced
                   by alpha stripping; encoders then write RGB output.
    """
    _image: Any = field(repr=False)
    has_alpha: bool = True

    def __post_init__(self):
        """Ensure the wrapped buffer is an RGBA Pillow image."""
        if not isinstance(self._image, Image.Image):
            raise TypeError(f"Expected PIL Image, got {type(self._image)}")
        if self._image.mode != "RGBA":
            object.__setattr__(self, "_image", self._image.convert("RGBA"))

    @classmethod
    def from_pil(cls, image: Any) -> "RasterImage":
        """
        Create a RasterImage from any Pillow image.

        Args:
            image: PIL Image in any mode

        Returns:
            New RasterImage holding an RGBA copy of the pixels

        Raises:
            TypeError: If image is not a PIL Image
        """
        if not isinstance(image, Image.Image):
            raise TypeError(f"Expected PIL Image, got {type(image)}")

        has_alpha = image.mode in _ALPHA_MODES or (
            image.mode == "P" and "transparency" in image.info
        )
        return cls(image.convert("RGBA"), has_alpha=has_alpha)

    @classmethod
    def from_array(cls, array: Any, has_alpha: bool = True) -> "RasterImage":
        """
        Create a RasterImage from an (H, W, 4) or (H, W, 3) uint8 array.
        """
        data = np.asarray(array)
        if data.ndim != 3 or data.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) array, got shape {data.shape}")

        data = np.clip(data, 0, MAX_CHANNEL_VALUE).astype(np.uint8)
        if data.shape[2] == 3:
            alpha = np.full(data.shape[:2] + (1,), MAX_CHANNEL_VALUE, dtype=np.uint8)
            data = np.concatenate([data, alpha], axis=2)
            has_alpha = False

        return cls(Image.fromarray(data), has_alpha=has_alpha)

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        color: RgbaColor = (0, 0, 0, 0),
    ) -> "RasterImage":
        """Create a solid-color image."""
        if width < 1 or height < 1:
            raise ValueError(f"Image size must be at least 1x1, got {width}x{height}")
        return cls(Image.new("RGBA", (width, height), tuple(color)))

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    @property
    def has_transparency(self) -> bool:
        """True if any pixel has alpha below 255."""
        alpha = self._image.getchannel("A")
        return alpha.getextrema()[0] < MAX_CHANNEL_VALUE

    def to_pil(self) -> Any:
        """Return an RGBA Pillow copy of the pixels."""
        return self._image.copy()

    def to_array(self) -> np.ndarray:
        """Return an (H, W, 4) uint8 copy of the pixels."""
        return np.array(self._image, dtype=np.uint8)

    def pixel(self, x: int, y: int) -> RgbaColor:
        return self._image.getpixel((x, y))

    def with_alpha_flag(self, has_alpha: bool) -> "RasterImage":
        return RasterImage(self._image.copy(), has_alpha=has_alpha)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return (
            self.size == other.size
            and self._image.tobytes() == other._image.tobytes()
        )

    def __hash__(self) -> int:
        return hash((self.size, self._image.tobytes()))


class Rotation(IntEnum):
    """Clockwise rotation in 90 degree steps."""
    NONE = 0
    CLOCKWISE_90 = 90
    CLOCKWISE_180 = 180
    CLOCKWISE_270 = 270

    @property
    def swaps_dimensions(self) -> bool:
        return self in (Rotation.CLOCKWISE_90, Rotation.CLOCKWISE_270)

    def rotated_clockwise(self) -> "Rotation":
        return Rotation((self.value + 90) % 360)

    def rotated_counter_clockwise(self) -> "Rotation":
        return Rotation((self.value + 270) % 360)


@dataclass(frozen=True)
class EditParameters:
    """Edits applied to an image by the transform engine.

    Attributes:
        background_color: RGBA fill painted behind the image (None = transparent)
        padding: Pixels added on every side (>= 0)
        rotation: Clockwise rotation in 90 degree steps
        flip_horizontal: Mirror left-right
        flip_vertical: Mirror top-bottom
        crop_rect: Optional normalized (x, y, width, height) crop, top-left origin
    """
    background_color: Optional[RgbaColor] = None
    padding: int = 0
    rotation: Rotation = Rotation.NONE
    flip_horizontal: bool = False
    flip_vertical: bool = False
    crop_rect: Optional[CropRect] = None

    def __post_init__(self):
        """Validate and normalize edit parameters."""
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")

        try:
            if int(self.rotation) != self.rotation:
                raise ValueError(f"non-integral rotation {self.rotation}")
            object.__setattr__(self, "rotation", Rotation(int(self.rotation)))
        except (TypeError, ValueError):
            raise ValueError(
                f"rotation must be one of 0, 90, 180, 270, got {self.rotation}"
            )

        if self.background_color is not None:
            color = tuple(int(c) for c in self.background_color)
            if len(color) == 3:
                color = color + (MAX_CHANNEL_VALUE,)
            if len(color) != 4 or not all(0 <= c <= MAX_CHANNEL_VALUE for c in color):
                raise ValueError(f"Invalid background color: {self.background_color}")
            object.__setattr__(self, "background_color", color)

        if self.crop_rect is not None:
            rect = tuple(float(v) for v in self.crop_rect)
            if len(rect) != 4:
                raise ValueError(f"crop_rect must have 4 values, got {self.crop_rect}")
            if rect[2] < 0 or rect[3] < 0:
                raise ValueError(f"crop_rect width/height must be >= 0, got {self.crop_rect}")
            object.__setattr__(self, "crop_rect", rect)

    @property
    def has_changes(self) -> bool:
        """Whether any edit differs from the defaults."""
        return self != EditParameters()

    def with_changes(self, **changes: Any) -> "EditParameters":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "background_color": list(self.background_color) if self.background_color else None,
            "padding": self.padding,
            "rotation": int(self.rotation),
            "flip_horizontal": self.flip_horizontal,
            "flip_vertical": self.flip_vertical,
            "crop_rect": list(self.crop_rect) if self.crop_rect else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditParameters":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                   if k in cls.__dataclass_fields__}
        return cls(**filtered)
