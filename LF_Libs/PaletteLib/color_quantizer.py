"""
Dominant Color Extraction.

Extracts a ranked palette of dominant colors using k-means clustering on a
downsampled copy of the image.

Algorithm:
    1. Downsample to a 50x50 grid and drop pixels under 50% alpha
    2. k-means with k = max_colors + 2, centroids seeded from k random
       samples, 10 rounds of nearest-centroid assignment (Euclidean RGB)
       and per-channel integer mean updates
    3. Drop clusters covering less than 1% of the samples
    4. Drop colors closer than 30 to an earlier kept color
    5. Sort by descending coverage and keep the top max_colors

Clustering is reproducible: the generator is seeded with
DEFAULT_PALETTE_SEED unless the caller passes another seed (or None for
a fresh random seed on every call).

Example:
    >>> image = RasterImage.new(64, 64, (200, 30, 30, 255))
    >>> palette = extract_palette(image, max_colors=4)
    >>> palette.hex_codes()
    ['#C81E1E']
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from PIL import Image
from scipy.spatial.distance import cdist

from LF_Libs.ImageEditingLib.image_editing_ops import format_hex_color
from LF_Libs.ImageEditingLib.image_models import RasterImage
from LF_Libs.constants import (
    DEFAULT_MAX_COLORS,
    DEFAULT_PALETTE_SEED,
    MAX_CHANNEL_VALUE,
    PALETTE_DUPLICATE_DISTANCE,
    PALETTE_EXTRA_CLUSTERS,
    PALETTE_ITERATIONS,
    PALETTE_MIN_ALPHA,
    PALETTE_MIN_COVERAGE,
    PALETTE_SAMPLE_SIZE,
)

logger = logging.getLogger(__name__)

RgbColor = Tuple[int, int, int]


@dataclass(frozen=True)
class ColorSwatch:
    """One extracted color.

    Attributes:
        rgb: (R, G, B) tuple, 0-255
        coverage: Fraction of sampled pixels assigned to this color (0.0-1.0)
    """
    rgb: RgbColor
    coverage: float

    @property
    def hex(self) -> str:
        """Uppercase "#RRGGBB" form."""
        return format_hex_color(self.rgb)

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return self.rgb + (MAX_CHANNEL_VALUE,)


@dataclass(frozen=True)
class Palette:
    """Swatches ordered by descending coverage."""
    swatches: Tuple[ColorSwatch, ...] = ()
    extracted_at: datetime = field(default_factory=datetime.now, compare=False)

    def __len__(self) -> int:
        return len(self.swatches)

    def __iter__(self):
        return iter(self.swatches)

    @property
    def is_empty(self) -> bool:
        return not self.swatches

    def hex_codes(self) -> List[str]:
        return [swatch.hex for swatch in self.swatches]


@dataclass
class QuantizerConfig:
    """Tuning knobs for palette extraction.

    Attributes:
        sample_size: (width, height) grid the image is downsampled to
        iterations: Number of k-means rounds
        extra_clusters: Clusters computed beyond max_colors
        min_alpha: Pixels with lower alpha are ignored (0-255)
        min_coverage: Clusters below this coverage are dropped
        duplicate_distance: Colors closer than this (RGB Euclidean) are merged
    """
    sample_size: Tuple[int, int] = PALETTE_SAMPLE_SIZE
    iterations: int = PALETTE_ITERATIONS
    extra_clusters: int = PALETTE_EXTRA_CLUSTERS
    min_alpha: int = PALETTE_MIN_ALPHA
    min_coverage: float = PALETTE_MIN_COVERAGE
    duplicate_distance: float = PALETTE_DUPLICATE_DISTANCE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["sample_size"] = list(self.sample_size)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuantizerConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                   if k in cls.__dataclass_fields__}
        if "sample_size" in filtered:
            filtered["sample_size"] = tuple(filtered["sample_size"])
        return cls(**filtered)


def extract_palette(
    image: RasterImage,
    max_colors: int = DEFAULT_MAX_COLORS,
    seed: Optional[int] = DEFAULT_PALETTE_SEED,
    config: Optional[QuantizerConfig] = None,
) -> Palette:
    """
    Extract dominant colors from an image.

    Args:
        image: Source image
        max_colors: Maximum number of swatches to return (>= 1)
        seed: Seed for centroid initialization; None draws a fresh seed
        config: Optional tuning overrides

    Returns:
        Palette sorted by descending coverage, at most max_colors long.
        Empty if the image has no sufficiently opaque pixels.

    Raises:
        ValueError: If max_colors < 1
        TypeError: If image is not a RasterImage
    """
    if not isinstance(image, RasterImage):
        raise TypeError(f"Expected RasterImage, got {type(image)}")
    if max_colors < 1:
        raise ValueError(f"max_colors must be >= 1, got {max_colors}")

    config = config or QuantizerConfig()
    pixels = sample_pixels(image, config)
    if len(pixels) == 0:
        logger.warning("No opaque pixels to extract colors from")
        return Palette()

    rng = np.random.default_rng(seed)
    centroids, counts = kmeans(pixels, max_colors + config.extra_clusters, config.iterations, rng)

    total = float(len(pixels))
    candidates = [
        ColorSwatch(rgb=tuple(int(c) for c in centroid), coverage=float(count / total))
        for centroid, count in zip(centroids, counts)
        if count / total >= config.min_coverage
    ]

    distinct = filter_similar_colors(candidates, config.duplicate_distance)
    ranked = sorted(distinct, key=lambda swatch: swatch.coverage, reverse=True)
    return Palette(swatches=tuple(ranked[:max_colors]))


def sample_pixels(image: RasterImage, config: Optional[QuantizerConfig] = None) -> np.ndarray:
    """
    Downsample an image and return its sufficiently opaque pixels.

    Returns:
        (N, 3) int64 array of RGB samples
    """
    config = config or QuantizerConfig()
    small = image.to_pil().resize(config.sample_size, Image.Resampling.BILINEAR)
    data = np.array(small, dtype=np.int64).reshape(-1, 4)
    return data[data[:, 3] >= config.min_alpha, :3]


def kmeans(
    pixels: np.ndarray,
    k: int,
    iterations: int,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integer k-means over RGB samples.

    Args:
        pixels: (N, 3) int array of samples
        k: Number of clusters (capped at N)
        iterations: Number of assign/update rounds
        rng: Generator used to pick the initial centroids

    Returns:
        Tuple of ((k, 3) int centroids, (k,) assigned sample counts)
    """
    k = min(k, len(pixels))
    initial = rng.choice(len(pixels), size=k, replace=False)
    centroids = pixels[initial].astype(np.int64)

    logger.debug(f"Running k-means on {len(pixels)} samples with k={k}")

    for _ in range(iterations):
        labels = _nearest_centroid(pixels, centroids)
        for idx in range(k):
            members = pixels[labels == idx]
            # Empty clusters keep their centroid
            if len(members):
                centroids[idx] = members.sum(axis=0) // len(members)

    labels = _nearest_centroid(pixels, centroids)
    counts = np.bincount(labels, minlength=k)
    return centroids, counts


def filter_similar_colors(
    swatches: List[ColorSwatch],
    threshold: float = PALETTE_DUPLICATE_DISTANCE,
) -> List[ColorSwatch]:
    """Keep the first of every group of colors closer than threshold."""
    kept: List[ColorSwatch] = []
    for swatch in swatches:
        if not any(color_distance(swatch.rgb, other.rgb) < threshold for other in kept):
            kept.append(swatch)
    return kept


def color_distance(a: RgbColor, b: RgbColor) -> float:
    """Euclidean distance in RGB space."""
    return float(np.linalg.norm(np.subtract(a, b, dtype=np.float64)))


def _nearest_centroid(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    # argmin returns the first index on ties
    distances = cdist(pixels.astype(np.float64), centroids.astype(np.float64))
    return np.argmin(distances, axis=1)
