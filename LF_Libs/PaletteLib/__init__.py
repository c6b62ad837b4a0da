"""
PaletteLib - Dominant color extraction

This module extracts ranked color palettes from images with k-means
clustering.
"""

from LF_Libs.PaletteLib.color_quantizer import (
    ColorSwatch,
    Palette,
    QuantizerConfig,
    extract_palette,
    sample_pixels,
    kmeans,
    filter_similar_colors,
    color_distance,
)

__all__ = [
    "ColorSwatch",
    "Palette",
    "QuantizerConfig",
    "extract_palette",
    "sample_pixels",
    "kmeans",
    "filter_similar_colors",
    "color_distance",
]
