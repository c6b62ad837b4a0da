"""
LF_Libs - Logo Forge Library Modules

This package contains the local image-processing core of Logo Forge,
organized into specialized sub-packages:

- ImageEditingLib: Raster image model, geometric edits and edit history
- MaskLib: Brush stroke masks, polarity conversion and alpha-aware compositing
- PaletteLib: Dominant color extraction via k-means clustering
- ExportLib: Platform icon bundles, manifests and the ICO container
"""

__version__ = "0.1.0"
