"""
Pytest configuration and shared fixtures for Logo Forge tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest
from PIL import Image

from LF_Libs.ImageEditingLib.image_models import RasterImage


@pytest.fixture
def red_image():
    """Solid opaque red 10x10 image."""
    return RasterImage.new(10, 10, (255, 0, 0, 255))


@pytest.fixture
def patterned_image():
    """
    Small 4x3 image where every pixel is different.

    Used to check pixel positions after geometric transforms.
    """
    data = np.zeros((3, 4, 4), dtype=np.uint8)
    for y in range(3):
        for x in range(4):
            data[y, x] = (x * 60, y * 100, 10 + x + y * 4, 255)
    return RasterImage.from_array(data)


@pytest.fixture
def transparent_logo():
    """
    20x20 logo: opaque blue square in the middle, transparent border.
    """
    image = Image.new("RGBA", (20, 20), (0, 0, 0, 0))
    image.paste((0, 0, 255, 255), (5, 5, 15, 15))
    return RasterImage.from_pil(image)
