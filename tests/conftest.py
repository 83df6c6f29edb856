"""
Shared fixtures: small synthetic images and a default pipeline.
"""

import numpy as np
import pytest

from photoedit.processing import AdjustmentPipeline, ColorImage


@pytest.fixture
def mid_gray():
    """Uniform 50% gray"""
    return ColorImage.solid(16, 12, (0.5, 0.5, 0.5))


@pytest.fixture
def muted_color():
    """Uniform, slightly warm, low-saturation color"""
    return ColorImage.solid(16, 12, (0.5, 0.45, 0.4))


@pytest.fixture
def color_gradient():
    """Red ramps left to right, green top to bottom, blue constant"""
    height, width = 24, 32
    pixels = np.zeros((height, width, 3), dtype=np.float32)
    pixels[:, :, 0] = np.linspace(0.0, 1.0, width, dtype=np.float32)[np.newaxis, :]
    pixels[:, :, 1] = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, np.newaxis]
    pixels[:, :, 2] = 0.5
    return ColorImage.from_array(pixels)


@pytest.fixture
def pipeline():
    return AdjustmentPipeline()
