"""
Image input and output for PhotoEdit.
"""

from .image_source import (
    IMAGE_EXTENSIONS,
    ArrayImageSource,
    FileImageSource,
    ImageSource,
    find_images,
    load_image,
)
from .renderer import PillowRenderer

__all__ = [
    'IMAGE_EXTENSIONS',
    'ArrayImageSource',
    'FileImageSource',
    'ImageSource',
    'find_images',
    'load_image',
    'PillowRenderer',
]
