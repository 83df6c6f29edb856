"""
PhotoEdit: ordered color adjustment pipeline for single photo editing

Applies a fixed sequence of parametric color adjustments followed by an
optional look filter to one source image, recomputing the full result on
every parameter change.
"""

__version__ = "0.1.0"
__author__ = "Sam Scarrow"
__email__ = "sam@example.com"

# Core imports for easy access
from .config import load_config
from .processing import (
    AdjustmentParameters,
    AdjustmentPipeline,
    ColorImage,
    FilterKind,
    FilterSelection,
)
from .session import EditSession

__all__ = [
    "load_config",
    "AdjustmentParameters",
    "AdjustmentPipeline",
    "ColorImage",
    "EditSession",
    "FilterKind",
    "FilterSelection",
]
