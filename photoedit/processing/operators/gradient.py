"""
Linear gradient overlay composited source-over onto the image.
"""

import logging
from typing import Optional

import numpy as np

from ..image import ColorImage
from .base import GradientConfig, Operator, finite

logger = logging.getLogger(__name__)


class LinearGradientOperator(Operator):
    """
    Build a two-color linear gradient and composite it over the image.

    Pixels are projected onto the line from ``point0`` to ``point1``;
    beyond either end the end color is held. Colors are interpolated in
    premultiplied space before the source-over blend.
    """

    name = "gradient"

    def apply(self, image: ColorImage, config: GradientConfig) -> Optional[ColorImage]:
        (x1, y1), (x2, y2) = config.point0, config.point1
        if not finite(x1, y1, x2, y2):
            return None
        for color in (config.color0, config.color1):
            if len(color) != 4 or not finite(*color) or min(color) < 0 or max(color) > 1:
                logger.debug(f"Gradient color {color} outside [0, 1] RGBA")
                return None

        # Calculate gradient direction
        dx = x2 - x1
        dy = y2 - y1
        length_sq = dx * dx + dy * dy
        if length_sq < 1e-12:
            # Degenerate case: start and end are the same
            logger.debug("Gradient anchors coincide")
            return None

        # Pixel centers, projected onto the gradient line
        height, width = image.shape
        y, x = np.ogrid[:height, :width]
        t = ((x + 0.5 - x1) * dx + (y + 0.5 - y1) * dy) / length_sq
        t = np.clip(t, 0.0, 1.0).astype(np.float32)[:, :, np.newaxis]

        c0 = np.asarray(config.color0, dtype=np.float32)
        c1 = np.asarray(config.color1, dtype=np.float32)
        premul0 = np.append(c0[:3] * c0[3], c0[3])
        premul1 = np.append(c1[:3] * c1[3], c1[3])
        overlay = premul0 * (1.0 - t) + premul1 * t

        overlay_rgb = overlay[:, :, :3]
        overlay_alpha = overlay[:, :, 3:]

        base_alpha = image.alpha[:, :, np.newaxis]
        base_rgb = image.rgb * base_alpha

        # Source-over compositing
        out_alpha = overlay_alpha + base_alpha * (1.0 - overlay_alpha)
        out_rgb = overlay_rgb + base_rgb * (1.0 - overlay_alpha)
        out_rgb = np.divide(out_rgb, out_alpha, out=np.zeros_like(out_rgb), where=out_alpha > 1e-6)

        pixels = np.concatenate([out_rgb, out_alpha], axis=2)
        return ColorImage(pixels)
