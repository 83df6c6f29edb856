"""
Tone operators: exposure and highlight/shadow recovery.
"""

import logging
from typing import Optional

import numpy as np
from scipy.ndimage import gaussian_filter

from ..image import ColorImage, luminance
from .base import (
    ExposureConfig, HighlightShadowConfig, Operator, finite, in_range
)

logger = logging.getLogger(__name__)

MAX_EV = 10.0


class ExposureOperator(Operator):
    """Scale linear intensity by ``2 ** ev``"""

    name = "exposure"

    def apply(self, image: ColorImage, config: ExposureConfig) -> Optional[ColorImage]:
        if not in_range(config.ev, -MAX_EV, MAX_EV):
            logger.debug(f"Exposure {config.ev} EV outside supported range")
            return None

        return image.with_rgb(image.rgb * np.float32(2.0 ** config.ev))


class HighlightShadowOperator(Operator):
    """
    Highlight compression and shadow lift driven by a smoothed luminance map.

    The luminance map is blurred so that the correction follows regions
    rather than individual pixels, which keeps local texture intact.
    ``highlight_amount`` of 1 and ``shadow_amount`` of 0 leave the image
    untouched.
    """

    name = "highlight_shadow"

    def __init__(self, highlight_threshold: float = 0.5, shadow_threshold: float = 0.5,
                 strength: float = 0.5):
        """
        Args:
            highlight_threshold: Luminance above which highlights are affected
            shadow_threshold: Luminance below which shadows are affected
            strength: Maximum fraction of a channel moved at full amount
        """
        self.highlight_threshold = highlight_threshold
        self.shadow_threshold = shadow_threshold
        self.strength = strength

    def apply(self, image: ColorImage, config: HighlightShadowConfig) -> Optional[ColorImage]:
        if not in_range(config.highlight_amount, 0.0, 1.0):
            logger.debug(f"Highlight amount {config.highlight_amount} outside [0, 1]")
            return None
        if not in_range(config.shadow_amount, -1.0, 1.0):
            logger.debug(f"Shadow amount {config.shadow_amount} outside [-1, 1]")
            return None
        if not finite(config.radius) or config.radius < 0:
            return None

        rgb = image.rgb.astype(np.float32)
        if config.highlight_amount >= 1.0 and config.shadow_amount == 0.0:
            return image.with_rgb(rgb)

        smoothed = luminance(rgb)
        if config.radius > 0:
            smoothed = gaussian_filter(smoothed, sigma=config.radius, mode='nearest')

        # Highlight adjustment
        if config.highlight_amount < 1.0:
            highlight_mask = np.clip(
                (smoothed - self.highlight_threshold) / (1.0 - self.highlight_threshold), 0, 1
            ) ** 2
            recovery = (1.0 - config.highlight_amount) * self.strength
            rgb = rgb - highlight_mask[:, :, np.newaxis] * rgb * recovery

        # Shadow adjustment
        if config.shadow_amount != 0.0:
            shadow_mask = np.clip(1.0 - smoothed / self.shadow_threshold, 0, 1) ** 2
            shadow_mask = shadow_mask[:, :, np.newaxis]
            lift = config.shadow_amount * self.strength
            if lift > 0:
                rgb = rgb + shadow_mask * lift * (1.0 - rgb)
            else:
                rgb = rgb + shadow_mask * lift * rgb

        return image.with_rgb(rgb)
