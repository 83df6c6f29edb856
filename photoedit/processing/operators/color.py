"""
Color operators: color controls, vibrance and temperature/tint.
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from ..image import ColorImage, luminance
from .base import (
    ColorControlsConfig, Operator, TemperatureTintConfig, VibranceConfig,
    finite, in_range
)

logger = logging.getLogger(__name__)

# Planckian locus approximation, normalized RGB of a black body (CIE 1931)
TEMPERATURE_TO_RGB = {
    1000: (1.000, 0.337, 0.000),
    1500: (1.000, 0.465, 0.000),
    2000: (1.000, 0.549, 0.081),
    2500: (1.000, 0.616, 0.213),
    3000: (1.000, 0.673, 0.337),
    3500: (1.000, 0.724, 0.446),
    4000: (1.000, 0.770, 0.544),
    4500: (1.000, 0.812, 0.630),
    5000: (1.000, 0.851, 0.708),
    5500: (1.000, 0.887, 0.778),
    6000: (1.000, 0.920, 0.843),
    6500: (1.000, 0.952, 0.903),
    7000: (0.949, 0.944, 1.000),
    7500: (0.913, 0.918, 1.000),
    8000: (0.883, 0.896, 1.000),
    8500: (0.858, 0.877, 1.000),
    9000: (0.835, 0.860, 1.000),
    9500: (0.815, 0.846, 1.000),
    10000: (0.798, 0.833, 1.000),
}

# Below 2000K the table has no blue component to rebalance against
MIN_TEMPERATURE = 2000.0
MAX_TEMPERATURE = 50000.0
MAX_TINT = 150.0


def temperature_to_rgb(temp_k: float) -> Tuple[float, float, float]:
    """Interpolate the normalized RGB of a black body at ``temp_k``"""
    if temp_k in TEMPERATURE_TO_RGB:
        return TEMPERATURE_TO_RGB[temp_k]

    temps = sorted(TEMPERATURE_TO_RGB)

    if temp_k <= temps[0]:
        return TEMPERATURE_TO_RGB[temps[0]]
    if temp_k >= temps[-1]:
        return TEMPERATURE_TO_RGB[temps[-1]]

    # Interpolate between nearest values
    for t1, t2 in zip(temps, temps[1:]):
        if t1 <= temp_k <= t2:
            rgb1 = TEMPERATURE_TO_RGB[t1]
            rgb2 = TEMPERATURE_TO_RGB[t2]
            alpha = (temp_k - t1) / (t2 - t1)
            return tuple(a + alpha * (b - a) for a, b in zip(rgb1, rgb2))

    return (1.0, 1.0, 1.0)


class ColorControlsOperator(Operator):
    """
    Saturation, brightness and contrast, applied in that order.

    Saturation interpolates each pixel away from its luma, brightness adds
    a constant, and contrast scales around mid gray. The default config is
    the identity.
    """

    name = "color_controls"

    def apply(self, image: ColorImage, config: ColorControlsConfig) -> Optional[ColorImage]:
        if not in_range(config.brightness, -1.0, 1.0):
            logger.debug(f"Brightness {config.brightness} outside [-1, 1]")
            return None
        if not in_range(config.contrast, 0.0, 4.0):
            logger.debug(f"Contrast {config.contrast} outside [0, 4]")
            return None
        if not in_range(config.saturation, 0.0, 4.0):
            logger.debug(f"Saturation {config.saturation} outside [0, 4]")
            return None

        rgb = image.rgb.astype(np.float32)

        if config.saturation != 1.0:
            gray = luminance(rgb)[:, :, np.newaxis]
            rgb = gray + (rgb - gray) * np.float32(config.saturation)

        if config.brightness != 0.0:
            rgb = rgb + np.float32(config.brightness)

        if config.contrast != 1.0:
            rgb = (rgb - 0.5) * np.float32(config.contrast) + 0.5

        return image.with_rgb(rgb)


class VibranceOperator(Operator):
    """Saturation change that favors already muted colors"""

    name = "vibrance"

    def apply(self, image: ColorImage, config: VibranceConfig) -> Optional[ColorImage]:
        if not in_range(config.amount, -1.0, 1.0):
            logger.debug(f"Vibrance {config.amount} outside [-1, 1]")
            return None

        rgb = np.ascontiguousarray(image.rgb, dtype=np.float32)
        if config.amount == 0.0:
            return image.with_rgb(rgb)

        # Float HSV keeps S and V in [0, 1]
        hsv = cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV)
        saturation = hsv[:, :, 1]

        # Less saturated pixels get more boost
        vibrance_factor = 1.0 + config.amount * (1.0 - saturation)
        hsv[:, :, 1] = np.clip(saturation * vibrance_factor, 0, 1)

        return image.with_rgb(cv2.cvtColor(hsv, cv2.COLOR_HSV2RGB))


class TemperatureTintOperator(Operator):
    """
    White balance shift from a source neutral to a target neutral.

    A neutral temperature above the target warms the image; tint moves
    along the green/magenta axis with positive values adding magenta.
    """

    name = "temperature_tint"

    def __init__(self, tint_scale: float = 50.0):
        """
        Args:
            tint_scale: Tint units per full green channel swing
        """
        self.tint_scale = tint_scale

    def multipliers(self, config: TemperatureTintConfig) -> Optional[Tuple[float, float, float]]:
        """Per-channel gains for ``config``, or None when out of domain"""
        temp, tint = config.neutral
        target_temp, target_tint = config.target_neutral

        for value in (temp, target_temp):
            if not in_range(value, MIN_TEMPERATURE, MAX_TEMPERATURE):
                logger.debug(f"Neutral temperature {value}K outside supported range")
                return None
        if not (in_range(tint, -MAX_TINT, MAX_TINT) and in_range(target_tint, -MAX_TINT, MAX_TINT)):
            logger.debug(f"Tint {tint} outside [-{MAX_TINT}, {MAX_TINT}]")
            return None

        source = temperature_to_rgb(temp)
        target = temperature_to_rgb(target_temp)
        gains = [t / s for t, s in zip(target, source)]

        # Anchor on green so overall brightness stays put
        green = gains[1]
        gains = [g / green for g in gains]
        gains[1] *= 1.0 - (tint - target_tint) / self.tint_scale

        if not finite(*gains) or min(gains) <= 0:
            return None
        return gains[0], gains[1], gains[2]

    def apply(self, image: ColorImage, config: TemperatureTintConfig) -> Optional[ColorImage]:
        gains = self.multipliers(config)
        if gains is None:
            return None

        rgb = image.rgb * np.asarray(gains, dtype=np.float32)
        return image.with_rgb(rgb)
