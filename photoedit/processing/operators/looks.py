"""
Named look filters applied after all adjustments.

Each look takes a single scalar derived from the filter intensity and is
built from the basic color operators.
"""

import logging
from typing import Optional

from ..image import ColorImage
from .base import ColorControlsConfig, LookConfig, Operator, TemperatureTintConfig, in_range
from .color import ColorControlsOperator, TemperatureTintOperator

logger = logging.getLogger(__name__)


class VividLook(Operator):
    """
    Punchier colors with a touch of contrast.

    ``amount`` runs from 0 (untouched) to 2 (strongest). It scales the gains
    above 1, so amount 1 is a 1.5x saturation boost and not the identity.
    """

    name = "vivid"

    def __init__(self, saturation_gain: float = 0.5, contrast_gain: float = 0.1,
                 color_controls: Optional[ColorControlsOperator] = None):
        self.saturation_gain = saturation_gain
        self.contrast_gain = contrast_gain
        self.color_controls = color_controls or ColorControlsOperator()

    def controls_for(self, amount: float) -> ColorControlsConfig:
        return ColorControlsConfig(
            saturation=1.0 + self.saturation_gain * amount,
            contrast=1.0 + self.contrast_gain * amount,
        )

    def apply(self, image: ColorImage, config: LookConfig) -> Optional[ColorImage]:
        if not in_range(config.amount, 0.0, 2.0):
            logger.debug(f"Vivid amount {config.amount} outside [0, 2]")
            return None
        return self.color_controls.apply(image, self.controls_for(config.amount))


class VividWarmLook(Operator):
    """
    Vivid colors rebalanced from a given neutral temperature.

    ``amount`` is the neutral temperature in Kelvin; it is compared against
    ``target_temperature`` the same way the warmth adjustment is.
    """

    name = "vivid_warm"

    def __init__(self, target_temperature: float = 6500.0,
                 vivid: Optional[VividLook] = None,
                 temperature_tint: Optional[TemperatureTintOperator] = None):
        self.target_temperature = target_temperature
        self.vivid = vivid or VividLook()
        self.temperature_tint = temperature_tint or TemperatureTintOperator()

    def apply(self, image: ColorImage, config: LookConfig) -> Optional[ColorImage]:
        balance = TemperatureTintConfig(
            neutral=(config.amount, 0.0),
            target_neutral=(self.target_temperature, 0.0),
        )
        warmed = self.temperature_tint.apply(image, balance)
        if warmed is None:
            return None
        return self.vivid.apply(warmed, LookConfig(amount=1.0))
