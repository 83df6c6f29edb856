"""
Color operators used by the adjustment pipeline.

The pipeline only talks to an :class:`OperatorSet`, so any operator can be
swapped for another implementation (or a test double) with
``dataclasses.replace``.
"""

from dataclasses import dataclass

from .base import (
    ColorControlsConfig,
    ExposureConfig,
    GradientConfig,
    HighlightShadowConfig,
    LookConfig,
    Operator,
    TemperatureTintConfig,
    VibranceConfig,
)
from .color import ColorControlsOperator, TemperatureTintOperator, VibranceOperator
from .gradient import LinearGradientOperator
from .looks import VividLook, VividWarmLook
from .tone import ExposureOperator, HighlightShadowOperator


@dataclass(frozen=True)
class OperatorSet:
    """One operator per kind, looked up by pipeline stages by attribute name"""
    exposure: Operator
    color_controls: Operator
    highlight_shadow: Operator
    vibrance: Operator
    temperature_tint: Operator
    gradient: Operator
    vivid: Operator
    vivid_warm: Operator

    @classmethod
    def default(cls, temperature_target: float = 6500.0) -> 'OperatorSet':
        """Standard numpy/OpenCV implementations"""
        color_controls = ColorControlsOperator()
        temperature_tint = TemperatureTintOperator()
        vivid = VividLook(color_controls=color_controls)
        return cls(
            exposure=ExposureOperator(),
            color_controls=color_controls,
            highlight_shadow=HighlightShadowOperator(),
            vibrance=VibranceOperator(),
            temperature_tint=temperature_tint,
            gradient=LinearGradientOperator(),
            vivid=vivid,
            vivid_warm=VividWarmLook(
                target_temperature=temperature_target,
                vivid=vivid,
                temperature_tint=temperature_tint,
            ),
        )


__all__ = [
    'OperatorSet',
    'Operator',
    'ColorControlsConfig',
    'ExposureConfig',
    'GradientConfig',
    'HighlightShadowConfig',
    'LookConfig',
    'TemperatureTintConfig',
    'VibranceConfig',
    'ColorControlsOperator',
    'ExposureOperator',
    'HighlightShadowOperator',
    'LinearGradientOperator',
    'TemperatureTintOperator',
    'VibranceOperator',
    'VividLook',
    'VividWarmLook',
]
