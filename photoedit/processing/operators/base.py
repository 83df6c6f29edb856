"""
Operator capability and native configuration types.

An operator turns one :class:`ColorImage` plus a small native configuration
into a new image, or returns ``None`` (no output) when it cannot produce a
result for the given inputs. Operators never modify their input.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..image import ColorImage


@dataclass(frozen=True)
class ExposureConfig:
    """Exposure change in EV stops"""
    ev: float = 0.0


@dataclass(frozen=True)
class ColorControlsConfig:
    """Brightness / contrast / saturation in a single pass"""
    brightness: float = 0.0  # additive, -1 to +1
    contrast: float = 1.0  # multiplier around mid gray, 0 to 4
    saturation: float = 1.0  # multiplier around luma, 0 to 4


@dataclass(frozen=True)
class HighlightShadowConfig:
    """Highlight compression and shadow lift"""
    highlight_amount: float = 1.0  # 0 to 1, 1 leaves highlights untouched
    shadow_amount: float = 0.0  # -1 to +1, 0 leaves shadows untouched
    radius: float = 8.0  # Gaussian radius of the luminance map (pixels)


@dataclass(frozen=True)
class VibranceConfig:
    """Saturation boost weighted toward muted colors"""
    amount: float = 0.0  # -1 to +1


@dataclass(frozen=True)
class TemperatureTintConfig:
    """Rebalance colors from a source neutral to a target neutral"""
    neutral: Tuple[float, float] = (6500.0, 0.0)  # (Kelvin, tint)
    target_neutral: Tuple[float, float] = (6500.0, 0.0)


@dataclass(frozen=True)
class GradientConfig:
    """
    Linear RGBA gradient composited over the image.

    Points are pixel coordinates ``(x, y)`` with ``y`` growing downward;
    colors are straight-alpha RGBA in ``[0, 1]``.
    """
    point0: Tuple[float, float]
    point1: Tuple[float, float]
    color0: Tuple[float, float, float, float]
    color1: Tuple[float, float, float, float]


@dataclass(frozen=True)
class LookConfig:
    """Single intensity-derived scalar driving a look filter"""
    amount: float


def finite(*values: float) -> bool:
    return all(math.isfinite(float(v)) for v in values)


def in_range(value: float, minimum: float, maximum: float) -> bool:
    return math.isfinite(value) and minimum <= value <= maximum


class Operator(ABC):
    """Color transform capability used by one or more pipeline stages."""

    #: Short name used in log messages
    name: str = "operator"

    @abstractmethod
    def apply(self, image: ColorImage, config: Any) -> Optional[ColorImage]:
        """
        Produce a new image from ``image`` and ``config``.

        Returns:
            The transformed image, or None when the operator has no output
            for this configuration
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
