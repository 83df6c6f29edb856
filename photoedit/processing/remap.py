"""
Slider-to-operator remapping rules.

Each function converts a user-facing value (slider domain, mostly -100 to
+100) into the native input of one operator. All of them are pure.
"""

from typing import Callable, Dict, Tuple

from .operators.base import GradientConfig

# Color neutral used by the warmth/tint stage when both knobs are at rest
NEUTRAL_TEMPERATURE = 6500.0
DEFAULT_TINT_LIMIT = 5.0

# Gradient anchor colors (RGB); alpha comes from the gradient intensity
GRADIENT_START_RGB = (1.0, 0.0, 0.0)
GRADIENT_END_RGB = (0.0, 0.0, 1.0)

VIVID_SCALE = 2.0
VIVID_WARM_SCALE = 7000.0


def exposure_ev(value: float) -> float:
    """+/-100 maps to +/-2 EV"""
    return value / 50.0


def brightness_delta(value: float) -> float:
    """Brilliance and brightness: additive brightness in [-1, 1]"""
    return value / 100.0


def black_point_delta(value: float) -> float:
    """Raising the black point darkens the image"""
    return -value / 100.0


def highlight_amount(value: float) -> float:
    return value / 100.0


def shadow_amount(value: float) -> float:
    """-100..100 maps onto 0..1"""
    return (value + 100.0) / 200.0


def contrast_multiplier(value: float) -> float:
    """-100..100 maps onto a 0..4 contrast multiplier"""
    return (value + 100.0) / 50.0


def saturation_multiplier(value: float) -> float:
    """-100..100 maps onto a 0..2 saturation multiplier"""
    return (value + 100.0) / 100.0


def vibrance_amount(value: float) -> float:
    return value / 100.0


def clamp_tint(tint: float, limit: float = DEFAULT_TINT_LIMIT) -> float:
    """Keep tint inside the range where the neutral model is stable"""
    return max(-limit, min(limit, tint))


def temperature_tint_neutral(warmth: float, tint: float,
                             tint_limit: float = DEFAULT_TINT_LIMIT,
                             base_temperature: float = NEUTRAL_TEMPERATURE) -> Tuple[float, float]:
    """
    Combine warmth and tint into a (temperature, tint) color neutral.

    Warmth offsets the base neutral (6500K) one Kelvin per slider step;
    tint is clamped to ``+/- tint_limit`` first.
    """
    return (base_temperature + warmth, clamp_tint(tint, tint_limit))


def gradient_intensity(value: float) -> float:
    """-100..100 maps onto 0..1"""
    return (value + 100.0) / 200.0


def gradient_config(value: float, width: int, height: int) -> GradientConfig:
    """
    Vertical overlay running from the top center to the bottom center.

    The start color's alpha is the gradient intensity and the end color's
    alpha its complement, so the slider cross-fades the two anchors.
    """
    intensity = gradient_intensity(value)
    return GradientConfig(
        point0=(width / 2.0, 0.0),
        point1=(width / 2.0, float(height)),
        color0=GRADIENT_START_RGB + (intensity,),
        color1=GRADIENT_END_RGB + (1.0 - intensity,),
    )


def vivid_amount(intensity: float) -> float:
    """Saturation-based look strength"""
    return intensity * VIVID_SCALE


def vivid_warm_temperature(intensity: float) -> float:
    """Temperature-based look neutral (Kelvin)"""
    return intensity * VIVID_WARM_SCALE


REMAPPERS: Dict[str, Callable] = {
    'exposure': exposure_ev,
    'brilliance': brightness_delta,
    'highlights': highlight_amount,
    'shadows': shadow_amount,
    'contrast': contrast_multiplier,
    'brightness': brightness_delta,
    'black_point': black_point_delta,
    'saturation': saturation_multiplier,
    'vibrance': vibrance_amount,
    'warmth_tint': temperature_tint_neutral,
    'gradient': gradient_config,
    'vivid': vivid_amount,
    'vivid_warm': vivid_warm_temperature,
}


def remap(stage: str, *values, **kwargs):
    """
    Remap user value(s) for ``stage`` into its native operator input.

    >>> remap('exposure', 100)
    2.0
    >>> remap('warmth_tint', 10, 1000)
    (6510.0, 5.0)
    """
    try:
        remapper = REMAPPERS[stage]
    except KeyError:
        raise KeyError(f"No remap rule for stage: {stage!r}") from None
    return remapper(*values, **kwargs)
