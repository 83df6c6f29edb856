"""
Adjustment parameter model for PhotoEdit.

Holds the user-facing value of every adjustment knob plus the selected look
filter. Values live in the slider domain (mostly -100 to +100); conversion to
operator inputs happens in :mod:`photoedit.processing.remap`.
"""

import copy
import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Tuple, Union

from ..errors import UnknownFilterError, UnknownParameterError

logger = logging.getLogger(__name__)

# Slider range shared by every adjustment
USER_RANGE: Tuple[float, float] = (-100.0, 100.0)
INTENSITY_RANGE: Tuple[float, float] = (0.0, 1.0)

# Value at which each adjustment stage is a no-op and gets skipped.
# Contrast and saturation are multiplicative knobs, so their neutral is 1.
NEUTRAL_VALUES: Dict[str, float] = {
    'exposure': 0.0,
    'brilliance': 0.0,
    'highlights': 0.0,
    'shadows': 0.0,
    'contrast': 1.0,
    'brightness': 0.0,
    'black_point': 0.0,
    'saturation': 1.0,
    'vibrance': 0.0,
    'warmth': 0.0,
    'tint': 0.0,
    'gradient': 0.0,
}

PARAMETER_NAMES: Tuple[str, ...] = tuple(NEUTRAL_VALUES)
DEFAULTS: Dict[str, float] = dict(NEUTRAL_VALUES)
DEFAULT_FILTER_INTENSITY = 0.5

NEUTRAL_TOLERANCE = 1e-6


def _clamp(value: float, minimum: float, maximum: float) -> float:
    """Return *value* limited to the inclusive ``[minimum, maximum]`` range."""
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def is_neutral(name: str, value: float) -> bool:
    """True when ``value`` equals the neutral value of adjustment ``name``."""
    return abs(float(value) - NEUTRAL_VALUES[name]) <= NEUTRAL_TOLERANCE


class FilterKind(Enum):
    """Available look filters"""
    NONE = "none"
    VIVID = "vivid"
    VIVID_WARM = "vivid_warm"

    @property
    def label(self) -> str:
        """Display name, e.g. ``Vivid Warm``"""
        return self.value.replace('_', ' ').title()

    @classmethod
    def parse(cls, value: Union['FilterKind', str, None]) -> 'FilterKind':
        """Resolve an enum member from a member, value, name or label."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE

        key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
        for kind in cls:
            if key in (kind.value, kind.name.lower()):
                return kind
        raise UnknownFilterError(f"Unknown filter: {value!r}")


@dataclass(frozen=True)
class FilterSelection:
    """Selected look filter together with its intensity (0-1)"""
    kind: FilterKind = FilterKind.NONE
    intensity: float = DEFAULT_FILTER_INTENSITY

    def __post_init__(self):
        kind = FilterKind.parse(self.kind)
        intensity = float(self.intensity)
        clamped = _clamp(intensity, *INTENSITY_RANGE)
        if clamped != intensity:
            logger.warning(f"Filter intensity {intensity} clamped to {clamped}")
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'intensity', clamped)

    @property
    def active(self) -> bool:
        return self.kind is not FilterKind.NONE


@dataclass
class AdjustmentParameters:
    """
    Current value of every adjustment plus the look filter selection.

    One instance is owned by an editing session. Values are kept inside
    :data:`USER_RANGE`; out-of-range input is clamped, never rejected.
    """
    exposure: float = DEFAULTS['exposure']
    brilliance: float = DEFAULTS['brilliance']
    highlights: float = DEFAULTS['highlights']
    shadows: float = DEFAULTS['shadows']
    contrast: float = DEFAULTS['contrast']
    brightness: float = DEFAULTS['brightness']
    black_point: float = DEFAULTS['black_point']
    saturation: float = DEFAULTS['saturation']
    vibrance: float = DEFAULTS['vibrance']
    warmth: float = DEFAULTS['warmth']
    tint: float = DEFAULTS['tint']
    gradient: float = DEFAULTS['gradient']

    filter: FilterSelection = field(default_factory=FilterSelection)

    def __post_init__(self):
        for name in PARAMETER_NAMES:
            self.set(name, getattr(self, name))
        if not isinstance(self.filter, FilterSelection):
            self.filter = FilterSelection(FilterKind.parse(self.filter))

    @classmethod
    def defaults(cls) -> 'AdjustmentParameters':
        """Fresh parameters at their documented defaults"""
        return cls()

    def get(self, name: str) -> float:
        if name not in NEUTRAL_VALUES:
            raise UnknownParameterError(f"Unknown adjustment: {name!r}")
        return getattr(self, name)

    def set(self, name: str, value: float) -> float:
        """
        Set adjustment ``name``, clamping to the slider range.

        Returns:
            The value actually stored
        """
        if name not in NEUTRAL_VALUES:
            raise UnknownParameterError(f"Unknown adjustment: {name!r}")

        numeric = float(value)
        if numeric != numeric:
            logger.warning(f"Ignoring NaN for '{name}', keeping neutral value")
            numeric = NEUTRAL_VALUES[name]

        clamped = _clamp(numeric, *USER_RANGE)
        if clamped != numeric:
            logger.warning(f"Adjustment '{name}' value {numeric} clamped to {clamped}")
        setattr(self, name, clamped)
        return clamped

    def set_filter(self, kind: Union[FilterKind, str, None],
                   intensity: float = None) -> FilterSelection:
        """Select a look; keeps the current intensity when none is given"""
        if intensity is None:
            intensity = self.filter.intensity
        self.filter = FilterSelection(FilterKind.parse(kind), intensity)
        return self.filter

    def with_filter(self, kind: Union[FilterKind, str, None],
                    intensity: float = None) -> 'AdjustmentParameters':
        """Copy of these parameters with a different look selected"""
        params = self.snapshot()
        params.set_filter(kind, intensity)
        return params

    def reset(self) -> None:
        """Restore every field to its default"""
        for name, value in DEFAULTS.items():
            setattr(self, name, value)
        self.filter = FilterSelection()

    def is_default(self) -> bool:
        return self == AdjustmentParameters()

    def is_neutral(self, name: str) -> bool:
        return is_neutral(name, self.get(name))

    def snapshot(self) -> 'AdjustmentParameters':
        """Independent copy for a pipeline run"""
        return copy.deepcopy(self)

    def as_dict(self) -> Dict[str, Any]:
        """Plain dictionary view used for logging and CLI output"""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'filter'}
        data['filter'] = self.filter.kind.value
        data['filter_intensity'] = self.filter.intensity
        return data
