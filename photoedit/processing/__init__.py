"""
Image processing for PhotoEdit: parameter model, operators and pipeline.
"""

from .adjustments import (
    DEFAULTS,
    NEUTRAL_VALUES,
    PARAMETER_NAMES,
    USER_RANGE,
    AdjustmentParameters,
    FilterKind,
    FilterSelection,
)
from .image import ColorImage
from .operators import OperatorSet
from .pipeline import (
    ADJUSTMENT_STAGES,
    FILTER_STAGES,
    AdjustmentPipeline,
    PipelineResult,
    PipelineSettings,
    PipelineState,
    Stage,
)

__all__ = [
    'DEFAULTS',
    'NEUTRAL_VALUES',
    'PARAMETER_NAMES',
    'USER_RANGE',
    'AdjustmentParameters',
    'FilterKind',
    'FilterSelection',
    'ColorImage',
    'OperatorSet',
    'ADJUSTMENT_STAGES',
    'FILTER_STAGES',
    'AdjustmentPipeline',
    'PipelineResult',
    'PipelineSettings',
    'PipelineState',
    'Stage',
]
