"""
Ordered adjustment pipeline for PhotoEdit.

Threads a source image through every adjustment stage in a fixed order and
finishes with the selected look filter. The order is part of the output
contract: color operators do not commute, so reordering stages changes
results.

Per stage:

1. skip when the driving parameters sit at their neutral value
2. remap slider values to the operator's native configuration
3. invoke the operator; on no output keep the pre-stage image
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import get_config_value
from ..utils.logging import StructuredLogger
from . import remap
from .adjustments import AdjustmentParameters, FilterKind
from .image import ColorImage
from .operators import (
    ColorControlsConfig,
    ExposureConfig,
    HighlightShadowConfig,
    LookConfig,
    OperatorSet,
    TemperatureTintConfig,
    VibranceConfig,
)

logger = logging.getLogger(__name__)
slog = StructuredLogger(__name__)


class PipelineState(Enum):
    """Recomputation state"""
    IDLE = "idle"  # no source image, nothing computed
    RUNNING = "running"
    DONE = "done"


@dataclass(frozen=True)
class PipelineSettings:
    """Tunables shared by every run"""
    tint_limit: float = remap.DEFAULT_TINT_LIMIT
    shadow_highlight_radius: float = 8.0
    temperature_target: float = remap.NEUTRAL_TEMPERATURE

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> 'PipelineSettings':
        """Read the ``pipeline`` section of a loaded configuration"""
        config = config or {}
        defaults = cls()
        return cls(
            tint_limit=float(get_config_value(config, 'pipeline.tint_limit', defaults.tint_limit)),
            shadow_highlight_radius=float(get_config_value(
                config, 'pipeline.shadow_highlight_radius', defaults.shadow_highlight_radius)),
            temperature_target=float(get_config_value(
                config, 'pipeline.temperature_target', defaults.temperature_target)),
        )


ConfigBuilder = Callable[[AdjustmentParameters, ColorImage, PipelineSettings], Any]


@dataclass(frozen=True)
class Stage:
    """
    One step of the pipeline.

    Attributes:
        name: Stage name, also the key of its remap rule
        operator: Attribute name of the operator in an :class:`OperatorSet`
        gate: Parameters whose neutral values make the stage a no-op
        build: Produces the native operator configuration
    """
    name: str
    operator: str
    gate: Tuple[str, ...]
    build: ConfigBuilder

    def is_neutral(self, params: AdjustmentParameters) -> bool:
        return all(params.is_neutral(name) for name in self.gate)

    def configure(self, params: AdjustmentParameters, image: ColorImage,
                  settings: PipelineSettings) -> Any:
        return self.build(params, image, settings)


def _exposure(p, image, settings):
    return ExposureConfig(ev=remap.exposure_ev(p.exposure))


def _brilliance(p, image, settings):
    return ColorControlsConfig(brightness=remap.brightness_delta(p.brilliance))


def _highlights(p, image, settings):
    return HighlightShadowConfig(highlight_amount=remap.highlight_amount(p.highlights),
                                 radius=settings.shadow_highlight_radius)


def _shadows(p, image, settings):
    return HighlightShadowConfig(shadow_amount=remap.shadow_amount(p.shadows),
                                 radius=settings.shadow_highlight_radius)


def _contrast(p, image, settings):
    return ColorControlsConfig(contrast=remap.contrast_multiplier(p.contrast))


def _brightness(p, image, settings):
    return ColorControlsConfig(brightness=remap.brightness_delta(p.brightness))


def _black_point(p, image, settings):
    return ColorControlsConfig(brightness=remap.black_point_delta(p.black_point))


def _saturation(p, image, settings):
    return ColorControlsConfig(saturation=remap.saturation_multiplier(p.saturation))


def _vibrance(p, image, settings):
    return VibranceConfig(amount=remap.vibrance_amount(p.vibrance))


def _warmth_tint(p, image, settings):
    neutral = remap.temperature_tint_neutral(
        p.warmth, p.tint,
        tint_limit=settings.tint_limit,
        base_temperature=settings.temperature_target,
    )
    return TemperatureTintConfig(neutral=neutral,
                                 target_neutral=(settings.temperature_target, 0.0))


def _gradient(p, image, settings):
    return remap.gradient_config(p.gradient, image.width, image.height)


def _vivid(p, image, settings):
    return LookConfig(amount=remap.vivid_amount(p.filter.intensity))


def _vivid_warm(p, image, settings):
    return LookConfig(amount=remap.vivid_warm_temperature(p.filter.intensity))


# Fixed stage order. This sequence is the product's look recipe; keep it.
ADJUSTMENT_STAGES: Tuple[Stage, ...] = (
    Stage('exposure', 'exposure', ('exposure',), _exposure),
    Stage('brilliance', 'color_controls', ('brilliance',), _brilliance),
    Stage('highlights', 'highlight_shadow', ('highlights',), _highlights),
    Stage('shadows', 'highlight_shadow', ('shadows',), _shadows),
    Stage('contrast', 'color_controls', ('contrast',), _contrast),
    Stage('brightness', 'color_controls', ('brightness',), _brightness),
    Stage('black_point', 'color_controls', ('black_point',), _black_point),
    Stage('saturation', 'color_controls', ('saturation',), _saturation),
    Stage('vibrance', 'vibrance', ('vibrance',), _vibrance),
    Stage('warmth_tint', 'temperature_tint', ('warmth', 'tint'), _warmth_tint),
    Stage('gradient', 'gradient', ('gradient',), _gradient),
)

FILTER_STAGES: Dict[FilterKind, Stage] = {
    FilterKind.VIVID: Stage('vivid', 'vivid', (), _vivid),
    FilterKind.VIVID_WARM: Stage('vivid_warm', 'vivid_warm', (), _vivid_warm),
}

STAGES_BY_NAME: Dict[str, Stage] = {stage.name: stage for stage in ADJUSTMENT_STAGES}


@dataclass
class PipelineResult:
    """Outcome of one recomputation"""
    state: PipelineState
    image: Optional[ColorImage] = None
    applied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    fallbacks: List[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def is_identity(self) -> bool:
        """True when no stage changed the image"""
        return not self.applied


class AdjustmentPipeline:
    """
    Applies adjustment stages and the look filter to a source image.

    Runs are pure with respect to their inputs: the source image and the
    parameters are never modified and nothing carries over between runs.
    """

    def __init__(self, operators: Optional[OperatorSet] = None,
                 stages: Sequence[Stage] = ADJUSTMENT_STAGES,
                 settings: Optional[PipelineSettings] = None):
        """
        Initialize the pipeline

        Args:
            operators: Operator implementations (defaults to the built-in set)
            stages: Adjustment stages in execution order
            settings: Pipeline tunables
        """
        self.settings = settings or PipelineSettings()
        self.operators = operators or OperatorSet.default(self.settings.temperature_target)
        self.stages = tuple(stages)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]],
                    operators: Optional[OperatorSet] = None) -> 'AdjustmentPipeline':
        return cls(operators=operators, settings=PipelineSettings.from_config(config))

    def active_stages(self, params: AdjustmentParameters) -> List[Stage]:
        """Stages that would run for ``params``, in order, filter last"""
        stages = [stage for stage in self.stages if not stage.is_neutral(params)]
        filter_stage = FILTER_STAGES.get(params.filter.kind)
        if filter_stage is not None:
            stages.append(filter_stage)
        return stages

    def describe(self, params: AdjustmentParameters, width: int = 1,
                 height: int = 1) -> List[Tuple[str, Any]]:
        """Native configuration of every active stage, for display"""
        probe = ColorImage.solid(width, height, (0.5, 0.5, 0.5))
        return [(stage.name, stage.configure(params, probe, self.settings))
                for stage in self.active_stages(params)]

    def run(self, source: Optional[ColorImage],
            params: AdjustmentParameters) -> PipelineResult:
        """
        Recompute the full result for ``source`` and ``params``.

        Args:
            source: Source image; None yields an idle result
            params: Parameter snapshot

        Returns:
            PipelineResult with the final image and per-stage bookkeeping
        """
        if source is None:
            return PipelineResult(state=PipelineState.IDLE)

        start = time.perf_counter()
        result = PipelineResult(state=PipelineState.RUNNING)
        current = source

        for stage in self.stages:
            if stage.is_neutral(params):
                result.skipped.append(stage.name)
                continue
            current = self._apply_stage(stage, current, params, result)

        filter_stage = FILTER_STAGES.get(params.filter.kind)
        if filter_stage is not None:
            current = self._apply_stage(filter_stage, current, params, result)

        result.image = current
        result.state = PipelineState.DONE
        result.elapsed = time.perf_counter() - start

        slog.debug("Pipeline run complete",
                   applied=result.applied, fallbacks=result.fallbacks,
                   elapsed_ms=round(result.elapsed * 1000, 2))
        return result

    def _apply_stage(self, stage: Stage, image: ColorImage,
                     params: AdjustmentParameters, result: PipelineResult) -> ColorImage:
        """Run one stage, returning the pre-stage image when it has no output"""
        operator = getattr(self.operators, stage.operator)

        try:
            config = stage.configure(params, image, self.settings)
            output = operator.apply(image, config)
        except Exception as e:
            logger.warning(f"Stage '{stage.name}' failed, keeping previous image: {e}")
            output = None
            config = None

        if output is None:
            result.fallbacks.append(stage.name)
            slog.debug("Stage produced no output", stage=stage.name, config=config)
            return image

        result.applied.append(stage.name)
        slog.debug("Stage applied", stage=stage.name, config=config)
        return output


def recompute(source: Optional[ColorImage], params: AdjustmentParameters,
              pipeline: Optional[AdjustmentPipeline] = None) -> Optional[ColorImage]:
    """Convenience wrapper returning only the result image"""
    pipeline = pipeline or AdjustmentPipeline()
    return pipeline.run(source, params).image
