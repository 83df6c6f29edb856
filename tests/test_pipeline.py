"""
Tests for the ordered adjustment pipeline.
"""

import dataclasses

import numpy as np
import pytest

from photoedit.processing import (
    ADJUSTMENT_STAGES,
    AdjustmentParameters,
    AdjustmentPipeline,
    ColorImage,
    OperatorSet,
    PipelineSettings,
    PipelineState,
)
from photoedit.processing.operators import Operator
from photoedit.processing.pipeline import STAGES_BY_NAME, recompute


class NoOutputOperator(Operator):
    """Operator that never produces an image"""

    name = "no_output"

    def __init__(self):
        self.calls = 0

    def apply(self, image, config):
        self.calls += 1
        return None


class FailingOperator(Operator):
    """Operator that raises on every call"""

    name = "failing"

    def apply(self, image, config):
        raise RuntimeError("boom")


def _without(*names):
    return [stage for stage in ADJUSTMENT_STAGES if stage.name not in names]


class TestStageOrder:
    """The fixed stage sequence."""

    def test_order(self):
        assert [stage.name for stage in ADJUSTMENT_STAGES] == [
            'exposure', 'brilliance', 'highlights', 'shadows', 'contrast',
            'brightness', 'black_point', 'saturation', 'vibrance',
            'warmth_tint', 'gradient',
        ]

    def test_active_stages_follow_order(self, pipeline):
        params = AdjustmentParameters(gradient=20, exposure=10, saturation=30)
        params.set_filter('vivid')
        names = [stage.name for stage in pipeline.active_stages(params)]
        assert names == ['exposure', 'saturation', 'gradient', 'vivid']

    def test_warmth_tint_gate(self):
        stage = STAGES_BY_NAME['warmth_tint']
        assert stage.is_neutral(AdjustmentParameters())
        assert not stage.is_neutral(AdjustmentParameters(warmth=10))
        assert not stage.is_neutral(AdjustmentParameters(tint=3))


class TestIdentity:
    """Default parameters leave the image alone."""

    def test_defaults_return_source(self, pipeline, color_gradient):
        result = pipeline.run(color_gradient, AdjustmentParameters())
        assert result.state is PipelineState.DONE
        assert result.image.pixel_equal(color_gradient)
        assert result.applied == []
        assert result.fallbacks == []
        assert len(result.skipped) == len(ADJUSTMENT_STAGES)
        assert result.is_identity

    def test_no_source(self, pipeline):
        result = pipeline.run(None, AdjustmentParameters(exposure=50))
        assert result.state is PipelineState.IDLE
        assert result.image is None

    def test_inputs_untouched(self, pipeline, color_gradient):
        before = color_gradient.pixels.copy()
        params = AdjustmentParameters(exposure=40, contrast=20, warmth=50, gradient=30)
        params.set_filter('vivid', 0.7)
        snapshot = params.snapshot()

        pipeline.run(color_gradient, params)

        assert np.array_equal(color_gradient.pixels, before)
        assert params == snapshot

    def test_recompute_helper(self, color_gradient):
        assert recompute(color_gradient, AdjustmentParameters()).pixel_equal(color_gradient)
        assert recompute(None, AdjustmentParameters()) is None


class TestMonotonicity:
    """Exposure brightens monotonically."""

    def test_exposure_increases_brightness(self, pipeline, mid_gray):
        means = []
        for value in (-100, -50, 0, 25):
            image = pipeline.run(mid_gray, AdjustmentParameters(exposure=value)).image
            means.append(float(image.rgb.mean()))
        assert means == sorted(means)
        assert len(set(means)) == len(means)

    def test_saturated_exposure_never_decreases(self, pipeline, mid_gray):
        low = pipeline.run(mid_gray, AdjustmentParameters(exposure=60)).image
        high = pipeline.run(mid_gray, AdjustmentParameters(exposure=100)).image
        assert high.rgb.mean() >= low.rgb.mean()


class TestOrderMatters:
    """Contrast and saturation do not commute."""

    def test_swapping_stages_changes_result(self):
        image = ColorImage.solid(4, 4, (0.9, 0.5, 0.2))
        params = AdjustmentParameters(contrast=0, saturation=100)

        stages = list(ADJUSTMENT_STAGES)
        i = stages.index(STAGES_BY_NAME['contrast'])
        j = stages.index(STAGES_BY_NAME['saturation'])
        stages[i], stages[j] = stages[j], stages[i]

        standard = AdjustmentPipeline().run(image, params).image
        swapped = AdjustmentPipeline(stages=stages).run(image, params).image

        assert not standard.pixel_equal(swapped)
        # contrast first: green ~0.430, saturation first: green ~0.373
        assert standard.rgb[0, 0, 1] == pytest.approx(0.4298, abs=1e-3)
        assert swapped.rgb[0, 0, 1] == pytest.approx(0.3732, abs=1e-3)


class TestFallback:
    """A stage without output keeps the previous image."""

    def test_no_output_equals_pipeline_without_stage(self, color_gradient):
        operators = dataclasses.replace(OperatorSet.default(), highlight_shadow=NoOutputOperator())
        params = AdjustmentParameters(exposure=20, highlights=50, contrast=30)

        result = AdjustmentPipeline(operators=operators).run(color_gradient, params)
        expected = AdjustmentPipeline(stages=_without('highlights')).run(color_gradient, params)

        assert result.fallbacks == ['highlights']
        assert result.image.pixel_equal(expected.image)
        assert operators.highlight_shadow.calls == 1

    def test_out_of_domain_value_falls_back(self, pipeline, color_gradient):
        """Negative highlights are outside the operator's domain."""
        with_highlights = pipeline.run(color_gradient, AdjustmentParameters(exposure=20, highlights=-50))
        without = pipeline.run(color_gradient, AdjustmentParameters(exposure=20))

        assert with_highlights.fallbacks == ['highlights']
        assert with_highlights.image.pixel_equal(without.image)

    def test_exception_is_recovered(self, color_gradient, caplog):
        operators = dataclasses.replace(OperatorSet.default(), vibrance=FailingOperator())
        params = AdjustmentParameters(exposure=-30, vibrance=40)

        with caplog.at_level('WARNING', logger='photoedit.processing.pipeline'):
            result = AdjustmentPipeline(operators=operators).run(color_gradient, params)
        expected = AdjustmentPipeline().run(color_gradient, AdjustmentParameters(exposure=-30))

        assert result.state is PipelineState.DONE
        assert result.fallbacks == ['vibrance']
        assert result.image.pixel_equal(expected.image)
        assert "vibrance" in caplog.text

    def test_first_stage_fallback_keeps_source(self, color_gradient):
        operators = dataclasses.replace(OperatorSet.default(), exposure=NoOutputOperator())
        result = AdjustmentPipeline(operators=operators).run(
            color_gradient, AdjustmentParameters(exposure=50))
        assert result.image.pixel_equal(color_gradient)


class TestGradientStage:
    """Gradient gating only affects its own stage."""

    def test_zero_gradient_keeps_earlier_stages(self, pipeline, mid_gray):
        result = pipeline.run(mid_gray, AdjustmentParameters(exposure=30, gradient=0))
        assert 'gradient' in result.skipped
        assert result.applied == ['exposure']
        assert not result.image.pixel_equal(mid_gray)

    def test_gradient_applies(self, pipeline, mid_gray):
        result = pipeline.run(mid_gray, AdjustmentParameters(gradient=50))
        top = result.image.rgb[0, 0]
        bottom = result.image.rgb[-1, 0]
        assert result.applied == ['gradient']
        assert top[0] > top[2]
        assert bottom[2] > bottom[0]


class TestWarmthTint:
    """Warmth and tint through the pipeline."""

    def test_warmth_warms(self, pipeline, mid_gray):
        r, g, b = pipeline.run(mid_gray, AdjustmentParameters(warmth=100)).image.rgb[0, 0]
        assert r > b

    def test_tint_beyond_limit_matches_limit(self, pipeline, muted_color):
        at_limit = pipeline.run(muted_color, AdjustmentParameters(tint=5)).image
        beyond = pipeline.run(muted_color, AdjustmentParameters(tint=100)).image
        assert at_limit.pixel_equal(beyond)

    def test_tint_limit_from_settings(self, muted_color):
        settings = PipelineSettings(tint_limit=2.0)
        narrow = AdjustmentPipeline(settings=settings)
        assert narrow.run(muted_color, AdjustmentParameters(tint=2)).image.pixel_equal(
            narrow.run(muted_color, AdjustmentParameters(tint=50)).image)


class TestFilters:
    """Look filters run last."""

    @pytest.mark.parametrize("intensity", [0.1, 0.5, 1.0])
    def test_vivid_increases_saturation(self, pipeline, muted_color, intensity):
        params = AdjustmentParameters().with_filter('vivid', intensity)
        result = pipeline.run(muted_color, params)
        assert result.applied == ['vivid']
        assert result.image.mean_saturation() > muted_color.mean_saturation()

    def test_vivid_zero_intensity_is_identity(self, pipeline, muted_color):
        params = AdjustmentParameters().with_filter('vivid', 0.0)
        assert pipeline.run(muted_color, params).image.pixel_equal(muted_color)

    def test_vivid_warm_low_intensity_falls_back(self, pipeline, muted_color):
        params = AdjustmentParameters(exposure=10).with_filter('vivid_warm', 0.1)
        result = pipeline.run(muted_color, params)
        expected = pipeline.run(muted_color, AdjustmentParameters(exposure=10))
        assert result.fallbacks == ['vivid_warm']
        assert result.image.pixel_equal(expected.image)

    def test_vivid_warm_full_intensity(self, pipeline, muted_color):
        params = AdjustmentParameters().with_filter('vivid_warm', 1.0)
        result = pipeline.run(muted_color, params)
        assert result.applied == ['vivid_warm']

    def test_filter_runs_after_adjustments(self, pipeline, muted_color):
        params = AdjustmentParameters(exposure=10).with_filter('vivid', 0.5)
        assert pipeline.run(muted_color, params).applied == ['exposure', 'vivid']


class TestSettings:
    """Pipeline settings from configuration."""

    def test_from_config(self):
        settings = PipelineSettings.from_config({'pipeline': {'tint_limit': 2.5}})
        assert settings.tint_limit == 2.5
        assert settings.temperature_target == 6500.0
        assert settings.shadow_highlight_radius == 8.0

    def test_from_empty_config(self):
        assert PipelineSettings.from_config(None) == PipelineSettings()

    def test_describe(self, pipeline):
        params = AdjustmentParameters(exposure=50, contrast=0)
        described = dict(pipeline.describe(params))
        assert described['exposure'].ev == 1.0
        assert described['contrast'].contrast == 2.0
        assert list(described) == ['exposure', 'contrast']
