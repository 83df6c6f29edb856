"""
Tests for the adjustment parameter model and filter selection.
"""

import math

import pytest

from photoedit.errors import PhotoEditError, UnknownFilterError, UnknownParameterError
from photoedit.processing import (
    DEFAULTS,
    PARAMETER_NAMES,
    AdjustmentParameters,
    FilterKind,
    FilterSelection,
)


class TestDefaults:
    """Default parameter values."""

    def test_documented_defaults(self):
        params = AdjustmentParameters()
        assert params.contrast == 1.0
        assert params.saturation == 1.0
        for name in PARAMETER_NAMES:
            if name not in ('contrast', 'saturation'):
                assert params.get(name) == 0.0
        assert params.filter.kind is FilterKind.NONE
        assert params.filter.intensity == 0.5

    def test_defaults_are_neutral(self):
        params = AdjustmentParameters.defaults()
        assert params.is_default()
        assert all(params.is_neutral(name) for name in PARAMETER_NAMES)

    def test_defaults_table_matches_fields(self):
        params = AdjustmentParameters()
        assert {name: params.get(name) for name in PARAMETER_NAMES} == DEFAULTS


class TestSetting:
    """Setting and clamping values."""

    def test_set_returns_stored_value(self):
        params = AdjustmentParameters()
        assert params.set('exposure', 42) == 42.0
        assert params.exposure == 42.0
        assert not params.is_default()

    def test_out_of_range_is_clamped(self):
        params = AdjustmentParameters()
        assert params.set('warmth', 250) == 100.0
        assert params.set('tint', -1000) == -100.0

    def test_constructor_clamps(self):
        params = AdjustmentParameters(exposure=500, shadows=-500)
        assert params.exposure == 100.0
        assert params.shadows == -100.0

    def test_nan_falls_back_to_neutral(self):
        params = AdjustmentParameters()
        params.set('contrast', 40)
        params.set('contrast', math.nan)
        assert params.contrast == 1.0

    def test_unknown_parameter_raises(self):
        params = AdjustmentParameters()
        with pytest.raises(UnknownParameterError):
            params.set('sharpness', 10)
        with pytest.raises(KeyError):
            params.get('clarity')

    def test_unknown_parameter_is_photoedit_error(self):
        with pytest.raises(PhotoEditError):
            AdjustmentParameters().set('grain', 1)

    def test_clamp_logs_warning(self, caplog):
        with caplog.at_level('WARNING', logger='photoedit.processing.adjustments'):
            AdjustmentParameters().set('exposure', 150)
        assert 'clamped' in caplog.text


class TestFilterSelection:
    """Look filter parsing and selection."""

    @pytest.mark.parametrize("value, expected", [
        ('vivid', FilterKind.VIVID),
        ('VIVID', FilterKind.VIVID),
        ('vivid-warm', FilterKind.VIVID_WARM),
        ('Vivid Warm', FilterKind.VIVID_WARM),
        ('none', FilterKind.NONE),
        (None, FilterKind.NONE),
        (FilterKind.VIVID, FilterKind.VIVID),
    ])
    def test_parse(self, value, expected):
        assert FilterKind.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(UnknownFilterError):
            FilterKind.parse('sepia')
        with pytest.raises(ValueError):
            FilterKind.parse('noir')

    def test_label(self):
        assert FilterKind.VIVID_WARM.label == 'Vivid Warm'

    def test_intensity_is_clamped(self):
        assert FilterSelection(FilterKind.VIVID, 2.0).intensity == 1.0
        assert FilterSelection(FilterKind.VIVID, -1.0).intensity == 0.0

    def test_active(self):
        assert not FilterSelection().active
        assert FilterSelection('vivid').active

    def test_set_filter_keeps_intensity(self):
        params = AdjustmentParameters()
        params.set_filter('vivid', 0.8)
        params.set_filter('vivid_warm')
        assert params.filter == FilterSelection(FilterKind.VIVID_WARM, 0.8)

    def test_with_filter_leaves_original(self):
        params = AdjustmentParameters()
        other = params.with_filter('vivid', 0.3)
        assert params.filter.kind is FilterKind.NONE
        assert other.filter.kind is FilterKind.VIVID
        assert other.filter.intensity == 0.3

    def test_string_filter_in_constructor(self):
        params = AdjustmentParameters(filter='vivid')
        assert params.filter.kind is FilterKind.VIVID


class TestLifecycle:
    """Reset, snapshots and views."""

    def test_reset_restores_defaults(self):
        params = AdjustmentParameters(exposure=30, contrast=-20)
        params.set_filter('vivid', 0.9)
        params.reset()
        assert params.is_default()
        assert params.filter == FilterSelection()

    def test_snapshot_is_independent(self):
        params = AdjustmentParameters(exposure=10)
        snapshot = params.snapshot()
        params.set('exposure', 90)
        assert snapshot.exposure == 10.0
        assert snapshot is not params

    def test_as_dict(self):
        params = AdjustmentParameters(warmth=20)
        params.set_filter('vivid-warm', 0.25)
        data = params.as_dict()
        assert data['warmth'] == 20.0
        assert data['filter'] == 'vivid_warm'
        assert data['filter_intensity'] == 0.25
        assert set(PARAMETER_NAMES) <= set(data)
