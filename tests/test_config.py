"""
Tests for configuration loading and helpers.
"""

import logging

from photoedit.config import (
    get_config_value,
    get_default_config,
    load_config,
    save_config,
    update_config_value,
)
from photoedit.utils.logging import StructuredLogger, setup_console_logging


class TestLoadConfig:
    """YAML loading with defaults."""

    def test_packaged_config_matches_defaults(self):
        assert load_config() == get_default_config()

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == get_default_config()

    def test_partial_file_is_merged(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("pipeline:\n  tint_limit: 2.5\nrender:\n  jpeg_quality: 75\n")
        config = load_config(path)
        assert config['pipeline']['tint_limit'] == 2.5
        assert config['pipeline']['temperature_target'] == 6500.0
        assert config['render']['jpeg_quality'] == 75
        assert config['session']['recompute_policy'] == 'synchronous'

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("pipeline: [unclosed\n")
        assert load_config(path) == get_default_config()

    def test_non_mapping_uses_defaults(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert load_config(path) == get_default_config()

    def test_environment_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv('PHOTOEDIT_TEST_LEVEL', 'DEBUG')
        path = tmp_path / "env.yaml"
        path.write_text("logging:\n  level: ${PHOTOEDIT_TEST_LEVEL}\n")
        assert load_config(path)['logging']['level'] == 'DEBUG'

    def test_save_and_reload(self, tmp_path):
        config = get_default_config()
        update_config_value(config, 'pipeline.shadow_highlight_radius', 4.0)
        path = tmp_path / "saved.yaml"
        assert save_config(config, path)
        assert load_config(path) == config


class TestConfigValues:
    """Dotted key helpers."""

    def test_get_nested(self):
        config = get_default_config()
        assert get_config_value(config, 'render.jpeg_quality') == 92
        assert get_config_value(config, 'render.missing', 'x') == 'x'
        assert get_config_value(config, 'render.jpeg_quality.deeper', 1) == 1

    def test_update_creates_sections(self):
        config = {}
        update_config_value(config, 'session.recompute_policy', 'manual')
        assert config == {'session': {'recompute_policy': 'manual'}}


class TestLogging:
    """Logging helpers."""

    def test_structured_message(self, caplog):
        slog = StructuredLogger('photoedit.test', metadata={'image': 'a.jpg'})
        with caplog.at_level(logging.INFO, logger='photoedit.test'):
            slog.info("Stage applied", stage='exposure')
        assert 'Stage applied | {"image": "a.jpg", "stage": "exposure"}' in caplog.text

    def test_plain_message(self, caplog):
        with caplog.at_level(logging.WARNING, logger='photoedit.test'):
            StructuredLogger('photoedit.test').warning("plain")
        assert caplog.records[-1].getMessage() == "plain"

    def test_setup_console_logging(self):
        root = logging.getLogger()
        previous = root.level
        handler = setup_console_logging(level='DEBUG', color=False)
        try:
            assert handler in root.handlers
            assert root.level == logging.DEBUG
        finally:
            root.removeHandler(handler)
            root.setLevel(previous)
