"""
Unit tests for configuration and plugin options.
"""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).parent.parent))

from seastate.config import EngineConfig, Settings, get_bool, get_float, get_settings, settings
from seastate.schemas import PluginOptions


class TestEngineConfig:
    """Tests for EngineConfig defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.wave_multiplier == 0.5
        assert config.vessel_length == 12.0
        assert config.period_buffer_seconds == 30.0
        assert config.minimum_period == 2.0
        assert config.maximum_period == 20.0
        assert config.direction_smoothing == 0.3
        assert config.update_rate_ms == 1000.0
        assert config.enable_heave and config.enable_period and config.enable_direction

    def test_invalid_update_rate(self):
        """Non-positive update rate falls back to the default."""
        assert EngineConfig(update_rate_ms=0).update_rate_ms == 1000.0

    def test_invalid_smoothing(self):
        assert EngineConfig(direction_smoothing=0).direction_smoothing == 0.3
        assert EngineConfig(direction_smoothing=1.5).direction_smoothing == 0.3
        assert EngineConfig(direction_smoothing=1.0).direction_smoothing == 1.0

    def test_inverted_period_window(self):
        config = EngineConfig(minimum_period=10, maximum_period=5)
        assert (config.minimum_period, config.maximum_period) == (2.0, 20.0)

    def test_invalid_buffer_seconds(self):
        assert EngineConfig(period_buffer_seconds=-1).period_buffer_seconds == 30.0


class TestSettings:
    """Tests for environment-driven settings."""

    def test_env_helpers(self, monkeypatch):
        monkeypatch.setenv("SEASTATE_TEST_FLAG", "yes")
        monkeypatch.setenv("SEASTATE_TEST_NUMBER", "abc")

        assert get_bool("SEASTATE_TEST_FLAG") is True
        assert get_float("SEASTATE_TEST_NUMBER", 1.5) == 1.5

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("SEASTATE_WAVE_MULTIPLIER", "0.8")
        monkeypatch.setenv("SEASTATE_VESSEL_LENGTH", "15")
        monkeypatch.setenv("SEASTATE_ENABLE_DIRECTION", "false")
        monkeypatch.setenv("SEASTATE_VESSEL_NAME", "Zennora")

        s = Settings()
        config = s.engine_config()

        assert config.wave_multiplier == 0.8
        assert config.vessel_length == 15.0
        assert config.enable_direction is False
        assert s.vessel_name == "Zennora"

    def test_blank_vessel_name(self, monkeypatch):
        monkeypatch.setenv("SEASTATE_VESSEL_NAME", "  ")
        assert Settings().vessel_name is None

    def test_invalid_poll_interval(self, monkeypatch):
        monkeypatch.setenv("SEASTATE_POLL_INTERVAL_S", "0")
        assert Settings().poll_interval_s == 2.0

    def test_singleton(self):
        assert get_settings() is settings


class TestPluginOptions:
    """Tests for validated plugin options."""

    def test_defaults(self):
        options = PluginOptions()
        config = options.to_engine_config()

        assert config == EngineConfig()
        assert options.heading_path == "navigation.headingMagnetic"

    def test_camel_case_options(self):
        options = PluginOptions.model_validate({
            "waveMultiplier": 0.7,
            "updateRate": 500,
            "periodBufferSize": 60,
            "enableHeave": False,
            "directionSmoothing": 0.5,
        })
        config = options.to_engine_config()

        assert config.wave_multiplier == 0.7
        assert config.update_rate_ms == 500
        assert config.buffer_capacity == 120
        assert config.enable_heave is False
        assert config.direction_smoothing == 0.5

    @pytest.mark.parametrize("options", [
        {"updateRate": 50},
        {"vesselLength": 0.5},
        {"periodBufferSize": 5},
        {"periodBufferSize": 200},
        {"directionSmoothing": 0.95},
        {"minimumPeriod": 0.5},
        {"maximumPeriod": 4},
        {"minimumPeriod": 10, "maximumPeriod": 8},
    ])
    def test_out_of_bounds_rejected(self, options):
        with pytest.raises(ValidationError):
            PluginOptions.model_validate(options)

    def test_design_length_used_when_not_configured(self):
        assert PluginOptions().to_engine_config(design_length=18.5).vessel_length == 18.5

    def test_configured_length_wins(self):
        options = PluginOptions.model_validate({"vesselLength": 14})
        assert options.to_engine_config(design_length=18.5).vessel_length == 14

    def test_compass_source(self):
        options = PluginOptions.model_validate({"compassSource": " navigation.headingTrue "})
        assert options.heading_path == "navigation.headingTrue"
        assert PluginOptions.model_validate({"compassSource": ""}).heading_path == "navigation.headingMagnetic"
