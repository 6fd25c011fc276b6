"""
Tests for pydantic-settings configuration.
"""

import pytest
from pydantic import ValidationError

from axle_calibration.config import (
    BatchSettings,
    RegressionSettings,
    Settings,
    SteerSettings,
    configure,
    get_settings,
)
from axle_calibration.core.types import TemperatureUnit


class TestRegressionSettings:
    """Tests for RegressionSettings."""

    def test_defaults(self):
        settings = RegressionSettings()

        assert settings.gauge_deadband_psi == 0.01
        assert settings.min_scale_gauge_psi == 1e-6
        assert settings.min_ridge_samples == 5
        assert settings.full_trust_samples == 20
        assert settings.pressure_lambda == 0.0
        assert settings.temperature_lambda_base == 1e4
        assert settings.temperature_lambda_reference == 20
        assert settings.temperature_lambda_max_samples == 50
        assert settings.max_temperature_fraction == 0.01
        assert settings.singular_determinant == 1e-12
        assert settings.temperature_unit == TemperatureUnit.FAHRENHEIT

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("AXLE_REGRESSION_GAUGE_DEADBAND_PSI", "0.5")
        monkeypatch.setenv("AXLE_REGRESSION_TEMPERATURE_UNIT", "celsius")

        settings = RegressionSettings()

        assert settings.gauge_deadband_psi == 0.5
        assert settings.temperature_unit == TemperatureUnit.CELSIUS

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            RegressionSettings(min_ridge_samples=10, full_trust_samples=10)

    def test_rejects_negative_penalty(self):
        with pytest.raises(ValidationError):
            RegressionSettings(temperature_lambda_base=-1.0)


class TestSettings:
    """Tests for the aggregate Settings and global accessors."""

    def test_subsettings(self):
        settings = Settings()

        assert isinstance(settings.regression, RegressionSettings)
        assert isinstance(settings.steer, SteerSettings)
        assert isinstance(settings.batch, BatchSettings)
        assert settings.steer.min_sessions == 3
        assert settings.steer.max_steer_weight == 30000.0
        assert settings.batch.continue_on_error is True

    def test_configure_replaces_global(self):
        custom = Settings(log_level="DEBUG")

        configured = configure(custom)

        assert configured is custom
        assert get_settings() is custom

    def test_configure_with_overrides(self):
        settings = configure(batch=BatchSettings(max_workers=4))

        assert get_settings().batch.max_workers == 4
        assert settings.regression.min_ridge_samples == 5
