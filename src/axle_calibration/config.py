"""
Configuration management for the Axle Calibration engine.

Uses pydantic-settings for environment-based configuration with validation.
All settings can be overridden via environment variables with AXLE_ prefix.
"""

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from axle_calibration.core.types import TemperatureUnit

load_dotenv()


class RegressionSettings(BaseSettings):
    """Settings for the per-channel weight regression.

    Defaults are field-tuned values; they are exposed here so they can be
    re-tuned against real sensor noise without code changes.
    """

    model_config = SettingsConfigDict(env_prefix="AXLE_REGRESSION_")

    # Sample filtering
    gauge_deadband_psi: float = Field(default=0.01, ge=0.0, le=5.0)
    min_scale_gauge_psi: float = Field(default=1e-6, gt=0.0)
    temperature_unit: TemperatureUnit = Field(default=TemperatureUnit.FAHRENHEIT)

    # Regime thresholds
    min_ridge_samples: int = Field(default=5, ge=2, le=100)
    full_trust_samples: int = Field(default=20, ge=3, le=1000)

    # Ridge penalties
    pressure_lambda: float = Field(default=0.0, ge=0.0)
    temperature_lambda_base: float = Field(default=1e4, ge=0.0)
    temperature_lambda_reference: int = Field(default=20, ge=1)
    temperature_lambda_max_samples: int = Field(default=50, ge=1)

    # Temperature effect clamp (fraction of typical weight)
    max_temperature_fraction: float = Field(default=0.01, ge=0.0, le=1.0)
    min_typical_weight: float = Field(default=1.0, ge=0.0)

    # Numerical guards (determinant is relative to the Hadamard bound)
    singular_determinant: float = Field(default=1e-12, gt=0.0)
    min_total_variance: float = Field(default=1e-9, ge=0.0)

    @model_validator(mode="after")
    def check_thresholds(self) -> "RegressionSettings":
        """Full trust must come after the ridge regime starts."""
        if self.full_trust_samples <= self.min_ridge_samples:
            raise ValueError("full_trust_samples must exceed min_ridge_samples")
        return self


class SteerSettings(BaseSettings):
    """Settings for virtual steer axle learning."""

    model_config = SettingsConfigDict(env_prefix="AXLE_STEER_")

    min_sessions: int = Field(default=3, ge=2, le=100)
    steer_group: str = Field(default="steer")
    drive_group: str = Field(default="drive")
    session_time_format: str = Field(default="%Y-%m-%d %H:%M")

    # Sanity range for predicted steer weight (lbs)
    max_steer_weight: float = Field(default=30000.0, gt=0.0)


class BatchSettings(BaseSettings):
    """Settings for fitting every channel of a device."""

    model_config = SettingsConfigDict(env_prefix="AXLE_BATCH_")

    max_workers: int = Field(default=1, ge=1, le=64)
    continue_on_error: bool = Field(default=True)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings."""

    model_config = SettingsConfigDict(
        env_prefix="AXLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Axle Calibration Engine")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Subsettings
    regression: RegressionSettings = Field(default_factory=RegressionSettings)
    steer: SteerSettings = Field(default_factory=SteerSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)


# Global settings instance - lazy loaded
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings] = None, **kwargs) -> Settings:
    """
    Configure the global settings.

    Args:
        settings: Optional Settings instance to use directly
        **kwargs: Settings overrides

    Returns:
        The configured Settings instance
    """
    global _settings
    if settings is not None:
        _settings = settings
    elif kwargs:
        _settings = Settings(**kwargs)
    else:
        _settings = Settings()
    return _settings
