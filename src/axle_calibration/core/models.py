"""
Core data models for the Axle Calibration engine.

Input and output models use Pydantic for validation and serialization.
Rows derived during a fit are plain frozen dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from axle_calibration.core.types import (
    AxleGroupName,
    FitMethod,
    PressureUnit,
    TemperatureUnit,
)


class CalibrationSample(BaseModel):
    """One operator-recorded calibration reading for a sensing channel."""

    model_config = ConfigDict(frozen=True)

    scale_weight: float = Field(..., description="Known scale weight (lbs)")
    bag_pressure: float = Field(..., description="Absolute bladder pressure")
    ambient_pressure: float = Field(..., description="Absolute atmospheric pressure")
    air_temperature: float = Field(..., description="Air temperature")
    occurred_at: datetime = Field(default_factory=datetime.now)

    # Grouping
    session_key: Optional[str] = Field(default=None, description="Ticket number")
    session_id: Optional[str] = Field(default=None, description="Calibration session id")
    session_notes: Optional[str] = Field(default=None)
    axle_group: Optional[Union[AxleGroupName, str]] = Field(default=None)

    # Units
    pressure_unit: PressureUnit = Field(default=PressureUnit.PSI)
    temperature_unit: TemperatureUnit = Field(default=TemperatureUnit.FAHRENHEIT)

    @field_validator("session_key", "session_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        """Treat empty identifiers as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("axle_group", mode="before")
    @classmethod
    def normalize_axle_group(cls, v: Any) -> Optional[Union[AxleGroupName, str]]:
        """Map known group names onto AxleGroupName."""
        if v is None or isinstance(v, AxleGroupName):
            return v
        name = str(v).strip().lower()
        try:
            return AxleGroupName(name)
        except ValueError:
            return name or None


@dataclass(frozen=True)
class FilteredRow:
    """A validated sample with its derived gauge pressure (psi)."""

    weight: float
    bag_pressure: float
    ambient_pressure: float
    temperature: float
    gauge_pressure: float


class ChannelModel(BaseModel):
    """Fitted linear weight model for one sensing channel.

    ``weight = intercept + pressure_coeff * bag + ambient_coeff * ambient
    + temperature_coeff * temperature``
    """

    model_config = ConfigDict(frozen=True)

    intercept: float
    pressure_coeff: float
    ambient_coeff: float
    temperature_coeff: float
    r_squared: Optional[float] = None
    rmse: Optional[float] = None

    sample_count: int = Field(default=0, ge=0)
    method: FitMethod = Field(default=FitMethod.ZERO_INTERCEPT)
    pressure_unit: PressureUnit = Field(default=PressureUnit.PSI)
    temperature_unit: TemperatureUnit = Field(default=TemperatureUnit.FAHRENHEIT)

    @property
    def is_calibrated(self) -> bool:
        """False when every coefficient is zero."""
        return any(
            (self.intercept, self.pressure_coeff, self.ambient_coeff, self.temperature_coeff)
        )

    def predict_weight(
        self,
        bag_pressure: float,
        ambient_pressure: float,
        temperature: float,
    ) -> Optional[float]:
        """
        Predict the load on this channel.

        Inputs must be in the model's pressure and temperature units.

        Returns:
            Predicted weight clamped to be non-negative, or None if the
            model carries no calibration.
        """
        if not self.is_calibrated:
            return None

        weight = (
            self.intercept
            + self.pressure_coeff * bag_pressure
            + self.ambient_coeff * ambient_pressure
            + self.temperature_coeff * temperature
        )
        return max(0.0, weight)

    def to_coefficients(self) -> dict[str, Optional[float]]:
        """Coefficients keyed by their stored field names."""
        return {
            "intercept": self.intercept,
            "air_pressure_coeff": self.pressure_coeff,
            "ambient_pressure_coeff": self.ambient_coeff,
            "air_temp_coeff": self.temperature_coeff,
            "r_squared": self.r_squared,
            "rmse": self.rmse,
        }

    def summary(self) -> str:
        """Generate a summary string."""
        rsq = f"{self.r_squared:.4f}" if self.r_squared is not None else "n/a"
        rmse = f"{self.rmse:.1f}" if self.rmse is not None else "n/a"
        return (
            f"{self.method.value} (n={self.sample_count}): "
            f"W = {self.intercept:.2f} + {self.pressure_coeff:.3f}*Pbag "
            f"{self.ambient_coeff:+.3f}*Pamb {self.temperature_coeff:+.4f}*T, "
            f"R2: {rsq}, RMSE: {rmse}"
        )


class SteerModel(BaseModel):
    """Steer axle weight learned from drive axle weight.

    ``steer = intercept + coefficient * drive``. The intercept approximates
    the empty steer weight; the coefficient reflects the kingpin position.
    """

    model_config = ConfigDict(frozen=True)

    intercept: float
    coefficient: float
    r_squared: float
    data_points: int = Field(default=0, ge=0)

    def predict_steer_weight(
        self, drive_weight: float, max_weight: float = 30000.0
    ) -> Optional[float]:
        """Predict steer weight, or None when outside ``[0, max_weight]``."""
        steer_weight = self.intercept + self.coefficient * drive_weight
        if steer_weight < 0 or steer_weight > max_weight:
            return None
        return steer_weight


class CalibrationSession(BaseModel):
    """Axle-group weight totals for one calibration session."""

    model_config = ConfigDict(frozen=True)

    key: str
    steer_weight: float = 0.0
    drive_weight: float = 0.0

    @property
    def is_complete(self) -> bool:
        """Both axle groups carry a positive total."""
        return self.steer_weight > 0 and self.drive_weight > 0


class SteerRegressionStats(BaseModel):
    """How much paired steer/drive data exists for a device."""

    data_points: int = Field(default=0, ge=0)
    is_trained: bool = False
    model: Optional[SteerModel] = None
