"""
Domain-specific types and enumerations for axle load calibration.
"""

from enum import Enum


class AxleGroupName(str, Enum):
    """Axle groups that take part in virtual steer learning."""

    STEER = "steer"
    DRIVE = "drive"


class FitMethod(str, Enum):
    """Regression strategy used to produce a channel model."""

    ZERO_INTERCEPT = "zero_intercept"  # n < 5, W = m * Pg
    RIDGE = "ridge"  # n >= 5, W = b + m * Pg + c * dT


class PressureUnit(str, Enum):
    """Units for absolute pressure readings."""

    PSI = "psi"
    KPA = "kpa"
    BAR = "bar"

    def to_psi(self, value: float) -> float:
        """Convert a reading in this unit to psi."""
        if self is PressureUnit.KPA:
            return value * 0.1450377377
        if self is PressureUnit.BAR:
            return value * 14.503773773
        return value


class TemperatureUnit(str, Enum):
    """Units for air temperature readings."""

    FAHRENHEIT = "fahrenheit"
    CELSIUS = "celsius"

    def convert(self, value: float, target: "TemperatureUnit") -> float:
        """Convert a reading in this unit to ``target``."""
        if self is target:
            return value
        if target is TemperatureUnit.FAHRENHEIT:
            return value * 9.0 / 5.0 + 32.0
        return (value - 32.0) * 5.0 / 9.0
