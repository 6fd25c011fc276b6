"""
Core data models, types and errors for the Axle Calibration engine.
"""

from axle_calibration.core.exceptions import FitError, SingularSystemError
from axle_calibration.core.models import (
    CalibrationSample,
    CalibrationSession,
    ChannelModel,
    FilteredRow,
    SteerModel,
    SteerRegressionStats,
)
from axle_calibration.core.types import (
    AxleGroupName,
    FitMethod,
    PressureUnit,
    TemperatureUnit,
)

__all__ = [
    # Models
    "CalibrationSample",
    "CalibrationSession",
    "ChannelModel",
    "FilteredRow",
    "SteerModel",
    "SteerRegressionStats",
    # Types
    "AxleGroupName",
    "FitMethod",
    "PressureUnit",
    "TemperatureUnit",
    # Errors
    "FitError",
    "SingularSystemError",
]
