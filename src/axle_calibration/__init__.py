"""
Axle Calibration - regression engine for pneumatic axle load sensors.

This package turns operator-recorded calibration points into predictive
weight models, including:

- Sample filtering and gauge-pressure derivation
- Per-channel weight regression (zero-intercept and ridge regimes)
- Virtual steer axle learning from paired axle-group totals
- Device-wide calibration across all sensing channels
"""

__version__ = "1.0.0"

# Core models
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
from axle_calibration.core.exceptions import FitError, SingularSystemError

# Configuration
from axle_calibration.config import (
    Settings,
    RegressionSettings,
    SteerSettings,
    BatchSettings,
    get_settings,
    configure,
)

# Regression engine
from axle_calibration.regression import (
    CalibrationSampleFilter,
    ChannelCalibrationFitter,
    SessionGrouper,
    VirtualSteerFitter,
    filter_samples,
    fit_channel,
    fit_virtual_steer,
    group_sessions,
    steer_regression_stats,
)

# Device workflow
from axle_calibration.calibration import (
    ChannelFitOutcome,
    ChannelFitStatus,
    DeviceCalibrationService,
    DeviceFitResult,
)

__all__ = [
    "__version__",
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
    # Configuration
    "Settings",
    "RegressionSettings",
    "SteerSettings",
    "BatchSettings",
    "get_settings",
    "configure",
    # Regression
    "CalibrationSampleFilter",
    "ChannelCalibrationFitter",
    "SessionGrouper",
    "VirtualSteerFitter",
    "filter_samples",
    "fit_channel",
    "fit_virtual_steer",
    "group_sessions",
    "steer_regression_stats",
    # Workflow
    "ChannelFitOutcome",
    "ChannelFitStatus",
    "DeviceCalibrationService",
    "DeviceFitResult",
]
