"""
Device calibration workflow built on the regression engine.
"""

from axle_calibration.calibration.service import (
    ChannelFitOutcome,
    ChannelFitStatus,
    DeviceCalibrationService,
    DeviceFitResult,
)

__all__ = [
    "ChannelFitOutcome",
    "ChannelFitStatus",
    "DeviceCalibrationService",
    "DeviceFitResult",
]
