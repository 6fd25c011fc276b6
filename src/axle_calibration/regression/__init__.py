"""
Calibration regression engine.

Example usage:

    from axle_calibration.regression import fit_channel, group_sessions, fit_virtual_steer

    model = fit_channel(channel_samples)
    if model is not None:
        weight = model.predict_weight(bag_psi, ambient_psi, temperature)

    steer = fit_virtual_steer(group_sessions(device_samples))
"""

from axle_calibration.regression.filter import (
    CalibrationSampleFilter,
    filter_samples,
)
from axle_calibration.regression.channel import (
    ChannelCalibrationFitter,
    fit_channel,
)
from axle_calibration.regression.steer import (
    SessionGrouper,
    VirtualSteerFitter,
    fit_virtual_steer,
    group_sessions,
    parse_virtual_steer_note,
    steer_regression_stats,
)
from axle_calibration.regression.linalg import invert_3x3, ridge_solve_3
from axle_calibration.regression.metrics import r_squared, rmse

__all__ = [
    # Filter
    "CalibrationSampleFilter",
    "filter_samples",
    # Channel fit
    "ChannelCalibrationFitter",
    "fit_channel",
    # Virtual steer
    "SessionGrouper",
    "VirtualSteerFitter",
    "fit_virtual_steer",
    "group_sessions",
    "parse_virtual_steer_note",
    "steer_regression_stats",
    # Helpers
    "invert_3x3",
    "ridge_solve_3",
    "r_squared",
    "rmse",
]
