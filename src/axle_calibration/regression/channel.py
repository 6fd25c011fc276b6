"""
Per-channel weight regression.

Fits ``W = b + m * Pg + c * (T - T0)`` from calibration rows, where ``Pg``
is gauge pressure. Bag and ambient pressure are never separate predictors:
the stored model always has ``ambient_coeff == -pressure_coeff``.

Two regimes:
- fewer than ``min_ridge_samples`` rows: the line is forced through the
  origin on gauge pressure and the temperature term is dropped.
- otherwise: ridge regression with a strong, sample-count dependent
  penalty on the temperature slope. The temperature coefficient is then
  faded in and clamped so it can never dominate the prediction.
"""

from typing import Iterable, Optional, Sequence

import numpy as np

from axle_calibration.config import RegressionSettings, get_settings
from axle_calibration.core.logging import get_logger
from axle_calibration.core.models import CalibrationSample, ChannelModel, FilteredRow
from axle_calibration.core.types import FitMethod, PressureUnit
from axle_calibration.regression.filter import CalibrationSampleFilter
from axle_calibration.regression.linalg import ridge_solve_3
from axle_calibration.regression.metrics import r_squared, rmse

logger = get_logger(__name__)


class ChannelCalibrationFitter:
    """
    Fits a linear weight model for a single sensing channel.

    Example:
        fitter = ChannelCalibrationFitter()
        model = fitter.fit(rows)
        if model is not None:
            print(model.summary())
    """

    def __init__(self, settings: RegressionSettings | None = None):
        """
        Initialize the fitter.

        Args:
            settings: Regression settings; defaults to the global settings.
        """
        self.settings = settings or get_settings().regression

    # ------------------------------------------------------------------
    # Sample-count schedules
    # ------------------------------------------------------------------

    def temperature_lambda(self, n: int) -> float:
        """Ridge penalty on the temperature slope; weakens as n grows."""
        s = self.settings
        scale = max(s.min_ridge_samples, min(n, s.temperature_lambda_max_samples))
        return s.temperature_lambda_base * (s.temperature_lambda_reference / scale)

    def temperature_ramp(self, n: int) -> float:
        """Fade-in factor for the temperature coefficient (0..1)."""
        s = self.settings
        if n < s.min_ridge_samples:
            return 0.0
        if n >= s.full_trust_samples:
            return 1.0
        return (n - s.min_ridge_samples) / (s.full_trust_samples - s.min_ridge_samples)

    def temperature_max_fraction(self, n: int) -> float:
        """Largest share of typical weight the temperature term may contribute."""
        return self.settings.max_temperature_fraction * self.temperature_ramp(n)

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    def fit(self, rows: Sequence[FilteredRow]) -> Optional[ChannelModel]:
        """
        Fit a channel model from filtered rows.

        Args:
            rows: Output of CalibrationSampleFilter.

        Returns:
            ChannelModel, or None if there is not enough usable data.

        Raises:
            SingularSystemError: If the ridge system cannot be inverted.
        """
        n = len(rows)
        if n < 1:
            return None

        if n < self.settings.min_ridge_samples:
            logger.debug(f"Zero-intercept differential fit on {n} rows")
            return self._fit_zero_intercept(rows)

        logger.debug(f"Ridge differential fit with temperature on {n} rows")
        return self._fit_ridge(rows)

    def _fit_zero_intercept(self, rows: Sequence[FilteredRow]) -> Optional[ChannelModel]:
        """W = m * Pg, with m the mean of per-row scale factors."""
        scale_factors = [
            r.weight / r.gauge_pressure
            for r in rows
            if abs(r.gauge_pressure) >= self.settings.min_scale_gauge_psi
        ]
        if not scale_factors:
            return None

        m = sum(scale_factors) / len(scale_factors)

        return ChannelModel(
            intercept=0.0,
            pressure_coeff=m,
            ambient_coeff=-m,
            temperature_coeff=0.0,
            r_squared=None,
            rmse=None,
            sample_count=len(rows),
            method=FitMethod.ZERO_INTERCEPT,
            pressure_unit=PressureUnit.PSI,
            temperature_unit=self.settings.temperature_unit,
        )

    def _fit_ridge(self, rows: Sequence[FilteredRow]) -> ChannelModel:
        """W = b + m * Pg + c * (T - T0) with a shrunk, clamped c."""
        n = len(rows)
        s = self.settings

        y = np.array([r.weight for r in rows], dtype=float)
        pg = np.array([r.gauge_pressure for r in rows], dtype=float)
        t = np.array([r.temperature for r in rows], dtype=float)

        # Constant temperature must center to exactly zero
        t0 = float(t[0]) if np.all(t == t[0]) else float(t.mean())
        dt = t - t0

        design = np.column_stack([np.ones(n), pg, dt])
        b, m, c = ridge_solve_3(
            design,
            y,
            (0.0, s.pressure_lambda, self.temperature_lambda(n)),
            min_determinant=s.singular_determinant,
        )

        c *= self.temperature_ramp(n)

        max_abs_dt = float(np.max(np.abs(dt)))
        if max_abs_dt > 0:
            typical_weight = float(np.mean(np.abs(y)))
            allowed = self.temperature_max_fraction(n) * max(typical_weight, s.min_typical_weight)
            max_effect = abs(c) * max_abs_dt
            if max_effect > allowed and max_effect > 0:
                c *= allowed / max_effect
        else:
            c = 0.0

        predicted = b + m * pg + c * dt
        rsq = r_squared(y, predicted, s.min_total_variance)
        fit_rmse = rmse(y, predicted)

        # Prediction uses raw temperature, so fold T0 into the intercept
        intercept = b - c * t0

        return ChannelModel(
            intercept=intercept,
            pressure_coeff=m,
            ambient_coeff=-m,
            temperature_coeff=c,
            r_squared=rsq,
            rmse=fit_rmse,
            sample_count=n,
            method=FitMethod.RIDGE,
            pressure_unit=PressureUnit.PSI,
            temperature_unit=s.temperature_unit,
        )


def fit_channel(
    samples: Iterable[CalibrationSample],
    settings: RegressionSettings | None = None,
) -> Optional[ChannelModel]:
    """
    Filter raw samples and fit a channel model.

    Args:
        samples: Raw calibration samples for one channel.
        settings: Optional regression settings.

    Returns:
        ChannelModel, or None when no usable rows remain.

    Raises:
        SingularSystemError: If the data set is degenerate.
    """
    settings = settings or get_settings().regression
    rows = CalibrationSampleFilter(settings).filter(samples)
    return ChannelCalibrationFitter(settings).fit(rows)
