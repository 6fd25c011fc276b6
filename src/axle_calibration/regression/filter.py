"""
Calibration sample filtering.

Normalizes units, derives gauge pressure and drops rows that cannot
contribute to a fit. Malformed rows are dropped, never raised on.
"""

import math
from typing import Iterable

from axle_calibration.config import RegressionSettings, get_settings
from axle_calibration.core.logging import get_logger
from axle_calibration.core.models import CalibrationSample, FilteredRow

logger = get_logger(__name__)


class CalibrationSampleFilter:
    """
    Turns raw calibration samples into rows ready for regression.

    Rules, in order:
    1. gauge pressure = bag pressure - ambient pressure (psi)
    2. drop rows whose scale weight is not positive
    3. drop rows whose gauge pressure is inside the deadband
    """

    def __init__(self, settings: RegressionSettings | None = None):
        self.settings = settings or get_settings().regression

    def filter(self, samples: Iterable[CalibrationSample]) -> list[FilteredRow]:
        """
        Filter samples, preserving the order of the survivors.

        Args:
            samples: Raw calibration samples.

        Returns:
            Rows with pressures in psi and temperature in the fit unit.
        """
        rows: list[FilteredRow] = []
        dropped = 0

        for sample in samples:
            row = self.to_row(sample)
            if row is None:
                dropped += 1
                continue
            rows.append(row)

        if dropped:
            logger.debug(f"Dropped {dropped} invalid calibration samples, kept {len(rows)}")
        return rows

    def to_row(self, sample: CalibrationSample) -> FilteredRow | None:
        """Convert one sample, or return None if it must be dropped."""
        weight = sample.scale_weight
        bag = sample.pressure_unit.to_psi(sample.bag_pressure)
        ambient = sample.pressure_unit.to_psi(sample.ambient_pressure)
        temperature = sample.temperature_unit.convert(
            sample.air_temperature, self.settings.temperature_unit
        )

        if not all(math.isfinite(v) for v in (weight, bag, ambient, temperature)):
            return None

        gauge = bag - ambient

        if weight <= 0:
            return None
        if gauge <= self.settings.gauge_deadband_psi:
            return None

        return FilteredRow(
            weight=weight,
            bag_pressure=bag,
            ambient_pressure=ambient,
            temperature=temperature,
            gauge_pressure=gauge,
        )


def filter_samples(
    samples: Iterable[CalibrationSample],
    settings: RegressionSettings | None = None,
) -> list[FilteredRow]:
    """Convenience wrapper around CalibrationSampleFilter."""
    return CalibrationSampleFilter(settings).filter(samples)
