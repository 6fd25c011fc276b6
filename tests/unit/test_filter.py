"""
Tests for calibration sample filtering.
"""

import math

import pytest

from axle_calibration.config import RegressionSettings
from axle_calibration.core.models import CalibrationSample
from axle_calibration.core.types import PressureUnit, TemperatureUnit
from axle_calibration.regression.filter import CalibrationSampleFilter, filter_samples
from tests.utils import make_sample


class TestCalibrationSampleFilter:
    """Tests for CalibrationSampleFilter."""

    def test_derives_gauge_pressure(self):
        """Gauge pressure is bag minus ambient."""
        sample = CalibrationSample(
            scale_weight=12000.0,
            bag_pressure=44.5,
            ambient_pressure=14.5,
            air_temperature=68.0,
        )
        rows = filter_samples([sample])

        assert len(rows) == 1
        row = rows[0]
        assert row.gauge_pressure == pytest.approx(30.0)
        assert row.weight == 12000.0
        assert row.bag_pressure == 44.5
        assert row.ambient_pressure == 14.5
        assert row.temperature == 68.0

    @pytest.mark.parametrize("weight", [0.0, -150.0])
    def test_drops_non_positive_weight(self, weight):
        """Rows without a positive scale weight are dropped."""
        assert filter_samples([make_sample(weight, 10.0)]) == []

    @pytest.mark.parametrize("gauge", [0.0, -2.0, 0.005])
    def test_drops_gauge_inside_deadband(self, gauge):
        """Bag pressure must exceed ambient by more than the deadband."""
        assert filter_samples([make_sample(1000.0, gauge)]) == []

    def test_deadband_edge(self):
        """0.01 psi is still inside the deadband; 0.02 psi is not."""
        at_edge = CalibrationSample(
            scale_weight=100.0, bag_pressure=15.0, ambient_pressure=14.99, air_temperature=60.0
        )
        above = make_sample(100.0, 0.02)

        rows = filter_samples([at_edge, above])

        assert len(rows) == 1
        assert rows[0].gauge_pressure == pytest.approx(0.02)

    def test_preserves_order(self):
        """Surviving rows keep their input order."""
        samples = [
            make_sample(1000.0, 2.0),
            make_sample(-1.0, 3.0),
            make_sample(3000.0, 6.0),
            make_sample(500.0, 0.0),
            make_sample(2000.0, 4.0),
        ]
        rows = filter_samples(samples)

        assert [r.weight for r in rows] == [1000.0, 3000.0, 2000.0]

    def test_drops_non_finite_values(self):
        """NaN or infinite readings never reach the fitter."""
        samples = [
            make_sample(1000.0, 2.0, temperature=math.nan),
            make_sample(math.inf, 2.0),
            make_sample(1000.0, 2.0),
        ]
        assert len(filter_samples(samples)) == 1

    def test_converts_kpa_to_psi(self):
        """Pressures are normalised to psi before the deadband check."""
        sample = CalibrationSample(
            scale_weight=5000.0,
            bag_pressure=200.0,
            ambient_pressure=100.0,
            air_temperature=70.0,
            pressure_unit=PressureUnit.KPA,
        )
        row = filter_samples([sample])[0]

        assert row.gauge_pressure == pytest.approx(14.50377377)
        assert row.ambient_pressure == pytest.approx(14.50377377)

    def test_converts_temperature_to_fit_unit(self):
        """Celsius readings are converted to the configured unit."""
        sample = make_sample(1000.0, 2.0, temperature=20.0, temperature_unit=TemperatureUnit.CELSIUS)

        fahrenheit = filter_samples([sample])
        celsius = filter_samples(
            [sample], RegressionSettings(temperature_unit=TemperatureUnit.CELSIUS)
        )

        assert fahrenheit[0].temperature == pytest.approx(68.0)
        assert celsius[0].temperature == 20.0

    def test_custom_deadband(self):
        """Deadband comes from settings."""
        flt = CalibrationSampleFilter(RegressionSettings(gauge_deadband_psi=1.0))

        rows = flt.filter([make_sample(1000.0, 0.5), make_sample(1000.0, 1.5)])

        assert [r.gauge_pressure for r in rows] == [pytest.approx(1.5)]

    def test_does_not_mutate_input(self):
        """The caller's list is left untouched."""
        samples = [make_sample(-1.0, 2.0), make_sample(1000.0, 2.0)]
        snapshot = list(samples)

        filter_samples(samples)

        assert samples == snapshot
