"""
Test utility functions and helpers for Axle Calibration tests.

Usage:
    from tests.utils import make_sample, temperature_bound

    samples = [make_sample(1000.0, 2.0) for _ in range(3)]
"""

from typing import Sequence

from axle_calibration.core.models import CalibrationSample, ChannelModel

AMBIENT_PSI = 14.5


def make_sample(
    weight: float,
    gauge: float,
    temperature: float = 70.0,
    ambient: float = AMBIENT_PSI,
    **kwargs,
) -> CalibrationSample:
    """Build a sample from a gauge pressure rather than a bag pressure."""
    return CalibrationSample(
        scale_weight=weight,
        bag_pressure=ambient + gauge,
        ambient_pressure=ambient,
        air_temperature=temperature,
        **kwargs,
    )


def max_temperature_effect(model: ChannelModel, temperatures: Sequence[float]) -> float:
    """Worst-case contribution of the temperature term around the mean."""
    t0 = sum(temperatures) / len(temperatures)
    return abs(model.temperature_coeff) * max(abs(t - t0) for t in temperatures)


def temperature_bound(n: int, weights: Sequence[float]) -> float:
    """Allowed temperature effect for n rows at default settings."""
    if n < 5:
        fraction = 0.0
    elif n >= 20:
        fraction = 0.01
    else:
        fraction = 0.01 * (n - 5) / 15
    typical = sum(abs(w) for w in weights) / len(weights)
    return fraction * max(typical, 1.0)
