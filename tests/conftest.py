"""
Shared fixtures for Axle Calibration tests.
"""

from datetime import datetime, timedelta

import pytest

from axle_calibration.config import RegressionSettings, Settings, SteerSettings, configure
from tests.utils import make_sample


@pytest.fixture(autouse=True)
def default_settings():
    """Reset global settings so environment overrides never leak into tests."""
    configure(Settings())
    yield
    configure(Settings())


@pytest.fixture
def regression_settings():
    """Regression settings with default tunables."""
    return RegressionSettings()


@pytest.fixture
def steer_settings():
    """Virtual steer settings with default tunables."""
    return SteerSettings()


@pytest.fixture
def linear_samples():
    """Six samples lying exactly on W = 500 * Pg at constant temperature."""
    return [make_sample(500.0 * pg, float(pg)) for pg in range(1, 7)]


@pytest.fixture
def field_samples():
    """Twenty-four noisy field samples with a mild temperature effect."""
    samples = []
    for i in range(24):
        gauge = 5.0 + i * 1.5
        temperature = 40.0 + (i * 7) % 45
        noise = ((i * 37) % 11 - 5) * 12.0
        weight = 1200.0 + 480.0 * gauge + 2.0 * (temperature - 60.0) + noise
        samples.append(make_sample(weight, gauge, temperature))
    return samples


@pytest.fixture
def steer_session_samples():
    """Four tickets, each with steer and drive axle group samples."""
    base = datetime(2025, 6, 1, 8, 0)
    samples = []
    for i, drive in enumerate([20000.0, 26000.0, 31000.0, 34000.0]):
        ticket = f"T-{100 + i}"
        at = base + timedelta(hours=i)
        steer = 9000.0 + 0.12 * drive
        samples.append(
            make_sample(steer, 60.0, session_key=ticket, axle_group="steer", occurred_at=at)
        )
        samples.append(
            make_sample(drive / 2, 40.0, session_key=ticket, axle_group="drive", occurred_at=at)
        )
        samples.append(
            make_sample(drive / 2, 41.0, session_key=ticket, axle_group="drive", occurred_at=at)
        )
    return samples
