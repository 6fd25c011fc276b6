#!/usr/bin/env python3
"""
Basic Calibration Example

This example demonstrates the core calibration workflow:
1. Record calibration samples for each sensing channel
2. Fit a weight model per channel
3. Learn the virtual steer axle from paired sessions
4. Predict live weights from new pressure readings
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from axle_calibration import CalibrationSample, DeviceCalibrationService
from axle_calibration.core.logging import setup_logging

AMBIENT_PSI = 14.6


def demo_samples(scale: float, offset: float, count: int) -> list[CalibrationSample]:
    """Synthetic scale tickets for one channel."""
    start = datetime(2025, 5, 12, 7, 30)
    samples = []
    for i in range(count):
        gauge = 8.0 + 3.5 * i
        temperature = 48.0 + 4.0 * (i % 6)
        samples.append(
            CalibrationSample(
                scale_weight=offset + scale * gauge + 1.5 * (temperature - 60.0),
                bag_pressure=AMBIENT_PSI + gauge,
                ambient_pressure=AMBIENT_PSI,
                air_temperature=temperature,
                occurred_at=start + timedelta(days=i),
                session_key=f"TKT-{1000 + i}",
                axle_group="drive",
            )
        )
    return samples


def main():
    setup_logging(level="INFO", colored=False)

    print("=" * 60)
    print("Axle Calibration - Basic Example")
    print("=" * 60)

    channels = {
        "1": demo_samples(scale=455.0, offset=900.0, count=8),
        "2": demo_samples(scale=470.0, offset=850.0, count=3),
    }

    # Steer weights recorded on the same tickets
    steer_samples = list(channels["1"])
    for sample in channels["1"]:
        steer_samples.append(
            CalibrationSample(
                scale_weight=9500.0 + 0.11 * sample.scale_weight * 2,
                bag_pressure=AMBIENT_PSI + 30.0,
                ambient_pressure=AMBIENT_PSI,
                air_temperature=sample.air_temperature,
                occurred_at=sample.occurred_at,
                session_key=sample.session_key,
                axle_group="steer",
            )
        )

    service = DeviceCalibrationService()
    result = service.fit_device("demo-truck", channels, steer_samples=steer_samples)

    print("\nChannel models:")
    for outcome in result.outcomes:
        if outcome.model is None:
            print(f"  Channel {outcome.channel_id}: {outcome.status.value}")
        else:
            print(f"  Channel {outcome.channel_id}: {outcome.model.summary()}")

    # Predict live weight
    bag, temperature = AMBIENT_PSI + 25.0, 62.0
    drive_weight = 0.0
    for channel_id, model in result.models.items():
        weight = model.predict_weight(bag, AMBIENT_PSI, temperature)
        drive_weight += weight
        print(f"\n  Channel {channel_id} at {bag - AMBIENT_PSI:.1f} psi gauge: {weight:,.0f} lbs")

    if result.steer_model is not None:
        steer = result.steer_model.predict_steer_weight(drive_weight)
        print(f"\nVirtual steer: {steer:,.0f} lbs (R2={result.steer_model.r_squared:.3f})")
    else:
        print("\nVirtual steer: needs more calibration sessions")


if __name__ == "__main__":
    main()
