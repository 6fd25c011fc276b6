"""
Tests for the device calibration service.
"""

import json

import pytest

from axle_calibration.calibration.service import (
    ChannelFitStatus,
    DeviceCalibrationService,
)
from axle_calibration.config import BatchSettings, Settings, SteerSettings
from axle_calibration.core.exceptions import SingularSystemError
from axle_calibration.core.types import FitMethod
from tests.utils import make_sample


@pytest.fixture
def device_channels(linear_samples):
    """Four channels: ridge-ready, low-data, empty and degenerate."""
    return {
        "1": linear_samples,
        "2": [make_sample(1000.0, 2.0) for _ in range(3)],
        "3": [],
        "4": [make_sample(5000.0 + 100.0 * i, 6.0) for i in range(5)],
    }


class TestDeviceCalibrationService:
    """Tests for DeviceCalibrationService."""

    def test_fit_device_outcomes(self, device_channels):
        result = DeviceCalibrationService().fit_device("truck-7", device_channels)

        statuses = [o.status for o in result.outcomes]
        assert statuses == [
            ChannelFitStatus.FITTED,
            ChannelFitStatus.FITTED,
            ChannelFitStatus.INSUFFICIENT_DATA,
            ChannelFitStatus.FAILED,
        ]
        assert result.success
        assert set(result.models) == {"1", "2"}
        assert result.models["1"].method == FitMethod.RIDGE
        assert result.models["2"].method == FitMethod.ZERO_INTERCEPT
        assert result.started_at is not None
        assert result.completed_at >= result.started_at

    def test_failed_channel_details(self, device_channels):
        result = DeviceCalibrationService().fit_device("truck-7", device_channels)

        failed = result.get_failed()
        assert [o.channel_id for o in failed] == ["4"]
        assert "not invertible" in failed[0].error_message
        assert failed[0].model is None

    def test_sample_counts(self, device_channels):
        device_channels["2"] = device_channels["2"] + [make_sample(-5.0, 2.0)]

        result = DeviceCalibrationService().fit_device("truck-7", device_channels)

        outcome = result.outcomes[1]
        assert outcome.sample_count == 4
        assert outcome.valid_count == 3

    def test_no_success_without_models(self):
        result = DeviceCalibrationService().fit_device("empty", {"1": [], "2": []})

        assert not result.success
        assert result.models == {}

    def test_stop_on_error(self, device_channels):
        settings = Settings(batch=BatchSettings(continue_on_error=False))

        with pytest.raises(SingularSystemError):
            DeviceCalibrationService(settings).fit_device("truck-7", device_channels)

    def test_parallel_matches_sequential(self, device_channels):
        sequential = DeviceCalibrationService().fit_device("truck-7", device_channels)
        parallel = DeviceCalibrationService(
            Settings(batch=BatchSettings(max_workers=4))
        ).fit_device("truck-7", device_channels)

        assert [o.channel_id for o in parallel.outcomes] == ["1", "2", "3", "4"]
        assert [o.to_dict() for o in parallel.outcomes] == [
            o.to_dict() for o in sequential.outcomes
        ]

    def test_parallel_stop_on_error(self, device_channels):
        settings = Settings(batch=BatchSettings(max_workers=4, continue_on_error=False))

        with pytest.raises(SingularSystemError):
            DeviceCalibrationService(settings).fit_device("truck-7", device_channels)

    def test_virtual_steer(self, device_channels, steer_session_samples):
        result = DeviceCalibrationService().fit_device(
            "truck-7", device_channels, steer_samples=steer_session_samples
        )

        assert result.steer_model is not None
        assert result.steer_model.coefficient == pytest.approx(0.12)

    def test_predict_steer_uses_configured_limit(self, steer_session_samples):
        service = DeviceCalibrationService(
            Settings(steer=SteerSettings(max_steer_weight=12000.0))
        )
        model = service.fit_steer(steer_session_samples)

        assert service.predict_steer_weight(model, 20000.0) == pytest.approx(11400.0)
        assert service.predict_steer_weight(model, 30000.0) is None

    def test_virtual_steer_not_trained(self, steer_session_samples):
        service = DeviceCalibrationService()

        assert service.fit_steer(steer_session_samples[:6]) is None

    def test_to_dict_is_json_serializable(self, device_channels, steer_session_samples):
        result = DeviceCalibrationService().fit_device(
            "truck-7", device_channels, steer_samples=steer_session_samples
        )

        data = json.loads(json.dumps(result.to_dict()))

        assert data["device_id"] == "truck-7"
        assert data["success"] is True
        assert data["channels"][0]["status"] == "fitted"
        assert data["channels"][0]["model"]["method"] == "ridge"
        assert data["channels"][3]["error"]
        assert data["steer_model"]["data_points"] == 4
