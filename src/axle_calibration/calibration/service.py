"""
Device-level calibration service.

Fits every sensing channel of a device from its calibration samples and,
when requested, the device's virtual steer model. Channel fits are
independent, so they can be fanned out over a thread pool.
"""

import concurrent.futures
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from axle_calibration.config import Settings, get_settings
from axle_calibration.core.exceptions import FitError
from axle_calibration.core.logging import LogContext, get_logger, log_operation
from axle_calibration.core.models import CalibrationSample, ChannelModel, SteerModel
from axle_calibration.regression.channel import ChannelCalibrationFitter
from axle_calibration.regression.filter import CalibrationSampleFilter
from axle_calibration.regression.steer import SessionGrouper, VirtualSteerFitter

logger = get_logger(__name__)


class ChannelFitStatus(str, Enum):
    """Outcome of fitting one channel."""

    FITTED = "fitted"
    INSUFFICIENT_DATA = "insufficient_data"
    FAILED = "failed"


@dataclass
class ChannelFitOutcome:
    """Result of fitting a single channel."""

    channel_id: str
    status: ChannelFitStatus = ChannelFitStatus.INSUFFICIENT_DATA
    model: Optional[ChannelModel] = None
    sample_count: int = 0
    valid_count: int = 0
    error_message: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "channel_id": self.channel_id,
            "status": self.status.value,
            "sample_count": self.sample_count,
            "valid_count": self.valid_count,
            "model": self.model.model_dump(mode="json") if self.model else None,
            "error": self.error_message,
        }


@dataclass
class DeviceFitResult:
    """Result of calibrating all channels of a device."""

    device_id: str
    outcomes: list[ChannelFitOutcome] = field(default_factory=list)
    steer_model: Optional[SteerModel] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        """True if at least one channel produced a model."""
        return any(o.status == ChannelFitStatus.FITTED for o in self.outcomes)

    @property
    def models(self) -> dict[str, ChannelModel]:
        """Fitted models keyed by channel id."""
        return {o.channel_id: o.model for o in self.outcomes if o.model is not None}

    def get_failed(self) -> list[ChannelFitOutcome]:
        """Channels whose fit raised an error."""
        return [o for o in self.outcomes if o.status == ChannelFitStatus.FAILED]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "device_id": self.device_id,
            "success": self.success,
            "channels": [o.to_dict() for o in self.outcomes],
            "steer_model": self.steer_model.model_dump(mode="json") if self.steer_model else None,
        }


class DeviceCalibrationService:
    """
    Runs channel and virtual steer regressions for a device.

    Example:
        service = DeviceCalibrationService()
        result = service.fit_device("truck-7", {"1": ch1_samples, "2": ch2_samples})
        for channel_id, model in result.models.items():
            store(channel_id, model.to_coefficients())
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the service.

        Args:
            settings: Application settings; defaults to the global settings.
        """
        self.settings = settings or get_settings()
        self._filter = CalibrationSampleFilter(self.settings.regression)
        self._channel_fitter = ChannelCalibrationFitter(self.settings.regression)
        self._steer_fitter = VirtualSteerFitter(self.settings.steer)
        self._grouper = SessionGrouper(self.settings.steer)

    def fit_channel(
        self, channel_id: str, samples: Sequence[CalibrationSample]
    ) -> ChannelFitOutcome:
        """
        Fit one channel.

        Raises:
            FitError: Only when ``continue_on_error`` is disabled.
        """
        outcome = ChannelFitOutcome(channel_id=channel_id, sample_count=len(samples))

        with LogContext(channel_id=channel_id):
            rows = self._filter.filter(samples)
            outcome.valid_count = len(rows)

            try:
                model = self._channel_fitter.fit(rows)
            except FitError as e:
                outcome.status = ChannelFitStatus.FAILED
                outcome.error_message = str(e)
                logger.warning(
                    f"Channel {channel_id} fit failed: {e}",
                    extra={"channel_id": channel_id, "sample_count": len(rows)},
                )
                if not self.settings.batch.continue_on_error:
                    raise
                return outcome

        if model is None:
            logger.info(f"Channel {channel_id} needs more calibration points")
            return outcome

        outcome.status = ChannelFitStatus.FITTED
        outcome.model = model
        logger.info(f"Channel {channel_id} calibrated: {model.summary()}")
        return outcome

    def fit_device(
        self,
        device_id: str,
        channels: Mapping[str, Sequence[CalibrationSample]],
        steer_samples: Optional[Iterable[CalibrationSample]] = None,
    ) -> DeviceFitResult:
        """
        Fit every channel of a device.

        Args:
            device_id: Device identifier, used for logging only.
            channels: Calibration samples keyed by channel id.
            steer_samples: Axle-group tagged samples for virtual steer
                learning; skipped when None.

        Returns:
            DeviceFitResult with one outcome per channel, in input order.
        """
        result = DeviceFitResult(device_id=device_id, started_at=datetime.now())

        with LogContext(device_id=device_id), log_operation(logger, f"fit_device {device_id}"):
            items = list(channels.items())
            if self.settings.batch.max_workers > 1 and len(items) > 1:
                result.outcomes = self._fit_parallel(items)
            else:
                result.outcomes = [self.fit_channel(cid, samples) for cid, samples in items]

            if steer_samples is not None:
                result.steer_model = self.fit_steer(steer_samples)

        result.completed_at = datetime.now()
        return result

    def fit_steer(self, samples: Iterable[CalibrationSample]) -> Optional[SteerModel]:
        """Group samples into sessions and fit the virtual steer model."""
        model = self._steer_fitter.fit(self._grouper.group(samples))
        if model is None:
            logger.info("Virtual steer not trained: not enough complete sessions")
        else:
            logger.info(
                f"Virtual steer trained on {model.data_points} sessions "
                f"(R2={model.r_squared:.4f})"
            )
        return model

    def predict_steer_weight(self, model: SteerModel, drive_weight: float) -> Optional[float]:
        """Predict steer weight within the configured sanity range."""
        return model.predict_steer_weight(drive_weight, self.settings.steer.max_steer_weight)

    def _fit_parallel(
        self, items: list[tuple[str, Sequence[CalibrationSample]]]
    ) -> list[ChannelFitOutcome]:
        """Fit channels concurrently, keeping input order."""
        context = LogContext.current()

        def fit_with_context(channel_id: str, samples: Sequence[CalibrationSample]):
            with LogContext(**context):
                return self.fit_channel(channel_id, samples)

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.settings.batch.max_workers
        ) as executor:
            futures = [executor.submit(fit_with_context, cid, samples) for cid, samples in items]
            return [future.result() for future in futures]
