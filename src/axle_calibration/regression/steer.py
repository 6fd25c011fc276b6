"""
Virtual steer axle learning.

Learns ``steer = intercept + coefficient * drive`` from calibration
sessions in which both the steer and the drive axle groups were weighed.

Sessions are keyed by calibration session id, else by ticket number, else
by the sample timestamp truncated to the minute. Two unrelated sessions
recorded within the same minute and without a ticket therefore merge.
"""

import re
from typing import Iterable, Optional, Sequence, Union

from axle_calibration.config import SteerSettings, get_settings
from axle_calibration.core.logging import get_logger
from axle_calibration.core.types import AxleGroupName
from axle_calibration.core.models import (
    CalibrationSample,
    CalibrationSession,
    SteerModel,
    SteerRegressionStats,
)

logger = get_logger(__name__)

VIRTUAL_STEER_NOTE = re.compile(r"\[VIRTUAL_STEER_WEIGHT:(\d+(?:\.\d+)?)\]")


def session_key(
    sample: CalibrationSample,
    time_format: str = "%Y-%m-%d %H:%M",
    use_session_id: bool = True,
) -> str:
    """Grouping key for a calibration sample."""
    if use_session_id and sample.session_id:
        return sample.session_id
    if sample.session_key:
        return sample.session_key
    return sample.occurred_at.strftime(time_format)


def _group_name(group: Union[AxleGroupName, str]) -> str:
    return group.value if isinstance(group, AxleGroupName) else group


def parse_virtual_steer_note(notes: Optional[str]) -> Optional[float]:
    """Extract an operator-entered steer weight from session notes."""
    if not notes:
        return None
    match = VIRTUAL_STEER_NOTE.search(notes)
    return float(match.group(1)) if match else None


class SessionGrouper:
    """Groups per-axle-group calibration samples into sessions."""

    def __init__(self, settings: SteerSettings | None = None):
        self.settings = settings or get_settings().steer

    def group(self, samples: Iterable[CalibrationSample]) -> list[CalibrationSession]:
        """
        Sum steer and drive weights per session.

        Samples without an axle group count as drive axle calibrations.
        Samples tagged with any other group are ignored. For sessions
        keyed by a calibration session id, a ``[VIRTUAL_STEER_WEIGHT:x]``
        session note overrides the steer sum.

        Returns:
            Sessions in order of first appearance.
        """
        steer = self.settings.steer_group
        drive = self.settings.drive_group

        totals: dict[str, dict[str, float]] = {}
        notes: dict[str, str] = {}

        for sample in samples:
            key = session_key(sample, self.settings.session_time_format)
            entry = totals.setdefault(key, {"steer": 0.0, "drive": 0.0})

            # Notes belong to a session entity; tickets and minutes have none
            if sample.session_id and sample.session_notes and key not in notes:
                notes[key] = sample.session_notes

            group = sample.axle_group
            if group is None:
                entry["drive"] += sample.scale_weight
            elif group == steer:
                entry["steer"] += sample.scale_weight
            elif group == drive:
                entry["drive"] += sample.scale_weight

        sessions = []
        for key, entry in totals.items():
            override = parse_virtual_steer_note(notes.get(key))
            sessions.append(
                CalibrationSession(
                    key=key,
                    steer_weight=override if override is not None else entry["steer"],
                    drive_weight=entry["drive"],
                )
            )
        return sessions


def group_sessions(
    samples: Iterable[CalibrationSample],
    settings: SteerSettings | None = None,
) -> list[CalibrationSession]:
    """Convenience wrapper around SessionGrouper."""
    return SessionGrouper(settings).group(samples)


class VirtualSteerFitter:
    """
    Ordinary least squares fit of steer weight on drive weight.

    Example:
        sessions = group_sessions(samples)
        model = VirtualSteerFitter().fit(sessions)
    """

    def __init__(self, settings: SteerSettings | None = None):
        self.settings = settings or get_settings().steer

    def fit(self, sessions: Sequence[CalibrationSession]) -> Optional[SteerModel]:
        """
        Fit the steer model from complete sessions.

        Args:
            sessions: Calibration sessions; incomplete ones are skipped.

        Returns:
            SteerModel, or None with fewer than ``min_sessions`` complete
            sessions or when every drive weight is identical.
        """
        pairs = [(s.drive_weight, s.steer_weight) for s in sessions if s.is_complete]
        n = len(pairs)

        if n < self.settings.min_sessions:
            logger.debug(f"Virtual steer needs {self.settings.min_sessions} sessions, have {n}")
            return None

        drives = [x for x, _ in pairs]
        if max(drives) == min(drives):
            logger.debug("Virtual steer fit skipped: drive weights do not vary")
            return None

        sum_x = sum(x for x, _ in pairs)
        sum_y = sum(y for _, y in pairs)
        sum_xy = sum(x * y for x, y in pairs)
        sum_x2 = sum(x * x for x, _ in pairs)

        denominator = n * sum_x2 - sum_x * sum_x
        if denominator <= 0:
            return None

        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n

        return SteerModel(
            intercept=intercept,
            coefficient=slope,
            r_squared=self._r_squared(pairs, slope, intercept),
            data_points=n,
        )

    @staticmethod
    def _r_squared(
        pairs: Sequence[tuple[float, float]], slope: float, intercept: float
    ) -> float:
        """R² of the fit; 0.0 when steer weights do not vary."""
        mean_y = sum(y for _, y in pairs) / len(pairs)

        ss_total = sum((y - mean_y) ** 2 for _, y in pairs)
        ss_residual = sum((y - (intercept + slope * x)) ** 2 for x, y in pairs)

        if ss_total == 0:
            return 0.0
        return 1.0 - ss_residual / ss_total


def fit_virtual_steer(
    sessions: Sequence[CalibrationSession],
    settings: SteerSettings | None = None,
) -> Optional[SteerModel]:
    """Fit a virtual steer model from grouped sessions."""
    return VirtualSteerFitter(settings).fit(sessions)


def steer_regression_stats(
    samples: Iterable[CalibrationSample],
    settings: SteerSettings | None = None,
) -> SteerRegressionStats:
    """
    Count sessions with both steer and drive samples and fit when possible.

    Only samples explicitly tagged with an axle group are counted, and
    they are keyed by ticket or minute only. Session ids are ignored for
    the count, so it can differ from the number of sessions the model
    was fitted on when samples carry a ``session_id``.
    """
    settings = settings or get_settings().steer
    samples = list(samples)

    seen: dict[str, set[str]] = {}
    for sample in samples:
        if sample.axle_group is None:
            continue
        key = session_key(sample, settings.session_time_format, use_session_id=False)
        seen.setdefault(key, set()).add(_group_name(sample.axle_group))

    data_points = sum(
        1 for groups in seen.values() if {settings.steer_group, settings.drive_group} <= groups
    )
    is_trained = data_points >= settings.min_sessions

    model = None
    if is_trained:
        model = VirtualSteerFitter(settings).fit(SessionGrouper(settings).group(samples))

    return SteerRegressionStats(data_points=data_points, is_trained=is_trained, model=model)
