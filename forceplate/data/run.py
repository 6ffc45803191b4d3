"""Test run: binds a sample series to a test type, athlete and lifecycle status."""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

from ..errors import RunNotActive
from .series import SampleSeries
from .types import ForceSample, TestStatus, TestType

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TestRun:
    """One force-plate test from start to completion.

    Created in progress with an empty series. Samples are appended while the
    run is in progress; completing, failing or cancelling it freezes the series
    and the run becomes read-only.
    """

    def __init__(
        self,
        test_type: TestType,
        athlete_id: str,
        start_time: Optional[datetime] = None,
        run_id: Optional[str] = None,
        notes: str = "",
        series: Optional[SampleSeries] = None,
    ) -> None:
        self.run_id = run_id or uuid.uuid4().hex
        self.test_type = TestType.from_value(test_type)
        self.athlete_id = str(athlete_id)
        self.start_time = start_time or _now()
        self._end_time: Optional[datetime] = None
        self._status = TestStatus.IN_PROGRESS
        self._series = series if series is not None else SampleSeries()
        self._metrics: Dict[str, float] = {}
        self._quality_score: Optional[float] = None
        self._notes = notes

    @classmethod
    def restore(
        cls,
        *,
        run_id: str,
        test_type: TestType,
        athlete_id: str,
        start_time: datetime,
        end_time: Optional[datetime],
        status: TestStatus,
        series: SampleSeries,
        metrics: Mapping[str, float],
        quality_score: Optional[float],
        notes: str = "",
    ) -> "TestRun":
        """Rebuild a run from stored fields (persistence round trip)."""
        run = cls(test_type, athlete_id, start_time=start_time, run_id=run_id, notes=notes, series=series)
        run._end_time = end_time
        run._status = TestStatus(status)
        run._metrics = {str(k): float(v) for k, v in metrics.items()}
        run._quality_score = None if quality_score is None else float(quality_score)
        if run._status is not TestStatus.IN_PROGRESS:
            series.freeze()
        return run

    # ----- read-only accessors -----

    @property
    def status(self) -> TestStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is TestStatus.IN_PROGRESS

    @property
    def series(self) -> SampleSeries:
        return self._series

    @property
    def end_time(self) -> Optional[datetime]:
        return self._end_time

    @property
    def metrics(self) -> Dict[str, float]:
        return dict(self._metrics)

    @property
    def quality_score(self) -> Optional[float]:
        return self._quality_score

    @property
    def notes(self) -> str:
        return self._notes

    @property
    def duration_s(self) -> float:
        """Duration of the recorded data, from the sample timestamps."""
        return self._series.duration_ms / 1000.0

    # ----- lifecycle -----

    def _require_active(self) -> None:
        if not self.is_active:
            raise RunNotActive(f"Test run {self.run_id} is {self._status.value}")

    def append(self, sample: ForceSample) -> None:
        self._require_active()
        self._series.append(sample)

    def add_note(self, text: str) -> None:
        self._require_active()
        self._notes = f"{self._notes}\n{text}".strip()

    def _close(self, status: TestStatus, end_time: Optional[datetime]) -> None:
        self._require_active()
        self._series.freeze()
        self._status = status
        self._end_time = end_time or _now()

    def complete(
        self,
        metrics: Mapping[str, float],
        quality_score: Optional[float] = None,
        end_time: Optional[datetime] = None,
    ) -> None:
        """Mark the run completed with its computed metrics and quality score."""
        self._require_active()
        self._metrics = {str(k): float(v) for k, v in metrics.items()}
        self._quality_score = None if quality_score is None else float(quality_score)
        self._close(TestStatus.COMPLETED, end_time)
        logger.info("Run %s completed with %d metrics", self.run_id, len(self._metrics))

    def fail(self, reason: str, end_time: Optional[datetime] = None) -> None:
        self._require_active()
        self._notes = f"{self._notes}\n{reason}".strip()
        self._close(TestStatus.FAILED, end_time)
        logger.warning("Run %s failed: %s", self.run_id, reason)

    def cancel(self, end_time: Optional[datetime] = None) -> None:
        self._close(TestStatus.CANCELLED, end_time)
        logger.info("Run %s cancelled after %d samples", self.run_id, self._series.count)
