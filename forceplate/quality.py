"""Per-sample and per-test data-quality scores (0-100) and quality bands."""
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple, Union

import numpy as np

from .config import DEFAULT_CONFIG, DEFAULT_GEOMETRY, DEFAULT_QUALITY_CONFIG, PlatformGeometry, QualityConfig
from .data.run import TestRun
from .data.series import SampleSeries
from .data.types import ForceSample, QualityBand, RawFrame, TestCategory, TestType, TrialValidity
from .detect import count_take_offs, sustain_samples
from .detect.events import detect_first_contact
from .errors import InsufficientData, UnsupportedTestType
from .metric_keys import MetricKey

logger = logging.getLogger(__name__)

MAX_SCORE = 100.0

_BANDS: Tuple[Tuple[float, QualityBand], ...] = (
    (90.0, QualityBand.EXCELLENT),
    (75.0, QualityBand.GOOD),
    (60.0, QualityBand.FAIR),
    (40.0, QualityBand.POOR),
)


def quality_band(score: float) -> QualityBand:
    """excellent >= 90, good >= 75, fair >= 60, poor >= 40, invalid below."""
    for floor, band in _BANDS:
        if score >= floor:
            return band
    return QualityBand.INVALID


@dataclass
class QualityReport:
    """Score with the deductions that produced it, as (reason, points) pairs."""

    deductions: List[Tuple[str, float]] = field(default_factory=list)

    def deduct(self, reason: str, points: float) -> None:
        self.deductions.append((reason, float(points)))

    @property
    def score(self) -> float:
        return float(max(0.0, MAX_SCORE - sum(points for _, points in self.deductions)))

    @property
    def band(self) -> QualityBand:
        return quality_band(self.score)

    @property
    def reasons(self) -> List[str]:
        return [reason for reason, _ in self.deductions]


class QualityScorer:
    """Scores data quality of single samples while acquiring and of finished tests.

    Weights and limits come from QualityConfig; they are empirical defaults,
    tune them per installation.
    """

    def __init__(
        self,
        config: QualityConfig = DEFAULT_QUALITY_CONFIG,
        geometry: PlatformGeometry = DEFAULT_GEOMETRY,
    ) -> None:
        self.config = config
        self.geometry = geometry

    # ----- per sample -----

    def assess_sample(
        self,
        sample: ForceSample,
        frame: Optional[RawFrame] = None,
        previous: Optional[ForceSample] = None,
        expected_rate_hz: Optional[float] = None,
    ) -> QualityReport:
        cfg = self.config
        report = QualityReport()

        total = sample.total_grf
        if total < 0 or total > cfg.max_total_force_n:
            report.deduct("force_out_of_range", cfg.out_of_range_force_penalty)

        if frame is not None:
            cells = np.asarray(frame.channels, dtype=float)
            if len(cells) == 8 and (np.sum(cells[:4]) < 0 or np.sum(cells[4:]) < 0):
                report.deduct("negative_side_force", cfg.negative_side_force_penalty)

        cops = [c for c in (sample.left_cop, sample.right_cop) if c is not None]
        if any(not self.geometry.contains(c.x, c.y) for c in cops):
            report.deduct("cop_out_of_bounds", cfg.cop_out_of_bounds_penalty)

        if sample.asymmetry_index > cfg.suspicious_asymmetry_pct:
            report.deduct("suspicious_asymmetry", cfg.suspicious_asymmetry_penalty)

        if sample.stability_index is not None and sample.stability_index < cfg.min_stability_index:
            report.deduct("low_stability", cfg.low_stability_penalty)

        if expected_rate_hz and self._rate_inconsistent(sample, previous, expected_rate_hz):
            report.deduct("rate_inconsistency", cfg.rate_inconsistency_penalty)
        return report

    def _rate_inconsistent(
        self, sample: ForceSample, previous: Optional[ForceSample], expected_rate_hz: float
    ) -> bool:
        cfg = self.config
        rate = sample.sampling_rate_hz
        if rate is not None and abs(rate - expected_rate_hz) / expected_rate_hz > cfg.rate_tolerance_fraction:
            return True
        if previous is not None:
            interval = sample.timestamp - previous.timestamp
            if abs(interval - 1000.0 / expected_rate_hz) > cfg.timing_jitter_ms:
                return True
        return False

    def score_sample(
        self,
        sample: ForceSample,
        frame: Optional[RawFrame] = None,
        previous: Optional[ForceSample] = None,
        expected_rate_hz: Optional[float] = None,
    ) -> float:
        return self.assess_sample(sample, frame, previous, expected_rate_hz).score

    # ----- per test -----

    def assess_test(
        self,
        run_or_series: Union[TestRun, SampleSeries],
        test_type: Optional[TestType] = None,
        metrics: Optional[Mapping[str, float]] = None,
        validity: Optional[TrialValidity] = None,
    ) -> QualityReport:
        """Deduct for duration, sample count, asymmetry, force variation and test-specific checks.

        A TestRun supplies its own series, test type and (if computed) metrics.
        Metric-based checks are skipped when the metric is absent.

        Raises:
            InsufficientData: Fewer than min_sample_count samples, or zero duration.
            UnsupportedTestType: No test type available, or an unknown one.
        """
        cfg = self.config
        if isinstance(run_or_series, TestRun):
            series = run_or_series.series
            test_type = test_type or run_or_series.test_type
            if metrics is None and run_or_series.metrics:
                metrics = run_or_series.metrics
        else:
            series = run_or_series
        if test_type is None:
            raise UnsupportedTestType("No test type given for quality scoring")
        try:
            test_type = TestType.from_value(test_type)
        except ValueError as exc:
            raise UnsupportedTestType(str(exc)) from exc
        if series.count < cfg.min_sample_count:
            raise InsufficientData(f"Need at least {cfg.min_sample_count} samples, got {series.count}")
        if series.duration_ms <= 0:
            raise InsufficientData("Series has zero duration")
        metrics = metrics or {}
        report = QualityReport()

        ratio = (series.duration_ms / 1000.0) / test_type.expected_duration_s
        if ratio < cfg.short_duration_ratio:
            report.deduct("short_duration", cfg.short_duration_penalty)
        elif ratio > cfg.long_duration_ratio:
            report.deduct("long_duration", cfg.long_duration_penalty)

        if series.count < cfg.min_recommended_samples:
            report.deduct("few_samples", cfg.few_samples_penalty)

        asymmetry = metrics.get(MetricKey.ASYMMETRY_INDEX.value, series.mean_asymmetry)
        if asymmetry > cfg.high_asymmetry_pct:
            report.deduct("high_asymmetry", cfg.high_asymmetry_penalty)
        elif asymmetry > cfg.moderate_asymmetry_pct:
            report.deduct("moderate_asymmetry", cfg.moderate_asymmetry_penalty)

        cv = metrics.get(MetricKey.FORCE_COEFFICIENT_OF_VARIATION.value)
        if cv is None:
            mean = float(np.mean(series.total))
            cv = float(np.std(series.total)) / mean if mean > 0 else 0.0
        if cv > cfg.max_force_cv:
            report.deduct("high_force_variation", cfg.high_force_cv_penalty)

        category = test_type.category
        if category is TestCategory.JUMP:
            height = metrics.get(MetricKey.JUMP_HEIGHT.value)
            if height is not None and height < cfg.min_jump_height_cm:
                report.deduct("low_jump_height", cfg.low_jump_height_penalty)
            flight = metrics.get(MetricKey.FLIGHT_TIME.value)
            if flight is not None and flight < cfg.min_flight_time_ms:
                report.deduct("short_flight", cfg.short_flight_penalty)
            if self._multiple_take_offs(series, validity):
                report.deduct("multiple_takeoff", cfg.multiple_take_off_penalty)
        elif category is TestCategory.BALANCE:
            cop_range = metrics.get(MetricKey.COP_RANGE.value)
            if cop_range is not None and cop_range > cfg.max_cop_range_mm:
                report.deduct("excessive_sway", cfg.excessive_sway_penalty)

        logger.debug("Quality %s: %.1f %s", test_type.value, report.score, report.reasons)
        return report

    @staticmethod
    def _multiple_take_offs(series: SampleSeries, validity: Optional[TrialValidity]) -> bool:
        if validity is not None:
            return "multiple_takeoff" in validity.flags
        detection = DEFAULT_CONFIG
        sustain = sustain_samples(series.sample_rate_hz, detection.landing_sustain_ms)
        contact = detect_first_contact(series.total, detection.flight_force_threshold_n, sustain)
        if contact is None:
            return False
        take_offs = count_take_offs(
            series.total,
            detection.flight_force_threshold_n,
            detection.take_off_consecutive_samples,
            sustain,
            start=contact,
        )
        return take_offs > 1

    def score_test(
        self,
        run_or_series: Union[TestRun, SampleSeries],
        test_type: Optional[TestType] = None,
        metrics: Optional[Mapping[str, float]] = None,
        validity: Optional[TrialValidity] = None,
    ) -> float:
        return self.assess_test(run_or_series, test_type, metrics, validity).score
