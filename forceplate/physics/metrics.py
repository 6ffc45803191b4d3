"""Test-level metrics: jump height, flight/contact time, RFD, impulse, CoP sway, asymmetry."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..config import DEFAULT_CONFIG, MetricsConfig
from ..data.series import SampleSeries
from ..data.types import JumpEvents, PhaseWindow, TestCategory, TestType, TrialValidity
from ..detect import (
    compute_baseline,
    compute_phases,
    count_take_offs,
    detect_events,
    onset_tolerance,
    phase_windows,
    sustain_samples,
    validate_trial,
)
from ..detect.events import detect_force_onset
from ..errors import InsufficientData, UnsupportedTestType
from ..metric_keys import MetricKey, force_at_key, impulse_window_key, rfd_window_key
from .asymmetry import window_asymmetry
from .balance import compute_balance
from .kinematics import compute_kinematics, net_impulse

logger = logging.getLogger(__name__)

_PHASE_DURATION_KEYS = {
    "unloading": MetricKey.UNLOADING_DURATION,
    "braking": MetricKey.BRAKING_DURATION,
    "propulsion": MetricKey.PROPULSION_DURATION,
}


@dataclass
class MetricsResult:
    """Metrics map plus the detection results they were derived from."""

    test_type: TestType
    metrics: Dict[str, float]
    bodyweight: float
    events: Optional[JumpEvents] = None
    phases: List[PhaseWindow] = field(default_factory=list)
    validity: Optional[TrialValidity] = None
    onset: Optional[int] = None


class MetricsEngine:
    """Derives the metrics map of a finished test from its sample series.

    Metrics whose phase or event could not be detected are left out of the map
    rather than reported as 0 or NaN.
    """

    def __init__(self, config: MetricsConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def compute(self, series: SampleSeries, test_type: Optional[TestType] = None) -> Dict[str, float]:
        return self.analyse(series, test_type).metrics

    def analyse(self, series: SampleSeries, test_type: Optional[TestType] = None) -> MetricsResult:
        """Run detection and metrics for one test.

        Raises:
            InsufficientData: Fewer than min_sample_count samples, zero duration,
                or (balance) too few defined CoP points.
            UnsupportedTestType: No test type given, an unknown one, or no algorithm for its category.
        """
        cfg = self.config
        test_type = test_type if test_type is not None else cfg.test_type
        if test_type is None:
            raise UnsupportedTestType("No test type given")
        try:
            test_type = TestType.from_value(test_type)
        except ValueError as exc:
            raise UnsupportedTestType(str(exc)) from exc

        if series.count < cfg.min_sample_count:
            raise InsufficientData(
                f"Need at least {cfg.min_sample_count} samples, got {series.count}"
            )
        if series.duration_ms <= 0:
            raise InsufficientData("Series has zero duration")
        category = test_type.category
        if category not in (TestCategory.JUMP, TestCategory.ISOMETRIC, TestCategory.BALANCE):
            raise UnsupportedTestType(f"No metrics algorithm for {test_type.value} ({category.value})")

        if cfg.lowpass_cutoff_hz is not None:
            series = series.filtered(cfg.lowpass_cutoff_hz, cfg.filter_order)

        bw, _mass, sigma = compute_baseline(
            series,
            quiet_window_ms=cfg.quiet_window_ms,
            body_weight_n=cfg.body_weight_n,
            flight_threshold_n=cfg.flight_force_threshold_n,
            gravity=cfg.gravity,
        )
        logger.debug("%s baseline: BW=%.1f N sigma=%.2f N over %d samples", test_type.value, bw, sigma, series.count)

        if category is TestCategory.JUMP:
            result = self._jump(series, test_type, bw, sigma)
        elif category is TestCategory.ISOMETRIC:
            result = self._isometric(series, test_type, bw, sigma)
        else:
            result = self._balance(series, test_type, bw)
        logger.info("Computed %d metrics for %s", len(result.metrics), test_type.value)
        return result

    # ----- shared -----

    def _basic(self, series: SampleSeries, bw: float, window_start: Optional[int], window_end: Optional[int]) -> Dict[str, float]:
        force = series.total
        peak = float(np.max(force))
        mean = float(np.mean(force))
        out: Dict[str, float] = {
            MetricKey.PEAK_FORCE.value: peak,
            MetricKey.AVERAGE_FORCE.value: mean,
            MetricKey.MIN_FORCE.value: float(np.min(force)),
            MetricKey.BODY_WEIGHT.value: bw,
            MetricKey.SAMPLE_RATE.value: series.sample_rate_hz,
            MetricKey.TEST_DURATION.value: float(series.duration_ms),
        }
        if bw > 0:
            out[MetricKey.RELATIVE_FORCE.value] = peak / bw
        if mean > 0:
            out[MetricKey.FORCE_COEFFICIENT_OF_VARIATION.value] = float(np.std(force)) / mean
        out.update(window_asymmetry(series, window_start, window_end))
        return out

    # ----- jump -----

    def _jump(self, series: SampleSeries, test_type: TestType, bw: float, sigma: float) -> MetricsResult:
        cfg = self.config
        g = cfg.gravity
        force = series.total
        ts = series.timestamps_ms
        t = series.times_s

        events = detect_events(
            series,
            test_type,
            bodyweight=bw,
            sigma_quiet=sigma,
            flight_threshold_n=cfg.flight_force_threshold_n,
            take_off_consecutive_samples=cfg.take_off_consecutive_samples,
            landing_sustain_ms=cfg.landing_sustain_ms,
            tolerance_n=cfg.quiet_standing_tolerance_n,
            onset_below_bw=cfg.onset_below_bw,
            onset_n_sigma=cfg.onset_n_sigma,
            onset_sustain_ms=cfg.onset_sustain_ms,
        )
        onset = events.movement_onset
        take_off = events.take_off
        landing = events.landing

        flight_s: Optional[float] = None
        if take_off is not None and landing is not None:
            flight_s = float(ts[landing] - ts[take_off]) / 1000.0

        # Drop jumps land on the plate moving, so velocity is anchored at take-off.
        v: Optional[np.ndarray] = None
        if test_type is TestType.DROP_JUMP:
            if flight_s is not None:
                v, _a = compute_kinematics(force, t, bw, onset, take_off, end_velocity=g * flight_s / 2.0, gravity=g)
                events = compute_phases(events, v, test_type)
        else:
            v, _a = compute_kinematics(force, t, bw, onset, take_off, gravity=g)
            events = compute_phases(events, v, test_type)
        phases = phase_windows(events, series.count)

        out = self._basic(series, bw, onset, take_off)

        if flight_s is not None:
            out[MetricKey.FLIGHT_TIME.value] = flight_s * 1000.0
            out[MetricKey.JUMP_HEIGHT.value] = g * flight_s ** 2 / 8.0 * 100.0
            out[MetricKey.TAKEOFF_VELOCITY.value] = g * flight_s / 2.0
        else:
            logger.warning("%s: no flight phase detected; flight metrics omitted", test_type.value)

        if onset is not None and take_off is not None and take_off > onset:
            contact_s = float(ts[take_off] - ts[onset]) / 1000.0
            out[MetricKey.CONTACT_TIME.value] = contact_s * 1000.0
            impulse = net_impulse(force, t, bw, onset, take_off)
            out[MetricKey.NET_IMPULSE.value] = impulse
            if test_type is not TestType.DROP_JUMP and bw > 0:
                v_to = impulse / (bw / g)
                if v_to > 0:
                    out[MetricKey.JUMP_HEIGHT_IMPULSE.value] = v_to ** 2 / (2.0 * g) * 100.0
            if test_type is TestType.DROP_JUMP and flight_s is not None and contact_s > 0:
                out[MetricKey.REACTIVE_STRENGTH_INDEX.value] = (g * flight_s ** 2 / 8.0) / contact_s

        concentric = [p for p in phases if p.name in ("braking", "propulsion")]
        if concentric and concentric[-1].end > concentric[0].start:
            out[MetricKey.AVERAGE_FORCE.value] = float(np.mean(force[concentric[0].start:concentric[-1].end]))
        else:
            del out[MetricKey.AVERAGE_FORCE.value]

        for phase in concentric:
            key = MetricKey.IMPULSE_BRAKING if phase.name == "braking" else MetricKey.IMPULSE_PROPULSION
            out[key.value] = net_impulse(force, t, bw, phase.start, phase.end)

        if v is not None and onset is not None and take_off is not None and take_off > onset:
            power = force[onset:take_off + 1] * v[onset:take_off + 1]
            peak_power = float(np.max(power))
            out[MetricKey.PEAK_POWER.value] = peak_power
            if bw > 0:
                out[MetricKey.RELATIVE_POWER.value] = peak_power / (bw / g)
            propulsion = [p for p in phases if p.name == "propulsion" and p.length > 0]
            if propulsion:
                p = propulsion[0]
                out[MetricKey.AVERAGE_POWER.value] = float(np.mean(force[p.start:p.end] * v[p.start:p.end]))

        rfd = self._jump_rfd(force, ts, events)
        if rfd is not None:
            out[MetricKey.RFD.value] = rfd

        for phase in phases:
            key = _PHASE_DURATION_KEYS.get(phase.name)
            if key is not None and phase.length > 0:
                out[key.value] = float(ts[phase.end] - ts[phase.start])

        if landing is not None:
            out[MetricKey.LANDING_PEAK_FORCE.value] = float(np.max(force[landing:]))

        contact = events.first_contact if events.first_contact is not None else 0
        take_offs = count_take_offs(
            force,
            cfg.flight_force_threshold_n,
            cfg.take_off_consecutive_samples,
            sustain_samples(series.sample_rate_hz, cfg.landing_sustain_ms),
            start=contact,
        )
        validity = validate_trial(events, ts, take_offs)
        if not validity.is_valid:
            logger.warning("%s validity flags: %s", test_type.value, validity.flags)

        return MetricsResult(
            test_type=test_type,
            metrics=out,
            bodyweight=bw,
            events=events,
            phases=phases,
            validity=validity,
            onset=onset,
        )

    def _jump_rfd(self, force: np.ndarray, ts: np.ndarray, events: JumpEvents) -> Optional[float]:
        """dF/dt over jump_rfd_window_ms from rfd_anchor ("onset", or "min_force" falling back to onset)."""
        start = events.movement_onset
        if self.config.rfd_anchor == "min_force" and events.min_force is not None:
            start = events.min_force
        if start is None or events.take_off is None or start >= events.take_off:
            return None
        end = int(np.searchsorted(ts, ts[start] + self.config.jump_rfd_window_ms, side="left"))
        end = min(end, events.take_off)
        dt_s = float(ts[end] - ts[start]) / 1000.0
        if end <= start or dt_s <= 0:
            return None
        return float(force[end] - force[start]) / dt_s

    # ----- isometric -----

    def _isometric(self, series: SampleSeries, test_type: TestType, bw: float, sigma: float) -> MetricsResult:
        cfg = self.config
        force = series.total
        ts = series.timestamps_ms
        t = series.times_s
        n = series.count

        tol = onset_tolerance(bw, sigma, cfg.quiet_standing_tolerance_n, cfg.onset_n_sigma, cfg.onset_below_bw)
        onset = detect_force_onset(
            force, bw, tol, sustain_samples(series.sample_rate_hz, cfg.onset_sustain_ms), rising=True
        )
        out = self._basic(series, bw, onset, None)
        if onset is None:
            logger.warning("%s: no force onset above %.1f N; onset metrics omitted", test_type.value, bw + tol)
            return MetricsResult(test_type=test_type, metrics=out, bodyweight=bw)

        peak_idx = onset + int(np.argmax(force[onset:]))
        out[MetricKey.PEAK_FORCE.value] = float(force[peak_idx])
        out[MetricKey.FORCE_ONSET_TIME.value] = float(ts[onset] - ts[0])
        out[MetricKey.TIME_TO_PEAK_FORCE.value] = float(ts[peak_idx] - ts[onset])
        if ts[peak_idx] > ts[onset]:
            out[MetricKey.RFD.value] = float(force[peak_idx] - force[onset]) / (float(ts[peak_idx] - ts[onset]) / 1000.0)
        out[MetricKey.IMPULSE.value] = net_impulse(force, t, bw, onset, n - 1)

        for window_ms in cfg.rfd_windows_ms:
            target = ts[onset] + window_ms
            if target > ts[-1]:
                logger.debug("RFD window %s ms exceeds the recording; skipped", window_ms)
                continue
            idx = int(np.searchsorted(ts, target, side="left"))
            dt_s = float(ts[idx] - ts[onset]) / 1000.0
            if dt_s <= 0:
                continue
            out[rfd_window_key(window_ms)] = float(force[idx] - force[onset]) / dt_s
            out[impulse_window_key(window_ms)] = net_impulse(force, t, bw, onset, idx)
            out[force_at_key(window_ms)] = float(force[idx])

        phases = [PhaseWindow("quiet", 0, onset), PhaseWindow("force_development", onset, peak_idx + 1)]
        return MetricsResult(test_type=test_type, metrics=out, bodyweight=bw, phases=phases, onset=onset)

    # ----- balance -----

    def _balance(self, series: SampleSeries, test_type: TestType, bw: float) -> MetricsResult:
        points = series.cop_points()
        if len(points) < self.config.min_sample_count:
            raise InsufficientData(
                f"Need at least {self.config.min_sample_count} CoP points, got {len(points)}"
            )
        out = self._basic(series, bw, None, None)
        out.update(compute_balance(points, series.cop_timestamps_ms()))
        return MetricsResult(test_type=test_type, metrics=out, bodyweight=bw)


def compute_metrics(
    series: SampleSeries,
    test_type: Optional[TestType] = None,
    config: Optional[MetricsConfig] = None,
) -> Dict[str, float]:
    """Functional form of MetricsEngine(config).compute(series, test_type)."""
    return MetricsEngine(config or DEFAULT_CONFIG).compute(series, test_type)
