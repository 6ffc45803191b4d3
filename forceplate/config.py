"""Default configuration for phase detection, metrics and quality scoring."""
from dataclasses import dataclass
from typing import Optional, Tuple

from .data.types import TestType

G = 9.81
RFD_ANCHORS = ("onset", "min_force")


@dataclass
class MetricsConfig:
    """Thresholds and windows used by the metrics engine.

    Every field has a default. The thresholds are empirical and not clinically
    validated; tune them per installation.
    """

    test_type: Optional[TestType] = None
    body_weight_n: Optional[float] = None  # None => mean of the quiet window
    rfd_windows_ms: Tuple[float, ...] = (50.0, 100.0, 200.0)
    jump_rfd_window_ms: float = 100.0
    rfd_anchor: str = "onset"  # "onset" or "min_force"; start of the jump RFD window
    flight_force_threshold_n: float = 20.0
    quiet_standing_tolerance_n: Optional[float] = None  # None => max(n_sigma*sigma, below_bw*BW)
    quiet_window_ms: float = 1000.0
    take_off_consecutive_samples: int = 4
    landing_sustain_ms: float = 10.0
    onset_below_bw: float = 0.05
    onset_n_sigma: float = 5.0
    onset_sustain_ms: float = 30.0
    min_sample_count: int = 10
    lowpass_cutoff_hz: Optional[float] = None  # None => analyse raw GRF
    filter_order: int = 4
    gravity: float = G

    def __post_init__(self) -> None:
        if self.rfd_anchor not in RFD_ANCHORS:
            raise ValueError(f"rfd_anchor must be one of {RFD_ANCHORS}, got {self.rfd_anchor!r}")


@dataclass
class QualityConfig:
    """Deduction weights (points out of 100) and limits for quality scoring."""

    # Per-sample
    max_total_force_n: float = 5000.0
    out_of_range_force_penalty: float = 30.0
    negative_side_force_penalty: float = 40.0
    cop_out_of_bounds_penalty: float = 20.0
    suspicious_asymmetry_pct: float = 50.0
    suspicious_asymmetry_penalty: float = 20.0
    min_stability_index: float = 0.3
    low_stability_penalty: float = 10.0
    rate_tolerance_fraction: float = 0.1
    timing_jitter_ms: float = 5.0
    rate_inconsistency_penalty: float = 10.0
    # Per-test
    short_duration_ratio: float = 0.5
    short_duration_penalty: float = 20.0
    long_duration_ratio: float = 2.0
    long_duration_penalty: float = 15.0
    min_recommended_samples: int = 100
    few_samples_penalty: float = 25.0
    high_asymmetry_pct: float = 20.0
    high_asymmetry_penalty: float = 15.0
    moderate_asymmetry_pct: float = 10.0
    moderate_asymmetry_penalty: float = 5.0
    max_force_cv: float = 0.15
    high_force_cv_penalty: float = 10.0
    min_jump_height_cm: float = 10.0
    low_jump_height_penalty: float = 10.0
    min_flight_time_ms: float = 200.0
    short_flight_penalty: float = 5.0
    multiple_take_off_penalty: float = 10.0
    max_cop_range_mm: float = 50.0
    excessive_sway_penalty: float = 10.0
    min_sample_count: int = 10


@dataclass
class PlatformGeometry:
    """Physical size of one platform; load cells sit at the four corners."""

    width_mm: float = 400.0
    length_mm: float = 600.0
    # FL, FR, RL, RR as (x, y) with x medial-lateral and y anterior-posterior
    corner_order: Tuple[str, ...] = ("front_left", "front_right", "rear_left", "rear_right")

    @property
    def corner_positions(self) -> Tuple[Tuple[float, float], ...]:
        hw = self.width_mm / 2.0
        hl = self.length_mm / 2.0
        return ((-hw, hl), (hw, hl), (-hw, -hl), (hw, -hl))

    def contains(self, x: float, y: float) -> bool:
        return abs(x) <= self.width_mm / 2.0 and abs(y) <= self.length_mm / 2.0


DEFAULT_CONFIG = MetricsConfig()
DEFAULT_QUALITY_CONFIG = QualityConfig()
DEFAULT_GEOMETRY = PlatformGeometry()
