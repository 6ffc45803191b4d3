"""Typed structures for force-plate samples, test types and detected events."""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from .vector import ForceVector

BALANCED_ASYMMETRY_PCT = 10.0


class TestCategory(str, Enum):
    JUMP = "jump"
    ISOMETRIC = "isometric"
    BALANCE = "balance"
    AGILITY = "agility"


class TestType(str, Enum):
    """Supported test protocols, keyed by their short code."""

    COUNTER_MOVEMENT_JUMP = "CMJ"
    SQUAT_JUMP = "SJ"
    DROP_JUMP = "DJ"
    ISOMETRIC_MID_THIGH_PULL = "IMTP"
    ISOMETRIC_SQUAT = "IS"
    STATIC_BALANCE = "SB"
    SINGLE_LEG_BALANCE = "SLB"
    DYNAMIC_BALANCE = "DB"
    LATERAL_HOP = "LH"

    @property
    def category(self) -> TestCategory:
        return _CATEGORIES[self]

    @property
    def expected_duration_s(self) -> float:
        """Nominal protocol duration used to judge recordings that are too short or long."""
        if self.category is TestCategory.JUMP:
            return 5.0
        if self.category is TestCategory.ISOMETRIC:
            return 8.0
        if self in (TestType.STATIC_BALANCE, TestType.SINGLE_LEG_BALANCE):
            return 30.0
        if self is TestType.DYNAMIC_BALANCE:
            return 20.0
        return 10.0

    @property
    def has_countermovement(self) -> bool:
        return self is TestType.COUNTER_MOVEMENT_JUMP

    @classmethod
    def from_value(cls, value: Union[str, "TestType"]) -> "TestType":
        """Resolve a code ("CMJ"), member name ("COUNTER_MOVEMENT_JUMP") or member.

        Raises:
            ValueError: If value names no known test type.
        """
        if isinstance(value, TestType):
            return value
        text = str(value).strip()
        for member in cls:
            if text.upper() == member.value or text.upper().replace("-", "_").replace(" ", "_") == member.name:
                return member
        raise ValueError(f"Unknown test type: {value!r}")


_CATEGORIES = {
    TestType.COUNTER_MOVEMENT_JUMP: TestCategory.JUMP,
    TestType.SQUAT_JUMP: TestCategory.JUMP,
    TestType.DROP_JUMP: TestCategory.JUMP,
    TestType.ISOMETRIC_MID_THIGH_PULL: TestCategory.ISOMETRIC,
    TestType.ISOMETRIC_SQUAT: TestCategory.ISOMETRIC,
    TestType.STATIC_BALANCE: TestCategory.BALANCE,
    TestType.SINGLE_LEG_BALANCE: TestCategory.BALANCE,
    TestType.DYNAMIC_BALANCE: TestCategory.BALANCE,
    TestType.LATERAL_HOP: TestCategory.AGILITY,
}


class TestStatus(str, Enum):

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class QualityBand(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    INVALID = "invalid"


@dataclass(frozen=True)
class RawFrame:
    """One acquisition frame: 8 load-cell readings (N) and a timestamp.

    Channel order: left platform front-left, front-right, rear-left, rear-right,
    then the right platform in the same order.
    """

    channels: Sequence[float]
    timestamp: int
    sampling_rate_hz: Optional[float] = None


def _clamped_force(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value if value > 0.0 else 0.0


@dataclass(frozen=True)
class ForceSample:
    """Ground reaction force of both platforms at one instant.

    GRF values are clamped to >= 0 at construction. CoP points are
    platform-relative (mm) and may be None when unknown.
    """

    timestamp: int
    left_grf: float
    right_grf: float
    left_cop: Optional[ForceVector] = None
    right_cop: Optional[ForceVector] = None
    sampling_rate_hz: Optional[float] = None
    stability_index: Optional[float] = None  # 0-1, supplied by the acquisition layer

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", int(self.timestamp))
        object.__setattr__(self, "left_grf", _clamped_force("left_grf", self.left_grf))
        object.__setattr__(self, "right_grf", _clamped_force("right_grf", self.right_grf))

    @property
    def total_grf(self) -> float:
        return self.left_grf + self.right_grf

    @property
    def combined_cop(self) -> Optional[ForceVector]:
        """Force-weighted average of both CoP points; None if either is unknown or no load."""
        total = self.total_grf
        if self.left_cop is None or self.right_cop is None or total <= 0:
            return None
        weighted = self.left_cop.scale(self.left_grf).add(self.right_cop.scale(self.right_grf))
        return weighted.divide(total)

    @property
    def asymmetry_index(self) -> float:
        """|L - R| / (L + R) * 100; 0 when there is no load."""
        total = self.total_grf
        if total <= 0:
            return 0.0
        return abs(self.left_grf - self.right_grf) / total * 100.0

    @property
    def left_load_pct(self) -> float:
        total = self.total_grf
        if total <= 0:
            return 50.0
        return self.left_grf / total * 100.0

    @property
    def right_load_pct(self) -> float:
        total = self.total_grf
        if total <= 0:
            return 50.0
        return self.right_grf / total * 100.0

    @property
    def is_balanced(self) -> bool:
        return self.asymmetry_index < BALANCED_ASYMMETRY_PCT

    @property
    def total_vector(self) -> ForceVector:
        return ForceVector.vertical(self.total_grf)


@dataclass
class JumpEvents:
    """Detected event indices (sample indices into the analysed series).

    - first_contact: first loaded sample (drop jumps start off the plate).
    - min_force: argmin(F) in [onset, take_off); end of unloading.
    - braking_start: first sample after min_force back at body weight.
    - velocity_zero: bottom of the countermovement; braking/propulsion boundary.
    """

    movement_onset: Optional[int] = None
    take_off: Optional[int] = None
    landing: Optional[int] = None
    first_contact: Optional[int] = None
    min_force: Optional[int] = None
    braking_start: Optional[int] = None
    velocity_zero: Optional[int] = None


@dataclass
class PhaseWindow:
    """Phase boundary indices; start inclusive, end exclusive."""

    name: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return max(0, self.end - self.start)


@dataclass
class TrialValidity:
    """Result of trial validity checks."""

    is_valid: bool
    flags: List[str] = field(default_factory=list)
