"""Trial validity checks: single take-off, plausible flight duration."""
from typing import List

import numpy as np

from ..data.types import JumpEvents, TrialValidity
from .events import detect_flights

FLIGHT_TIME_MIN_MS = 100.0
FLIGHT_TIME_MAX_MS = 2000.0


def count_take_offs(
    force: np.ndarray,
    threshold: float,
    consecutive: int,
    landing_sustain: int,
    start: int = 0,
) -> int:
    return len(detect_flights(force, threshold, consecutive, landing_sustain, start=start))


def validate_trial(
    events: JumpEvents,
    timestamps_ms: np.ndarray,
    take_off_count: int,
    flight_time_min_ms: float = FLIGHT_TIME_MIN_MS,
    flight_time_max_ms: float = FLIGHT_TIME_MAX_MS,
) -> TrialValidity:
    """Check for single take-off and plausible flight duration. Return flags only (no exception)."""
    flags: List[str] = []

    if take_off_count > 1:
        flags.append("multiple_takeoff")
    if events.take_off is None:
        flags.append("no_takeoff")
    elif events.landing is None:
        flags.append("no_landing")

    if events.take_off is not None and events.landing is not None:
        t_flight = float(timestamps_ms[events.landing] - timestamps_ms[events.take_off])
        if t_flight < flight_time_min_ms:
            flags.append("short_flight")
        if t_flight > flight_time_max_ms:
            flags.append("long_flight")

    return TrialValidity(is_valid=len(flags) == 0, flags=flags)
