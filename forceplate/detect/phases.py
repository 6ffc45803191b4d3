"""Velocity-zero (braking/propulsion boundary) and phase windows for jump tests."""
from dataclasses import replace
from typing import List, Optional

import numpy as np

from ..data.types import JumpEvents, PhaseWindow, TestType


def find_velocity_zero(v: np.ndarray, start: int, take_off: int) -> Optional[int]:
    """First upward zero crossing of v after its minimum in [start, take_off].

    Falls back to the sample after the minimum when v never crosses zero, so a
    propulsion phase still exists.
    """
    v_seg = v[start : take_off + 1]
    if len(v_seg) < 2:
        return None
    local_min = int(np.argmin(v_seg))
    for i in range(local_min, len(v_seg) - 1):
        if v_seg[i] <= 0 and v_seg[i + 1] > 0:
            return start + i + 1
    if local_min < len(v_seg) - 1:
        return start + local_min + 1
    return None


def compute_phases(events: JumpEvents, v: np.ndarray, test_type: TestType) -> JumpEvents:
    """Return events with velocity_zero set from the COM velocity.

    Squat jumps have no downward phase, so velocity zero is their onset.
    """
    take_off = events.take_off
    if take_off is None:
        return events
    if test_type is TestType.SQUAT_JUMP:
        return replace(events, velocity_zero=events.movement_onset)
    start = events.braking_start if events.braking_start is not None else events.movement_onset
    if start is None:
        return events
    return replace(events, velocity_zero=find_velocity_zero(v, start, take_off))


def phase_windows(events: JumpEvents, n: int) -> List[PhaseWindow]:
    """Phase windows (start inclusive, end exclusive) for the events that were found."""
    onset = events.movement_onset
    braking = events.braking_start
    v_zero = events.velocity_zero
    take_off = events.take_off
    landing = events.landing

    phases: List[PhaseWindow] = []
    if onset is not None and onset > 0:
        off_plate = events.first_contact is not None and onset == events.first_contact
        phases.append(PhaseWindow("pre_contact" if off_plate else "quiet", 0, onset))
    if onset is not None and braking is not None:
        phases.append(PhaseWindow("unloading", onset, braking))
    braking_from = braking
    if braking_from is None and events.first_contact is not None and onset == events.first_contact:
        braking_from = onset  # drop jumps brake from first contact
    if braking_from is not None and v_zero is not None and v_zero > braking_from:
        phases.append(PhaseWindow("braking", braking_from, v_zero))
    if v_zero is not None and take_off is not None and take_off > v_zero:
        phases.append(PhaseWindow("propulsion", v_zero, take_off))
    if take_off is not None and landing is not None:
        phases.append(PhaseWindow("flight", take_off, landing))
    if landing is not None:
        phases.append(PhaseWindow("landing", landing, n))
    return phases
