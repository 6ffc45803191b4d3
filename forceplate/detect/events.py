"""First contact, take-off, landing, movement onset, and min-force detection."""
import logging
from typing import List, Optional, Tuple

import numpy as np

from ..data.series import SampleSeries
from ..data.types import JumpEvents, TestType

logger = logging.getLogger(__name__)

DEFAULT_FLIGHT_THRESHOLD_N = 20.0
TAKE_OFF_CONSECUTIVE_SAMPLES = 4
LANDING_SUSTAIN_MS = 10.0
ONSET_BELOW_BW = 0.05
ONSET_N_SIGMA = 5.0
ONSET_SUSTAIN_MS = 30.0


def sustain_samples(sample_rate: float, sustain_ms: float) -> int:
    """Samples spanning sustain_ms at sample_rate (at least 1)."""
    return max(1, int(np.ceil(sample_rate * sustain_ms / 1000.0)))


def first_sustained(mask: np.ndarray, length: int, start: int = 0, stop: Optional[int] = None) -> Optional[int]:
    """First index i in [start, stop) with mask[i : i + length] all True."""
    n = len(mask)
    length = max(1, int(length))
    if n < length:
        return None
    run = np.convolve(mask.astype(np.int64), np.ones(length, dtype=np.int64), mode="valid")
    stop = len(run) if stop is None else min(stop, len(run))
    start = max(0, start)
    if start >= stop:
        return None
    hits = np.flatnonzero(run[start:stop] == length)
    return start + int(hits[0]) if len(hits) else None


def onset_tolerance(
    bodyweight: float,
    sigma_quiet: float,
    tolerance_n: Optional[float] = None,
    onset_n_sigma: float = ONSET_N_SIGMA,
    onset_below_bw: float = ONSET_BELOW_BW,
) -> float:
    """Deviation from bodyweight that counts as movement: explicit, or max(n*sigma, frac*BW)."""
    if tolerance_n is not None:
        return float(tolerance_n)
    return max(onset_n_sigma * sigma_quiet, onset_below_bw * bodyweight)


def detect_first_contact(force: np.ndarray, threshold: float, sustain: int) -> Optional[int]:
    """First sample at or above threshold sustained for sustain samples."""
    return first_sustained(force >= threshold, sustain)


def detect_take_off(force: np.ndarray, threshold: float, consecutive: int, start: int = 0) -> Optional[int]:
    """First sample at or after start that stays below threshold for consecutive samples."""
    return first_sustained(force < threshold, consecutive, start=start)


def detect_landing(force: np.ndarray, take_off: int, threshold: float, sustain: int) -> Optional[int]:
    """First sample after take_off back at or above threshold, sustained for sustain samples."""
    return first_sustained(force >= threshold, sustain, start=take_off + 1)


def detect_flights(
    force: np.ndarray,
    threshold: float,
    consecutive: int,
    landing_sustain: int,
    start: int = 0,
) -> List[Tuple[int, Optional[int]]]:
    """Every (take_off, landing) pair from start onward; the last landing may be None."""
    flights: List[Tuple[int, Optional[int]]] = []
    pos = start
    while True:
        take_off = detect_take_off(force, threshold, consecutive, start=pos)
        if take_off is None:
            break
        landing = detect_landing(force, take_off, threshold, landing_sustain)
        flights.append((take_off, landing))
        if landing is None:
            break
        pos = landing
    return flights


def detect_force_onset(
    force: np.ndarray,
    bodyweight: float,
    tolerance: float,
    sustain: int,
    rising: bool,
    start: int = 0,
    stop: Optional[int] = None,
) -> Optional[int]:
    """First sustained departure from bodyweight: above BW + tol when rising, else below BW - tol."""
    if rising:
        mask = force > bodyweight + tolerance
    else:
        mask = force < bodyweight - tolerance
    return first_sustained(mask, sustain, start=start, stop=stop)


def detect_events(
    series: SampleSeries,
    test_type: TestType,
    bodyweight: float,
    sigma_quiet: float = 0.0,
    flight_threshold_n: float = DEFAULT_FLIGHT_THRESHOLD_N,
    take_off_consecutive_samples: int = TAKE_OFF_CONSECUTIVE_SAMPLES,
    landing_sustain_ms: float = LANDING_SUSTAIN_MS,
    tolerance_n: Optional[float] = None,
    onset_below_bw: float = ONSET_BELOW_BW,
    onset_n_sigma: float = ONSET_N_SIGMA,
    onset_sustain_ms: float = ONSET_SUSTAIN_MS,
) -> JumpEvents:
    """Detect jump events from total GRF.

    - First contact: first sustained loading of the plate (index 0 unless the
      athlete starts off the plate, as in drop jumps).
    - Take-off: first sample after first contact sustained below the flight
      threshold for take_off_consecutive_samples.
    - Landing: first sample after take-off sustained at or above the threshold
      for landing_sustain_ms.
    - Movement onset: countermovement jumps, F < BW - tol sustained
      onset_sustain_ms; squat jumps, F > BW + tol sustained; drop jumps, first
      contact. Must precede take-off, otherwise left None.
    - min_force: argmin(F) over the unloading dip, from onset to the first
      sample back at or above BW (take-off if F never recovers).
    - braking_start: that first sample back at or above BW.

    velocity_zero is filled in later by compute_phases.
    """
    force = series.total
    n = len(force)
    sr = series.sample_rate_hz
    landing_sustain = sustain_samples(sr, landing_sustain_ms)

    first_contact = detect_first_contact(force, flight_threshold_n, landing_sustain)
    if first_contact is None:
        logger.debug("Plate never loaded above %.1f N", flight_threshold_n)
        return JumpEvents()

    take_off = detect_take_off(force, flight_threshold_n, take_off_consecutive_samples, start=first_contact)
    landing = None
    if take_off is not None:
        landing = detect_landing(force, take_off, flight_threshold_n, landing_sustain)

    tol = onset_tolerance(bodyweight, sigma_quiet, tolerance_n, onset_n_sigma, onset_below_bw)
    onset_stop = take_off if take_off is not None else n
    movement_onset: Optional[int]
    if test_type is TestType.DROP_JUMP:
        movement_onset = first_contact
    else:
        movement_onset = detect_force_onset(
            force,
            bodyweight,
            tol,
            sustain_samples(sr, onset_sustain_ms),
            rising=not test_type.has_countermovement,
            start=first_contact,
            stop=onset_stop,
        )

    min_force: Optional[int] = None
    braking_start: Optional[int] = None
    if test_type.has_countermovement and movement_onset is not None and take_off is not None:
        back = np.flatnonzero(force[movement_onset:take_off] >= bodyweight)
        dip_end = movement_onset + int(back[0]) if len(back) else take_off
        seg = force[movement_onset:dip_end]
        if len(seg) > 0:
            min_force = movement_onset + int(np.argmin(seg))
            if len(back):
                braking_start = dip_end

    logger.debug(
        "Events: contact=%s onset=%s min_force=%s braking=%s take_off=%s landing=%s",
        first_contact, movement_onset, min_force, braking_start, take_off, landing,
    )
    return JumpEvents(
        movement_onset=movement_onset,
        take_off=take_off,
        landing=landing,
        first_contact=first_contact,
        min_force=min_force,
        braking_start=braking_start,
    )
