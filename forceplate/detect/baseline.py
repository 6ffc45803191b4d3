"""Bodyweight, mass, and quiet-phase std from the quiet-standing window."""
import logging
from typing import Optional, Tuple

import numpy as np

from ..config import G
from ..data.series import SampleSeries

logger = logging.getLogger(__name__)


def _window_samples(series: SampleSeries, window_ms: float) -> int:
    """Number of leading samples covering window_ms (at least 2 where available)."""
    ts = series.timestamps_ms
    if len(ts) == 0:
        return 0
    n = int(np.searchsorted(ts, ts[0] + window_ms, side="left"))
    return min(max(n, 2), len(ts))


def compute_baseline(
    series: SampleSeries,
    quiet_window_ms: float = 1000.0,
    body_weight_n: Optional[float] = None,
    flight_threshold_n: float = 20.0,
    gravity: float = G,
) -> Tuple[float, float, float]:
    """Compute bodyweight (N), mass (kg), and sigma_quiet from quiet standing.

    Uses mean and std of total GRF over the first quiet_window_ms. When the
    recording starts unloaded (drop jumps: the start of the window reads
    below flight_threshold_n) the last quiet_window_ms of the recording is used
    instead. An explicit body_weight_n overrides the mean; sigma still comes
    from the window.

    Returns:
        (bodyweight_N, mass_kg, sigma_quiet_N).
    """
    total = series.total
    n_quiet = _window_samples(series, quiet_window_ms)
    seg = total[:n_quiet]
    head = seg[: max(1, len(seg) // 10)]
    if len(head) and float(np.mean(head)) < flight_threshold_n:
        logger.debug("Recording starts unloaded (%.1f N); using trailing window", float(np.mean(head)))
        seg = total[len(total) - n_quiet :]

    bodyweight = float(np.mean(seg)) if len(seg) else 0.0
    sigma_quiet = float(np.std(seg)) if len(seg) > 1 else 0.0
    if body_weight_n is not None:
        bodyweight = float(body_weight_n)
    mass = bodyweight / gravity
    return bodyweight, mass, sigma_quiet
