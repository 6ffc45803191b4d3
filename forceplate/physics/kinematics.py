"""COM acceleration and velocity from total GRF, and net impulse."""
from typing import Optional, Tuple

import numpy as np
from scipy.integrate import cumulative_trapezoid, trapezoid

from ..config import G


def net_impulse(force: np.ndarray, t: np.ndarray, bodyweight: float, start: int, end: int) -> float:
    """Trapezoidal integral of (F - BW) over samples [start, end] inclusive (N*s)."""
    sl = slice(start, end + 1)
    if end <= start:
        return 0.0
    return float(trapezoid(force[sl] - bodyweight, t[sl]))


def compute_kinematics(
    force: np.ndarray,
    t: np.ndarray,
    bodyweight: float,
    start_idx: Optional[int],
    end_idx: Optional[int],
    end_velocity: Optional[float] = None,
    gravity: float = G,
) -> Tuple[np.ndarray, np.ndarray]:
    """Vertical COM velocity and acceleration between start_idx and end_idx.

    a(t) = (F(t) - BW) / m. By default the athlete is at rest at start_idx and
    velocity is integrated forward. When end_velocity is given (drop jumps,
    where the athlete lands on the plate already moving) the integral is
    anchored at end_idx instead: v(t) = v_end - integral of a from t to end.

    Returns:
        (velocity, acceleration), both full series length, m/s and m/s^2.
        Velocity is 0 outside [start_idx, end_idx].
    """
    n = len(force)
    mass = bodyweight / gravity if bodyweight > 0 else 0.0
    a = (force - bodyweight) / mass if mass > 0 else np.zeros(n)
    v = np.zeros(n)

    if start_idx is None or end_idx is None:
        return v, a
    start = max(0, start_idx)
    end = min(end_idx + 1, n)
    if end - start < 2:
        return v, a

    v_seg = cumulative_trapezoid(a[start:end], t[start:end], initial=0)
    if end_velocity is not None:
        v_seg = end_velocity - (v_seg[-1] - v_seg)
    v[start:end] = v_seg
    return v, a
