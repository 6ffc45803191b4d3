"""Left/right asymmetry and load distribution over an analysis window."""
from typing import Dict, Optional

import numpy as np

from ..data.series import SampleSeries
from ..metric_keys import MetricKey


def window_asymmetry(series: SampleSeries, start: Optional[int] = None, end: Optional[int] = None) -> Dict[str, float]:
    """Mean and max per-sample asymmetry plus left/right load share over [start, end).

    Windows shorter than 2 samples fall back to the whole series.
    """
    left = series.left
    right = series.right
    asym = series.asymmetry
    sl = slice(start, end)
    if len(asym[sl]) < 2:
        sl = slice(None)

    left_w = left[sl]
    right_w = right[sl]
    total = float(np.sum(left_w) + np.sum(right_w))
    if total > 0:
        left_pct = float(np.sum(left_w)) / total * 100.0
    else:
        left_pct = 50.0
    return {
        MetricKey.ASYMMETRY_INDEX.value: float(np.mean(asym[sl])),
        MetricKey.MAX_ASYMMETRY.value: float(np.max(asym[sl])),
        MetricKey.LEFT_LOAD_PERCENTAGE.value: left_pct,
        MetricKey.RIGHT_LOAD_PERCENTAGE.value: 100.0 - left_pct,
    }
