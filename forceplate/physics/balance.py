"""Centre-of-pressure sway metrics for balance tests."""
import logging
from typing import Dict

import numpy as np
from scipy.spatial import ConvexHull, QhullError
from scipy.stats import chi2

from ..metric_keys import MetricKey

logger = logging.getLogger(__name__)

ELLIPSE_CONFIDENCE = 0.95


def hull_area(points: np.ndarray) -> float:
    """Convex-hull area of 2D points (mm^2); 0 for fewer than 3 points or a degenerate (collinear) set."""
    if len(points) < 3:
        return 0.0
    try:
        return float(ConvexHull(points).volume)
    except QhullError:
        logger.debug("CoP points degenerate; hull area is 0")
        return 0.0


def ellipse_area(points: np.ndarray, confidence: float = ELLIPSE_CONFIDENCE) -> float:
    """Area of the prediction ellipse covering `confidence` of a bivariate normal fit."""
    if len(points) < 3:
        return 0.0
    cov = np.cov(points, rowvar=False)
    det = float(np.linalg.det(cov))
    if det <= 0:
        return 0.0
    return float(np.pi * chi2.ppf(confidence, df=2) * np.sqrt(det))


def stability_index(points: np.ndarray) -> float:
    """100 / (1 + variance of step lengths): 100 for perfectly even sway, toward 0 as it gets erratic."""
    if len(points) < 2:
        return 100.0
    steps = np.hypot(*np.diff(points, axis=0).T)
    return float(100.0 / (1.0 + np.var(steps)))


def compute_balance(points: np.ndarray, timestamps_ms: np.ndarray) -> Dict[str, float]:
    """CoP range, path, velocity, area and stability from a (k, 2) trajectory in mm.

    x is medial-lateral (ML), y anterior-posterior (AP). Velocities are omitted
    when the trajectory has no duration.
    """
    x = points[:, 0]
    y = points[:, 1]
    range_ml = float(np.ptp(x))
    range_ap = float(np.ptp(y))
    dx = np.diff(x)
    dy = np.diff(y)
    path = float(np.sum(np.hypot(dx, dy)))

    out: Dict[str, float] = {
        MetricKey.COP_RANGE_ML.value: range_ml,
        MetricKey.COP_RANGE_AP.value: range_ap,
        MetricKey.COP_RANGE.value: float(np.hypot(range_ml, range_ap)),
        MetricKey.COP_PATH_LENGTH.value: path,
        MetricKey.COP_AREA.value: hull_area(points),
        MetricKey.COP_ELLIPSE_AREA_95.value: ellipse_area(points),
        MetricKey.COP_STD_ML.value: float(np.std(x)),
        MetricKey.COP_STD_AP.value: float(np.std(y)),
        MetricKey.STABILITY_INDEX.value: stability_index(points),
    }

    duration_s = float(timestamps_ms[-1] - timestamps_ms[0]) / 1000.0
    if duration_s > 0:
        out[MetricKey.COP_VELOCITY.value] = path / duration_s
        out[MetricKey.COP_VELOCITY_ML.value] = float(np.sum(np.abs(dx))) / duration_s
        out[MetricKey.COP_VELOCITY_AP.value] = float(np.sum(np.abs(dy))) / duration_s
    return out
