from .kinematics import compute_kinematics, net_impulse
from .asymmetry import window_asymmetry
from .balance import compute_balance, ellipse_area, hull_area, stability_index
from .metrics import MetricsEngine, MetricsResult, compute_metrics

__all__ = [
    "MetricsEngine",
    "MetricsResult",
    "compute_balance",
    "compute_kinematics",
    "compute_metrics",
    "ellipse_area",
    "hull_area",
    "net_impulse",
    "stability_index",
    "window_asymmetry",
]
