"""Structured analysis response: metrics with value + unit + explanation, and phases for API consumers."""
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np

from .data.types import PhaseWindow
from .metric_keys import describe

# Display order for phases
PHASE_ORDER: List[str] = [
    "pre_contact",
    "quiet",
    "unloading",
    "braking",
    "propulsion",
    "flight",
    "landing",
    "force_development",
]

PHASE_EXPLANATIONS: Dict[str, str] = {
    "pre_contact": "Before first contact; the athlete is off the plate.",
    "quiet": "Standing still; force reflects body weight.",
    "unloading": "Force drops below body weight as the body starts to lower.",
    "braking": "Force rises back above body weight to stop the downward movement.",
    "propulsion": "Push upwards from zero velocity until take-off.",
    "flight": "Airborne; force plate reads near zero.",
    "landing": "Impact and absorption after touchdown.",
    "force_development": "Force rises from onset to peak against the fixed bar.",
}


def build_metric_analysis(metrics: Mapping[str, float]) -> Dict[str, Dict[str, Any]]:
    """Map metric key -> {value, unit, explanation}. Unknown keys get empty unit and explanation."""
    analysis: Dict[str, Dict[str, Any]] = {}
    for key, value in metrics.items():
        unit, explanation = describe(key) or ("", "")
        analysis[key] = {"value": value, "unit": unit, "explanation": explanation}
    return analysis


def build_phase_payload(phases: Sequence[PhaseWindow], timestamps_ms: np.ndarray) -> List[Dict[str, Any]]:
    """Phases in display order with index bounds, times (ms from the first sample) and explanation."""
    if len(timestamps_ms) == 0:
        return []
    t0 = int(timestamps_ms[0])
    last = len(timestamps_ms) - 1
    ordered = sorted(
        phases,
        key=lambda p: PHASE_ORDER.index(p.name) if p.name in PHASE_ORDER else len(PHASE_ORDER),
    )
    out: List[Dict[str, Any]] = []
    for p in ordered:
        start_ms = int(timestamps_ms[min(p.start, last)]) - t0
        end_ms = int(timestamps_ms[min(p.end, last)]) - t0
        out.append({
            "name": p.name,
            "start_index": p.start,
            "end_index": p.end,
            "start_ms": start_ms,
            "end_ms": end_ms,
            "duration_ms": end_ms - start_ms,
            "explanation": PHASE_EXPLANATIONS.get(p.name, ""),
        })
    return out
