"""Run force-plate analysis from in-memory data (API entry point). No file I/O or plotting."""
import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .analysis_response import build_metric_analysis, build_phase_payload
from .config import DEFAULT_CONFIG, DEFAULT_QUALITY_CONFIG, MetricsConfig, QualityConfig
from .data import TestRun, TestType, load_run_from_dict
from .decode import decode_block
from .errors import ForcePlateError
from .physics import MetricsEngine, MetricsResult
from .quality import QualityReport, QualityScorer

logger = logging.getLogger(__name__)


def analyse_run(
    run: TestRun,
    config: MetricsConfig = DEFAULT_CONFIG,
    quality_config: QualityConfig = DEFAULT_QUALITY_CONFIG,
) -> Tuple[MetricsResult, QualityReport]:
    """Compute metrics and test quality for a run without changing its state."""
    result = MetricsEngine(config).analyse(run.series, run.test_type)
    report = QualityScorer(quality_config).assess_test(
        run.series, run.test_type, metrics=result.metrics, validity=result.validity
    )
    return result, report


def finalize_run(
    run: TestRun,
    config: MetricsConfig = DEFAULT_CONFIG,
    quality_config: QualityConfig = DEFAULT_QUALITY_CONFIG,
) -> Tuple[MetricsResult, QualityReport]:
    """End an in-progress run: compute metrics and quality, then mark it completed.

    On a core error (too little data, unsupported test type) the run is marked
    failed with the error as its note, and the error is re-raised.
    """
    run.series.freeze()
    try:
        result, report = analyse_run(run, config, quality_config)
    except ForcePlateError as exc:
        run.fail(f"{type(exc).__name__}: {exc}")
        raise
    run.complete(result.metrics, quality_score=report.score)
    return result, report


def _run_from_frames(data: Dict[str, Any]) -> TestRun:
    """Build an in-progress run from raw frames: {"frames": [{"channels": [8 floats], "timestamp": ms}, ...]}."""
    frames = data["frames"]
    if frames:
        channels = np.array([f["channels"] for f in frames], dtype=float)
    else:
        channels = np.zeros((0, 8))
    timestamps = [int(f["timestamp"]) for f in frames]
    series = decode_block(channels, timestamps, data.get("sampling_rate_hz"))
    return TestRun(TestType.from_value(data["test_type"]), data["athlete_id"], series=series)


def run_analysis(
    data: Dict[str, Any],
    config: Optional[MetricsConfig] = None,
    quality_config: Optional[QualityConfig] = None,
) -> Dict[str, Any]:
    """Run the full pipeline on in-memory data and return the analysis payload.

    Intended for API use: no files are written, no plots are generated.
    Input dict should contain athlete_id, test_type and one of: "samples"
    (sample dicts), "frames" (raw 8-channel frames), or "left_force" /
    "right_force" arrays with "test_duration" in seconds.

    Returns:
        Dict with athlete_id, test_type, metrics, quality_score, quality_band,
        quality_deductions, phases, validity, and "analysis" (metric key ->
        {value, unit, explanation}). Suitable for a JSON response or storage.

    Raises:
        ValueError: If required keys are missing or data is invalid (all core
            errors for bad input are ValueErrors).
    """
    if "frames" in data:
        missing = {"athlete_id", "test_type"} - set(data.keys())
        if missing:
            raise ValueError(f"Missing required keys: {missing}")
        run = _run_from_frames(data)
    else:
        run = load_run_from_dict(data)

    result, report = analyse_run(run, config or DEFAULT_CONFIG, quality_config or DEFAULT_QUALITY_CONFIG)
    logger.info(
        "Analysed %s for athlete %s: %d metrics, quality %.0f (%s)",
        run.test_type.value, run.athlete_id, len(result.metrics), report.score, report.band.value,
    )

    validity = None
    if result.validity is not None:
        validity = {"is_valid": result.validity.is_valid, "flags": list(result.validity.flags)}

    return {
        "athlete_id": run.athlete_id,
        "test_type": run.test_type.value,
        "sample_rate": run.series.sample_rate_hz,
        "bodyweight_N": result.bodyweight,
        "metrics": dict(result.metrics),
        "quality_score": report.score,
        "quality_band": report.band.value,
        "quality_deductions": [{"reason": r, "points": p} for r, p in report.deductions],
        "phases": build_phase_payload(result.phases, run.series.timestamps_ms),
        "validity": validity,
        "analysis": build_metric_analysis(result.metrics),
    }
