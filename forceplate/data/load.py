"""Load and store test runs as JSON-compatible dicts (lossless round trip)."""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np

from .run import TestRun
from .series import SampleSeries
from .types import ForceSample, TestStatus, TestType
from .vector import ForceVector

REQUIRED_KEYS = {"athlete_id", "test_type"}
COLUMNAR_KEYS = {"test_duration", "left_force", "right_force"}


def _cop_to_list(cop: Optional[ForceVector]) -> Optional[list]:
    return None if cop is None else [cop.x, cop.y]


def _cop_from_list(value: Any) -> Optional[ForceVector]:
    if value is None:
        return None
    x, y = value
    return ForceVector.horizontal(float(x), float(y))


def sample_to_dict(sample: ForceSample) -> Dict[str, Any]:
    return {
        "timestamp": sample.timestamp,
        "left_grf": sample.left_grf,
        "right_grf": sample.right_grf,
        "left_cop": _cop_to_list(sample.left_cop),
        "right_cop": _cop_to_list(sample.right_cop),
        "sampling_rate_hz": sample.sampling_rate_hz,
        "stability_index": sample.stability_index,
    }


def sample_from_dict(data: Dict[str, Any]) -> ForceSample:
    rate = data.get("sampling_rate_hz")
    stability = data.get("stability_index")
    return ForceSample(
        timestamp=int(data["timestamp"]),
        left_grf=float(data["left_grf"]),
        right_grf=float(data["right_grf"]),
        left_cop=_cop_from_list(data.get("left_cop")),
        right_cop=_cop_from_list(data.get("right_cop")),
        sampling_rate_hz=None if rate is None else float(rate),
        stability_index=None if stability is None else float(stability),
    )


def run_to_dict(run: TestRun) -> Dict[str, Any]:
    """Serialize every field needed to rebuild the run with load_run_from_dict."""
    return {
        "run_id": run.run_id,
        "athlete_id": run.athlete_id,
        "test_type": run.test_type.value,
        "status": run.status.value,
        "start_time": run.start_time.isoformat(),
        "end_time": run.end_time.isoformat() if run.end_time is not None else None,
        "metrics": run.metrics,
        "quality_score": run.quality_score,
        "notes": run.notes,
        "samples": [sample_to_dict(s) for s in run.series],
    }


def _series_from_columns(data: Dict[str, Any]) -> SampleSeries:
    """Build a series from columnar force arrays (left_force, right_force, test_duration).

    Timestamps are spread evenly over test_duration (s), as exported by the device app.
    """
    left_force = np.asarray(data["left_force"], dtype=float)
    right_force = np.asarray(data["right_force"], dtype=float)
    sample_count = int(data.get("sample_count", len(left_force)))
    test_duration = float(data["test_duration"])

    if len(left_force) != sample_count:
        raise ValueError(f"left_force length {len(left_force)} != sample_count {sample_count}")
    if len(right_force) != sample_count:
        raise ValueError(f"right_force length {len(right_force)} != sample_count {sample_count}")
    if test_duration <= 0:
        raise ValueError(f"test_duration must be positive, got {test_duration}")

    sample_rate = sample_count / test_duration
    t_ms = np.round(np.arange(sample_count, dtype=float) / sample_rate * 1000.0).astype(np.int64)
    return SampleSeries(
        ForceSample(timestamp=int(t), left_grf=float(lf), right_grf=float(rf), sampling_rate_hz=sample_rate)
        for t, lf, rf in zip(t_ms, left_force, right_force)
    )


def load_run_from_dict(data: Dict[str, Any]) -> TestRun:
    """Build a TestRun from an in-memory dict (e.g. from an API request or a stored run).

    Samples come either from "samples" (list of sample dicts, as written by
    run_to_dict) or from columnar "left_force"/"right_force" arrays with
    "test_duration" in seconds. Runs without a status are restored in progress.

    Raises:
        ValueError: If required keys are missing or array lengths mismatch.
    """
    missing = REQUIRED_KEYS - set(data.keys())
    if "samples" not in data:
        missing |= COLUMNAR_KEYS - set(data.keys())
    if missing:
        raise ValueError(f"Missing required keys: {missing}")

    if "samples" in data:
        series = SampleSeries(sample_from_dict(s) for s in data["samples"])
    else:
        series = _series_from_columns(data)

    start_time = data.get("start_time")
    end_time = data.get("end_time")
    return TestRun.restore(
        run_id=str(data.get("run_id") or ""),
        test_type=TestType.from_value(data["test_type"]),
        athlete_id=str(data["athlete_id"]),
        start_time=datetime.fromisoformat(start_time) if start_time else datetime.now().astimezone(),
        end_time=datetime.fromisoformat(end_time) if end_time else None,
        status=TestStatus(data.get("status", TestStatus.IN_PROGRESS.value)),
        series=series,
        metrics=data.get("metrics") or {},
        quality_score=data.get("quality_score"),
        notes=str(data.get("notes") or ""),
    )


def load_run(path: Union[str, Path]) -> TestRun:
    """Load a single run JSON file.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If required keys are missing or array lengths mismatch.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return load_run_from_dict(data)


def save_run(run: TestRun, path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(run_to_dict(run), f, indent=2)
