from .types import (
    ForceSample,
    JumpEvents,
    PhaseWindow,
    QualityBand,
    RawFrame,
    TestCategory,
    TestStatus,
    TestType,
    TrialValidity,
)
from .vector import ForceVector
from .series import SampleSeries
from .run import TestRun
from .load import load_run, load_run_from_dict, run_to_dict, sample_from_dict, sample_to_dict, save_run

__all__ = [
    "ForceSample",
    "ForceVector",
    "JumpEvents",
    "PhaseWindow",
    "QualityBand",
    "RawFrame",
    "SampleSeries",
    "TestCategory",
    "TestRun",
    "TestStatus",
    "TestType",
    "TrialValidity",
    "load_run",
    "load_run_from_dict",
    "run_to_dict",
    "sample_from_dict",
    "sample_to_dict",
    "save_run",
]
