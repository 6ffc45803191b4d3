from .data import (
    ForceSample,
    ForceVector,
    RawFrame,
    SampleSeries,
    TestRun,
    TestStatus,
    TestType,
    load_run,
    load_run_from_dict,
    run_to_dict,
)
from .config import DEFAULT_CONFIG, DEFAULT_GEOMETRY, DEFAULT_QUALITY_CONFIG, MetricsConfig, PlatformGeometry, QualityConfig
from .decode import decode, decode_block, decode_frames
from .metric_keys import MetricKey
from .physics import MetricsEngine, compute_metrics
from .quality import QualityScorer, quality_band
from .run_analysis import finalize_run, run_analysis

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_GEOMETRY",
    "DEFAULT_QUALITY_CONFIG",
    "ForceSample",
    "ForceVector",
    "MetricKey",
    "MetricsConfig",
    "MetricsEngine",
    "PlatformGeometry",
    "QualityConfig",
    "QualityScorer",
    "RawFrame",
    "SampleSeries",
    "TestRun",
    "TestStatus",
    "TestType",
    "compute_metrics",
    "decode",
    "decode_block",
    "decode_frames",
    "finalize_run",
    "load_run",
    "load_run_from_dict",
    "quality_band",
    "run_analysis",
    "run_to_dict",
]
