"""Tests for raw load-cell frame decoding."""

from __future__ import annotations

import numpy as np
import pytest

from forceplate.config import PlatformGeometry
from forceplate.data.types import RawFrame
from forceplate.data.vector import ForceVector
from forceplate.decode import decode, decode_block, decode_frames
from forceplate.errors import InvalidChannelCount, InvalidChannelValue


def make_frame(left=(100.0, 100.0, 100.0, 100.0), right=(50.0, 50.0, 50.0, 50.0), timestamp=0, rate=None):
    return RawFrame(channels=list(left) + list(right), timestamp=timestamp, sampling_rate_hz=rate)


# ---------------------------------------------------------------------------
# Force per side
# ---------------------------------------------------------------------------


def test_sums_four_cells_per_side():
    sample = decode(make_frame())
    assert sample.left_grf == 400.0
    assert sample.right_grf == 200.0
    assert sample.total_grf == 600.0


def test_sum_matches_cells_for_random_frames():
    rng = np.random.default_rng(7)
    for i in range(50):
        cells = rng.uniform(0.0, 500.0, size=8)
        sample = decode(RawFrame(channels=cells.tolist(), timestamp=i))
        assert sample.left_grf == pytest.approx(float(np.sum(cells[:4])), rel=1e-12)
        assert sample.right_grf == pytest.approx(float(np.sum(cells[4:])), rel=1e-12)


def test_negative_cells_are_treated_as_zero():
    sample = decode(make_frame(left=(-50.0, 100.0, 100.0, 100.0)))
    assert sample.left_grf == 300.0


def test_timestamp_and_rate_carried_over():
    sample = decode(make_frame(timestamp=1234, rate=1000.0))
    assert sample.timestamp == 1234
    assert sample.sampling_rate_hz == 1000.0


# ---------------------------------------------------------------------------
# Centre of pressure
# ---------------------------------------------------------------------------


def test_even_load_puts_cop_at_centre():
    sample = decode(make_frame())
    assert sample.left_cop == ForceVector(0.0, 0.0, 0.0)
    assert sample.right_cop == ForceVector(0.0, 0.0, 0.0)


def test_front_left_cell_only():
    sample = decode(make_frame(left=(100.0, 0.0, 0.0, 0.0)))
    assert sample.left_cop.x == pytest.approx(-200.0)
    assert sample.left_cop.y == pytest.approx(300.0)


def test_front_loaded_platform():
    sample = decode(make_frame(right=(100.0, 100.0, 0.0, 0.0)))
    assert sample.right_cop.x == pytest.approx(0.0)
    assert sample.right_cop.y == pytest.approx(300.0)


def test_unloaded_platform_reports_origin():
    sample = decode(make_frame(left=(0.0, 0.0, 0.0, 0.0)))
    assert sample.left_grf == 0.0
    assert sample.left_cop == ForceVector(0.0, 0.0, 0.0)


def test_custom_geometry():
    geometry = PlatformGeometry(width_mm=200.0, length_mm=400.0)
    sample = decode(make_frame(left=(0.0, 50.0, 0.0, 0.0)), geometry)
    assert sample.left_cop.x == pytest.approx(100.0)
    assert sample.left_cop.y == pytest.approx(200.0)


# ---------------------------------------------------------------------------
# Invalid input
# ---------------------------------------------------------------------------


def test_seven_channels_raise_invalid_channel_count():
    frame = RawFrame(channels=[1.0] * 7, timestamp=0)
    with pytest.raises(InvalidChannelCount) as exc_info:
        decode(frame)
    assert exc_info.value.count == 7
    assert isinstance(exc_info.value, ValueError)


def test_non_finite_channel_raises():
    frame = make_frame(left=(float("nan"), 1.0, 1.0, 1.0))
    with pytest.raises(InvalidChannelValue):
        decode(frame)


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------


def test_decode_frames_builds_series():
    series = decode_frames(make_frame(timestamp=t) for t in range(5))
    assert series.count == 5
    assert not series.frozen
    assert list(series.timestamps_ms) == [0, 1, 2, 3, 4]


def test_decode_block():
    block = np.full((4, 8), 25.0)
    series = decode_block(block, [0, 10, 20, 30], sampling_rate_hz=100.0)
    assert series.count == 4
    assert series[0].left_grf == 100.0
    assert series[3].sampling_rate_hz == 100.0


def test_decode_block_wrong_width():
    with pytest.raises(InvalidChannelCount):
        decode_block(np.zeros((3, 7)), [0, 1, 2])


def test_decode_block_timestamp_mismatch():
    with pytest.raises(ValueError):
        decode_block(np.zeros((3, 8)), [0, 1])
