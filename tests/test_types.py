"""Tests for ForceSample derived values and TestType resolution."""

from __future__ import annotations

import dataclasses

import pytest

from forceplate.data.run import TestRun
from forceplate.data.types import ForceSample, TestCategory, TestStatus, TestType
from forceplate.data.vector import ForceVector

# ---------------------------------------------------------------------------
# ForceSample
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("force", [0.1, 350.0, 1200.0])
def test_equal_sides_have_zero_asymmetry(force):
    sample = ForceSample(timestamp=0, left_grf=force, right_grf=force)
    assert sample.asymmetry_index == 0.0
    assert sample.is_balanced


def test_unloaded_sample_splits_fifty_fifty():
    sample = ForceSample(timestamp=0, left_grf=0.0, right_grf=0.0)
    assert sample.left_load_pct == 50.0
    assert sample.right_load_pct == 50.0
    assert sample.asymmetry_index == 0.0


def test_asymmetry_and_load_share():
    sample = ForceSample(timestamp=0, left_grf=600.0, right_grf=400.0)
    assert sample.asymmetry_index == pytest.approx(20.0)
    assert sample.left_load_pct == pytest.approx(60.0)
    assert sample.right_load_pct == pytest.approx(40.0)
    assert not sample.is_balanced


def test_negative_force_clamped_at_construction():
    sample = ForceSample(timestamp=0, left_grf=-25.0, right_grf=100.0)
    assert sample.left_grf == 0.0
    assert sample.total_grf == 100.0


def test_non_finite_force_rejected():
    with pytest.raises(ValueError):
        ForceSample(timestamp=0, left_grf=float("inf"), right_grf=100.0)


def test_combined_cop_is_force_weighted():
    sample = ForceSample(
        timestamp=0,
        left_grf=300.0,
        right_grf=100.0,
        left_cop=ForceVector.horizontal(-100.0, 0.0),
        right_cop=ForceVector.horizontal(100.0, 40.0),
    )
    cop = sample.combined_cop
    assert cop.x == pytest.approx(-50.0)
    assert cop.y == pytest.approx(10.0)


def test_combined_cop_undefined_without_both_points():
    sample = ForceSample(timestamp=0, left_grf=300.0, right_grf=100.0, left_cop=ForceVector.zero())
    assert sample.combined_cop is None


def test_combined_cop_undefined_without_load():
    sample = ForceSample(
        timestamp=0, left_grf=0.0, right_grf=0.0, left_cop=ForceVector.zero(), right_cop=ForceVector.zero()
    )
    assert sample.combined_cop is None


def test_sample_is_immutable():
    sample = ForceSample(timestamp=0, left_grf=1.0, right_grf=1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        sample.left_grf = 2.0  # type: ignore[misc]


def test_total_vector_is_vertical():
    sample = ForceSample(timestamp=0, left_grf=300.0, right_grf=400.0)
    assert sample.total_vector == ForceVector(0.0, 0.0, 700.0)


# ---------------------------------------------------------------------------
# TestType
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [
        ("CMJ", TestType.COUNTER_MOVEMENT_JUMP),
        ("cmj", TestType.COUNTER_MOVEMENT_JUMP),
        ("SQUAT_JUMP", TestType.SQUAT_JUMP),
        ("isometric mid-thigh pull", TestType.ISOMETRIC_MID_THIGH_PULL),
        (TestType.STATIC_BALANCE, TestType.STATIC_BALANCE),
    ],
)
def test_from_value(value, expected):
    assert TestType.from_value(value) is expected


def test_from_value_unknown():
    with pytest.raises(ValueError):
        TestType.from_value("BACKFLIP")


def test_categories_and_expected_durations():
    assert TestType.DROP_JUMP.category is TestCategory.JUMP
    assert TestType.ISOMETRIC_SQUAT.category is TestCategory.ISOMETRIC
    assert TestType.DYNAMIC_BALANCE.category is TestCategory.BALANCE
    assert TestType.LATERAL_HOP.category is TestCategory.AGILITY
    assert TestType.COUNTER_MOVEMENT_JUMP.expected_duration_s == 5.0
    assert TestType.ISOMETRIC_MID_THIGH_PULL.expected_duration_s == 8.0
    assert TestType.SINGLE_LEG_BALANCE.expected_duration_s == 30.0
    assert TestType.DYNAMIC_BALANCE.expected_duration_s == 20.0
    assert TestType.LATERAL_HOP.expected_duration_s == 10.0


def test_only_cmj_has_countermovement():
    assert TestType.COUNTER_MOVEMENT_JUMP.has_countermovement
    assert not TestType.SQUAT_JUMP.has_countermovement
    assert not TestType.DROP_JUMP.has_countermovement


@pytest.mark.parametrize("cls", [TestCategory, TestType, TestStatus, TestRun])
def test_library_classes_carry_no_collection_flag(cls):
    assert "__test__" not in vars(cls)
