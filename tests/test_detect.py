"""Tests for baseline, event, phase and validity detection plus the physics helpers."""

from __future__ import annotations

import numpy as np
import pytest

from forceplate.analysis_response import build_metric_analysis, build_phase_payload
from forceplate.data.series import SampleSeries
from forceplate.data.types import ForceSample, JumpEvents, PhaseWindow, TestType
from forceplate.detect import (
    compute_baseline,
    compute_phases,
    detect_flights,
    first_sustained,
    onset_tolerance,
    phase_windows,
    sustain_samples,
    validate_trial,
)
from forceplate.detect.phases import find_velocity_zero
from forceplate.physics import compute_kinematics, ellipse_area, hull_area, net_impulse, stability_index
from forceplate.physics.asymmetry import window_asymmetry

G = 9.81

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_series(totals, left_share=0.5) -> SampleSeries:
    return SampleSeries(
        ForceSample(timestamp=i, left_grf=f * left_share, right_grf=f * (1.0 - left_share))
        for i, f in enumerate(np.asarray(totals, dtype=float))
    )


# ---------------------------------------------------------------------------
# Sustained runs and tolerances
# ---------------------------------------------------------------------------


def test_first_sustained():
    mask = np.array([False, True, True, False, True, True, True])
    assert first_sustained(mask, 3) == 4
    assert first_sustained(mask, 2) == 1
    assert first_sustained(mask, 2, start=2) == 4
    assert first_sustained(mask, 2, start=2, stop=4) is None
    assert first_sustained(mask, 8) is None


@pytest.mark.parametrize("rate, ms, expected", [(1000.0, 10.0, 10), (100.0, 10.0, 1), (250.0, 30.0, 8), (1000.0, 0.0, 1)])
def test_sustain_samples(rate, ms, expected):
    assert sustain_samples(rate, ms) == expected


def test_onset_tolerance():
    assert onset_tolerance(700.0, 2.0) == pytest.approx(35.0)
    assert onset_tolerance(700.0, 10.0) == pytest.approx(50.0)
    assert onset_tolerance(700.0, 10.0, tolerance_n=12.0) == 12.0


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------


def test_baseline_from_quiet_window():
    bw, mass, sigma = compute_baseline(make_series(np.full(2000, 700.0)))
    assert bw == pytest.approx(700.0)
    assert mass == pytest.approx(700.0 / G)
    assert sigma == pytest.approx(0.0)


def test_baseline_uses_noise_of_window_only():
    totals = np.concatenate([np.tile([690.0, 710.0], 500), np.full(1000, 1500.0)])
    bw, _mass, sigma = compute_baseline(make_series(totals))
    assert bw == pytest.approx(700.0)
    assert sigma == pytest.approx(10.0)


def test_explicit_body_weight_overrides_mean():
    bw, mass, _sigma = compute_baseline(make_series(np.full(2000, 700.0)), body_weight_n=800.0)
    assert bw == 800.0
    assert mass == pytest.approx(800.0 / G)


def test_recording_starting_off_plate_uses_trailing_window():
    totals = np.concatenate([np.zeros(500), np.full(1500, 700.0)])
    bw, _mass, _sigma = compute_baseline(make_series(totals))
    assert bw == pytest.approx(700.0)


# ---------------------------------------------------------------------------
# Flights, phases and validity
# ---------------------------------------------------------------------------


def test_detect_flights():
    force = np.concatenate([np.full(20, 700.0), np.zeros(10), np.full(20, 700.0), np.zeros(10), np.full(20, 700.0)])
    assert detect_flights(force, 20.0, 4, 10) == [(20, 30), (50, 60)]


def test_detect_flights_without_landing():
    force = np.concatenate([np.full(20, 700.0), np.zeros(10)])
    assert detect_flights(force, 20.0, 4, 10) == [(20, None)]


def test_velocity_zero_is_upward_crossing_after_minimum():
    v = np.array([0.0, -1.0, -2.0, -1.0, 0.5, 1.0])
    assert find_velocity_zero(v, 0, 5) == 4


def test_velocity_zero_falls_back_after_minimum():
    v = np.array([0.0, -1.0, -2.0, -1.0, -0.5, -0.1])
    assert find_velocity_zero(v, 0, 5) == 3


def test_squat_jump_velocity_zero_is_onset():
    events = JumpEvents(movement_onset=10, take_off=50, first_contact=0)
    updated = compute_phases(events, np.zeros(60), TestType.SQUAT_JUMP)
    assert updated.velocity_zero == 10
    assert events.velocity_zero is None


def test_phase_windows_for_full_countermovement():
    events = JumpEvents(
        movement_onset=100, braking_start=200, velocity_zero=260, take_off=300, landing=400, first_contact=0
    )
    windows = phase_windows(events, 500)
    assert [(p.name, p.start, p.end) for p in windows] == [
        ("quiet", 0, 100),
        ("unloading", 100, 200),
        ("braking", 200, 260),
        ("propulsion", 260, 300),
        ("flight", 300, 400),
        ("landing", 400, 500),
    ]


def test_phase_windows_for_drop_jump():
    events = JumpEvents(movement_onset=50, velocity_zero=120, take_off=200, landing=300, first_contact=50)
    names = [p.name for p in phase_windows(events, 400)]
    assert names == ["pre_contact", "braking", "propulsion", "flight", "landing"]


@pytest.mark.parametrize(
    "events, flag",
    [
        (JumpEvents(take_off=10, landing=60), "short_flight"),
        (JumpEvents(), "no_takeoff"),
        (JumpEvents(take_off=10), "no_landing"),
    ],
)
def test_validity_flags(events, flag):
    validity = validate_trial(events, np.arange(100), take_off_count=1)
    assert flag in validity.flags
    assert not validity.is_valid


def test_long_flight_and_multiple_take_offs():
    validity = validate_trial(JumpEvents(take_off=10, landing=70), np.arange(100) * 50, take_off_count=2)
    assert validity.flags == ["multiple_takeoff", "long_flight"]


def test_valid_trial():
    validity = validate_trial(JumpEvents(take_off=10, landing=60), np.arange(100) * 5, take_off_count=1)
    assert validity.is_valid
    assert validity.flags == []


# ---------------------------------------------------------------------------
# Kinematics, impulse, balance helpers
# ---------------------------------------------------------------------------


def test_kinematics_constant_acceleration():
    mass = 700.0 / G
    force = np.full(11, 700.0 + 2.0 * mass)
    t = np.arange(11) * 0.001
    v, a = compute_kinematics(force, t, 700.0, 0, 10)
    assert a == pytest.approx(np.full(11, 2.0))
    assert v[10] == pytest.approx(0.02)
    assert v[0] == 0.0


def test_kinematics_anchored_at_end():
    mass = 700.0 / G
    force = np.full(11, 700.0 + 2.0 * mass)
    t = np.arange(11) * 0.001
    v, _a = compute_kinematics(force, t, 700.0, 0, 10, end_velocity=1.0)
    assert v[10] == pytest.approx(1.0)
    assert v[0] == pytest.approx(0.98)


def test_kinematics_without_window_is_zero():
    v, _a = compute_kinematics(np.full(5, 800.0), np.arange(5) * 0.001, 700.0, None, 4)
    assert not v.any()


def test_net_impulse():
    t = np.linspace(0.0, 1.0, 11)
    assert net_impulse(np.full(11, 800.0), t, 700.0, 0, 10) == pytest.approx(100.0)
    assert net_impulse(np.full(11, 800.0), t, 700.0, 5, 5) == 0.0


def test_hull_and_ellipse_area():
    square = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    assert hull_area(square) == pytest.approx(1.0)
    assert hull_area(square[:2]) == 0.0
    line = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
    assert hull_area(line) == 0.0
    assert ellipse_area(line) == 0.0
    assert ellipse_area(square) > 0.0


def test_stability_index():
    assert stability_index(np.array([[0.0, 0.0]])) == 100.0
    even = np.column_stack([np.arange(10.0), np.zeros(10)])
    assert stability_index(even) == pytest.approx(100.0)
    jerky = np.array([[0.0, 0.0], [1.0, 0.0], [11.0, 0.0], [12.0, 0.0]])
    assert stability_index(jerky) < 10.0


def test_window_asymmetry_short_window_uses_whole_series():
    series = make_series(np.full(10, 100.0), left_share=0.7)
    out = window_asymmetry(series, 3, 4)
    assert out["asymmetryIndex"] == pytest.approx(40.0)
    assert out["leftLoadPercentage"] == pytest.approx(70.0)
    assert out["maxAsymmetry"] == pytest.approx(40.0)


# ---------------------------------------------------------------------------
# Response payloads
# ---------------------------------------------------------------------------


def test_phase_payload_order_and_times():
    timestamps = np.arange(100, 600)
    phases = [PhaseWindow("landing", 400, 500), PhaseWindow("quiet", 0, 100), PhaseWindow("flight", 300, 400)]
    payload = build_phase_payload(phases, timestamps)
    assert [p["name"] for p in payload] == ["quiet", "flight", "landing"]
    assert payload[0]["start_ms"] == 0
    assert payload[1]["duration_ms"] == 100
    assert payload[2]["end_ms"] == 499
    assert build_phase_payload(phases, np.array([], dtype=np.int64)) == []


def test_metric_analysis_units():
    analysis = build_metric_analysis({"flightTime": 400.0, "rfd0_100ms": 4000.0, "custom": 1.0})
    assert analysis["flightTime"]["unit"] == "ms"
    assert analysis["rfd0_100ms"]["unit"] == "N/s"
    assert analysis["custom"] == {"value": 1.0, "unit": "", "explanation": ""}
