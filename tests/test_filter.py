"""Tests for the zero-phase low-pass filter."""

from __future__ import annotations

import numpy as np
import pytest

from forceplate.signal import lowpass_filter


def test_removes_high_frequency_noise():
    t = np.arange(2000) / 1000.0
    slow = 700.0 + 100.0 * np.sin(2 * np.pi * 2.0 * t)
    noisy = slow + 20.0 * np.sin(2 * np.pi * 300.0 * t)
    filtered = lowpass_filter(noisy, 1000.0, 50.0)
    assert filtered.shape == noisy.shape
    assert np.max(np.abs(filtered[200:-200] - slow[200:-200])) < 2.0


def test_zero_phase_keeps_peak_position():
    t = np.arange(1000) / 1000.0
    pulse = np.exp(-((t - 0.5) ** 2) / (2 * 0.02 ** 2))
    filtered = lowpass_filter(pulse, 1000.0, 50.0)
    assert int(np.argmax(filtered)) == 500


def test_cutoff_at_nyquist_returns_copy():
    signal = np.array([1.0, 2.0, 3.0, 4.0] * 10)
    out = lowpass_filter(signal, 100.0, 50.0)
    assert np.array_equal(out, signal)
    assert out is not signal


def test_short_signal_returned_unchanged():
    signal = np.array([1.0, 5.0, 2.0])
    assert np.array_equal(lowpass_filter(signal, 1000.0, 50.0), signal)


def test_rejects_non_positive_rate():
    with pytest.raises(ValueError):
        lowpass_filter(np.zeros(100), 0.0, 50.0)
