"""Butterworth low-pass pre-filter for left/right GRF before detection."""
import logging

import numpy as np
from scipy.signal import butter, filtfilt

logger = logging.getLogger(__name__)


def lowpass_filter(signal: np.ndarray, sample_rate: float, cutoff_hz: float, order: int = 4) -> np.ndarray:
    """Filter a GRF channel forward and backward so event indices do not shift.

    Args:
        signal: 1D force channel (N).
        sample_rate: Sampling frequency of the channel in Hz.
        cutoff_hz: -3 dB cutoff in Hz; 50 Hz suits jump and isometric tests.
        order: Butterworth order.

    Returns:
        New array of the same length. A plain copy comes back when the cutoff
        is at or above Nyquist, or when the channel is shorter than the
        padding filtfilt needs.

    Raises:
        ValueError: If sample_rate is not positive.
    """
    signal = np.asarray(signal, dtype=float)
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    wn = cutoff_hz / (0.5 * sample_rate)
    if wn >= 1.0:
        return signal.copy()
    b, a = butter(order, wn, btype="low")
    padlen = 3 * max(len(a), len(b))
    if len(signal) <= padlen:
        logger.debug("Channel of %d samples too short to filter (needs > %d)", len(signal), padlen)
        return signal.copy()
    return filtfilt(b, a, signal)
