from .baseline import compute_baseline
from .events import detect_events, detect_flights, first_sustained, onset_tolerance, sustain_samples
from .phases import compute_phases, phase_windows
from .validity import count_take_offs, validate_trial

__all__ = [
    "compute_baseline",
    "compute_phases",
    "count_take_offs",
    "detect_events",
    "detect_flights",
    "first_sustained",
    "onset_tolerance",
    "phase_windows",
    "sustain_samples",
    "validate_trial",
]
