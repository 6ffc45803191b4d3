from .filter import lowpass_filter

__all__ = ["lowpass_filter"]
