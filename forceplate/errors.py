"""Typed failures raised by the force-plate core at the point of detection."""


class ForcePlateError(Exception):
    """Base class for all force-plate core errors."""


class InvalidChannelCount(ForcePlateError, ValueError):
    """Raw frame does not carry exactly 8 load-cell channels."""

    def __init__(self, count: int, expected: int = 8) -> None:
        super().__init__(f"Expected {expected} load-cell channels, got {count}")
        self.count = count
        self.expected = expected


class InvalidChannelValue(ForcePlateError, ValueError):
    """Raw frame carries a NaN or infinite load-cell reading."""


class DivisionByZero(ForcePlateError, ZeroDivisionError):
    """Vector divided by a zero scalar."""


class OutOfOrderSample(ForcePlateError, ValueError):
    """Sample appended with a timestamp earlier than the last one."""

    def __init__(self, timestamp: int, last_timestamp: int) -> None:
        super().__init__(
            f"Sample timestamp {timestamp} ms is earlier than last timestamp {last_timestamp} ms"
        )
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp


class InsufficientData(ForcePlateError, ValueError):
    """Series too short (or zero duration) to derive metrics or quality."""


class UnsupportedTestType(ForcePlateError, ValueError):
    """No metrics algorithm exists for the requested test type."""


class SeriesFrozen(ForcePlateError, RuntimeError):
    """Append attempted on a series that has been frozen."""


class RunNotActive(ForcePlateError, RuntimeError):
    """Mutation attempted on a test run that is no longer in progress."""
