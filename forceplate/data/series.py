"""Ordered, append-only buffer of force samples with aggregates and derived views."""
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Union, overload

import numpy as np

from ..errors import InsufficientData, OutOfOrderSample, SeriesFrozen
from ..signal.filter import lowpass_filter
from .types import ForceSample


class SampleSeries:
    """Ordered sequence of ForceSample acquired during one test.

    Samples are appended one at a time by a single producer while the test is
    running; the series is then frozen and handed to the metrics engine and the
    quality scorer. Transformations never mutate the receiver: they return a
    new, unfrozen series.

    Numpy views of the GRF channels are built lazily and discarded on append.
    """

    def __init__(self, samples: Optional[Iterable[ForceSample]] = None, frozen: bool = False) -> None:
        self._samples: List[ForceSample] = []
        self._frozen = False
        self._arrays: Optional[Dict[str, np.ndarray]] = None
        if samples is not None:
            self.extend(samples)
        self._frozen = frozen

    # ----- acquisition -----

    def append(self, sample: ForceSample) -> None:
        """Append one sample.

        Raises:
            SeriesFrozen: If the series has been frozen.
            OutOfOrderSample: If sample.timestamp is earlier than the last timestamp.
        """
        if self._frozen:
            raise SeriesFrozen("Cannot append to a frozen series")
        if self._samples and sample.timestamp < self._samples[-1].timestamp:
            raise OutOfOrderSample(sample.timestamp, self._samples[-1].timestamp)
        self._samples.append(sample)
        self._arrays = None

    def extend(self, samples: Iterable[ForceSample]) -> None:
        for sample in samples:
            self.append(sample)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ----- sequence protocol -----

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[ForceSample]:
        return iter(self._samples)

    @overload
    def __getitem__(self, index: int) -> ForceSample: ...

    @overload
    def __getitem__(self, index: slice) -> "SampleSeries": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[ForceSample, "SampleSeries"]:
        if isinstance(index, slice):
            return SampleSeries(self._samples[index])
        return self._samples[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleSeries):
            return NotImplemented
        return self._samples == other._samples

    def __repr__(self) -> str:
        return f"SampleSeries(count={self.count}, duration_ms={self.duration_ms}, frozen={self._frozen})"

    @property
    def samples(self) -> Sequence[ForceSample]:
        return tuple(self._samples)

    # ----- aggregates -----

    @property
    def count(self) -> int:
        return len(self._samples)

    @property
    def duration_ms(self) -> int:
        if not self._samples:
            return 0
        return self._samples[-1].timestamp - self._samples[0].timestamp

    @property
    def sample_rate_hz(self) -> float:
        """(count - 1) intervals over the duration; 0 with fewer than 2 samples or no duration."""
        duration = self.duration_ms
        if self.count < 2 or duration <= 0:
            return 0.0
        return (self.count - 1) * 1000.0 / duration

    def _array(self, name: str) -> np.ndarray:
        if self._arrays is None:
            samples = self._samples
            arrays = {
                "timestamps": np.array([s.timestamp for s in samples], dtype=np.int64),
                "left": np.array([s.left_grf for s in samples], dtype=float),
                "right": np.array([s.right_grf for s in samples], dtype=float),
            }
            arrays["total"] = arrays["left"] + arrays["right"]
            with np.errstate(divide="ignore", invalid="ignore"):
                asym = np.where(
                    arrays["total"] > 0,
                    np.abs(arrays["left"] - arrays["right"]) / arrays["total"] * 100.0,
                    0.0,
                )
            arrays["asymmetry"] = asym
            for arr in arrays.values():
                arr.flags.writeable = False
            self._arrays = arrays
        return self._arrays[name]

    @property
    def timestamps_ms(self) -> np.ndarray:
        return self._array("timestamps")

    @property
    def times_s(self) -> np.ndarray:
        """Seconds since the first sample."""
        ts = self.timestamps_ms
        if len(ts) == 0:
            return np.zeros(0)
        return (ts - ts[0]) / 1000.0

    @property
    def left(self) -> np.ndarray:
        return self._array("left")

    @property
    def right(self) -> np.ndarray:
        return self._array("right")

    @property
    def total(self) -> np.ndarray:
        return self._array("total")

    @property
    def asymmetry(self) -> np.ndarray:
        return self._array("asymmetry")

    # An empty buffer carries no load: peaks and means read as 0 for live display.
    @property
    def peak_left_grf(self) -> float:
        return float(np.max(self.left)) if self.count else 0.0

    @property
    def peak_right_grf(self) -> float:
        return float(np.max(self.right)) if self.count else 0.0

    @property
    def peak_total_grf(self) -> float:
        return float(np.max(self.total)) if self.count else 0.0

    @property
    def average_left_grf(self) -> float:
        return float(np.mean(self.left)) if self.count else 0.0

    @property
    def average_right_grf(self) -> float:
        return float(np.mean(self.right)) if self.count else 0.0

    @property
    def average_total_grf(self) -> float:
        return float(np.mean(self.total)) if self.count else 0.0

    @property
    def mean_asymmetry(self) -> float:
        return float(np.mean(self.asymmetry)) if self.count else 0.0

    def cop_points(self) -> np.ndarray:
        """Combined CoP (x, y) of every sample where it is defined, shape (k, 2)."""
        points = [(c.x, c.y) for c in (s.combined_cop for s in self._samples) if c is not None]
        if not points:
            return np.zeros((0, 2))
        return np.array(points, dtype=float)

    def cop_timestamps_ms(self) -> np.ndarray:
        return np.array(
            [s.timestamp for s in self._samples if s.combined_cop is not None], dtype=np.int64
        )

    # ----- non-destructive transformations -----

    def time_range(self, start_ms: int, end_ms: int) -> "SampleSeries":
        """Samples with start_ms <= timestamp <= end_ms."""
        return SampleSeries(s for s in self._samples if start_ms <= s.timestamp <= end_ms)

    def force_threshold(self, min_total_grf: float) -> "SampleSeries":
        """Samples whose total GRF is at least min_total_grf."""
        return SampleSeries(s for s in self._samples if s.total_grf >= min_total_grf)

    def downsample(self, factor: int) -> "SampleSeries":
        """Keep every factor-th sample starting with the first; factor <= 1 copies."""
        factor = int(factor)
        if factor <= 1:
            return SampleSeries(self._samples)
        return SampleSeries(self._samples[::factor])

    def smoothed(self, window_size: int) -> "SampleSeries":
        """Centred moving average of left/right GRF.

        Each sample averages window_size // 2 neighbours on either side, with the
        window clipped at the series boundaries. window_size <= 1 or larger than
        the series copies the series unchanged.
        """
        n = self.count
        if window_size <= 1 or window_size > n:
            return SampleSeries(self._samples)
        half = window_size // 2
        idx = np.arange(n)
        starts = np.maximum(0, idx - half)
        ends = np.minimum(n, idx + half + 1)
        counts = ends - starts
        left_cs = np.concatenate(([0.0], np.cumsum(self.left)))
        right_cs = np.concatenate(([0.0], np.cumsum(self.right)))
        left_avg = (left_cs[ends] - left_cs[starts]) / counts
        right_avg = (right_cs[ends] - right_cs[starts]) / counts
        return SampleSeries(
            replace(s, left_grf=float(lf), right_grf=float(rf))
            for s, lf, rf in zip(self._samples, left_avg, right_avg)
        )

    def filtered(self, cutoff_hz: float, order: int = 4) -> "SampleSeries":
        """Zero-phase low-pass filter of left/right GRF at the series' own sample rate.

        Raises:
            InsufficientData: If the sample rate cannot be derived (< 2 samples or no duration).
        """
        rate = self.sample_rate_hz
        if rate <= 0:
            raise InsufficientData("Cannot filter a series without a sample rate")
        left_f = lowpass_filter(self.left, rate, cutoff_hz, order)
        right_f = lowpass_filter(self.right, rate, cutoff_hz, order)
        return SampleSeries(
            replace(s, left_grf=float(lf), right_grf=float(rf))
            for s, lf, rf in zip(self._samples, left_f, right_f)
        )
