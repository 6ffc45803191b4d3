"""Decode raw 8-channel load-cell frames into per-platform GRF and centre of pressure."""
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .config import DEFAULT_GEOMETRY, PlatformGeometry
from .data.series import SampleSeries
from .data.types import ForceSample, RawFrame
from .data.vector import ForceVector
from .errors import InvalidChannelCount, InvalidChannelValue

CHANNEL_COUNT = 8
CELLS_PER_PLATFORM = 4


def _validated_channels(channels: Sequence[float]) -> np.ndarray:
    cells = np.asarray(channels, dtype=float).ravel()
    if cells.size != CHANNEL_COUNT:
        raise InvalidChannelCount(cells.size, CHANNEL_COUNT)
    if not np.all(np.isfinite(cells)):
        raise InvalidChannelValue(f"Load-cell channels must be finite, got {cells.tolist()}")
    return cells


def _platform(cells: np.ndarray, corners: np.ndarray) -> Tuple[float, ForceVector]:
    """Total force and CoP of one platform; CoP is reported at the origin when unloaded."""
    total = float(np.sum(cells))
    if total <= 0:
        return 0.0, ForceVector.horizontal(0.0, 0.0)
    x, y = (cells @ corners) / total
    return total, ForceVector.horizontal(x, y)


def decode(frame: RawFrame, geometry: PlatformGeometry = DEFAULT_GEOMETRY) -> ForceSample:
    """Convert one raw frame into a ForceSample.

    Negative cell readings (sensor drift below zero) are treated as 0 before
    summation. Each platform's CoP is the force-weighted centroid of its four
    corner positions.

    Raises:
        InvalidChannelCount: If the frame does not carry exactly 8 channels.
        InvalidChannelValue: If any channel is NaN or infinite.
    """
    cells = np.clip(_validated_channels(frame.channels), 0.0, None)
    corners = np.asarray(geometry.corner_positions, dtype=float)
    left_grf, left_cop = _platform(cells[:CELLS_PER_PLATFORM], corners)
    right_grf, right_cop = _platform(cells[CELLS_PER_PLATFORM:], corners)
    return ForceSample(
        timestamp=frame.timestamp,
        left_grf=left_grf,
        right_grf=right_grf,
        left_cop=left_cop,
        right_cop=right_cop,
        sampling_rate_hz=frame.sampling_rate_hz,
    )


def decode_frames(
    frames: Iterable[RawFrame], geometry: PlatformGeometry = DEFAULT_GEOMETRY
) -> SampleSeries:
    """Decode frames in arrival order into a new (unfrozen) series."""
    return SampleSeries(decode(frame, geometry) for frame in frames)


def decode_block(
    channels: np.ndarray,
    timestamps: Sequence[int],
    sampling_rate_hz: Optional[float] = None,
    geometry: PlatformGeometry = DEFAULT_GEOMETRY,
) -> SampleSeries:
    """Decode an (n, 8) block of readings, as delivered by one DAQ chunk callback.

    Raises:
        InvalidChannelCount: If the block is not n x 8.
        ValueError: If timestamps does not have one entry per row.
    """
    block = np.asarray(channels, dtype=float)
    if block.ndim != 2 or block.shape[1] != CHANNEL_COUNT:
        width = block.shape[-1] if block.ndim else 0
        raise InvalidChannelCount(width, CHANNEL_COUNT)
    if len(timestamps) != block.shape[0]:
        raise ValueError(f"timestamps length {len(timestamps)} != block rows {block.shape[0]}")
    return decode_frames(
        (RawFrame(row, int(ts), sampling_rate_hz) for row, ts in zip(block, timestamps)),
        geometry,
    )
