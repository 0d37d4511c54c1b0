#!/usr/bin/env python3
"""Construction of integral histogram tables from sample grids.

Three variants share one scan and differ only in bin index and
contribution per sample:

- plain: bin of the sample, contribution 1
- weighted: bin of the value sample, contribution = magnitude sample
- joint: joint value x magnitude bin, contribution 1

The scan establishes the recurrence

    T[y+1, x+1, :] = T[y, x+1, :] + T[y+1, x, :] - T[y, x, :]
    T[y+1, x+1, bin(x, y)] += contribution(x, y)

on a table with a zeroed sentinel row and column.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from .binning import joint_bins, plain_bins
from .config import HistogramConfig
from .errors import DimensionMismatch, InvalidConfiguration, TypeMismatch
from .models import IntegralHistogramTable, TableMode

logger = logging.getLogger(__name__)

# A single 2-D grid, an (H, W, C) array, or one 2-D grid per channel
GridInput = npt.ArrayLike | Sequence[npt.ArrayLike]

_GRID_NDIM = 2
_STACKED_NDIM = 3


def split_channels(grids: GridInput, cfg: HistogramConfig, name: str = "image") -> list[np.ndarray]:
    """Turn the accepted input forms into a list of per-channel 2-D grids.

    Args:
        grids: 2-D grid (single channel), (H, W, C) array, or sequence of 2-D grids.
        cfg: Engine configuration the grids must match.
        name: Input name used in error messages.

    Returns:
        List of ``cfg.channels`` arrays of shape (height, width).

    Raises:
        DimensionMismatch: If the channel count or any grid shape differs
            from the configuration.
    """
    if not isinstance(grids, np.ndarray) and len(grids) and np.ndim(grids[0]) == _GRID_NDIM:
        channels = [np.asarray(g) for g in grids]
    else:
        grids = np.asarray(grids)
        if grids.ndim == _GRID_NDIM:
            channels = [grids]
        elif grids.ndim == _STACKED_NDIM:
            channels = [grids[:, :, c] for c in range(grids.shape[2])]
        else:
            msg = f"{name} must be 2-D or (H, W, C), got shape {grids.shape}"
            raise DimensionMismatch(msg)

    if len(channels) != cfg.channels:
        msg = f"{name} has {len(channels)} channels, expected {cfg.channels}"
        raise DimensionMismatch(msg)

    expected = (cfg.height, cfg.width)
    for idx, channel in enumerate(channels):
        if channel.shape != expected:
            msg = f"{name} channel {idx} has shape {channel.shape}, expected {expected}"
            raise DimensionMismatch(msg)
    return channels


def _split_pair(
    values: GridInput, magnitudes: GridInput, cfg: HistogramConfig
) -> tuple[list[np.ndarray], list[np.ndarray]]:
    """Validate and split paired value/magnitude inputs."""
    value_channels = split_channels(values, cfg, "values")
    mag_channels = split_channels(magnitudes, cfg, "magnitudes")
    for idx, (val, mag) in enumerate(zip(value_channels, mag_channels)):
        if val.dtype != mag.dtype:
            msg = f"channel {idx}: value dtype {val.dtype} differs from magnitude dtype {mag.dtype}"
            raise TypeMismatch(msg)
    return value_channels, mag_channels


def _accumulator_dtype(cfg: HistogramConfig, weights: np.ndarray | None) -> np.dtype:
    """Pick the accumulator dtype: configured, else int64 or float64 for float weights."""
    if cfg.accumulator_dtype is not None:
        return np.dtype(cfg.accumulator_dtype)
    if weights is not None and np.issubdtype(weights.dtype, np.inexact):
        return np.dtype(np.float64)
    return np.dtype(np.int64)


def wavefront_scan(
    index: npt.NDArray[np.int64], weights: np.ndarray | None, out: np.ndarray
) -> None:
    """Single-pass row-major scan filling one channel of the table.

    Args:
        index: Bin index per sample, shape (H, W).
        weights: Contribution per sample (None = 1 per sample), shape (H, W).
        out: Channel table of shape (H+1, W+1, bins) with zeroed sentinels.
    """
    rows, cols = index.shape
    for y in range(rows):
        for x in range(cols):
            # Propagate upper, left and upper-left prefix sums
            out[y + 1, x + 1] = out[y, x + 1] + out[y + 1, x] - out[y, x]
            out[y + 1, x + 1, index[y, x]] += 1 if weights is None else weights[y, x]


def cumsum_scan(
    index: npt.NDArray[np.int64], weights: np.ndarray | None, out: np.ndarray
) -> None:
    """Two-pass (rows then columns) prefix sum filling one channel of the table.

    Produces the same table as :func:`wavefront_scan`.

    Args:
        index: Bin index per sample, shape (H, W).
        weights: Contribution per sample (None = 1 per sample), shape (H, W).
        out: Channel table of shape (H+1, W+1, bins) with zeroed sentinels.
    """
    inner = out[1:, 1:]
    contribution = 1 if weights is None else weights[..., np.newaxis]
    np.put_along_axis(inner, index[..., np.newaxis], contribution, axis=2)
    np.cumsum(inner, axis=0, dtype=out.dtype, out=inner)
    np.cumsum(inner, axis=1, dtype=out.dtype, out=inner)


_SCANS = {
    "wavefront": wavefront_scan,
    "cumsum": cumsum_scan,
}


def _build(
    indices: list[np.ndarray],
    weights: list[np.ndarray] | None,
    cfg: HistogramConfig,
    mode: TableMode,
) -> IntegralHistogramTable:
    dtype = _accumulator_dtype(cfg, weights[0] if weights else None)

    # Sentinel row and column are zero: base case of the recurrence
    data = np.zeros(cfg.table_shape, dtype=dtype)

    scan = _SCANS[cfg.scan]
    for c, index in enumerate(indices):
        channel_weights = None if weights is None else weights[c].astype(dtype, copy=False)
        scan(index, channel_weights, data[c])

    logger.debug(f"Built {mode} integral histogram {data.shape} ({dtype}, {cfg.scan} scan)")
    return IntegralHistogramTable(data=data, mode=mode)


def build_plain(image: GridInput, cfg: HistogramConfig) -> IntegralHistogramTable:
    """Build an occupancy-count integral histogram.

    Args:
        image: Sample grid(s), one per channel.
        cfg: Engine configuration.

    Returns:
        Fresh table owned by the caller.

    Raises:
        DimensionMismatch: If the input does not match the configured shape.
    """
    cfg.validate()
    channels = split_channels(image, cfg)
    indices = [plain_bins(ch, cfg.bins, cfg.max_value) for ch in channels]
    return _build(indices, None, cfg, "plain")


def build_weighted(
    values: GridInput, magnitudes: GridInput, cfg: HistogramConfig
) -> IntegralHistogramTable:
    """Build a value histogram where each sample contributes its magnitude.

    Args:
        values: Value grid(s), one per channel; select the bin.
        magnitudes: Magnitude grid(s) of the same shape and dtype; added to the bin.
        cfg: Engine configuration.

    Returns:
        Fresh table owned by the caller.

    Raises:
        DimensionMismatch: If either input does not match the configured shape.
        TypeMismatch: If value and magnitude dtypes differ.
    """
    cfg.validate()
    value_channels, mag_channels = _split_pair(values, magnitudes, cfg)
    indices = [plain_bins(ch, cfg.bins, cfg.max_value) for ch in value_channels]
    return _build(indices, mag_channels, cfg, "weighted")


def build_joint(
    values: GridInput, magnitudes: GridInput, cfg: HistogramConfig
) -> IntegralHistogramTable:
    """Build a joint value x magnitude occupancy histogram.

    Requires ``cfg.mag_bins``; the ``cfg.bins`` joint bins are laid out as
    ``value_bin + magnitude_bin * (bins // mag_bins)``.

    Args:
        values: Value grid(s), one per channel.
        magnitudes: Magnitude grid(s) of the same shape and dtype.
        cfg: Engine configuration.

    Returns:
        Fresh table owned by the caller.

    Raises:
        InvalidConfiguration: If ``cfg.mag_bins`` is not set.
        DimensionMismatch: If either input does not match the configured shape.
        TypeMismatch: If value and magnitude dtypes differ.
    """
    cfg.validate()
    if cfg.mag_bins is None:
        msg = "joint histogram requires mag_bins to be configured"
        raise InvalidConfiguration(msg)
    value_channels, mag_channels = _split_pair(values, magnitudes, cfg)
    indices = [
        joint_bins(val, mag, cfg.bins, cfg.mag_bins, cfg.max_value, cfg.max_magnitude)
        for val, mag in zip(value_channels, mag_channels)
    ]
    return _build(indices, None, cfg, "joint")
