"""Mapping of raw samples to histogram bin indices."""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

# Default normalization maximum for floating point samples (skimage convention)
_FLOAT_MAX_VALUE = 1.0


def resolve_max_value(dtype: npt.DTypeLike, max_value: float | None) -> float:
    """Resolve the normalization maximum for a sample dtype.

    Args:
        dtype: Sample dtype.
        max_value: Explicit maximum, or None for the dtype default.

    Returns:
        ``max_value`` if given, ``np.iinfo(dtype).max`` for integer and bool
        dtypes, 1.0 for floating dtypes.
    """
    if max_value is not None:
        return max_value
    dtype = np.dtype(dtype)
    if dtype == np.bool_:
        return 1
    if np.issubdtype(dtype, np.integer):
        return int(np.iinfo(dtype).max)
    return _FLOAT_MAX_VALUE


def _quantize(samples: npt.NDArray[np.generic], scale: int, max_value: float) -> npt.NDArray[np.intp]:
    """Compute ``floor(samples * scale / max_value)`` without overflow."""
    if np.issubdtype(samples.dtype, np.integer) and float(max_value).is_integer():
        # Exact integer arithmetic; uint8 * scale would wrap otherwise
        return (samples.astype(np.int64) * scale) // int(max_value)
    return np.floor(samples.astype(np.float64) * scale / max_value).astype(np.int64)


def _clip(index: npt.NDArray[np.int64], upper: int, what: str) -> npt.NDArray[np.int64]:
    outside = np.count_nonzero((index < 0) | (index >= upper))
    if outside:
        logger.warning(f"{outside} {what} samples outside the normalization range were clipped")
        index = np.clip(index, 0, upper - 1)
    return index


def plain_bins(
    samples: npt.NDArray[np.generic], bins: int, max_value: float | None = None
) -> npt.NDArray[np.int64]:
    """Bin index of every sample for plain and value-magnitude histograms.

    Args:
        samples: Grid of samples (any shape).
        bins: Number of bins.
        max_value: Normalization maximum (None = dtype maximum).

    Returns:
        Array of the same shape with indices in [0, bins).
    """
    samples = np.asarray(samples)
    max_value = resolve_max_value(samples.dtype, max_value)
    index = _quantize(samples, bins - 1, max_value)
    return _clip(index, bins, "value")


def joint_bins(  # noqa: PLR0913
    values: npt.NDArray[np.generic],
    magnitudes: npt.NDArray[np.generic],
    bins: int,
    mag_bins: int,
    max_value: float | None = None,
    max_magnitude: float | None = None,
) -> npt.NDArray[np.int64]:
    """Joint value x magnitude bin index of every sample.

    The value axis is quantized into ``bins // mag_bins`` bins and the
    magnitude axis into ``mag_bins`` bins; the combined index is
    ``value_bin + magnitude_bin * (bins // mag_bins)``.

    Args:
        values: Grid of value samples.
        magnitudes: Grid of magnitude samples, same shape as ``values``.
        bins: Total number of joint bins.
        mag_bins: Number of magnitude bins; must divide ``bins``.
        max_value: Normalization maximum for values (None = dtype maximum).
        max_magnitude: Normalization maximum for magnitudes (None = dtype maximum).

    Returns:
        Array of joint indices in [0, bins).
    """
    values = np.asarray(values)
    magnitudes = np.asarray(magnitudes)
    nval = bins // mag_bins
    max_value = resolve_max_value(values.dtype, max_value)
    max_magnitude = resolve_max_value(magnitudes.dtype, max_magnitude)

    value_index = _clip(_quantize(values, nval - 1, max_value), nval, "value")
    mag_index = _clip(_quantize(magnitudes, mag_bins - 1, max_magnitude), mag_bins, "magnitude")
    return value_index + mag_index * nval
