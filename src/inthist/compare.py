"""Dense sliding-window comparison of two integral histograms."""

from __future__ import annotations

import logging

import cv2
import numpy as np
import numpy.typing as npt
from tqdm import tqdm

from .distances import DistanceFunction, chi_squared
from .errors import DimensionMismatch
from .models import IntegralHistogramTable
from .query import WindowLike, check_window, window_row_histograms

logger = logging.getLogger(__name__)


def _check_compatible(table1: IntegralHistogramTable, table2: IntegralHistogramTable) -> None:
    if table1.data.shape != table2.data.shape:
        msg = f"table shapes differ: {table1.data.shape} vs {table2.data.shape}"
        raise DimensionMismatch(msg)
    if table1.mode != table2.mode:
        msg = f"table modes differ: {table1.mode} vs {table2.mode}"
        raise DimensionMismatch(msg)


def compare_channel(  # noqa: PLR0913
    table1: IntegralHistogramTable,
    table2: IntegralHistogramTable,
    channel: int,
    window: WindowLike,
    distance: DistanceFunction,
    out_dtype: npt.DTypeLike = np.float32,
    progress: bool = False,
) -> npt.NDArray[np.generic]:
    """Dissimilarity map of a single channel.

    Args:
        table1: First table.
        table2: Second table, same shape as ``table1``.
        channel: Channel index to compare.
        window: Window size as ``(width, height)``.
        distance: Callable ``(h1, h2, bins) -> float``.
        out_dtype: Output dtype.
        progress: Show a tqdm progress bar over output rows.

    Returns:
        Array of shape (H - win_h + 1, W - win_w + 1).
    """
    win_w, win_h = window
    out_rows = table1.height - win_h + 1
    out_cols = table1.width - win_w + 1
    bins = table1.bins
    out = np.empty((out_rows, out_cols), dtype=out_dtype)

    rows = range(out_rows)
    if progress:
        rows = tqdm(rows, desc=f"Comparing channel {channel}", unit="row")
    for y in rows:
        res1 = window_row_histograms(table1, channel, y, window)
        res2 = window_row_histograms(table2, channel, y, window)
        for x in range(out_cols):
            out[y, x] = distance(res1[x], res2[x], bins)
    return out


def compare(  # noqa: PLR0913
    table1: IntegralHistogramTable,
    table2: IntegralHistogramTable,
    window: WindowLike,
    distance: DistanceFunction = chi_squared,
    out_dtype: npt.DTypeLike = np.float32,
    progress: bool = False,
) -> npt.NDArray[np.generic]:
    """Compare two tables under every position of a sliding window.

    Each output pixel ``(x, y)`` is ``distance(h1, h2, bins)`` where ``h1``
    and ``h2`` are the histograms of the window with top-left corner
    ``(x, y)`` in each table. Cost does not depend on the window size.

    Args:
        table1: First table.
        table2: Second table, built with the same configuration.
        window: Window size as ``(width, height)``.
        distance: Callable ``(h1, h2, bins) -> float``. Defaults to chi-squared.
        out_dtype: Output dtype (must be supported by ``cv2.merge``).
        progress: Show a tqdm progress bar over output rows.

    Returns:
        Channel-merged map of shape (H - win_h + 1, W - win_w + 1, channels);
        2-D for single-channel tables.

    Raises:
        DimensionMismatch: If the tables differ in shape or mode.
        OutOfBounds: If the window is empty or larger than the grid.
        TypeError: If ``distance`` is not callable.
    """
    _check_compatible(table1, table2)
    if not callable(distance):
        msg = f"distance must be callable, got {type(distance).__name__}"
        raise TypeError(msg)
    check_window(table1, window)
    win_w, win_h = window

    name = getattr(distance, "__name__", type(distance).__name__)
    logger.debug(
        f"Comparing {table1.channels} channel(s) of {table1.width}x{table1.height} "
        f"with {win_w}x{win_h} window using {name}"
    )

    maps = [
        compare_channel(table1, table2, c, (win_w, win_h), distance, out_dtype, progress)
        for c in range(table1.channels)
    ]
    return cv2.merge(maps)
