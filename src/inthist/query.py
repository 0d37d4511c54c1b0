"""Region histogram extraction by 2-D inclusion-exclusion."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from pydantic import ValidationError

from .errors import OutOfBounds
from .models import IntegralHistogramTable, Region

RegionLike = Region | tuple[int, int, int, int]
WindowLike = tuple[int, int]


def check_region(table: IntegralHistogramTable, region: Region) -> None:
    """Raise OutOfBounds unless the region lies within the table's grid."""
    if region.x1 > table.width or region.y1 > table.height:
        msg = (
            f"region ({region.x}, {region.y}, {region.width}, {region.height}) exceeds "
            f"grid {table.width}x{table.height}"
        )
        raise OutOfBounds(msg)


def check_window(table: IntegralHistogramTable, window: WindowLike) -> None:
    """Raise OutOfBounds unless the window is non-empty and fits the grid."""
    win_w, win_h = window
    if not (0 < win_w <= table.width and 0 < win_h <= table.height):
        msg = f"window {win_w}x{win_h} does not fit grid {table.width}x{table.height}"
        raise OutOfBounds(msg)


def region_histogram(table: IntegralHistogramTable, region: RegionLike) -> npt.NDArray[np.generic]:
    """Exact histogram of the samples inside a rectangle.

    Runs in O(bins * channels) regardless of the rectangle's area:

        out[b] = T[y1, x1, b] - T[y0, x1, b] - T[y1, x0, b] + T[y0, x0, b]

    Args:
        table: Integral histogram table.
        region: Region or ``(x, y, width, height)`` tuple.

    Returns:
        Vector of length ``bins * channels``, channel-major.

    Raises:
        OutOfBounds: If the region exceeds the grid or has negative coordinates.
        ValueError: If the region descriptor is malformed (wrong arity,
            non-integral coordinates).
    """
    try:
        region = Region.coerce(region)
    except ValidationError as e:
        # Negative coordinates fail the ge=0 constraints; anything else is malformed
        if all(err["type"] == "greater_than_equal" for err in e.errors()):
            msg = f"region {region!r} has negative coordinates"
            raise OutOfBounds(msg) from e
        raise
    check_region(table, region)

    t = table.data
    x0, y0, x1, y1 = region.x, region.y, region.x1, region.y1
    out = t[:, y1, x1] - t[:, y0, x1] - t[:, y1, x0] + t[:, y0, x0]
    return out.ravel()


def window_histograms(table: IntegralHistogramTable, window: WindowLike) -> npt.NDArray[np.generic]:
    """Histograms of every window position at once.

    Applies the inclusion-exclusion formula to shifted slices of the table,
    so entry ``[c, y, x]`` equals the histogram of channel ``c`` over the
    window whose top-left corner is ``(x, y)``.

    Args:
        table: Integral histogram table.
        window: Window size as ``(width, height)``.

    Returns:
        Array of shape (channels, H - win_h + 1, W - win_w + 1, bins).

    Raises:
        OutOfBounds: If the window is empty or larger than the grid.
    """
    check_window(table, window)
    win_w, win_h = window
    t = table.data
    return (
        t[:, win_h:, win_w:]
        - t[:, :-win_h, win_w:]
        - t[:, win_h:, :-win_w]
        + t[:, :-win_h, :-win_w]
    )


def window_row_histograms(
    table: IntegralHistogramTable, channel: int, row: int, window: WindowLike
) -> npt.NDArray[np.generic]:
    """Histograms of all windows whose top edge is ``row``, for one channel.

    Args:
        table: Integral histogram table.
        channel: Channel index.
        row: Top row of the windows, in [0, H - win_h].
        window: Window size as ``(width, height)``; assumed to fit the grid.

    Returns:
        Array of shape (W - win_w + 1, bins); entry ``x`` is the window at column ``x``.
    """
    win_w, win_h = window
    t = table.data[channel]
    top = t[row]
    bottom = t[row + win_h]
    return bottom[win_w:] - top[win_w:] - bottom[:-win_w] + top[:-win_w]
