#!/usr/bin/env python3
"""Distance functions between two histogram vectors."""

from __future__ import annotations

from typing import Literal, Protocol

import cv2
import numpy as np
import numpy.typing as npt

DistanceName = Literal["chi_squared", "l1", "euclidean", "intersection", "bhattacharyya"]


class DistanceFunction(Protocol):
    """Protocol defining the interface for histogram distances."""

    def __call__(self, h1: npt.NDArray[np.generic], h2: npt.NDArray[np.generic], length: int) -> float:
        """Compute dissimilarity between two histograms.

        Args:
            h1: First histogram vector.
            h2: Second histogram vector, same bin layout as ``h1``.
            length: Number of bins to compare.

        Returns:
            Distance score (lower = more similar, 0 for identical histograms)
        """
        ...


def _as_float(h: npt.NDArray[np.generic], length: int) -> npt.NDArray[np.float64]:
    return np.asarray(h[:length], dtype=np.float64)


def chi_squared(h1: npt.NDArray[np.generic], h2: npt.NDArray[np.generic], length: int) -> float:
    """Chi-squared statistic ``sum (h1 - h2)^2 / (h1 + h2)``.

    Bins where both histograms are empty contribute zero.
    """
    a = _as_float(h1, length)
    b = _as_float(h2, length)
    num = (a - b) ** 2
    den = a + b
    nonzero = den != 0
    return float(np.sum(num[nonzero] / den[nonzero]))


def l1_distance(h1: npt.NDArray[np.generic], h2: npt.NDArray[np.generic], length: int) -> float:
    """Sum of absolute bin differences."""
    return float(np.sum(np.abs(_as_float(h1, length) - _as_float(h2, length))))


def euclidean_distance(h1: npt.NDArray[np.generic], h2: npt.NDArray[np.generic], length: int) -> float:
    """L2 norm of the bin differences."""
    return float(np.linalg.norm(_as_float(h1, length) - _as_float(h2, length)))


def intersection_distance(h1: npt.NDArray[np.generic], h2: npt.NDArray[np.generic], length: int) -> float:
    """Mass of ``h1`` not shared with ``h2``: ``sum h1 - sum min(h1, h2)``.

    Zero for identical histograms; not symmetric when the totals differ.
    """
    a = _as_float(h1, length)
    b = _as_float(h2, length)
    return float(np.sum(a) - np.sum(np.minimum(a, b)))


def bhattacharyya_distance(h1: npt.NDArray[np.generic], h2: npt.NDArray[np.generic], length: int) -> float:
    """Bhattacharyya distance as computed by OpenCV.

    Two empty histograms are identical and get distance 0; an empty
    histogram against a non-empty one gets the maximum distance 1.
    """
    a = _as_float(h1, length).astype(np.float32)
    b = _as_float(h2, length).astype(np.float32)
    empty_a, empty_b = not a.any(), not b.any()
    if empty_a and empty_b:
        return 0.0
    if empty_a or empty_b:
        return 1.0
    return float(cv2.compareHist(a, b, cv2.HISTCMP_BHATTACHARYYA))


_DISTANCES: dict[str, DistanceFunction] = {
    "chi_squared": chi_squared,
    "l1": l1_distance,
    "euclidean": euclidean_distance,
    "intersection": intersection_distance,
    "bhattacharyya": bhattacharyya_distance,
}


def create_distance(name: DistanceName) -> DistanceFunction:
    """Factory function to look up a distance by name.

    Args:
        name: One of ``chi_squared``, ``l1``, ``euclidean``, ``intersection``,
            ``bhattacharyya``.

    Returns:
        The distance function.

    Raises:
        ValueError: If the distance name is unknown
    """
    try:
        return _DISTANCES[name]
    except KeyError:
        msg = f"Unknown distance: {name}"
        raise ValueError(msg) from None
