"""Integral histograms - O(bins) region histograms and sliding-window comparison."""

from .builder import build_joint, build_plain, build_weighted
from .compare import compare
from .config import HistogramConfig
from .distances import (
    DistanceFunction,
    bhattacharyya_distance,
    chi_squared,
    create_distance,
    euclidean_distance,
    intersection_distance,
    l1_distance,
)
from .engine import IntegralHistogram
from .errors import (
    DimensionMismatch,
    IntegralHistogramError,
    InvalidConfiguration,
    OutOfBounds,
    TypeMismatch,
)
from .models import IntegralHistogramTable, Region
from .query import region_histogram, window_histograms

__version__ = "0.1.0"

__all__ = [
    "DimensionMismatch",
    "DistanceFunction",
    "HistogramConfig",
    "IntegralHistogram",
    "IntegralHistogramError",
    "IntegralHistogramTable",
    "InvalidConfiguration",
    "OutOfBounds",
    "Region",
    "TypeMismatch",
    "bhattacharyya_distance",
    "build_joint",
    "build_plain",
    "build_weighted",
    "chi_squared",
    "compare",
    "create_distance",
    "euclidean_distance",
    "intersection_distance",
    "l1_distance",
    "region_histogram",
    "window_histograms",
]
