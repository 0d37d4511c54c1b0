"""Integral histogram engine bound to a fixed configuration."""

import logging

import numpy as np
import numpy.typing as npt

from .builder import GridInput, build_joint, build_plain, build_weighted
from .compare import compare
from .config import HistogramConfig
from .distances import DistanceFunction, chi_squared
from .models import IntegralHistogramTable
from .query import RegionLike, WindowLike, region_histogram, window_histograms

logger = logging.getLogger(__name__)


class IntegralHistogram:
    """Builds, queries and compares integral histograms of one grid geometry.

    The engine holds only its configuration; every build returns a fresh
    table owned by the caller.

    Example:
        >>> engine = IntegralHistogram(HistogramConfig(width=640, height=480, channels=3, bins=20))
        >>> table_a = engine.integral_histogram(image_a)
        >>> engine.region_histogram(table_a, (0, 0, 100, 100))  # 60 values
        >>> sim = engine.compare(table_a, engine.integral_histogram(image_b), (20, 20))
    """

    def __init__(self, config: HistogramConfig):
        """Initialize engine and validate its configuration.

        Args:
            config: Grid geometry and binning parameters.

        Raises:
            InvalidConfiguration: If the configuration is invalid.
        """
        config.validate()
        self.config = config
        logger.debug(f"Engine configured: {config}")

    def integral_histogram(self, image: GridInput) -> IntegralHistogramTable:
        """Occupancy-count table of ``image`` (one grid per channel)."""
        return build_plain(image, self.config)

    def integral_histogram_vm(self, values: GridInput, magnitudes: GridInput) -> IntegralHistogramTable:
        """Value-binned table where each sample contributes its magnitude."""
        return build_weighted(values, magnitudes, self.config)

    def integral_histogram_joint(self, values: GridInput, magnitudes: GridInput) -> IntegralHistogramTable:
        """Joint value x magnitude table; requires ``config.mag_bins``."""
        return build_joint(values, magnitudes, self.config)

    def region_histogram(self, table: IntegralHistogramTable, region: RegionLike) -> npt.NDArray[np.generic]:
        """Histogram of a rectangle, ``bins * channels`` values channel-major."""
        return region_histogram(table, region)

    def window_histograms(self, table: IntegralHistogramTable, window: WindowLike) -> npt.NDArray[np.generic]:
        """Histograms of every window position, shape (channels, rows, cols, bins)."""
        return window_histograms(table, window)

    def compare(  # noqa: PLR0913
        self,
        table1: IntegralHistogramTable,
        table2: IntegralHistogramTable,
        window: WindowLike,
        distance: DistanceFunction = chi_squared,
        out_dtype: npt.DTypeLike = np.float32,
        progress: bool = False,
    ) -> npt.NDArray[np.generic]:
        """Per-pixel dissimilarity map of two tables under a sliding window."""
        return compare(table1, table2, window, distance, out_dtype, progress)
