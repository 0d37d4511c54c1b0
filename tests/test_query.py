"""
Unit tests for region histogram queries.
"""

import numpy as np
import pytest

from inthist import HistogramConfig, IntegralHistogram, OutOfBounds, Region
from inthist.binning import plain_bins


@pytest.fixture
def rgb_setup():
    """Random 3-channel image with its engine and table."""
    rng = np.random.default_rng(10)
    image = rng.integers(0, 256, (16, 12, 3), dtype=np.uint8)
    engine = IntegralHistogram(HistogramConfig(width=12, height=16, channels=3, bins=10))
    return image, engine, engine.integral_histogram(image)


def naive_histogram(image: np.ndarray, bins: int, x: int, y: int, w: int, h: int) -> np.ndarray:
    """Histogram of a rectangle computed by binning every sample in it."""
    index = plain_bins(image, bins)
    patch = index[y:y + h, x:x + w]
    return np.concatenate(
        [np.bincount(patch[:, :, c].ravel(), minlength=bins) for c in range(image.shape[2])]
    )


class TestRegionHistogram:
    """Test O(1) region extraction."""

    def test_two_by_two_whole_image(self):
        """Test that the 2x2 example's whole-image histogram is [2, 2]."""
        engine = IntegralHistogram(HistogramConfig(width=2, height=2, bins=2))
        table = engine.integral_histogram(np.array([[0, 255], [255, 0]], dtype=np.uint8))

        np.testing.assert_array_equal(engine.region_histogram(table, (0, 0, 2, 2)), [2, 2])

    def test_whole_image_consistency(self, rgb_setup):
        """Test that the whole-grid query equals a plain histogram of all samples."""
        image, engine, table = rgb_setup

        hist = engine.region_histogram(table, Region(x=0, y=0, width=12, height=16))

        assert hist.shape == (30,)
        np.testing.assert_array_equal(hist, naive_histogram(image, 10, 0, 0, 12, 16))
        # Every channel accounts for every sample
        assert np.all(hist.reshape(3, 10).sum(axis=1) == 12 * 16)

    @pytest.mark.parametrize("rect", [(0, 0, 1, 1), (3, 5, 4, 7), (11, 15, 1, 1), (2, 0, 10, 16)])
    def test_matches_naive(self, rgb_setup, rect):
        """Test arbitrary rectangles against direct binning."""
        image, engine, table = rgb_setup

        np.testing.assert_array_equal(
            engine.region_histogram(table, rect), naive_histogram(image, 10, *rect)
        )

    def test_additivity(self, rgb_setup):
        """Test that two adjacent rectangles sum to the rectangle they tile."""
        _, engine, table = rgb_setup

        whole = engine.region_histogram(table, (2, 3, 8, 9))
        left = engine.region_histogram(table, (2, 3, 5, 9))
        right = engine.region_histogram(table, (7, 3, 3, 9))
        top = engine.region_histogram(table, (2, 3, 8, 4))
        bottom = engine.region_histogram(table, (2, 7, 8, 5))

        np.testing.assert_array_equal(left + right, whole)
        np.testing.assert_array_equal(top + bottom, whole)

    @pytest.mark.parametrize("rect", [(4, 4, 0, 5), (4, 4, 5, 0), (12, 16, 0, 0), (0, 0, 0, 0)])
    def test_zero_area(self, rgb_setup, rect):
        """Test that zero width or height yields an all-zero histogram."""
        _, engine, table = rgb_setup

        hist = engine.region_histogram(table, rect)

        assert hist.shape == (30,)
        assert not hist.any()

    @pytest.mark.parametrize("rect", [(0, 0, 13, 1), (0, 0, 1, 17), (12, 0, 1, 1), (-1, 0, 2, 2)])
    def test_out_of_bounds(self, rgb_setup, rect):
        """Test that rectangles beyond the grid raise OutOfBounds."""
        _, engine, table = rgb_setup

        with pytest.raises(OutOfBounds):
            engine.region_histogram(table, rect)

    @pytest.mark.parametrize("rect", [(0, 0, 2), (0.5, 0, 2, 2), ("a", 0, 2, 2)])
    def test_malformed_region_is_not_out_of_bounds(self, rgb_setup, rect):
        """Test that malformed descriptors raise ValueError rather than OutOfBounds."""
        _, engine, table = rgb_setup

        with pytest.raises(ValueError) as excinfo:
            engine.region_histogram(table, rect)

        assert not isinstance(excinfo.value, OutOfBounds)

    def test_weighted_region(self):
        """Test that weighted tables return magnitude sums per bin."""
        values = np.array([[0, 255, 0], [255, 0, 255]], dtype=np.uint8)
        mags = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8)
        engine = IntegralHistogram(HistogramConfig(width=3, height=2, bins=2))
        table = engine.integral_histogram_vm(values, mags)

        np.testing.assert_array_equal(engine.region_histogram(table, (1, 0, 2, 2)), [3 + 5, 2 + 6])


class TestWindowHistograms:
    """Test dense extraction of all window histograms."""

    def test_matches_region_queries(self, rgb_setup):
        """Test that each dense entry equals the single-region query."""
        _, engine, table = rgb_setup

        dense = engine.window_histograms(table, (5, 3))

        assert dense.shape == (3, 14, 8, 10)
        for y in (0, 6, 13):
            for x in (0, 4, 7):
                np.testing.assert_array_equal(
                    dense[:, y, x].ravel(), engine.region_histogram(table, (x, y, 5, 3))
                )

    def test_full_window(self, rgb_setup):
        """Test that a window the size of the grid yields one position."""
        _, engine, table = rgb_setup

        dense = engine.window_histograms(table, (12, 16))

        assert dense.shape == (3, 1, 1, 10)

    @pytest.mark.parametrize("window", [(0, 3), (3, 0), (13, 3), (3, 17)])
    def test_window_out_of_bounds(self, rgb_setup, window):
        """Test that empty or oversized windows raise OutOfBounds."""
        _, engine, table = rgb_setup

        with pytest.raises(OutOfBounds):
            engine.window_histograms(table, window)
