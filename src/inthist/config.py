#!/usr/bin/env python3
"""Configuration dataclass for the integral histogram engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np
import numpy.typing as npt

from .errors import InvalidConfiguration

# Type aliases
ScanMethod = Literal["cumsum", "wavefront"]

_SCAN_METHODS = ("cumsum", "wavefront")


@dataclass(frozen=True)
class HistogramConfig:
    """Immutable engine configuration.

    Grid dimensions and bin layout are fixed here; every table built from
    the same config has the same shape and can be compared with any other.
    """

    # Grid Settings
    width: int
    height: int
    channels: int = 1

    # Binning Settings
    bins: int = 256
    max_value: float | None = None  # None = sample dtype maximum

    # Joint Mode Settings (None = joint mode unavailable)
    mag_bins: int | None = None
    max_magnitude: float | None = None  # None = magnitude dtype maximum

    # Storage Settings
    accumulator_dtype: npt.DTypeLike | None = None  # None = chosen per build
    scan: ScanMethod = "cumsum"

    def __post_init__(self) -> None:
        """Normalize the accumulator dtype to a numpy dtype."""
        if self.accumulator_dtype is not None:
            object.__setattr__(self, "accumulator_dtype", np.dtype(self.accumulator_dtype))

    @property
    def value_bins(self) -> int:
        """Number of value bins per magnitude bin in joint mode.

        Returns:
            ``bins // mag_bins``, or ``bins`` when joint mode is not configured.
        """
        if self.mag_bins is None:
            return self.bins
        return self.bins // self.mag_bins

    @property
    def table_shape(self) -> tuple[int, int, int, int]:
        """Shape of the table array, sentinel row and column included."""
        return (self.channels, self.height + 1, self.width + 1, self.bins)

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            InvalidConfiguration: If any parameter is invalid.
        """
        if self.width <= 0 or self.height <= 0:
            msg = f"grid dimensions must be positive, got {self.width}x{self.height}"
            raise InvalidConfiguration(msg)
        if self.channels <= 0:
            msg = f"channels must be positive, got {self.channels}"
            raise InvalidConfiguration(msg)
        if self.bins <= 0:
            msg = f"bins must be positive, got {self.bins}"
            raise InvalidConfiguration(msg)
        if self.max_value is not None and self.max_value <= 0:
            msg = f"max_value must be positive, got {self.max_value}"
            raise InvalidConfiguration(msg)
        if self.max_magnitude is not None and self.max_magnitude <= 0:
            msg = f"max_magnitude must be positive, got {self.max_magnitude}"
            raise InvalidConfiguration(msg)
        if self.mag_bins is not None:
            if not 0 < self.mag_bins <= self.bins:
                msg = f"mag_bins must be in [1,{self.bins}], got {self.mag_bins}"
                raise InvalidConfiguration(msg)
            if self.bins % self.mag_bins != 0:
                msg = f"bins ({self.bins}) must be divisible by mag_bins ({self.mag_bins})"
                raise InvalidConfiguration(msg)
        if self.scan not in _SCAN_METHODS:
            msg = f"Unknown scan method: {self.scan}"
            raise InvalidConfiguration(msg)
