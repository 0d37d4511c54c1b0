"""Exceptions raised by the integral histogram engine."""


class IntegralHistogramError(ValueError):
    """Base class for all integral histogram errors."""


class DimensionMismatch(IntegralHistogramError):
    """Input grid shape or channel count does not match the configuration."""


class TypeMismatch(IntegralHistogramError):
    """Value and magnitude grids have different sample dtypes."""


class InvalidConfiguration(IntegralHistogramError):
    """Configuration parameters are out of range or inconsistent."""


class OutOfBounds(IntegralHistogramError):
    """Region or window exceeds the extents of the table."""
