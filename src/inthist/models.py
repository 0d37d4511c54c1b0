"""Pydantic models for regions and integral histogram tables."""

from typing import Literal

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, ConfigDict, Field, field_validator

TableMode = Literal["plain", "weighted", "joint"]


class Region(BaseModel):
    """Axis-aligned rectangle in grid coordinates.

    Attributes:
        x: Left column of the rectangle.
        y: Top row of the rectangle.
        width: Number of columns covered (0 gives an empty region).
        height: Number of rows covered (0 gives an empty region).
    """
    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @classmethod
    def coerce(cls, region: "Region | tuple[int, int, int, int]") -> "Region":
        """Accept either a Region or an ``(x, y, width, height)`` tuple."""
        if isinstance(region, Region):
            return region
        x, y, width, height = region
        return cls(x=x, y=y, width=width, height=height)

    @property
    def x1(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def y1(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height


class IntegralHistogramTable(BaseModel):
    """Integral histogram of one or more channels.

    ``data[c, y, x, b]`` holds the count (or weighted sum) of channel ``c``
    samples in ``[0, x) x [0, y)`` that fall into bin ``b``. Row 0 and
    column 0 are zero sentinels. The array is read-only.

    Attributes:
        data: Accumulator array of shape (channels, height+1, width+1, bins).
        mode: Which build variant produced the table.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    data: np.ndarray
    mode: TableMode = "plain"

    @field_validator("data")
    @classmethod
    def _check_data(cls, value: np.ndarray) -> np.ndarray:
        if value.ndim != 4:
            msg = f"table data must be 4-D (channels, rows, cols, bins), got {value.ndim}-D"
            raise ValueError(msg)
        # Read-only view; the caller's own buffer keeps its flags
        value = value.view()
        value.flags.writeable = False
        return value

    @property
    def channels(self) -> int:
        return int(self.data.shape[0])

    @property
    def height(self) -> int:
        """Grid height (rows of samples, excluding the sentinel row)."""
        return int(self.data.shape[1]) - 1

    @property
    def width(self) -> int:
        """Grid width (columns of samples, excluding the sentinel column)."""
        return int(self.data.shape[2]) - 1

    @property
    def bins(self) -> int:
        return int(self.data.shape[3])

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    def cell(self, channel: int, row: int, col: int) -> npt.NDArray[np.generic]:
        """Bin vector stored at one table cell.

        Args:
            channel: Channel index.
            row: Table row in [0, height].
            col: Table column in [0, width].

        Returns:
            Read-only view of length ``bins``.
        """
        return self.data[channel, row, col]

    def flat(self) -> npt.NDArray[np.generic]:
        """Channel-major 1-D concatenation of the whole table."""
        return self.data.ravel()
