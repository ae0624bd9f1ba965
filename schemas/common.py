"""
Common geometry models shared across layers.
"""

import math
from typing import Any, Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from core.constants import GeometryConstants


def _snap(value: float) -> float:
    """Snap value to the nearest integer if it is within floating-point noise of it."""
    nearest = round(value)
    if abs(value - nearest) < GeometryConstants.INTEGRAL_EPSILON:
        return float(nearest)
    return value


def round_half_away(value: float) -> int:
    """Round to nearest integer, halves away from zero (not banker's rounding)."""
    return int(math.floor(abs(value) + 0.5) * (1 if value >= 0 else -1))


class Size(BaseModel):
    """
    Width and height in pixels.

    Values are real numbers; negative values are representable so that
    buffer allocation can reject them with a typed error.
    """

    model_config = ConfigDict(frozen=True)

    width: float = Field(..., description="Width")
    height: float = Field(..., description="Height")

    @classmethod
    def of(cls, value: Union["Size", Tuple[float, float], Dict[str, Any]]) -> "Size":
        """Coerce a Size, (width, height) tuple or dict to a Size."""
        if isinstance(value, Size):
            return value
        if isinstance(value, dict):
            return cls(**value)
        try:
            width, height = value
        except (TypeError, ValueError) as e:
            raise ValueError(f"Expected (width, height), got {value!r}") from e
        return cls(width=width, height=height)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def scaled(self, ratio: float) -> "Size":
        """Scale both axes uniformly."""
        return Size(width=self.width * ratio, height=self.height * ratio)

    def transposed(self) -> "Size":
        return Size(width=self.height, height=self.width)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.width, self.height)


class Rect(BaseModel):
    """
    Rectangle with real-valued origin and size.

    Use `integral()` before treating a rect as a pixel region.
    """

    model_config = ConfigDict(frozen=True)

    x: float = Field(0.0, description="X coordinate")
    y: float = Field(0.0, description="Y coordinate")
    width: float = Field(..., description="Width")
    height: float = Field(..., description="Height")

    @classmethod
    def of(
        cls, value: Union["Rect", Tuple[float, float, float, float], Dict[str, Any]]
    ) -> "Rect":
        """Coerce a Rect, (x, y, width, height) tuple or dict to a Rect."""
        if isinstance(value, Rect):
            return value
        if isinstance(value, dict):
            return cls(**value)
        try:
            x, y, width, height = value
        except (TypeError, ValueError) as e:
            raise ValueError(f"Expected (x, y, width, height), got {value!r}") from e
        return cls(x=x, y=y, width=width, height=height)

    @classmethod
    def from_size(cls, size: Size) -> "Rect":
        return cls(x=0.0, y=0.0, width=size.width, height=size.height)

    @property
    def min_x(self) -> float:
        return min(self.x, self.x + self.width)

    @property
    def min_y(self) -> float:
        return min(self.y, self.y + self.height)

    @property
    def max_x(self) -> float:
        return max(self.x, self.x + self.width)

    @property
    def max_y(self) -> float:
        return max(self.y, self.y + self.height)

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)

    @property
    def is_empty(self) -> bool:
        """True when the rect covers no area."""
        return self.width <= 0 or self.height <= 0

    def integral(self) -> "Rect":
        """
        Round outward to whole-pixel boundaries.

        The origin is rounded down and the far edge up, after standardizing
        negative widths/heights. Edges within floating-point noise of an
        integer are snapped first.
        """
        x1 = math.floor(_snap(self.min_x))
        y1 = math.floor(_snap(self.min_y))
        x2 = math.ceil(_snap(self.max_x))
        y2 = math.ceil(_snap(self.max_y))
        return Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

    def transposed(self) -> "Rect":
        """Swap width and height, keeping the origin."""
        return Rect(x=self.x, y=self.y, width=self.height, height=self.width)

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g}, {self.width:g}x{self.height:g})"
