"""
Centralized enums for the image ops library.
"""

from enum import Enum, IntEnum

import cv2


class Orientation(str, Enum):
    """
    Orientation tag of a decoded image.

    Describes how the stored rows/columns map to the upright display.
    The values mirror the usual image-orientation names; `exif_value`
    gives the matching EXIF Orientation tag.
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    UP_MIRRORED = "up_mirrored"
    DOWN_MIRRORED = "down_mirrored"
    LEFT_MIRRORED = "left_mirrored"
    RIGHT_MIRRORED = "right_mirrored"

    @property
    def exif_value(self) -> int:
        return _EXIF_VALUES[self]

    @property
    def is_transposed(self) -> bool:
        """True when stored rows/columns are swapped relative to the display."""
        return self in _TRANSPOSED

    @classmethod
    def from_exif(cls, value: int) -> "Orientation":
        """
        Map an EXIF Orientation value (1-8) to an Orientation.

        Raises:
            ValueError: If value is not a valid EXIF orientation
        """
        for orientation, exif in _EXIF_VALUES.items():
            if exif == value:
                return orientation
        raise ValueError(f"Unknown EXIF orientation: {value}")


_EXIF_VALUES = {
    Orientation.UP: 1,
    Orientation.UP_MIRRORED: 2,
    Orientation.DOWN: 3,
    Orientation.DOWN_MIRRORED: 4,
    Orientation.LEFT_MIRRORED: 5,
    Orientation.RIGHT: 6,
    Orientation.RIGHT_MIRRORED: 7,
    Orientation.LEFT: 8,
}

_TRANSPOSED = frozenset(
    {
        Orientation.LEFT,
        Orientation.LEFT_MIRRORED,
        Orientation.RIGHT,
        Orientation.RIGHT_MIRRORED,
    }
)


class FitPolicy(str, Enum):
    """Content-fit policies. Only FILL and FIT are aspect-preserving."""

    FILL = "fill"  # cover the bounds, overflow on one axis
    FIT = "fit"  # stay inside the bounds, shortfall on one axis
    STRETCH = "stretch"
    CENTER = "center"


class InterpolationQuality(IntEnum):
    """Resampling quality, ordered from fastest to highest fidelity."""

    NEAREST = 0
    BILINEAR = 1
    HIGH = 2

    @property
    def cv2_flag(self) -> int:
        return _CV2_FLAGS[self]


_CV2_FLAGS = {
    InterpolationQuality.NEAREST: cv2.INTER_NEAREST,
    InterpolationQuality.BILINEAR: cv2.INTER_LINEAR,
    InterpolationQuality.HIGH: cv2.INTER_LANCZOS4,
}
