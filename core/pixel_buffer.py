"""
Pixel buffer data model.

A PixelBuffer owns a numpy array of samples shaped (height, width, channels)
plus the metadata needed to round-trip it to a raw byte layout: the color
model, an optional row stride and the orientation tag of the source image.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Tuple

import numpy as np

from core.constants import ErrorMessages, ImageConstants
from core.enums import Orientation
from core.exceptions import AllocationFailedException

_DTYPES = {8: np.dtype(np.uint8), 16: np.dtype(np.uint16), 32: np.dtype(np.float32)}


@dataclass(frozen=True)
class ColorModel:
    """Channel count, bit depth and alpha presence of a pixel format."""

    channels: int
    bits_per_component: int = 8
    has_alpha: bool = False

    GRAY: ClassVar["ColorModel"]
    GRAY_ALPHA: ClassVar["ColorModel"]
    RGB: ClassVar["ColorModel"]
    RGBA: ClassVar["ColorModel"]
    GRAY16: ClassVar["ColorModel"]
    RGB16: ClassVar["ColorModel"]
    RGBA16: ClassVar["ColorModel"]

    @property
    def is_supported(self) -> bool:
        return (
            self.channels in ImageConstants.SUPPORTED_CHANNELS
            and self.bits_per_component in ImageConstants.SUPPORTED_BITS_PER_COMPONENT
            and (not self.has_alpha or self.channels in (2, 4))
        )

    @property
    def dtype(self) -> np.dtype:
        return _DTYPES[self.bits_per_component]

    @property
    def bytes_per_pixel(self) -> int:
        return self.channels * self.bits_per_component // 8

    def validate(self) -> None:
        """
        Raises:
            AllocationFailedException: If no buffer can be built for this model
        """
        if not self.is_supported:
            raise AllocationFailedException(
                ErrorMessages.UNSUPPORTED_COLOR_MODEL.format(color_model=self),
                {"color_model": str(self)},
            )

    @classmethod
    def for_array(cls, array: np.ndarray) -> "ColorModel":
        """
        Infer a color model from an (H, W) or (H, W, C) sample array.

        Two- and four-channel arrays are taken to carry alpha.
        """
        if array.ndim == 2:
            channels = 1
        elif array.ndim == 3:
            channels = array.shape[2]
        else:
            raise AllocationFailedException(
                ErrorMessages.INVALID_ARRAY_SHAPE.format(shape=array.shape)
            )

        for bits, dtype in _DTYPES.items():
            if array.dtype == dtype:
                model = cls(channels=channels, bits_per_component=bits, has_alpha=channels in (2, 4))
                model.validate()
                return model

        raise AllocationFailedException(ErrorMessages.UNSUPPORTED_DTYPE.format(dtype=array.dtype))


ColorModel.GRAY = ColorModel(1)
ColorModel.GRAY_ALPHA = ColorModel(2, has_alpha=True)
ColorModel.RGB = ColorModel(3)
ColorModel.RGBA = ColorModel(4, has_alpha=True)
ColorModel.GRAY16 = ColorModel(1, 16)
ColorModel.RGB16 = ColorModel(3, 16)
ColorModel.RGBA16 = ColorModel(4, 16, has_alpha=True)


def validate_dimensions(width: int, height: int) -> None:
    """
    Check that a buffer of width x height can be allocated.

    Raises:
        AllocationFailedException: On non-positive or oversized dimensions
    """
    if width < ImageConstants.MIN_IMAGE_DIMENSION or height < ImageConstants.MIN_IMAGE_DIMENSION:
        raise AllocationFailedException(
            ErrorMessages.INVALID_DIMENSIONS.format(width=width, height=height),
            {"width": width, "height": height},
        )

    if width > ImageConstants.MAX_IMAGE_DIMENSION or height > ImageConstants.MAX_IMAGE_DIMENSION:
        raise AllocationFailedException(
            ErrorMessages.DIMENSIONS_TOO_LARGE.format(
                width=width, height=height, max=ImageConstants.MAX_IMAGE_DIMENSION
            ),
            {"width": width, "height": height},
        )


@dataclass(eq=False)
class PixelBuffer:
    """
    Decoded raster image.

    Attributes:
        data: Samples shaped (height, width, channels), owned by this buffer
        color_model: Pixel format of data
        orientation: How stored pixels map to the upright display
        bytes_per_row: Row stride of the raw layout, 0 for tightly packed
    """

    data: np.ndarray
    color_model: ColorModel
    orientation: Orientation = Orientation.UP
    bytes_per_row: int = field(default=0)

    def __post_init__(self):
        self.color_model.validate()

        if self.data.ndim != 3 or self.data.shape[2] != self.color_model.channels:
            raise AllocationFailedException(
                ErrorMessages.INVALID_ARRAY_SHAPE.format(shape=self.data.shape),
                {"color_model": str(self.color_model)},
            )
        if self.data.dtype != self.color_model.dtype:
            raise AllocationFailedException(
                ErrorMessages.UNSUPPORTED_DTYPE.format(dtype=self.data.dtype)
            )

        validate_dimensions(self.width, self.height)

        row_size = self.width * self.bytes_per_pixel
        if self.bytes_per_row and self.bytes_per_row < row_size:
            raise AllocationFailedException(
                ErrorMessages.INVALID_ROW_STRIDE.format(
                    bytes_per_row=self.bytes_per_row, row_size=row_size
                )
            )

    @classmethod
    def allocate(
        cls,
        width: int,
        height: int,
        color_model: ColorModel,
        orientation: Orientation = Orientation.UP,
    ) -> "PixelBuffer":
        """
        Allocate a zero-filled buffer.

        Raises:
            AllocationFailedException: On invalid dimensions or color model
        """
        validate_dimensions(width, height)
        color_model.validate()

        data = np.zeros((height, width, color_model.channels), dtype=color_model.dtype)
        return cls(data=data, color_model=color_model, orientation=orientation)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def bits_per_component(self) -> int:
        return self.color_model.bits_per_component

    @property
    def bytes_per_pixel(self) -> int:
        return self.color_model.bytes_per_pixel

    @property
    def row_stride(self) -> int:
        """Resolved bytes per row (tightly packed when bytes_per_row is 0)."""
        return self.bytes_per_row or self.width * self.bytes_per_pixel

    @property
    def size(self) -> Tuple[int, int]:
        """Stored (width, height)."""
        return (self.width, self.height)

    @property
    def display_size(self) -> Tuple[int, int]:
        """(width, height) once the orientation is applied."""
        if self.orientation.is_transposed:
            return (self.height, self.width)
        return (self.width, self.height)

    def copy(self) -> "PixelBuffer":
        """Return an independent copy sharing no sample memory."""
        return PixelBuffer(
            data=self.data.copy(),
            color_model=self.color_model,
            orientation=self.orientation,
            bytes_per_row=self.bytes_per_row,
        )

    def __repr__(self) -> str:
        return (
            f"PixelBuffer({self.width}x{self.height}, channels={self.color_model.channels}, "
            f"bits={self.bits_per_component}, orientation={self.orientation.value})"
        )
