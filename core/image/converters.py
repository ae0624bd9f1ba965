"""
Pixel buffer conversion utilities.

Adapters between PixelBuffer and the collaborators around the library:
- NumPy arrays
- Raw sample bytes (with optional row padding)
- PIL Images (decoded elsewhere; orientation read from EXIF)
"""

import logging
from typing import Optional, Union

import numpy as np
from PIL import Image

from core.constants import ErrorMessages, ExifConstants
from core.enums import Orientation
from core.exceptions import AllocationFailedException, InvalidOrientationException
from core.pixel_buffer import ColorModel, PixelBuffer, validate_dimensions
from raster.orientation import OrientationTransform

logger = logging.getLogger(__name__)


_PIL_MODES = {
    "L": ColorModel.GRAY,
    "LA": ColorModel.GRAY_ALPHA,
    "RGB": ColorModel.RGB,
    "RGBA": ColorModel.RGBA,
    "I;16": ColorModel.GRAY16,
    "F": ColorModel(1, 32),
}

# Modes PIL can decode into but that have no direct buffer layout
_PIL_FALLBACK_MODES = {"1": "L", "P": "RGBA", "CMYK": "RGB", "YCbCr": "RGB", "I": "F"}


class ImageConverters:
    """Utilities for converting between pixel buffers and external formats."""

    @staticmethod
    def from_array(
        array: np.ndarray,
        orientation: Union[Orientation, str, int] = Orientation.UP,
        color_model: Optional[ColorModel] = None,
    ) -> PixelBuffer:
        """
        Wrap a copy of a NumPy array as a pixel buffer.

        Args:
            array: (H, W) or (H, W, C) array of uint8, uint16 or float32 samples
            orientation: Orientation tag of the source image
            color_model: Explicit color model (inferred from array if None)

        Returns:
            PixelBuffer owning a copy of the samples
        """
        model = color_model or ColorModel.for_array(array)
        data = array.reshape(array.shape[0], array.shape[1], -1) if array.ndim == 2 else array

        return PixelBuffer(
            data=np.ascontiguousarray(data).copy(),
            color_model=model,
            orientation=OrientationTransform.parse(orientation),
        )

    @staticmethod
    def to_numpy(buffer: PixelBuffer, squeeze: bool = True) -> np.ndarray:
        """
        Copy buffer samples into a NumPy array.

        Args:
            buffer: Source buffer
            squeeze: If True, single-channel buffers come back as (H, W)
        """
        data = buffer.data.copy()
        if squeeze and buffer.color_model.channels == 1:
            return data[:, :, 0]
        return data

    @staticmethod
    def from_bytes(
        raw: bytes,
        width: int,
        height: int,
        color_model: ColorModel,
        bytes_per_row: int = 0,
        orientation: Union[Orientation, str, int] = Orientation.UP,
    ) -> PixelBuffer:
        """
        Build a pixel buffer from raw samples as a decoder hands them over.

        Args:
            raw: Sample bytes in native byte order, rows top to bottom
            width: Width in pixels
            height: Height in pixels
            color_model: Pixel format of raw
            bytes_per_row: Row stride including padding, 0 for tightly packed
            orientation: Orientation tag of the source image

        Returns:
            PixelBuffer owning a copy of the samples

        Raises:
            AllocationFailedException: If the layout does not fit raw
        """
        validate_dimensions(width, height)
        color_model.validate()

        row_size = width * color_model.bytes_per_pixel
        stride = bytes_per_row or row_size
        if stride < row_size:
            raise AllocationFailedException(
                ErrorMessages.INVALID_ROW_STRIDE.format(bytes_per_row=stride, row_size=row_size)
            )

        required = stride * (height - 1) + row_size
        if len(raw) < required:
            raise AllocationFailedException(
                ErrorMessages.INSUFFICIENT_DATA.format(required=required, actual=len(raw)),
                {"required": required, "actual": len(raw)},
            )

        # Pad the tail so the last row can be viewed with the full stride
        padded = np.frombuffer(bytes(raw[:required]) + b"\x00" * (stride - row_size), np.uint8)
        rows = padded.reshape(height, stride)[:, :row_size]
        data = (
            np.ascontiguousarray(rows)
            .view(color_model.dtype)
            .reshape(height, width, color_model.channels)
            .copy()
        )

        return PixelBuffer(
            data=data,
            color_model=color_model,
            orientation=OrientationTransform.parse(orientation),
            bytes_per_row=bytes_per_row,
        )

    @staticmethod
    def to_bytes(buffer: PixelBuffer) -> bytes:
        """
        Serialize samples to raw bytes using the buffer's row stride.

        Padding bytes at the end of each row are zero.
        """
        row_size = buffer.width * buffer.bytes_per_pixel
        rows = np.ascontiguousarray(buffer.data).view(np.uint8).reshape(buffer.height, row_size)

        if buffer.row_stride == row_size:
            return rows.tobytes()

        padded = np.zeros((buffer.height, buffer.row_stride), dtype=np.uint8)
        padded[:, :row_size] = rows
        return padded.tobytes()

    @staticmethod
    def read_orientation(image: Image.Image) -> Orientation:
        """
        Read the EXIF orientation of a decoded PIL image.

        Missing tags mean UP. Values outside 1-8 are rejected.

        Raises:
            InvalidOrientationException: If the tag holds an unknown value
        """
        value = image.getexif().get(ExifConstants.ORIENTATION_TAG, ExifConstants.DEFAULT_ORIENTATION)
        try:
            return OrientationTransform.parse(int(value))
        except (TypeError, ValueError) as e:
            raise InvalidOrientationException(value) from e

    @staticmethod
    def from_pil(image: Image.Image) -> PixelBuffer:
        """
        Convert a decoded PIL Image to a pixel buffer.

        The EXIF orientation is kept as the buffer's tag; pixels stay in
        stored order.

        Args:
            image: PIL Image

        Returns:
            PixelBuffer with RGB/RGBA/L/LA/16-bit/float samples

        Raises:
            AllocationFailedException: If the image mode has no buffer layout
            InvalidOrientationException: If the EXIF orientation is invalid
        """
        orientation = ImageConverters.read_orientation(image)

        mode = image.mode
        if mode not in _PIL_MODES:
            if mode not in _PIL_FALLBACK_MODES:
                raise AllocationFailedException(ErrorMessages.UNSUPPORTED_PIL_MODE.format(mode=mode))
            logger.debug(f"Converting PIL mode {mode} to {_PIL_FALLBACK_MODES[mode]}")
            image = image.convert(_PIL_FALLBACK_MODES[mode])
            mode = image.mode

        color_model = _PIL_MODES[mode]
        array = np.array(image, dtype=color_model.dtype)
        return ImageConverters.from_array(array, orientation=orientation, color_model=color_model)

    @staticmethod
    def to_pil(buffer: PixelBuffer) -> Image.Image:
        """
        Convert a normalized pixel buffer to a PIL Image for encoding.

        Args:
            buffer: Buffer with orientation UP (output of any resize)

        Returns:
            PIL Image

        Raises:
            InvalidOrientationException: If the buffer is not normalized
            AllocationFailedException: If the color model has no PIL mode
        """
        if buffer.orientation != Orientation.UP:
            raise InvalidOrientationException(
                buffer.orientation.value,
                ErrorMessages.ORIENTATION_NOT_NORMALIZED.format(orientation=buffer.orientation.value),
            )

        # PIL picks L/LA/RGB/RGBA/I;16/F from the array shape and dtype
        if buffer.color_model in _PIL_MODES.values():
            return Image.fromarray(ImageConverters.to_numpy(buffer))

        raise AllocationFailedException(
            ErrorMessages.UNSUPPORTED_COLOR_MODEL.format(color_model=buffer.color_model)
        )
