"""
Rectangular cropping of pixel buffers.
"""

import logging
from typing import Any, Dict, Tuple, Union

from core.exceptions import OutOfBoundsException
from core.pixel_buffer import PixelBuffer
from schemas.common import Rect

logger = logging.getLogger(__name__)


class Cropper:
    """
    Extracts sub-regions of a buffer in its stored orientation.

    The orientation tag is carried over unchanged; rect coordinates always
    refer to stored pixels.
    """

    @staticmethod
    def validate_rect(rect: Rect, width: int, height: int) -> Rect:
        """
        Round rect outward and check it lies inside a width x height buffer.

        Returns:
            The integral rect

        Raises:
            OutOfBoundsException: If the rounded rect is empty or leaves the buffer
        """
        region = rect.integral()

        if region.is_empty:
            raise OutOfBoundsException(rect, width, height)

        if region.x < 0 or region.y < 0 or region.max_x > width or region.max_y > height:
            raise OutOfBoundsException(rect, width, height)

        return region

    @staticmethod
    def crop(
        buffer: PixelBuffer,
        rect: Union[Rect, Tuple[float, float, float, float], Dict[str, Any]],
    ) -> PixelBuffer:
        """
        Copy the pixels inside rect into a new buffer.

        Args:
            buffer: Source buffer
            rect: Region in stored-pixel coordinates; rounded outward first

        Returns:
            Independent buffer holding exactly the rounded region

        Raises:
            OutOfBoundsException: If the rounded rect is empty or leaves the buffer
        """
        rect = Rect.of(rect)

        try:
            region = Cropper.validate_rect(rect, buffer.width, buffer.height)
        except OutOfBoundsException as e:
            logger.warning(f"Invalid crop: {e.message}")
            raise

        x, y = int(region.x), int(region.y)
        x2, y2 = int(region.max_x), int(region.max_y)

        cropped = PixelBuffer(
            data=buffer.data[y:y2, x:x2].copy(),
            color_model=buffer.color_model,
            orientation=buffer.orientation,
        )
        logger.debug(f"Cropped {buffer} to {region}")
        return cropped
