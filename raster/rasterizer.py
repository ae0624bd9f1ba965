"""
Rasterizer - resize primitive.

Composites a source buffer into a newly allocated destination buffer through
an affine transform with one OpenCV warp. Heavy reductions are
area-averaged first so they do not alias.
"""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from core.constants import ErrorMessages, ImageConstants
from core.enums import InterpolationQuality, Orientation
from core.exceptions import AllocationFailedException, CompositingFailedException
from core.pixel_buffer import PixelBuffer
from raster.orientation import AffineTransform
from schemas.common import Rect, Size

logger = logging.getLogger(__name__)


def _translation(tx: float, ty: float) -> AffineTransform:
    return AffineTransform.identity().translated(tx, ty)


def _is_positive_finite(value: float) -> bool:
    return math.isfinite(value) and value > 0


class Rasterizer:
    """
    Draws a source buffer into a destination of a given size.

    Coordinate spaces involved in one draw:
    - source array space: x right, y down, pixel centers at +0.5
    - drawing space: y up, origin at the destination's bottom-left; the
      orientation transform lives here
    - destination array space: x right, y down
    All of them are folded into a single matrix for the warp.
    """

    def __init__(self, quality: InterpolationQuality = InterpolationQuality.HIGH):
        """
        Initialize rasterizer.

        Args:
            quality: Default interpolation quality for render()
        """
        self.quality = quality

    @staticmethod
    def draw_rect(target_size: Size, draw_transposed: bool) -> Tuple[Rect, Rect]:
        """
        Integral output rect and the rect the image is drawn into.

        Returns:
            Tuple of (output_rect, draw_rect)
        """
        output_rect = Rect.from_size(target_size).integral()
        draw_rect = output_rect.transposed() if draw_transposed else output_rect
        return output_rect, draw_rect

    @staticmethod
    def prefilter(
        source: PixelBuffer, draw_rect: Rect, quality: InterpolationQuality
    ) -> np.ndarray:
        """
        Area-average heavy reductions before the warp.

        warpAffine samples a fixed-size kernel around each mapped point, so
        reducing an axis by more than ANTIALIAS_REDUCTION skips source pixels
        and aliases. Such axes are first shrunk to the draw rect with
        INTER_AREA, leaving the warp to orient and finish the scale.
        NEAREST keeps point sampling.

        Args:
            source: Source buffer (read only)
            draw_rect: Integral rect the stored image is drawn into
            quality: Interpolation quality of the draw

        Returns:
            Source samples, reduced where needed (H, W, C)
        """
        if quality == InterpolationQuality.NEAREST:
            return source.data

        limit = ImageConstants.ANTIALIAS_REDUCTION
        width, height = source.size
        if width > limit * draw_rect.width:
            width = int(draw_rect.width)
        if height > limit * draw_rect.height:
            height = int(draw_rect.height)

        if (width, height) == source.size:
            return source.data

        reduced = cv2.resize(source.data, (width, height), interpolation=cv2.INTER_AREA)
        logger.debug(f"Prefiltered {source} to {width}x{height}")
        return reduced.reshape(height, width, source.color_model.channels)

    @staticmethod
    def compose_matrix(
        source_size: Tuple[int, int],
        output_rect: Rect,
        draw_rect: Rect,
        transform: AffineTransform,
    ) -> AffineTransform:
        """
        Forward mapping from source array coordinates to destination array coordinates.

        Args:
            source_size: Stored (width, height) of the source buffer
            output_rect: Integral destination rect
            draw_rect: Rect the image is drawn into (transposed if required)
            transform: Orientation transform in drawing space

        Returns:
            AffineTransform in OpenCV pixel convention (centers at integers)
        """
        source_width, source_height = source_size

        # Source array -> drawing space: scale into draw_rect, flip y (top row drawn at the top)
        place = AffineTransform(
            np.array(
                [
                    [draw_rect.width / source_width, 0.0, draw_rect.x],
                    [0.0, -draw_rect.height / source_height, draw_rect.y + draw_rect.height],
                    [0.0, 0.0, 1.0],
                ]
            )
        )

        # Drawing space (y up) -> destination array (y down)
        flip = AffineTransform(
            np.array([[1.0, 0.0, 0.0], [0.0, -1.0, output_rect.height], [0.0, 0.0, 1.0]])
        )

        forward = flip.concat(transform).concat(place)
        return _translation(-0.5, -0.5).concat(forward).concat(_translation(0.5, 0.5))

    def render(
        self,
        source: PixelBuffer,
        target_size: Size,
        transform: AffineTransform,
        draw_transposed: bool,
        quality: Optional[InterpolationQuality] = None,
    ) -> PixelBuffer:
        """
        Draw source into a new buffer of target_size through transform.

        Args:
            source: Source buffer (read only)
            target_size: Output size; rounded outward to whole pixels
            transform: Orientation transform from OrientationTransform
            draw_transposed: Swap the draw rect's width and height
            quality: Interpolation quality (None = rasterizer default)

        Returns:
            New buffer with the source's color model and orientation UP

        Raises:
            AllocationFailedException: If the destination cannot be allocated
            CompositingFailedException: If drawing or extraction fails
        """
        quality = self.quality if quality is None else InterpolationQuality(quality)

        # integral() would flip a negative size into a positive one and overflow on inf
        if not _is_positive_finite(target_size.width) or not _is_positive_finite(
            target_size.height
        ):
            message = ErrorMessages.INVALID_DIMENSIONS.format(
                width=f"{target_size.width:g}", height=f"{target_size.height:g}"
            )
            logger.warning(f"Cannot allocate destination for {source}: {message}")
            raise AllocationFailedException(message)

        output_rect, draw_rect = self.draw_rect(target_size, draw_transposed)
        width, height = int(output_rect.width), int(output_rect.height)

        try:
            destination = PixelBuffer.allocate(
                width, height, source.color_model, orientation=Orientation.UP
            )
        except AllocationFailedException as e:
            logger.warning(f"Cannot allocate destination for {source}: {e.message}")
            raise

        try:
            samples = self.prefilter(source, draw_rect, quality)
            sample_size = (samples.shape[1], samples.shape[0])
            matrix = self.compose_matrix(sample_size, output_rect, draw_rect, transform)
            result = cv2.warpAffine(
                samples,
                matrix.as_cv2(),
                (width, height),
                dst=destination.data,
                flags=quality.cv2_flag,
                borderMode=cv2.BORDER_REPLICATE,
            )
        except cv2.error as e:
            logger.error(f"Failed to composite {source} into {width}x{height}: {e}")
            raise CompositingFailedException(
                ErrorMessages.COMPOSITING_FAILED.format(error=e),
                {"width": width, "height": height},
            ) from e

        expected = (height, width, source.color_model.channels)
        if result is None or result.size != height * width * expected[2]:
            actual = None if result is None else result.shape
            logger.error(f"Unexpected compositing output {actual} for {expected}")
            raise CompositingFailedException(
                ErrorMessages.UNEXPECTED_OUTPUT_SHAPE.format(actual=actual, expected=expected)
            )

        rendered = PixelBuffer(
            data=np.ascontiguousarray(result.reshape(expected)),
            color_model=destination.color_model,
            orientation=destination.orientation,
        )

        logger.debug(
            f"Rendered {source} -> {width}x{height} "
            f"(transposed={draw_transposed}, quality={quality.name.lower()})"
        )
        return rendered
