"""
Image Ops Service - public resize, fit, thumbnail and crop operations.

This service composes the raster components:
- OrientationTransform derives the drawing transform from the image orientation
- FitCalculator turns bounds and a fit policy into an output size
- Rasterizer draws the normalized, resized buffer
- Cropper cuts the centered square for thumbnails
"""

import logging
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from config import Settings, get_settings
from core.enums import FitPolicy, InterpolationQuality
from core.exceptions import InvalidParameterException
from core.pixel_buffer import PixelBuffer
from core.utils.decorators import timer
from raster.cropper import Cropper
from raster.fit import FitCalculator
from raster.orientation import OrientationTransform
from raster.rasterizer import Rasterizer
from schemas.common import Rect, Size, round_half_away
from schemas.image import CropParams, FitParams, ResizeParams, ThumbnailParams

logger = logging.getLogger(__name__)

SizeLike = Union[Size, Tuple[float, float], Dict[str, Any]]
RectLike = Union[Rect, Tuple[float, float, float, float], Dict[str, Any]]
QualityLike = Union[InterpolationQuality, str, int, None]

P = TypeVar("P", bound=BaseModel)


class ImageOpsService:
    """
    Stateless facade over the raster pipeline.

    Holds only configuration, so one instance can serve concurrent callers.
    Every operation returns a new buffer owned by the caller; the source
    buffer is never modified.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize image ops service.

        Args:
            settings: Settings instance (defaults to get_settings())
        """
        self.settings = settings or get_settings()
        self.default_quality = self.settings.image.default_quality
        self.rasterizer = Rasterizer(quality=self.default_quality)

        logger.info(f"Image ops service initialized (default quality: {self.default_quality.name})")

    @staticmethod
    def _validated(model: Type[P], **values: Any) -> P:
        """
        Build a parameter model from caller arguments.

        Raises:
            InvalidParameterException: If any argument fails validation
        """
        try:
            return model(**values)
        except ValidationError as e:
            fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            name = ", ".join(fields)
            logger.warning(f"Rejected {model.__name__} arguments: {name}")
            raise InvalidParameterException(name, e.errors()[0]["msg"], fields) from e

    def _quality(self, quality: Optional[InterpolationQuality]) -> InterpolationQuality:
        return self.default_quality if quality is None else quality

    def resize(
        self, image: PixelBuffer, target_size: SizeLike, quality: QualityLike = None
    ) -> PixelBuffer:
        """
        Resize image to target_size, normalizing its orientation.

        The aspect ratio is not preserved if target_size has a different one.

        Args:
            image: Source buffer
            target_size: Output (width, height) as displayed
            quality: Interpolation quality (None = configured default)

        Returns:
            New buffer of target_size (rounded up to whole pixels), orientation UP

        Raises:
            InvalidOrientationException: If the image orientation is unknown
            InvalidParameterException: If target_size or quality is malformed
            AllocationFailedException: If target_size has a non-positive dimension
            CompositingFailedException: If drawing fails
        """
        params = self._validated(ResizeParams, target_size=target_size, quality=quality)
        quality = self._quality(params.quality)

        with timer() as t:
            transform, draw_transposed = OrientationTransform.for_orientation(
                image.orientation, params.target_size
            )
            result = self.rasterizer.render(
                image, params.target_size, transform, draw_transposed, quality
            )

        logger.debug(f"Resized {image} -> {result} in {t['ms']:.1f} ms")
        return result

    def resize_to_fit(
        self,
        image: PixelBuffer,
        bounds: SizeLike,
        policy: Union[FitPolicy, str] = FitPolicy.FIT,
        quality: QualityLike = None,
    ) -> PixelBuffer:
        """
        Resize image uniformly so it fills or fits bounds.

        Args:
            image: Source buffer
            bounds: Target bounds
            policy: FitPolicy.FILL (cover bounds) or FitPolicy.FIT (stay inside)
            quality: Interpolation quality (None = configured default)

        Returns:
            New buffer with the image's displayed aspect ratio, orientation UP

        Raises:
            UnsupportedFitPolicyException: If policy is not fill or fit
            InvalidParameterException: If bounds or quality is malformed
            AllocationFailedException: If the computed size is empty
        """
        params = self._validated(
            FitParams,
            bounds=bounds,
            policy=FitCalculator.parse_policy(policy),
            quality=quality,
        )

        display_width, display_height = image.display_size
        new_size = FitCalculator.calculate(
            Size(width=display_width, height=display_height), params.bounds, params.policy
        )
        return self.resize(image, new_size, params.quality)

    def thumbnail(
        self,
        image: PixelBuffer,
        size: Optional[int] = None,
        quality: QualityLike = None,
        border_size: int = 0,
        corner_radius: int = 0,
    ) -> PixelBuffer:
        """
        Square thumbnail: fill a size x size box, then crop the center.

        Args:
            image: Source buffer
            size: Edge length (None = configured thumbnail size)
            quality: Interpolation quality (None = configured default)
            border_size: Transparent border width, left to the caller's renderer
            corner_radius: Corner radius, left to the caller's renderer

        Returns:
            New size x size buffer, orientation UP

        Raises:
            AllocationFailedException: If size is not positive
            InvalidParameterException: If size is fractional or decoration is negative
        """
        params = self._validated(
            ThumbnailParams,
            size=self.settings.image.thumbnail_size if size is None else size,
            quality=quality,
            border_size=border_size,
            corner_radius=corner_radius,
        )
        edge = params.size

        if params.border_size or params.corner_radius:
            logger.debug(
                f"Thumbnail decoration (border={params.border_size}, "
                f"radius={params.corner_radius}) is not applied to pixels"
            )

        resized = self.resize_to_fit(image, (edge, edge), FitPolicy.FILL, params.quality)

        crop_rect = Rect(
            x=round_half_away((resized.width - edge) / 2),
            y=round_half_away((resized.height - edge) / 2),
            width=edge,
            height=edge,
        )
        return Cropper.crop(resized, crop_rect)

    def crop(self, image: PixelBuffer, rect: RectLike) -> PixelBuffer:
        """
        Copy the region rect (stored-pixel coordinates, rounded outward).

        Raises:
            OutOfBoundsException: If the rounded rect leaves the image
            InvalidParameterException: If rect is not a rect, tuple or dict
        """
        params = self._validated(CropParams, rect=rect)
        return Cropper.crop(image, params.rect)


_default_service: Optional[ImageOpsService] = None


def get_image_ops_service() -> ImageOpsService:
    """Get the shared service built from get_settings()."""
    global _default_service
    if _default_service is None:
        _default_service = ImageOpsService()
    return _default_service


def resize(image: PixelBuffer, target_size: SizeLike, quality: QualityLike = None) -> PixelBuffer:
    return get_image_ops_service().resize(image, target_size, quality)


def resize_to_fit(
    image: PixelBuffer,
    bounds: SizeLike,
    policy: Union[FitPolicy, str] = FitPolicy.FIT,
    quality: QualityLike = None,
) -> PixelBuffer:
    return get_image_ops_service().resize_to_fit(image, bounds, policy, quality)


def thumbnail(
    image: PixelBuffer,
    size: Optional[int] = None,
    quality: QualityLike = None,
    border_size: int = 0,
    corner_radius: int = 0,
) -> PixelBuffer:
    return get_image_ops_service().thumbnail(image, size, quality, border_size, corner_radius)


def crop(image: PixelBuffer, rect: RectLike) -> PixelBuffer:
    return get_image_ops_service().crop(image, rect)
