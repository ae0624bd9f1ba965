"""
Image operation parameter models.

This module contains validated parameter sets for the public operations:
- Resize to an explicit size
- Aspect-preserving resize to bounds
- Square thumbnail generation
- Rectangular crop

Sizes and rects accept models, tuples or dicts; qualities accept members,
names or raw values. Anything else fails validation.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from core.enums import FitPolicy, InterpolationQuality
from core.utils.enum_converter import require_enum

from .common import Rect, Size


class QualityParams(BaseModel):
    """Base for operations taking an interpolation quality"""

    quality: Optional[InterpolationQuality] = Field(
        default=None, description="Interpolation quality (None = configured default)"
    )

    @field_validator("quality", mode="before")
    @classmethod
    def parse_quality(cls, value: Any) -> Optional[InterpolationQuality]:
        if value is None:
            return None
        return require_enum(value, InterpolationQuality, normalize=True)


class ResizeParams(QualityParams):
    """Parameters for resizing to an explicit target size"""

    target_size: Size = Field(..., description="Output size (may change aspect ratio)")

    @field_validator("target_size", mode="before")
    @classmethod
    def parse_size(cls, value: Any) -> Size:
        return Size.of(value)


class FitParams(QualityParams):
    """Parameters for aspect-preserving resize"""

    bounds: Size = Field(..., description="Bounds to fill or fit into")
    policy: FitPolicy = Field(default=FitPolicy.FIT, description="Content-fit policy")

    @field_validator("bounds", mode="before")
    @classmethod
    def parse_bounds(cls, value: Any) -> Size:
        return Size.of(value)


class ThumbnailParams(QualityParams):
    """
    Parameters for square thumbnail generation.

    border_size and corner_radius are accepted for callers that decorate
    thumbnails downstream; they do not change the pixels produced here.
    """

    size: int = Field(..., description="Edge length of the square thumbnail")
    border_size: int = Field(default=0, ge=0, description="Transparent border width")
    corner_radius: int = Field(default=0, ge=0, description="Corner radius")


class CropParams(BaseModel):
    """Parameters for cropping a stored-pixel region"""

    rect: Rect = Field(..., description="Region in stored-pixel coordinates")

    @field_validator("rect", mode="before")
    @classmethod
    def parse_rect(cls, value: Any) -> Rect:
        return Rect.of(value)
