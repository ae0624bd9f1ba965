"""
Service layer exposing the public image operations.
"""

from .image_ops_service import (
    ImageOpsService,
    crop,
    get_image_ops_service,
    resize,
    resize_to_fit,
    thumbnail,
)

__all__ = [
    "ImageOpsService",
    "crop",
    "get_image_ops_service",
    "resize",
    "resize_to_fit",
    "thumbnail",
]
