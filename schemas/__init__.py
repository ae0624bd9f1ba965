"""
Schemas Package

This package contains the Pydantic models for geometry and operation
parameters shared across layers:
- common: Size and Rect
- image: Parameter sets for resize, fit, thumbnail and crop operations
"""

from .common import Rect, Size, round_half_away
from .image import CropParams, FitParams, QualityParams, ResizeParams, ThumbnailParams

__all__ = [
    # Common models
    "Rect",
    "Size",
    "round_half_away",
    # Operation parameters
    "CropParams",
    "FitParams",
    "QualityParams",
    "ResizeParams",
    "ThumbnailParams",
]
