"""
Core modules for the image ops library
"""

from .enums import FitPolicy, InterpolationQuality, Orientation
from .exceptions import (
    AllocationFailedException,
    CompositingFailedException,
    ImageOpsException,
    InvalidOrientationException,
    InvalidParameterException,
    OutOfBoundsException,
    UnsupportedFitPolicyException,
)
from .pixel_buffer import ColorModel, PixelBuffer

__all__ = [
    "ColorModel",
    "PixelBuffer",
    "FitPolicy",
    "InterpolationQuality",
    "Orientation",
    "ImageOpsException",
    "InvalidOrientationException",
    "InvalidParameterException",
    "UnsupportedFitPolicyException",
    "OutOfBoundsException",
    "AllocationFailedException",
    "CompositingFailedException",
]
