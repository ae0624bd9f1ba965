"""
Raster algorithms: orientation transforms, fit sizing, compositing and cropping.
"""

from .cropper import Cropper
from .fit import FitCalculator
from .orientation import AffineTransform, OrientationTransform
from .rasterizer import Rasterizer

__all__ = [
    "AffineTransform",
    "Cropper",
    "FitCalculator",
    "OrientationTransform",
    "Rasterizer",
]
