"""
Image conversion utilities.

This package adapts pixel buffers to their collaborators:
- converters: NumPy arrays, raw sample bytes and PIL Images
"""

from core.image.converters import ImageConverters

__all__ = ["ImageConverters"]
