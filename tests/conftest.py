"""
Pytest configuration and fixtures for image ops tests
"""

import numpy as np
import pytest

from config import Settings
from core.enums import Orientation
from core.pixel_buffer import ColorModel, PixelBuffer
from services.image_ops_service import ImageOpsService


@pytest.fixture
def marker_array():
    """4x6 RGB array where every pixel is distinct"""
    return np.arange(4 * 6 * 3, dtype=np.uint8).reshape(4, 6, 3)


@pytest.fixture
def make_buffer():
    """Factory wrapping an array in a PixelBuffer with a given orientation"""

    def _make(array, orientation=Orientation.UP):
        if array.ndim == 2:
            array = array[:, :, np.newaxis]
        return PixelBuffer(
            data=array.copy(),
            color_model=ColorModel.for_array(array),
            orientation=orientation,
        )

    return _make


@pytest.fixture
def marker_buffer(marker_array, make_buffer):
    """Upright buffer over marker_array"""
    return make_buffer(marker_array)


@pytest.fixture
def test_image():
    """Create a 400x200 RGB test image with a bright block in the top-left"""
    image = np.zeros((200, 400, 3), dtype=np.uint8)
    image[:50, :100] = (255, 255, 255)
    return image


@pytest.fixture
def settings():
    """Settings with nearest-neighbour default quality so pixel checks are exact"""
    return Settings(image={"default_quality": "nearest"})


@pytest.fixture
def service(settings):
    """Create ImageOpsService instance for testing"""
    return ImageOpsService(settings=settings)
