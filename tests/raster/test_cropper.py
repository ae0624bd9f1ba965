"""
Tests for Cropper
"""

import numpy as np
import pytest

from core.enums import Orientation
from core.exceptions import OutOfBoundsException
from raster.cropper import Cropper
from schemas.common import Rect


class TestCropper:
    """Test rectangular cropping"""

    def test_full_bounds_is_identical(self, marker_buffer):
        """Cropping to the full buffer returns the same pixels"""
        cropped = Cropper.crop(marker_buffer, (0, 0, 6, 4))

        np.testing.assert_array_equal(cropped.data, marker_buffer.data)
        assert cropped.color_model == marker_buffer.color_model

    def test_sub_region(self, marker_buffer, marker_array):
        """Only the requested region is copied"""
        cropped = Cropper.crop(marker_buffer, Rect(x=1, y=2, width=3, height=2))

        assert cropped.size == (3, 2)
        np.testing.assert_array_equal(cropped.data, marker_array[2:4, 1:4])

    def test_fractional_rect_rounds_outward(self, marker_buffer, marker_array):
        """Fractional edges are rounded outward to whole pixels"""
        cropped = Cropper.crop(marker_buffer, {"x": 0.5, "y": 0.5, "width": 1, "height": 1})

        np.testing.assert_array_equal(cropped.data, marker_array[0:2, 0:2])

    def test_copy_is_independent(self, marker_buffer, marker_array):
        """Mutating the crop leaves the source untouched"""
        cropped = Cropper.crop(marker_buffer, (0, 0, 2, 2))
        cropped.data[:] = 0

        np.testing.assert_array_equal(marker_buffer.data, marker_array)

    def test_orientation_not_reinterpreted(self, make_buffer, marker_array):
        """Crop works on stored pixels and keeps the orientation tag"""
        buffer = make_buffer(marker_array, Orientation.RIGHT)
        cropped = Cropper.crop(buffer, (0, 0, 6, 1))

        assert cropped.orientation == Orientation.RIGHT
        np.testing.assert_array_equal(cropped.data, marker_array[0:1, :])

    @pytest.mark.parametrize(
        "rect",
        [
            (5, 0, 2, 2),  # past the right edge
            (0, 3, 1, 2),  # past the bottom edge
            (-1, 0, 2, 2),  # negative origin
            (0, 0, 7, 4),  # wider than the buffer
            (2, 2, 0, 1),  # empty
            (5.5, 0, 0.6, 1),  # rounds out to x=5..7
        ],
    )
    def test_out_of_bounds(self, marker_buffer, rect):
        """Rects leaving the buffer after rounding fail"""
        with pytest.raises(OutOfBoundsException):
            Cropper.crop(marker_buffer, rect)
