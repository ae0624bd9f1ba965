"""
Tests for the Rasterizer resize primitive
"""

import cv2
import numpy as np
import pytest

from core.enums import InterpolationQuality, Orientation
from core.exceptions import AllocationFailedException, CompositingFailedException
from core.pixel_buffer import ColorModel, PixelBuffer
from raster.orientation import AffineTransform, OrientationTransform
from raster.rasterizer import Rasterizer
from schemas.common import Rect, Size

# What each orientation's upright image looks like, in numpy terms
UPRIGHT = {
    Orientation.UP: lambda a: a,
    Orientation.UP_MIRRORED: np.fliplr,
    Orientation.DOWN: lambda a: np.rot90(a, 2),
    Orientation.DOWN_MIRRORED: np.flipud,
    Orientation.LEFT: lambda a: np.rot90(a, 1),
    Orientation.RIGHT: lambda a: np.rot90(a, -1),
    Orientation.LEFT_MIRRORED: lambda a: np.transpose(a, (1, 0, 2)),
    Orientation.RIGHT_MIRRORED: lambda a: np.transpose(np.rot90(a, 2), (1, 0, 2)),
}


def render(buffer, size, quality=InterpolationQuality.NEAREST):
    size = Size.of(size)
    transform, transposed = OrientationTransform.for_orientation(buffer.orientation, size)
    return Rasterizer().render(buffer, size, transform, transposed, quality)


class TestRasterizerOrientation:
    """Orientation normalization through a single draw"""

    @pytest.mark.parametrize("orientation", list(Orientation))
    def test_normalizes_all_orientations(self, orientation, marker_array, make_buffer):
        """Drawing at the display size yields the upright image"""
        buffer = make_buffer(marker_array, orientation)
        result = render(buffer, buffer.display_size)

        expected = UPRIGHT[orientation](marker_array)
        assert result.orientation == Orientation.UP
        assert result.size == (expected.shape[1], expected.shape[0])
        np.testing.assert_array_equal(result.data, expected)

    @pytest.mark.parametrize(
        "orientation,expected_position",
        [
            (Orientation.UP, (0, 1)),
            (Orientation.UP_MIRRORED, (0, 3)),
            (Orientation.DOWN, (2, 3)),
            (Orientation.DOWN_MIRRORED, (2, 1)),
            (Orientation.LEFT, (3, 0)),
            (Orientation.RIGHT, (1, 2)),
            (Orientation.LEFT_MIRRORED, (1, 0)),
            (Orientation.RIGHT_MIRRORED, (3, 2)),
        ],
    )
    def test_marker_pixel(self, orientation, expected_position, make_buffer):
        """A single marker at stored row 0, column 1 lands where predicted"""
        array = np.zeros((3, 5), dtype=np.uint8)
        array[0, 1] = 255
        buffer = make_buffer(array, orientation)

        result = render(buffer, buffer.display_size)

        positions = list(zip(*np.nonzero(result.data[:, :, 0])))
        assert positions == [expected_position]

    def test_transposed_scaling(self, make_buffer):
        """Quarter-turn images scale along their displayed axes"""
        buffer = make_buffer(np.zeros((20, 40, 3), dtype=np.uint8), Orientation.RIGHT)

        result = render(buffer, (10, 20))

        assert result.size == (10, 20)


class TestRasterizerScaling:
    """Scaling and pixel formats"""

    def test_nearest_upscale(self, marker_buffer, marker_array):
        """2x nearest upscaling repeats each pixel"""
        result = render(marker_buffer, (12, 8))

        expected = np.repeat(np.repeat(marker_array, 2, axis=0), 2, axis=1)
        np.testing.assert_array_equal(result.data, expected)

    def test_disproportionate(self, marker_buffer):
        """Aspect ratio may change"""
        result = render(marker_buffer, (12, 2))
        assert result.data.shape == (2, 12, 3)

    def test_fractional_size_rounds_up(self, marker_buffer):
        """Output size is the integral rect of the target"""
        result = render(marker_buffer, (5.2, 3.0000000001))
        assert result.size == (6, 3)

    def test_uniform_image_stays_uniform(self, make_buffer):
        """Edges replicate instead of fading to black"""
        buffer = make_buffer(np.full((10, 10, 3), 200, dtype=np.uint8))

        bilinear = render(buffer, (37, 23), InterpolationQuality.BILINEAR)
        high = render(buffer, (37, 23), InterpolationQuality.HIGH)

        assert np.all(bilinear.data == 200)
        np.testing.assert_allclose(high.data, 200, atol=1)

    @pytest.mark.parametrize(
        "color_model", [ColorModel.GRAY, ColorModel.GRAY_ALPHA, ColorModel.RGBA, ColorModel.RGB16]
    )
    def test_preserves_color_model(self, color_model):
        """Destination has the source's color model"""
        buffer = PixelBuffer.allocate(8, 6, color_model)
        result = render(buffer, (4, 3), InterpolationQuality.BILINEAR)

        assert result.color_model == color_model
        assert result.data.shape == (3, 4, color_model.channels)
        assert result.data.dtype == color_model.dtype

    def test_float_samples(self, make_buffer):
        """32-bit float buffers are supported"""
        buffer = make_buffer(np.full((4, 4), 0.5, dtype=np.float32))
        result = render(buffer, (2, 2), InterpolationQuality.BILINEAR)

        np.testing.assert_allclose(result.data, 0.5)

    def test_source_untouched(self, marker_buffer, marker_array):
        """Rendering never writes into the source"""
        render(marker_buffer, (3, 2), InterpolationQuality.HIGH)
        np.testing.assert_array_equal(marker_buffer.data, marker_array)

    def test_default_quality(self, marker_buffer, marker_array):
        """quality=None uses the rasterizer's default"""
        rasterizer = Rasterizer(quality=InterpolationQuality.NEAREST)
        result = rasterizer.render(
            marker_buffer, Size(width=12, height=8), AffineTransform.identity(), False
        )

        np.testing.assert_array_equal(result.data[::2, ::2], marker_array)


class TestAntialiasing:
    """Heavy reductions average instead of point-sampling"""

    @pytest.mark.parametrize("quality", [InterpolationQuality.BILINEAR, InterpolationQuality.HIGH])
    @pytest.mark.parametrize(
        "orientation,target", [(Orientation.UP, (30, 15)), (Orientation.RIGHT, (15, 30))]
    )
    def test_stripes_shrink_to_mean(self, make_buffer, quality, orientation, target):
        """1-in-3 bright columns (mean 85) stay close to 85 everywhere after a 40x reduction"""
        stripes = np.tile(np.array([255, 0, 0], dtype=np.uint8), (600, 400))
        buffer = make_buffer(stripes, orientation)

        result = render(buffer, target, quality)

        assert result.size == target
        assert abs(float(result.data.mean()) - 85.0) < 2.0
        assert int(result.data.max()) - int(result.data.min()) <= 10

    def test_prefilter_only_heavy_reductions(self, marker_buffer):
        """Reductions up to 2x and nearest sampling use the source as is"""
        mild = Rect(width=3, height=2)
        heavy = Rect(width=2, height=1)
        high, nearest = InterpolationQuality.HIGH, InterpolationQuality.NEAREST

        assert Rasterizer.prefilter(marker_buffer, mild, high) is marker_buffer.data
        assert Rasterizer.prefilter(marker_buffer, heavy, nearest) is marker_buffer.data
        assert Rasterizer.prefilter(marker_buffer, heavy, high).shape == (1, 2, 3)

    def test_prefilter_keeps_channel_axis(self, make_buffer):
        """Single-channel reductions stay (H, W, 1)"""
        buffer = make_buffer(np.zeros((40, 40), dtype=np.uint16))

        reduced = Rasterizer.prefilter(buffer, Rect(width=4, height=40), InterpolationQuality.HIGH)

        assert reduced.shape == (40, 4, 1)
        assert reduced.dtype == np.uint16


class TestRasterizerFailures:
    """Allocation and compositing failures"""

    @pytest.mark.parametrize(
        "size",
        [(0, 4), (4, 0), (-3, 4), (4, -1), (40000, 2), (float("inf"), 2), (2, float("nan"))],
    )
    def test_invalid_target_size(self, marker_buffer, size):
        """Non-positive or oversized targets fail allocation"""
        with pytest.raises(AllocationFailedException):
            render(marker_buffer, size)

    def test_destination_allocated_upright(self, make_buffer, marker_array, monkeypatch):
        """The destination is created upright rather than re-tagged after drawing"""
        allocated = []
        allocate = PixelBuffer.allocate

        def recording_allocate(*args, **kwargs):
            buffer = allocate(*args, **kwargs)
            allocated.append(buffer.orientation)
            return buffer

        monkeypatch.setattr(PixelBuffer, "allocate", recording_allocate)
        source = make_buffer(marker_array, Orientation.LEFT)

        result = render(source, source.display_size)

        assert allocated == [Orientation.UP]
        assert result.orientation == Orientation.UP
        assert source.orientation == Orientation.LEFT

    def test_opencv_error(self, marker_buffer, monkeypatch):
        """OpenCV failures surface as CompositingFailedException"""

        def failing_warp(*args, **kwargs):
            raise cv2.error("warp failed")

        monkeypatch.setattr(cv2, "warpAffine", failing_warp)

        with pytest.raises(CompositingFailedException) as exc_info:
            render(marker_buffer, (3, 2))
        assert isinstance(exc_info.value.__cause__, cv2.error)

    def test_unexpected_output(self, marker_buffer, monkeypatch):
        """A result of the wrong size is rejected"""
        monkeypatch.setattr(
            cv2, "warpAffine", lambda *args, **kwargs: np.zeros((1, 1, 3), dtype=np.uint8)
        )

        with pytest.raises(CompositingFailedException):
            render(marker_buffer, (3, 2))


class TestComposeMatrix:
    """Coordinate folding"""

    def test_identity_at_same_size(self):
        """Upright same-size draw maps pixels onto themselves"""
        output_rect, draw_rect = Rasterizer.draw_rect(Size(width=6, height=4), False)
        matrix = Rasterizer.compose_matrix((6, 4), output_rect, draw_rect, AffineTransform.identity())

        np.testing.assert_allclose(matrix.matrix, np.eye(3), atol=1e-12)

    def test_transposed_draw_rect(self):
        """Transposed draws swap only the draw rect"""
        output_rect, draw_rect = Rasterizer.draw_rect(Size(width=10, height=20), True)

        assert (output_rect.width, output_rect.height) == (10, 20)
        assert (draw_rect.width, draw_rect.height) == (20, 10)
