"""
Orientation transforms for resizing.
Derives the affine transform that turns stored pixels upright while drawing.
"""

import logging
import math
from typing import Any, Callable, Dict, Tuple

import numpy as np

from core.constants import GeometryConstants
from core.enums import Orientation
from core.exceptions import InvalidOrientationException
from core.utils.enum_converter import require_enum
from schemas.common import Size

logger = logging.getLogger(__name__)


class AffineTransform:
    """
    Immutable 2D affine transform backed by a 3x3 matrix.

    Builder methods post-multiply: in `t.translated(...).rotated(...)` the
    rotation is applied to a point first, then the translation. Chains
    therefore read in the same order as drawing-context transform calls.
    """

    __slots__ = ("_matrix",)

    def __init__(self, matrix: np.ndarray):
        self._matrix = np.array(matrix, dtype=np.float64)
        self._matrix.setflags(write=False)

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls(np.eye(3))

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def is_identity(self) -> bool:
        return bool(np.allclose(self._matrix, np.eye(3)))

    def concat(self, other: "AffineTransform") -> "AffineTransform":
        """Return a transform that applies `other` first, then self."""
        return AffineTransform(self._matrix @ other.matrix)

    def translated(self, tx: float, ty: float) -> "AffineTransform":
        return self.concat(
            AffineTransform(np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]]))
        )

    def rotated(self, angle: float) -> "AffineTransform":
        """Rotate by angle radians (counter-clockwise in a y-up space)."""
        c, s = math.cos(angle), math.sin(angle)
        # cos(pi/2) is ~6e-17, not 0; keep quarter turns exact
        c = 0.0 if abs(c) < GeometryConstants.MATRIX_EPSILON else c
        s = 0.0 if abs(s) < GeometryConstants.MATRIX_EPSILON else s
        return self.concat(
            AffineTransform(np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]))
        )

    def scaled(self, sx: float, sy: float) -> "AffineTransform":
        return self.concat(
            AffineTransform(np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]]))
        )

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        """Map a point through the transform."""
        px, py, _ = self._matrix @ np.array([x, y, 1.0])
        return (float(px), float(py))

    def as_cv2(self) -> np.ndarray:
        """Top two rows as a float64 2x3 matrix, as OpenCV warp functions take it."""
        return np.array(self._matrix[:2, :], dtype=np.float64)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return bool(np.allclose(self._matrix, other.matrix))

    def __hash__(self):
        return hash(tuple(np.round(self._matrix, 9).ravel()))

    def __repr__(self) -> str:
        a, c, tx = self._matrix[0]
        b, d, ty = self._matrix[1]
        return f"AffineTransform(a={a:g}, b={b:g}, c={c:g}, d={d:g}, tx={tx:g}, ty={ty:g})"


_Step = Callable[[AffineTransform, float, float], AffineTransform]


def _identity_step(t: AffineTransform, width: float, height: float) -> AffineTransform:
    return t


# Pass 1: rotate the stored image into place
_ROTATION_PASS: Dict[Orientation, _Step] = {
    Orientation.UP: _identity_step,
    Orientation.UP_MIRRORED: _identity_step,
    Orientation.DOWN: lambda t, w, h: t.translated(w, h).rotated(math.pi),
    Orientation.DOWN_MIRRORED: lambda t, w, h: t.translated(w, h).rotated(math.pi),
    Orientation.LEFT: lambda t, w, h: t.translated(w, 0).rotated(math.pi / 2),
    Orientation.LEFT_MIRRORED: lambda t, w, h: t.translated(w, 0).rotated(math.pi / 2),
    Orientation.RIGHT: lambda t, w, h: t.translated(0, h).rotated(-math.pi / 2),
    Orientation.RIGHT_MIRRORED: lambda t, w, h: t.translated(0, h).rotated(-math.pi / 2),
}

# Pass 2: undo horizontal mirroring
_MIRROR_PASS: Dict[Orientation, _Step] = {
    Orientation.UP: _identity_step,
    Orientation.DOWN: _identity_step,
    Orientation.LEFT: _identity_step,
    Orientation.RIGHT: _identity_step,
    Orientation.UP_MIRRORED: lambda t, w, h: t.translated(w, 0).scaled(-1, 1),
    Orientation.DOWN_MIRRORED: lambda t, w, h: t.translated(w, 0).scaled(-1, 1),
    Orientation.LEFT_MIRRORED: lambda t, w, h: t.translated(h, 0).scaled(-1, 1),
    Orientation.RIGHT_MIRRORED: lambda t, w, h: t.translated(h, 0).scaled(-1, 1),
}


class OrientationTransform:
    """
    Computes the drawing transform for a source orientation.

    The transform works in a y-up drawing space whose origin is the
    bottom-left corner of the destination. The Rasterizer converts it to
    array coordinates.
    """

    @staticmethod
    def parse(orientation: Any) -> Orientation:
        """
        Accept an Orientation, its name/value, or an EXIF value 1-8.

        Raises:
            InvalidOrientationException: If the value names no orientation
        """
        if isinstance(orientation, Orientation):
            return orientation

        if isinstance(orientation, int) and not isinstance(orientation, bool):
            try:
                return Orientation.from_exif(orientation)
            except ValueError as e:
                raise InvalidOrientationException(orientation) from e

        try:
            return require_enum(orientation, Orientation, normalize=True)
        except ValueError as e:
            raise InvalidOrientationException(orientation) from e

    @staticmethod
    def is_transposed(orientation: Any) -> bool:
        """True for the four orientations whose rows and columns are swapped."""
        return OrientationTransform.parse(orientation).is_transposed

    @staticmethod
    def for_orientation(orientation: Any, size: Size) -> Tuple[AffineTransform, bool]:
        """
        Build the transform for drawing an image of this orientation at size.

        Args:
            orientation: Orientation of the source image
            size: Target (output) size

        Returns:
            Tuple of (transform, draw_transposed)

        Raises:
            InvalidOrientationException: If orientation is not recognized
        """
        orientation = OrientationTransform.parse(orientation)
        width, height = size.width, size.height

        transform = AffineTransform.identity()
        transform = _ROTATION_PASS[orientation](transform, width, height)
        transform = _MIRROR_PASS[orientation](transform, width, height)

        draw_transposed = orientation.is_transposed
        logger.debug(
            f"Orientation {orientation.value} at {width:g}x{height:g}: "
            f"{transform}, transposed={draw_transposed}"
        )
        return transform, draw_transposed
