"""
Constants and configuration values for the image ops library.
Centralizes all magic numbers and message templates.
"""


# Image Constants
class ImageConstants:
    """Constants related to pixel buffers and resizing."""

    # Buffer dimensions (OpenCV warp limit is SHRT_MAX per axis)
    MIN_IMAGE_DIMENSION = 1
    MAX_IMAGE_DIMENSION = 32767

    # Color models
    SUPPORTED_CHANNELS = (1, 2, 3, 4)
    SUPPORTED_BITS_PER_COMPONENT = (8, 16, 32)

    # Reductions beyond this factor are area-averaged before warping
    ANTIALIAS_REDUCTION = 2.0

    # Thumbnail settings
    DEFAULT_THUMBNAIL_SIZE = 100


# Geometry Constants
class GeometryConstants:
    """Constants for rect and transform math."""

    # Edges closer than this to a whole pixel snap to it before rounding
    INTEGRAL_EPSILON = 1e-6

    # Matrix entries below this are treated as exact zeros after rotation
    MATRIX_EPSILON = 1e-12


# EXIF Constants
class ExifConstants:
    """Constants for reading orientation from decoded image metadata."""

    ORIENTATION_TAG = 0x0112
    DEFAULT_ORIENTATION = 1


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Settings
    ENV_PREFIX = "IMAGEOPS_"
    ENV_NESTED_DELIMITER = "__"


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    # Orientation errors
    INVALID_ORIENTATION = "Invalid orientation: {orientation}"
    ORIENTATION_NOT_NORMALIZED = "Buffer orientation must be 'up' for export, got '{orientation}'"

    # Fit errors
    UNSUPPORTED_FIT_POLICY = "Unsupported fit policy: {policy}"

    # Crop errors
    OUT_OF_BOUNDS = "Rect {rect} is out of buffer bounds {width}x{height}"

    # Allocation errors
    INVALID_DIMENSIONS = "Cannot allocate buffer of size {width}x{height}"
    DIMENSIONS_TOO_LARGE = "Buffer size {width}x{height} exceeds maximum dimension {max}"
    UNSUPPORTED_COLOR_MODEL = "Unsupported color model: {color_model}"
    INSUFFICIENT_DATA = "Raw data too short: need {required} bytes, got {actual}"
    INVALID_ROW_STRIDE = "bytes_per_row {bytes_per_row} is less than row size {row_size}"
    INVALID_ARRAY_SHAPE = "Cannot build pixel buffer from array with shape {shape}"
    UNSUPPORTED_DTYPE = "Unsupported sample type: {dtype}"
    UNSUPPORTED_PIL_MODE = "Unsupported PIL image mode: {mode}"

    # Compositing errors
    COMPOSITING_FAILED = "Compositing failed: {error}"
    UNEXPECTED_OUTPUT_SHAPE = "Compositing produced shape {actual}, expected {expected}"

    # Parameter errors
    INVALID_PARAMETER = "Invalid {name}: {error}"
