"""
Exception types for the image ops library.

Every public operation reports failures synchronously through one of these
types. None of them are retried: the operations are deterministic.
"""

from typing import Any, Dict, List, Optional

from core.constants import ErrorMessages


class ImageOpsException(Exception):
    """Base exception for all image ops failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidOrientationException(ImageOpsException):
    """Orientation tag is not one of the eight known values."""

    def __init__(self, orientation: Any, message: Optional[str] = None):
        super().__init__(
            message or ErrorMessages.INVALID_ORIENTATION.format(orientation=orientation),
            {"orientation": str(orientation)},
        )
        self.orientation = orientation


class UnsupportedFitPolicyException(ImageOpsException):
    """Fit policy is neither fill nor fit."""

    def __init__(self, policy: Any):
        super().__init__(
            ErrorMessages.UNSUPPORTED_FIT_POLICY.format(policy=policy),
            {"policy": str(policy)},
        )
        self.policy = policy


class OutOfBoundsException(ImageOpsException):
    """Crop rect extends beyond the buffer after integral rounding."""

    def __init__(self, rect: Any, width: int, height: int):
        super().__init__(
            ErrorMessages.OUT_OF_BOUNDS.format(rect=rect, width=width, height=height),
            {"rect": str(rect), "width": width, "height": height},
        )


class AllocationFailedException(ImageOpsException):
    """Destination buffer cannot be constructed."""


class CompositingFailedException(ImageOpsException):
    """Draw or extract step failed."""


class InvalidParameterException(ImageOpsException, ValueError):
    """Operation argument has the wrong type or range (size, rect, quality, decoration)."""

    def __init__(self, name: str, error: Any, fields: Optional[List[str]] = None):
        super().__init__(
            ErrorMessages.INVALID_PARAMETER.format(name=name, error=error),
            {"parameter": name, "fields": fields or []},
        )
        self.name = name
