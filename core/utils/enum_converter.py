"""
Enum conversion utilities.

Provides standardized methods for converting between enums and strings,
with support for case-insensitive parsing and by-name lookup.
"""

from enum import Enum
from typing import Any, Optional, Type, TypeVar

T = TypeVar("T", bound=Enum)


def _lookup(value: Any, enum_class: Type[T], normalize: bool) -> Optional[T]:
    """Resolve value by enum value first, then by member name."""
    if isinstance(value, enum_class):
        return value

    if isinstance(value, str):
        str_value = value.strip().lower() if normalize else value
        try:
            return enum_class(str_value)
        except ValueError:
            pass
        try:
            return enum_class[str_value.upper()]
        except KeyError:
            return None

    # Plain int for IntEnum, or any other raw value
    if isinstance(value, bool):
        return None
    try:
        return enum_class(value)
    except (ValueError, TypeError):
        return None


def require_enum(value: Any, enum_class: Type[T], normalize: bool = True) -> T:
    """
    Parse value to an enum member by value or member name.

    Args:
        value: Value to parse (enum member, value or member name)
        enum_class: Enum class to parse to
        normalize: Whether to lowercase string before parsing

    Returns:
        Parsed enum value

    Raises:
        ValueError: If value does not name a member of enum_class
    """
    parsed = _lookup(value, enum_class, normalize) if value is not None else None
    if parsed is None:
        raise ValueError(f"{value!r} is not a valid {enum_class.__name__}")
    return parsed


def enum_to_string(value: Any) -> str:
    """
    Convert enum to string value, or pass through if already string.

    IntEnum members are converted to their lowercase member name.

    Example:
        >>> enum_to_string(FitPolicy.FILL)
        >>> # Returns "fill"
    """
    if isinstance(value, Enum):
        return value.value if isinstance(value.value, str) else value.name.lower()
    return value
