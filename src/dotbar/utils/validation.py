"""Input validation for lifecycle events."""

from dotbar.utils.errors import InvalidEventError


def validate_count(name: str, value: int) -> int:
    """Validate a count is a non-negative integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidEventError(f"{name} must be an integer, got {type(value).__name__}")

    if value < 0:
        raise InvalidEventError(f"{name} must not be negative, got {value}")

    return value


def validate_unit_id(unit_id: str) -> str:
    """Validate a unit identifier is a non-empty string."""
    if not isinstance(unit_id, str) or not unit_id:
        raise InvalidEventError(f"Unit identifier must be a non-empty string, got {unit_id!r}")

    return unit_id
