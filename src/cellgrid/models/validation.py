from collections.abc import Callable
from typing import Any

# A validator takes the edit buffer and returns (is_valid, error_message)
Validator = Callable[[Any], tuple[bool, str]]


def validate_required(value: Any, title: str = "Field") -> tuple[bool, str]:
    """Validate that a cell value is present.

    Only None and the empty string count as missing; whitespace is a value.

    Args:
        value: The edit buffer to validate
        title: Column display name used in the error message

    Returns:
        Tuple of (is_valid, error_message) - error_message is "" if valid
    """
    if value is None or value == "":
        return False, f"{title} is required."
    return True, ""


def required_validator(title: str) -> Validator:
    """Build the default validator for an editable column."""

    def _validate(value: Any) -> tuple[bool, str]:
        return validate_required(value, title)

    return _validate

