"""Tests for validation.py - cell buffer validators."""

import pytest

from cellgrid.models.validation import required_validator, validate_required


class TestValidateRequired:
    """Tests for validate_required()."""

    @pytest.mark.parametrize("value", ["a", "bee", 0, 32, 0.0, " "])
    def test_present_values_are_valid(self, value):
        """Anything but None and "" counts as present."""
        is_valid, error = validate_required(value, "Name")
        assert is_valid is True
        assert error == ""

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_values_are_invalid(self, value):
        """None and the empty string are missing."""
        is_valid, error = validate_required(value, "Name")
        assert is_valid is False
        assert error == "Name is required."


class TestRequiredValidator:
    """Tests for required_validator()."""

    def test_uses_column_title(self):
        """Error message names the column."""
        validate = required_validator("Value")
        assert validate("") == (False, "Value is required.")
        assert validate("1") == (True, "")

