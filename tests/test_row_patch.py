"""Unit tests for RowPatch."""

import pytest

from cellgrid.models.grid_row import GridRow
from cellgrid.models.row_patch import RowPatch


class TestRowPatchBasics:
    """Basic tests for RowPatch."""

    def test_empty_patch(self):
        """Empty patch has no changes."""
        assert RowPatch().has_changes() is False

    def test_set_field(self):
        """Setting a field records a change."""
        patch = RowPatch()
        patch.set_field("name", "bee")
        assert patch.has_changes() is True
        assert patch["name"] == "bee"
        assert "value" not in patch

    def test_key_cannot_be_set(self):
        """The key field is reserved."""
        with pytest.raises(ValueError):
            RowPatch().set_field("key", "1")

    def test_behaves_as_mapping(self):
        """RowPatch can be passed wherever a mapping is expected."""
        patch = RowPatch(changes={"name": "x", "value": 3})
        assert dict(patch) == {"name": "x", "value": 3}
        assert len(patch) == 2
        assert "name" in patch


class TestRowPatchFreeze:
    """Tests for RowPatch.freeze()."""

    def test_freeze_applies_changes(self):
        """Freeze merges changes into a new row."""
        base = GridRow(key="1", fields={"name": "b", "value": 2})
        result = RowPatch(changes={"name": "bee"}).freeze(base)
        assert result.to_dict() == {"key": "1", "name": "bee", "value": 2}
        assert base.get("name") == "b"

    def test_freeze_empty_patch_returns_base(self):
        """Freeze with no changes returns base row."""
        base = GridRow(key="1", fields={"name": "b"})
        assert RowPatch().freeze(base) is base


class TestRowPatchOf:
    """Tests for RowPatch.of()."""

    def test_of_mapping(self):
        """A dict is converted into a patch."""
        patch = RowPatch.of({"name": "x"})
        assert isinstance(patch, RowPatch)
        assert dict(patch) == {"name": "x"}

    def test_of_drops_key(self):
        """A key entry in the source mapping is dropped."""
        patch = RowPatch.of({"key": "7", "name": "x"})
        assert dict(patch) == {"name": "x"}

    def test_of_patch_copies(self):
        """Coercing a RowPatch returns an independent copy."""
        original = RowPatch(changes={"name": "x"})
        copy = RowPatch.of(original)
        copy.set_field("value", 1)
        assert "value" not in original
