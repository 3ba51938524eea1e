"""Tests for the GridRow model and template fields."""

import pytest

from cellgrid.models.grid_row import GridRow, make_template_fields


class TestGridRow:
    """Tests for GridRow."""

    def test_to_dict_includes_key(self):
        """Materialized row carries its key first, then the fields."""
        row = GridRow(key="0", fields={"name": "a", "value": 1})
        assert row.to_dict() == {"key": "0", "name": "a", "value": 1}

    def test_from_dict_round_trip(self):
        """from_dict splits the key from the fields."""
        row = GridRow.from_dict({"key": 3, "name": "c", "value": 9})
        assert row.key == 3
        assert row.fields == {"name": "c", "value": 9}

    def test_from_dict_requires_key(self):
        """A record without a key can't become a row."""
        with pytest.raises(ValueError):
            GridRow.from_dict({"name": "a"})

    def test_fields_are_copied(self):
        """Mutating the caller's dict doesn't change the row."""
        source = {"name": "a"}
        row = GridRow(key="0", fields=source)
        source["name"] = "changed"
        assert row.get("name") == "a"

    def test_key_entry_not_kept_in_fields(self):
        """Fields never carry a second key."""
        row = GridRow(key=2, fields={"key": "0", "name": "c"})
        assert row.fields == {"name": "c"}
        assert row.to_dict() == {"key": 2, "name": "c"}

    def test_with_patch_replaces_only_patched_fields(self):
        """Patch merges over existing fields."""
        row = GridRow(key="1", fields={"name": "b", "value": 2})
        patched = row.with_patch({"name": "bee"})
        assert patched.to_dict() == {"key": "1", "name": "bee", "value": 2}
        # Original row unchanged
        assert row.get("name") == "b"

    def test_with_patch_never_changes_key(self):
        """A key entry in a patch is ignored."""
        row = GridRow(key="1", fields={"name": "b"})
        patched = row.with_patch({"key": "99", "name": "x"})
        assert patched.key == "1"
        assert "key" not in patched.fields

    def test_get_default(self):
        """Missing fields return the default."""
        row = GridRow(key="0")
        assert row.get("name") is None
        assert row.get("name", "") == ""

    def test_equality(self):
        """Rows with the same key and fields are equal."""
        assert GridRow("0", {"a": 1}) == GridRow("0", {"a": 1})
        assert GridRow("0", {"a": 1}) != GridRow(0, {"a": 1})


class TestMakeTemplateFields:
    """Tests for the new-row template."""

    def test_default_template(self):
        """Default template uses the counter in the name."""
        assert make_template_fields(2) == {"name": "dooring 2", "value": 32}

    def test_custom_template(self):
        """Name template and value are configurable."""
        assert make_template_fields(5, "row {n}", 0) == {"name": "row 5", "value": 0}
