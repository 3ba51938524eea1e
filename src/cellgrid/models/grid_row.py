"""Data model for the editable grid.

Contains the GridRow frozen dataclass, the row key type, and the template
used for rows created by the "add row" action.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

# Keys from initial ingestion are strings ("0", "1", ...), keys minted by the
# add action are integers unless key unification is enabled.
RowKey = Union[str, int]

# Reserved field name carrying the row identifier in materialized records
KEY_FIELD = "key"

# Defaults for rows created by the add action
DEFAULT_NEW_ROW_NAME = "dooring {n}"
DEFAULT_NEW_ROW_VALUE = 32


# ==============================================================================
# Main Data Model
# ==============================================================================


@dataclass(frozen=True)
class GridRow:
    """Immutable row in the grid.

    A row is a stable key plus an open mapping of field name -> value. Being
    frozen, changes produce a new instance via with_patch().

    Usage:
        row = GridRow(key="0", fields={"name": "a", "value": 1})
        renamed = row.with_patch({"name": "bee"})
    """

    key: RowKey
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Private copy; a "key" entry would shadow the real key in to_dict()
        fields = {name: value for name, value in self.fields.items() if name != KEY_FIELD}
        object.__setattr__(self, "fields", fields)

    def get(self, field_id: str, default: Any = None) -> Any:
        """Get a field value, or default if the row has no such field."""
        return self.fields.get(field_id, default)

    def with_patch(self, patch: Mapping[str, Any]) -> GridRow:
        """Return a new row with patch merged over the current fields.

        The key is never changed by a patch; a "key" entry is ignored.
        """
        merged = dict(self.fields)
        merged.update({name: value for name, value in patch.items() if name != KEY_FIELD})
        return GridRow(key=self.key, fields=merged)

    def to_dict(self) -> dict[str, Any]:
        """Materialize the row as a plain dict including its key."""
        return {KEY_FIELD: self.key, **self.fields}

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> GridRow:
        """Build a row from a materialized record (must contain "key")."""
        if KEY_FIELD not in record:
            raise ValueError(f"Record has no {KEY_FIELD!r} field: {record!r}")
        fields = {name: value for name, value in record.items() if name != KEY_FIELD}
        return cls(key=record[KEY_FIELD], fields=fields)


def make_template_fields(
    n: int,
    name_template: str = DEFAULT_NEW_ROW_NAME,
    value: Any = DEFAULT_NEW_ROW_VALUE,
) -> dict[str, Any]:
    """Default field values for a row created by the add action.

    Args:
        n: Counter value used for the new row's key
        name_template: Format string for the name field; "{n}" is the counter
        value: Placeholder for the value field

    Returns:
        Field map like {"name": "dooring 2", "value": 32}
    """
    return {"name": name_template.format(n=n), "value": value}
