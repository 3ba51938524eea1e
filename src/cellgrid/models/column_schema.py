"""Column schema for the grid.

A ColumnDefinition describes one field: its display name, the field it reads,
whether cells in it can be edited, and an optional custom renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .grid_row import GridRow

# Field ids of the baseline schema
FIELD_NAME = "name"
FIELD_VALUE = "value"
FIELD_OPERATION = "operation"

Renderer = Callable[[Any, GridRow], Any]


@dataclass(frozen=True)
class ColumnDefinition:
    """Immutable description of a grid column."""

    name: str
    field_id: str
    editable: bool = False
    render: Renderer | None = None
    width: int | None = None  # pixels, presentation hint only

    def display_value(self, row: GridRow) -> Any:
        """Value shown in this column for the given row."""
        value = row.get(self.field_id)
        if self.render is not None:
            return self.render(value, row)
        return "" if value is None else str(value)


# Baseline schema: two editable fields plus the delete affordance column.
# The operation column's render is supplied by the grid controller, which
# knows whether the delete affordance is currently available.
DEFAULT_COLUMNS: tuple[ColumnDefinition, ...] = (
    ColumnDefinition(name="Name", field_id=FIELD_NAME, editable=True, width=180),
    ColumnDefinition(name="Value", field_id=FIELD_VALUE, editable=True, width=120),
    ColumnDefinition(name="Operation", field_id=FIELD_OPERATION, editable=False),
)


def editable_columns(columns: tuple[ColumnDefinition, ...]) -> tuple[ColumnDefinition, ...]:
    """Columns whose cells get a CellEditController."""
    return tuple(col for col in columns if col.editable)


def find_column(columns: tuple[ColumnDefinition, ...], field_id: str) -> ColumnDefinition:
    """Look up a column by field id.

    Raises:
        KeyError: If no column reads field_id.
    """
    for col in columns:
        if col.field_id == field_id:
            return col
    raise KeyError(field_id)
