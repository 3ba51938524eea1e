"""Inline-editable data grid: row store, per-cell editing and change notification."""

from .errors import (
    CellEditError,
    CsvImportError,
    DeleteNotRequestedError,
    GridError,
    ReentrantMutationError,
    RowNotFoundError,
)
from .grid_controller import GridController
from .models.column_schema import DEFAULT_COLUMNS, ColumnDefinition
from .models.grid_row import GridRow
from .settings import GridSettings

__all__ = [
    # Classes
    "GridController",
    "GridRow",
    "ColumnDefinition",
    "GridSettings",
    "DEFAULT_COLUMNS",
    # Errors
    "GridError",
    "RowNotFoundError",
    "CellEditError",
    "DeleteNotRequestedError",
    "ReentrantMutationError",
    "CsvImportError",
]
