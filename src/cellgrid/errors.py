"""Exceptions raised by the grid core.

Validation failures are not exceptions: they are reported as CommitResult
values by the cell edit controller and never reach the external owner.
"""

from __future__ import annotations

from typing import Any


class GridError(Exception):
    """Base class for grid errors."""


class RowNotFoundError(GridError, KeyError):
    """No row with the given key exists in the grid."""

    def __init__(self, key: Any):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Row not found: {self.key!r}"


class CellEditError(GridError):
    """Invalid operation for the current state of a cell."""


class DeleteNotRequestedError(GridError):
    """A delete was confirmed without a matching pending request."""


class ReentrantMutationError(GridError):
    """A mutation was attempted while another one is still notifying."""


class CsvImportError(GridError):
    """A CSV file could not be read for import."""
