"""Per-cell edit state machine.

A CellEditController owns the edit buffer of one (row, editable column)
pair. Controllers are independent: several cells may be editing at once.

States:
    VIEWING --begin_edit--> EDITING
    EDITING --commit (valid)--> VIEWING   (row updated via on_commit)
    EDITING --commit (invalid)--> EDITING (error recorded, nothing changes)
    EDITING --cancel--> VIEWING           (buffer discarded)

Confirm (Enter) and blur are both commit triggers and behave the same:
losing focus never silently discards an edit.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..debug_trace import get_logger
from ..errors import CellEditError, ReentrantMutationError, RowNotFoundError
from ..models.column_schema import ColumnDefinition
from ..models.grid_row import GridRow, RowKey
from ..models.validation import Validator, required_validator

logger = get_logger(__name__)

# Receives (row_key, {field_id: buffer}) and applies it to the row store.
# RowNotFoundError and ReentrantMutationError mean nothing was merged; any
# other exception is raised after the merge (by the owner callback).
CommitHandler = Callable[[RowKey, dict[str, Any]], None]


class CellEditState(Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class CommitTrigger(Enum):
    CONFIRM = "confirm"
    BLUR = "blur"


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a commit attempt.

    Attributes:
        ok: True if the buffer was merged into the row
        value: The committed (or rejected) buffer value
        error: Validation or lookup error message, "" on success
        trigger: What started the commit
    """

    ok: bool
    value: Any = None
    error: str = ""
    trigger: CommitTrigger = CommitTrigger.CONFIRM


class CellEditController:
    """Edit state machine for a single grid cell."""

    def __init__(
        self,
        row_key: RowKey,
        column: ColumnDefinition,
        validator: Validator | None = None,
        on_commit: CommitHandler | None = None,
    ):
        """Initialize a controller in the VIEWING state.

        Args:
            row_key: Key of the row this cell belongs to
            column: The (editable) column of this cell
            validator: Buffer validator; defaults to required-non-empty
            on_commit: Called with (row_key, patch) when a commit validates

        Raises:
            CellEditError: If the column is not editable.
        """
        if not column.editable:
            raise CellEditError(f"Column {column.field_id!r} is not editable")

        self._row_key = row_key
        self._column = column
        self._validator = validator or required_validator(column.name)
        self._on_commit = on_commit

        self._state = CellEditState.VIEWING
        self._buffer: Any = None
        self._last_error = ""
        self._committing = False

    @property
    def row_key(self) -> RowKey:
        return self._row_key

    @property
    def field_id(self) -> str:
        return self._column.field_id

    @property
    def state(self) -> CellEditState:
        return self._state

    @property
    def is_editing(self) -> bool:
        return self._state is CellEditState.EDITING

    @property
    def buffer(self) -> Any:
        """Current edit buffer (None while VIEWING)."""
        return self._buffer

    @property
    def last_error(self) -> str:
        """Error from the last failed commit, "" if none."""
        return self._last_error

    def begin_edit(self, row: GridRow) -> None:
        """Enter EDITING with the buffer synced to the row's committed value.

        The buffer is re-synced on every call, even when already editing,
        so a stale uncommitted value never survives re-activation.

        Args:
            row: The current committed row for this cell
        """
        if row.key != self._row_key:
            raise CellEditError(f"Row {row.key!r} does not belong to cell {self._row_key!r}")
        self._buffer = row.get(self.field_id)
        self._last_error = ""
        self._state = CellEditState.EDITING

    def set_buffer(self, value: Any) -> None:
        """Replace the edit buffer with user input.

        Raises:
            CellEditError: If the cell is not being edited.
        """
        if not self.is_editing:
            raise CellEditError(f"Cell ({self._row_key!r}, {self.field_id!r}) is not editing")
        self._buffer = value

    def commit(self, trigger: CommitTrigger = CommitTrigger.CONFIRM) -> CommitResult:
        """Validate the buffer and merge it into the row.

        On success the cell returns to VIEWING. On a validation failure, or
        if the row no longer exists, the cell stays EDITING with its buffer
        intact so the user can retry. A commit attempted while another is
        still running on this cell is rejected. If on_commit raises after
        the value was merged, the cell returns to VIEWING before the
        exception propagates.

        Raises:
            CellEditError: If the cell is not being edited.
        """
        if not self.is_editing:
            raise CellEditError(f"Cell ({self._row_key!r}, {self.field_id!r}) is not editing")

        value = self._buffer
        if self._committing:
            logger.debug("Rejected re-entrant commit on (%r, %s)", self._row_key, self.field_id)
            return CommitResult(
                ok=False, value=value, error="Commit already in progress", trigger=trigger
            )

        is_valid, error = self._validator(value)
        if not is_valid:
            self._last_error = error
            logger.warning("Save failed for (%r, %s): %s", self._row_key, self.field_id, error)
            return CommitResult(ok=False, value=value, error=error, trigger=trigger)

        self._committing = True
        try:
            if self._on_commit is not None:
                self._on_commit(self._row_key, {self.field_id: value})
        except (RowNotFoundError, ReentrantMutationError) as e:
            self._last_error = str(e)
            logger.warning("Save failed for (%r, %s): %s", self._row_key, self.field_id, e)
            return CommitResult(ok=False, value=value, error=str(e), trigger=trigger)
        except Exception:
            # The row already holds the value; only the notification failed
            self._finish_edit()
            raise
        finally:
            self._committing = False

        self._finish_edit()
        return CommitResult(ok=True, value=value, trigger=trigger)

    def _finish_edit(self) -> None:
        self._state = CellEditState.VIEWING
        self._buffer = None
        self._last_error = ""

    def cancel(self) -> None:
        """Leave EDITING without touching the row; no-op while VIEWING."""
        if self.is_editing:
            self._finish_edit()
