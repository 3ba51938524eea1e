"""Grid controller: the root of the editable grid.

Composes the row store, cell edit controllers, deletion gate and change
notifier around one explicit GridState. Every user action computes a new
state with a pure transition; the controller swaps it in and then, as an
explicit effect, notifies the owner exactly once.

Usage:
    grid = GridController(
        data=[{"name": "a", "value": 1}, {"name": "b", "value": 2}],
        on_change=save_rows,
    )
    grid.add_row()

    grid.begin_edit("1", "name")
    grid.set_buffer("1", "name", "bee")
    grid.commit_edit("1", "name")

    grid.request_delete("0")
    grid.confirm_delete()
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

from .data.change_notifier import ChangeNotifier, OnChange
from .data.csv_source import save_records_to_csv
from .data.grid_state import GridState, add_row, initial_state, update_row
from .data.row_store import Rows, RowStore
from .debug_trace import get_logger, perf_timer
from .errors import CellEditError, ReentrantMutationError, RowNotFoundError
from .models.column_schema import (
    DEFAULT_COLUMNS,
    FIELD_OPERATION,
    ColumnDefinition,
    editable_columns,
    find_column,
)
from .models.grid_row import GridRow, RowKey
from .models.validation import Validator
from .services.cell_edit import CellEditController, CommitResult, CommitTrigger
from .services.delete_gate import DeletionConfirmationGate
from .services.import_service import ImportService
from .settings import GridSettings

logger = get_logger(__name__)


class GridController:
    """Owns the rows of one grid and mediates every change to them.

    Mutations are serialized: a mutation attempted while the owner is
    being notified of the previous one raises ReentrantMutationError to
    its caller (inside the owner callback). The mutation being notified
    still completes and reaches every observer, so each notification
    reflects exactly one mutation, in event order.
    """

    def __init__(
        self,
        data: Iterable[Mapping[str, Any]] | None = None,
        on_change: OnChange | None = None,
        columns: Sequence[ColumnDefinition] = DEFAULT_COLUMNS,
        settings: GridSettings | None = None,
        validators: Mapping[str, Validator] | None = None,
    ):
        """Initialize the grid from the owner's records.

        Args:
            data: Initial field maps (no keys); keyed "0".."n-1"
            on_change: Owner callback, receives the full row list after
                every mutation
            columns: Column schema, fixed for the grid's lifetime
            settings: Grid settings (defaults if None)
            validators: Optional field_id -> validator overrides; editable
                columns default to required-non-empty
        """
        self._settings = settings or GridSettings()
        self._columns = tuple(self._bind_operation_render(col) for col in columns)
        self._validators = dict(validators or {})

        records = list(data or [])
        self._state = initial_state(records, self._settings.initial_counter(len(records)))

        self._notifier = ChangeNotifier(on_change)
        self._notifying = False

        # One controller per (row key, field id), created on first use
        self._cells: dict[tuple[RowKey, str], CellEditController] = {}

        logger.debug("Grid created with %d rows, counter=%d", len(records), self._state.counter)

    # --- Properties ---

    @property
    def state(self) -> GridState:
        return self._state

    @property
    def rows(self) -> Rows:
        return self._state.rows

    @property
    def counter(self) -> int:
        return self._state.counter

    @property
    def columns(self) -> tuple[ColumnDefinition, ...]:
        return self._columns

    @property
    def editable_columns(self) -> tuple[ColumnDefinition, ...]:
        return editable_columns(self._columns)

    @property
    def settings(self) -> GridSettings:
        return self._settings

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def pending_delete(self) -> RowKey | None:
        return self._state.pending_delete

    @property
    def delete_available(self) -> bool:
        """Whether the per-row delete affordance is shown (grid non-empty)."""
        return DeletionConfirmationGate.is_available(self._state)

    def records(self) -> list[dict[str, Any]]:
        """Materialized rows, each including its key."""
        return self._state.records()

    def get_row(self, key: RowKey) -> GridRow:
        """Row with the given key.

        Raises:
            RowNotFoundError: If no row has the key.
        """
        row = RowStore.get(self._state.rows, key)
        if row is None:
            raise RowNotFoundError(key)
        return row

    # --- State transitions ---

    def _apply(self, new_state: GridState, action: str) -> None:
        """Swap in a new state and notify the owner once."""
        if self._notifying:
            raise ReentrantMutationError(f"{action} attempted during change notification")

        self._state = new_state
        logger.debug("%s -> %d rows", action, len(new_state.rows))

        self._notifying = True
        try:
            self._notifier.notify(new_state.records())
        except ReentrantMutationError as e:
            # Raised by a nested mutation the owner attempted; only that one is rejected
            logger.warning("Rejected mutation during notification of %s: %s", action, e)
        finally:
            self._notifying = False

    def add_row(self) -> GridRow:
        """Append a template row keyed by the counter."""
        template = self._settings.template_for(self._state.counter)
        new_state, new_row = add_row(
            self._state, template, string_keys=self._settings.unify_keys
        )
        self._apply(new_state, f"add {new_row.key!r}")
        return new_row

    def update_row(self, key: RowKey, patch: Mapping[str, Any]) -> GridRow:
        """Merge patch into the row with the given key.

        Returns:
            The updated row.

        Raises:
            RowNotFoundError: If the key is missing and the missing-key
                policy is RAISE.
        """
        new_state = update_row(
            self._state, key, patch, missing=self._settings.missing_key_policy
        )
        self._apply(new_state, f"update {key!r}")
        updated = RowStore.get(new_state.rows, key)
        # LAST_ROW fallback updates a different row than the one asked for
        return updated if updated is not None else new_state.rows[-1]

    def request_delete(self, key: RowKey) -> None:
        """First phase of a delete: ask for confirmation. Rows are untouched."""
        self._state = DeletionConfirmationGate.request_delete(self._state, key)

    def confirm_delete(self, key: RowKey | None = None) -> None:
        """Second phase of a delete: remove the pending row and notify.

        Raises:
            DeleteNotRequestedError: If no matching delete is pending.
        """
        pending = self._state.pending_delete
        new_state = DeletionConfirmationGate.confirm(self._state, key)
        self._apply(new_state, f"delete {pending!r}")
        for cell_id in [cell_id for cell_id in self._cells if cell_id[0] == pending]:
            del self._cells[cell_id]

    def cancel_delete(self) -> None:
        """Discard a pending delete request."""
        self._state = DeletionConfirmationGate.cancel(self._state)

    # --- Cell editing ---

    def cell(self, key: RowKey, field_id: str) -> CellEditController:
        """Edit controller for a cell, created on first use.

        Raises:
            RowNotFoundError: If no row has the key.
            KeyError: If no column reads field_id.
            CellEditError: If the column is not editable.
        """
        cell_id = (key, field_id)
        controller = self._cells.get(cell_id)
        if controller is not None:
            return controller

        self.get_row(key)
        column = find_column(self._columns, field_id)
        if not column.editable:
            raise CellEditError(f"Column {field_id!r} is not editable")

        controller = CellEditController(
            row_key=key,
            column=column,
            validator=self._validators.get(field_id),
            on_commit=self._commit_cell,
        )
        self._cells[cell_id] = controller
        return controller

    def _commit_cell(self, key: RowKey, patch: dict[str, Any]) -> None:
        self.update_row(key, patch)

    def begin_edit(self, key: RowKey, field_id: str) -> CellEditController:
        """Activate a cell: enter EDITING with the committed value as buffer."""
        controller = self.cell(key, field_id)
        controller.begin_edit(self.get_row(key))
        return controller

    def set_buffer(self, key: RowKey, field_id: str, value: Any) -> None:
        self.cell(key, field_id).set_buffer(value)

    def commit_edit(
        self,
        key: RowKey,
        field_id: str,
        trigger: CommitTrigger = CommitTrigger.CONFIRM,
    ) -> CommitResult:
        """Validate and merge a cell's buffer (Enter or focus loss)."""
        return self.cell(key, field_id).commit(trigger)

    def cancel_edit(self, key: RowKey, field_id: str) -> None:
        self.cell(key, field_id).cancel()

    def editing_cells(self) -> list[tuple[RowKey, str]]:
        """(key, field_id) of every cell currently in EDITING."""
        return [cell_id for cell_id, ctl in self._cells.items() if ctl.is_editing]

    # --- Rendering ---

    def _bind_operation_render(self, column: ColumnDefinition) -> ColumnDefinition:
        if column.field_id != FIELD_OPERATION or column.render is not None:
            return column
        return replace(column, render=self._render_operation)

    def _render_operation(self, _value: Any, _row: GridRow) -> str:
        return self._settings.delete_label if self.delete_available else ""

    def headers(self) -> list[str]:
        return [col.name for col in self._columns]

    def render(self) -> list[list[Any]]:
        """Display values, one list per row in display order."""
        with perf_timer("render", row_count=len(self._state.rows)):
            return [
                [col.display_value(row) for col in self._columns] for row in self._state.rows
            ]

    # --- Import / export ---

    def import_records(self, records: Sequence[Mapping[str, Any]]) -> list[GridRow]:
        """Append records as new rows; notifies once if any were added."""
        new_state, added = ImportService.merge_records(self._state, records, self._settings)
        if added:
            self._apply(new_state, f"import {len(added)} rows")
        return added

    def import_csv(self, csv_path: str | Path) -> list[GridRow]:
        """Append the rows of a CSV file; notifies once if any were added.

        Raises:
            CsvImportError: If the file can't be read.
        """
        new_state, added = ImportService.import_csv(
            self._state, csv_path, self._columns, self._settings
        )
        if added:
            self._apply(new_state, f"import {len(added)} rows from {csv_path}")
        return added

    def export_csv(self, csv_path: str | Path) -> int:
        """Write the editable fields of all rows to CSV."""
        return save_records_to_csv(
            csv_path, self.records(), self._columns, encoding=self._settings.csv_encoding
        )
