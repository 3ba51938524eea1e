"""Panel widget presenting a GridController.

Uses tksheet for table display. The sheet is only a view: every edit is
routed through the controller's cell edit state machine, and the sheet is
repopulated from the controller whenever the owner is notified of a change.
"""

from __future__ import annotations

import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Any

from tksheet import Sheet

from ..data.row_store import RowStore
from ..debug_trace import get_logger
from ..errors import CsvImportError, GridError
from ..grid_controller import GridController
from ..models.column_schema import FIELD_OPERATION
from ..models.grid_row import RowKey
from ..services.cell_edit import CommitTrigger

logger = get_logger(__name__)

# Keys that close the tksheet cell editor as an explicit confirm
CONFIRM_KEYS = ("Return", "Tab")

DEFAULT_COLUMN_WIDTH = 100


class GridPanel(ttk.Frame):
    """Editable table with add, delete (with confirmation) and import actions.

    Editable columns open an in-cell editor; the operation column shows the
    delete affordance and asks for confirmation when clicked.
    """

    def __init__(self, parent: tk.Widget, controller: GridController):
        """Initialize the grid panel.

        Args:
            parent: Parent widget
            controller: The grid controller to present and drive
        """
        super().__init__(parent)

        self.controller = controller

        # Suppress sheet events during programmatic updates
        self._suppress_notifications = False

        # Cell whose editor is reopened after a failed commit
        self._reopen_cell: tuple[RowKey, str] | None = None

        self._create_widgets()
        self._populate_sheet()

        self.controller.notifier.add_observer(self._on_rows_changed)
        self.bind("<Destroy>", self._on_destroy)

    # --- Helpers ---

    def _key_at(self, row_idx: int) -> RowKey | None:
        rows = self.controller.rows
        if 0 <= row_idx < len(rows):
            return rows[row_idx].key
        return None

    def _field_at(self, col_idx: int) -> str | None:
        columns = self.controller.columns
        if 0 <= col_idx < len(columns):
            return columns[col_idx].field_id
        return None

    def _populate_sheet(self) -> None:
        """Populate sheet with the controller's current rows."""
        self._suppress_notifications = True
        try:
            self.sheet.set_sheet_data(self.controller.render(), reset_col_positions=False)
            self.sheet.set_index_data([str(row.key) for row in self.controller.rows])
        finally:
            self._suppress_notifications = False
        self._update_status()

    def _update_status(self, message: str = "") -> None:
        """Update the status label and button states."""
        if not message:
            message = f"Rows: {len(self.controller.rows)}"
        self.status_label.config(text=message)

        delete_state = tk.NORMAL if self.controller.delete_available else tk.DISABLED
        self.delete_button.config(state=delete_state)

    # --- Controller events ---

    def _on_rows_changed(self, _records: list[dict[str, Any]]) -> None:
        # The sheet may be closing its editor; repopulate once it is idle
        self.after_idle(self._populate_sheet)

    def _on_destroy(self, event) -> None:
        """Stop observing the controller when the panel is destroyed."""
        if event.widget == self:
            self.controller.notifier.remove_observer(self._on_rows_changed)

    # --- Sheet events ---

    def _on_begin_edit(self, event) -> Any:
        """Enter EDITING on the controller when the sheet opens an editor."""
        key = self._key_at(event.row)
        field_id = self._field_at(event.column)
        if key is None or field_id is None:
            return None

        if self._reopen_cell == (key, field_id):
            self._reopen_cell = None
            cell = self.controller.cell(key, field_id)
            if cell.is_editing:
                # Keep the rejected input instead of re-syncing
                return "" if cell.buffer is None else str(cell.buffer)

        controller = self.controller.begin_edit(key, field_id)
        buffer = controller.buffer
        return "" if buffer is None else str(buffer)

    def _validate_edit(self, event) -> str | None:
        """Commit the editor's text through the cell edit controller.

        Returns:
            The display value to keep in the sheet, or None to reject the
            edit. A rejected cell stays EDITING on the controller, so its
            editor is reopened with the rejected input.
        """
        key = self._key_at(event.row)
        field_id = self._field_at(event.column)
        if key is None or field_id is None:
            return None

        cell = self.controller.cell(key, field_id)
        if not cell.is_editing:
            cell.begin_edit(self.controller.get_row(key))

        key_pressed = getattr(event, "key", None)
        trigger = CommitTrigger.CONFIRM if key_pressed in CONFIRM_KEYS else CommitTrigger.BLUR

        cell.set_buffer(event.value)
        result = cell.commit(trigger)
        if not result.ok:
            self._update_status(f"Save failed: {result.error}")
            self._reopen_cell = (key, field_id)
            self.after_idle(self._reopen_editor, key, field_id)
            return None
        return event.value

    def _reopen_editor(self, key: RowKey, field_id: str) -> None:
        """Open the sheet editor again on a cell still EDITING."""
        if self._reopen_cell != (key, field_id):
            return
        row_idx = RowStore.find_index(self.controller.rows, key)
        col_idx = next(
            (idx for idx, col in enumerate(self.controller.columns) if col.field_id == field_id),
            -1,
        )
        if row_idx < 0 or col_idx < 0:
            self._reopen_cell = None
            return
        self.sheet.see(row_idx, col_idx)
        self.sheet.select_cell(row_idx, col_idx)
        self.sheet.open_cell(ignore_existing_editor=True)

    def _on_cell_select(self, event) -> None:
        """Clicking the operation column starts a delete request."""
        selected = getattr(event, "selected", None)
        if not selected or self._suppress_notifications:
            return

        field_id = self._field_at(selected.column)
        if field_id != FIELD_OPERATION or not self.controller.delete_available:
            return

        key = self._key_at(selected.row)
        if key is not None:
            self.request_delete(key)

    # --- Actions ---

    def add_row(self) -> None:
        """Append a new template row."""
        row = self.controller.add_row()
        self._update_status(f"Added row {row.key}")

    def request_delete(self, key: RowKey) -> bool:
        """Ask for confirmation, then delete the row.

        Returns:
            True if the row was deleted.
        """
        self.controller.request_delete(key)
        confirmed = messagebox.askyesno(
            "Delete",
            self.controller.settings.delete_confirm_text,
            parent=self,
        )
        if not confirmed:
            self.controller.cancel_delete()
            return False

        self.controller.confirm_delete(key)
        return True

    def delete_selected_row(self) -> None:
        """Delete the row that holds the current selection."""
        selected_rows = list(self.sheet.get_selected_rows())
        if not selected_rows:
            selected_cells = list(self.sheet.get_selected_cells())
            selected_rows = [row for row, _col in selected_cells]
        if not selected_rows:
            self._update_status("Select a row to delete")
            return

        key = self._key_at(selected_rows[0])
        if key is not None:
            self.request_delete(key)

    def import_csv(self) -> None:
        """Ask for a CSV file and append its rows."""
        path = filedialog.askopenfilename(
            parent=self,
            title="Import rows",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
        )
        if not path:
            return

        try:
            added = self.controller.import_csv(Path(path))
        except CsvImportError as e:
            messagebox.showerror("Import Error", str(e), parent=self)
            return
        self._update_status(f"Imported {len(added)} rows")

    def export_csv(self) -> None:
        """Ask for a destination and write the rows as CSV."""
        path = filedialog.asksaveasfilename(
            parent=self,
            title="Export rows",
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv")],
        )
        if not path:
            return

        try:
            count = self.controller.export_csv(Path(path))
        except (OSError, GridError) as e:
            messagebox.showerror("Export Error", str(e), parent=self)
            return
        self._update_status(f"Exported {count} rows")

    # --- Widgets ---

    def _create_widgets(self) -> None:
        """Create all panel widgets."""
        toolbar = ttk.Frame(self)
        toolbar.pack(fill=tk.X, padx=5, pady=(5, 0))

        ttk.Button(toolbar, text="Add Row", command=self.add_row).pack(side=tk.LEFT)
        self.delete_button = ttk.Button(
            toolbar, text="Delete Row", command=self.delete_selected_row
        )
        self.delete_button.pack(side=tk.LEFT, padx=(5, 0))
        ttk.Button(toolbar, text="Import CSV...", command=self.import_csv).pack(
            side=tk.LEFT, padx=(5, 0)
        )
        ttk.Button(toolbar, text="Export CSV...", command=self.export_csv).pack(
            side=tk.LEFT, padx=(5, 0)
        )

        columns = self.controller.columns
        self.sheet = Sheet(
            self,
            headers=self.controller.headers(),
            show_row_index=True,
            height=260,
            width=480,
        )
        self.sheet.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        self.sheet.enable_bindings()

        # No structural edits through the sheet; rows change via the controller
        self.sheet.disable_bindings(
            "row_drag_and_drop",
            "column_drag_and_drop",
            "rc_insert_row",
            "rc_delete_row",
            "rc_insert_column",
            "rc_delete_column",
            "rc_select_column",
            "paste",
            "cut",
            "delete",
            "undo",
            "sort_cells",
            "sort_row",
            "sort_column",
            "sort_rows",
            "sort_columns",
        )

        self.sheet.set_column_widths([col.width or DEFAULT_COLUMN_WIDTH for col in columns])
        self.sheet.readonly_columns(
            [idx for idx, col in enumerate(columns) if not col.editable]
        )

        self.sheet.extra_bindings("begin_edit_cell", self._on_begin_edit)
        self.sheet.edit_validation(self._validate_edit)
        self.sheet.extra_bindings("cell_select", self._on_cell_select)

        footer = ttk.Frame(self)
        footer.pack(fill=tk.X, padx=5, pady=(2, 5))

        self.status_label = ttk.Label(footer, text="")
        self.status_label.pack(side=tk.LEFT)
