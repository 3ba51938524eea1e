"""Demo application for the editable grid.

Shows a small main window with an "Edit Data" button that opens the grid
window. Every change is reported to the owner callback, which logs it.
"""

from __future__ import annotations

import sys
import tkinter as tk
from pathlib import Path
from tkinter import ttk
from typing import Any

from .data.csv_source import load_records_from_csv
from .debug_trace import get_logger, setup_debug_logging
from .grid_controller import GridController
from .models.column_schema import DEFAULT_COLUMNS
from .settings import GridSettings
from .views.grid_window import GridWindow

logger = get_logger(__name__)

SAMPLE_DATA = [
    {"name": "a", "value": 1},
    {"name": "b", "value": 2},
]


class GridApp:
    """Owner of a grid: supplies the initial rows and receives changes."""

    def __init__(self, data: list[dict[str, Any]], settings: GridSettings | None = None):
        self.root = tk.Tk()
        self.root.title("cellgrid")
        self.root.geometry("320x120")

        self.rows: list[dict[str, Any]] = []
        self.controller = GridController(data=data, on_change=self.on_change, settings=settings)
        self.grid_window = GridWindow(self.root, self.controller)

        self._create_widgets()

    def _create_widgets(self) -> None:
        frame = ttk.Frame(self.root, padding="10")
        frame.pack(fill=tk.BOTH, expand=True)

        ttk.Button(frame, text="Edit Data", command=self.grid_window.open).pack(anchor=tk.W)
        self.summary_label = ttk.Label(frame, text=self._summary())
        self.summary_label.pack(anchor=tk.W, pady=(10, 0))

    def _summary(self) -> str:
        return f"{len(self.controller.rows)} rows"

    def on_change(self, rows: list[dict[str, Any]]) -> None:
        """Receive the full row list after every grid mutation."""
        self.rows = rows
        logger.info("Rows changed: %s", rows)
        self.summary_label.config(text=self._summary())

    def run(self) -> None:
        self.root.mainloop()


def _load_initial_data(argv: list[str]) -> list[dict[str, Any]]:
    """Initial rows from a CSV path argument, or the sample rows."""
    paths = [arg for arg in argv if not arg.startswith("-")]
    if not paths:
        return list(SAMPLE_DATA)
    return load_records_from_csv(Path(paths[0]), DEFAULT_COLUMNS)


def main() -> None:
    """Entry point for the application."""
    setup_debug_logging()
    app = GridApp(_load_initial_data(sys.argv[1:]))
    app.run()


def main_debug() -> None:
    """Entry point with console debug logging.

    Args (via sys.argv):
        -unify: Mint string keys seeded from the initial row count
        [path.csv]: Load initial rows from a CSV file
    """
    setup_debug_logging(debug=True)
    settings = GridSettings(unify_keys="-unify" in sys.argv)
    app = GridApp(_load_initial_data(sys.argv[1:]), settings=settings)
    app.run()


if __name__ == "__main__":
    main()
