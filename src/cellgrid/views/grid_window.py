"""Window hosting the grid panel.

The window is the grid's visibility gate: open() shows it, close() hides
it. The controller's rows are independent of whether the window is shown,
so closing and reopening keeps every edit.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from ..grid_controller import GridController
from .grid_panel import GridPanel


class GridWindow:
    """Lazily created Toplevel with a GridPanel and OK/Cancel buttons.

    Both buttons only hide the window; edits are already committed to the
    controller as they happen.
    """

    def __init__(self, parent: tk.Misc, controller: GridController, title: str = "Edit Data"):
        self.parent = parent
        self.controller = controller
        self.title = title
        self.window: tk.Toplevel | None = None
        self.panel: GridPanel | None = None

    @property
    def is_open(self) -> bool:
        return self.window is not None and self.window.winfo_viewable()

    def _create_window(self) -> None:
        self.window = tk.Toplevel(self.parent)
        self.window.title(self.title)
        self.window.geometry("520x380")
        self.window.transient(self.parent)
        self.window.protocol("WM_DELETE_WINDOW", self.close)

        self.panel = GridPanel(self.window, self.controller)
        self.panel.pack(fill=tk.BOTH, expand=True)

        buttons = ttk.Frame(self.window, padding=(5, 0, 5, 5))
        buttons.pack(fill=tk.X)
        ttk.Button(buttons, text="Cancel", command=self.close).pack(side=tk.RIGHT)
        ttk.Button(buttons, text="OK", command=self.close).pack(side=tk.RIGHT, padx=(0, 5))

    def open(self) -> None:
        """Show the window, creating it on first use."""
        if self.window is None:
            self._create_window()
        else:
            self.window.deiconify()
        self.window.lift()

    def close(self) -> None:
        """Hide the window."""
        if self.window is not None:
            self.window.withdraw()
