"""Service layer for grid behavior.

This package contains the state machines and stateless services that the
grid controller composes. Services separate business logic from UI
concerns and provide clear contracts for operations.

Services:
- CellEditController: Per-cell view/edit/commit state machine (stateful)
- DeletionConfirmationGate: Two-phase request/confirm/cancel for row deletion
- ImportService: Appending CSV records as new rows

Gate and import transitions take a GridState and return a new one; the
grid controller swaps it in and notifies the owner.
"""

from .cell_edit import CellEditController, CellEditState, CommitResult, CommitTrigger
from .delete_gate import DeletionConfirmationGate
from .import_service import ImportService

__all__ = [
    "CellEditController",
    "CellEditState",
    "CommitResult",
    "CommitTrigger",
    "DeletionConfirmationGate",
    "ImportService",
]
