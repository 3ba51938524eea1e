"""Two-phase confirmation guard for row deletion.

request_delete() only records which row is awaiting confirmation; the row
is removed by confirm(). The removal path is not reachable any other way.
"""

from __future__ import annotations

from dataclasses import replace

from ..data.grid_state import GridState, remove_row
from ..debug_trace import get_logger
from ..errors import DeleteNotRequestedError
from ..models.grid_row import RowKey

logger = get_logger(__name__)


class DeletionConfirmationGate:
    """Pure transitions for the delete confirmation flow.

    All methods are static as the gate's only state is the pending_delete
    field of GridState.
    """

    @staticmethod
    def is_available(state: GridState) -> bool:
        """Whether the delete affordance is shown.

        It is shown on every row as soon as the grid has at least one row,
        so the last remaining row can be deleted too.
        """
        return not state.is_empty

    @staticmethod
    def request_delete(state: GridState, key: RowKey) -> GridState:
        """Mark key as awaiting confirmation; rows are untouched.

        A new request replaces any earlier pending one.
        """
        if state.pending_delete is not None and state.pending_delete != key:
            logger.debug("Replacing pending delete %r with %r", state.pending_delete, key)
        return replace(state, pending_delete=key)

    @staticmethod
    def confirm(state: GridState, key: RowKey | None = None) -> GridState:
        """Remove the pending row and clear the request.

        A pending key no longer in the grid removes nothing (not an error).

        Args:
            state: Current state
            key: Optional key the caller is confirming; must match the pending one

        Raises:
            DeleteNotRequestedError: If nothing is pending or key doesn't match.
        """
        pending = state.pending_delete
        if pending is None:
            raise DeleteNotRequestedError("No delete is awaiting confirmation")
        if key is not None and key != pending:
            raise DeleteNotRequestedError(
                f"Delete of {key!r} was not requested (pending: {pending!r})"
            )
        return replace(remove_row(state, pending), pending_delete=None)

    @staticmethod
    def cancel(state: GridState) -> GridState:
        """Discard the pending request, if any."""
        if state.pending_delete is None:
            return state
        return replace(state, pending_delete=None)
