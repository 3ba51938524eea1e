"""Tests for the per-cell edit state machine."""

from unittest.mock import MagicMock

import pytest

from cellgrid.errors import CellEditError, ReentrantMutationError, RowNotFoundError
from cellgrid.models.column_schema import ColumnDefinition
from cellgrid.models.grid_row import GridRow
from cellgrid.services.cell_edit import (
    CellEditController,
    CellEditState,
    CommitTrigger,
)

NAME_COLUMN = ColumnDefinition(name="Name", field_id="name", editable=True)


@pytest.fixture
def row():
    return GridRow(key="1", fields={"name": "b", "value": 2})


@pytest.fixture
def on_commit():
    return MagicMock()


@pytest.fixture
def cell(on_commit):
    return CellEditController(row_key="1", column=NAME_COLUMN, on_commit=on_commit)


class TestStateTransitions:
    """VIEWING <-> EDITING transitions."""

    def test_initial_state_is_viewing(self, cell):
        assert cell.state is CellEditState.VIEWING
        assert cell.is_editing is False
        assert cell.buffer is None

    def test_begin_edit_syncs_buffer(self, cell, row):
        """Activation copies the committed value into the buffer."""
        cell.begin_edit(row)
        assert cell.state is CellEditState.EDITING
        assert cell.buffer == "b"

    def test_begin_edit_discards_stale_buffer(self, cell, row):
        """Re-activation always re-syncs, dropping uncommitted input."""
        cell.begin_edit(row)
        cell.set_buffer("stale")
        cell.begin_edit(row)
        assert cell.buffer == "b"

    def test_begin_edit_with_wrong_row(self, cell):
        """A cell only edits its own row."""
        with pytest.raises(CellEditError):
            cell.begin_edit(GridRow(key="0", fields={"name": "a"}))

    def test_set_buffer_requires_editing(self, cell):
        with pytest.raises(CellEditError):
            cell.set_buffer("x")

    def test_commit_requires_editing(self, cell):
        with pytest.raises(CellEditError):
            cell.commit()

    def test_non_editable_column_rejected(self):
        """Controllers exist only for editable columns."""
        column = ColumnDefinition(name="Operation", field_id="operation")
        with pytest.raises(CellEditError):
            CellEditController(row_key="1", column=column)


class TestCommit:
    """Tests for commit()."""

    def test_valid_commit(self, cell, row, on_commit):
        """Scenario D: a valid buffer is merged and the cell returns to VIEWING."""
        cell.begin_edit(row)
        cell.set_buffer("bee")

        result = cell.commit()

        assert result.ok is True
        assert result.value == "bee"
        on_commit.assert_called_once_with("1", {"name": "bee"})
        assert cell.state is CellEditState.VIEWING
        assert cell.buffer is None

    def test_blur_behaves_like_confirm(self, cell, row, on_commit):
        """Focus loss commits; it never discards."""
        cell.begin_edit(row)
        cell.set_buffer("bee")

        result = cell.commit(CommitTrigger.BLUR)

        assert result.ok is True
        assert result.trigger is CommitTrigger.BLUR
        on_commit.assert_called_once_with("1", {"name": "bee"})

    def test_invalid_commit_stays_editing(self, cell, row, on_commit):
        """Empty input fails validation; nothing is merged."""
        cell.begin_edit(row)
        cell.set_buffer("")

        result = cell.commit()

        assert result.ok is False
        assert result.error == "Name is required."
        assert cell.last_error == "Name is required."
        assert cell.state is CellEditState.EDITING
        assert cell.buffer == ""
        on_commit.assert_not_called()

    def test_retry_after_failure(self, cell, row, on_commit):
        """The user can fix the input and commit again."""
        cell.begin_edit(row)
        cell.set_buffer("")
        cell.commit()
        cell.set_buffer("fixed")

        result = cell.commit()

        assert result.ok is True
        assert cell.last_error == ""
        on_commit.assert_called_once_with("1", {"name": "fixed"})

    def test_unchanged_value_still_commits(self, cell, row, on_commit):
        """Committing the same value is still a commit."""
        cell.begin_edit(row)
        assert cell.commit().ok is True
        on_commit.assert_called_once_with("1", {"name": "b"})

    def test_custom_validator(self, row, on_commit):
        """A supplied validator replaces the default."""

        def short_only(value):
            return (len(value) <= 3, "Too long")

        cell = CellEditController("1", NAME_COLUMN, validator=short_only, on_commit=on_commit)
        cell.begin_edit(row)
        cell.set_buffer("toolong")
        assert cell.commit().error == "Too long"
        cell.set_buffer("")
        # Custom validator allows empty input
        assert cell.commit().ok is True

    def test_missing_row_keeps_editing(self, cell, row, on_commit):
        """If the row vanished, the commit fails and the buffer is kept."""
        on_commit.side_effect = RowNotFoundError("1")
        cell.begin_edit(row)
        cell.set_buffer("bee")

        result = cell.commit()

        assert result.ok is False
        assert "Row not found" in result.error
        assert cell.is_editing is True
        assert cell.buffer == "bee"

    def test_rejected_mutation_keeps_editing(self, cell, row, on_commit):
        """A grid that refuses the update leaves the buffer for a retry."""
        on_commit.side_effect = ReentrantMutationError("busy")
        cell.begin_edit(row)
        cell.set_buffer("bee")

        result = cell.commit()

        assert result.ok is False
        assert cell.is_editing is True
        assert cell.buffer == "bee"

    def test_owner_failure_after_merge_ends_edit(self, cell, row, on_commit):
        """Errors raised after the merge propagate, but the edit is over."""
        on_commit.side_effect = RuntimeError("owner failed")
        cell.begin_edit(row)
        cell.set_buffer("bee")

        with pytest.raises(RuntimeError):
            cell.commit()

        assert cell.state is CellEditState.VIEWING
        assert cell.buffer is None

    def test_reentrant_commit_rejected(self, row):
        """A commit started during another commit on the same cell is rejected."""
        inner_results = []

        def on_commit(_key, _patch):
            inner_results.append(cell.commit(CommitTrigger.BLUR))

        cell = CellEditController("1", NAME_COLUMN, on_commit=on_commit)
        cell.begin_edit(row)
        cell.set_buffer("bee")

        outer = cell.commit()

        assert outer.ok is True
        assert len(inner_results) == 1
        assert inner_results[0].ok is False
        assert inner_results[0].error == "Commit already in progress"
        assert cell.is_editing is False

    def test_failed_commit_is_logged(self, cell, row, caplog):
        """Validation failures are logged, not raised."""
        cell.begin_edit(row)
        cell.set_buffer("")
        with caplog.at_level("WARNING", logger="cellgrid"):
            cell.commit()
        assert "Name is required." in caplog.text


class TestCancel:
    """Tests for cancel()."""

    def test_cancel_discards_buffer(self, cell, row, on_commit):
        cell.begin_edit(row)
        cell.set_buffer("bee")
        cell.cancel()
        assert cell.state is CellEditState.VIEWING
        assert cell.buffer is None
        on_commit.assert_not_called()

    def test_cancel_while_viewing_is_noop(self, cell):
        cell.cancel()
        assert cell.state is CellEditState.VIEWING


def test_cells_are_independent(row):
    """Several cells can be editing at the same time."""
    value_column = ColumnDefinition(name="Value", field_id="value", editable=True)
    name_cell = CellEditController("1", NAME_COLUMN)
    value_cell = CellEditController("1", value_column)

    name_cell.begin_edit(row)
    value_cell.begin_edit(row)

    assert name_cell.is_editing and value_cell.is_editing
    assert name_cell.buffer == "b"
    assert value_cell.buffer == 2
