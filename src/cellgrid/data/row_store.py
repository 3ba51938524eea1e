"""Row store operations for the grid.

The row collection is an ordered tuple of immutable GridRow objects. Every
operation here is a pure transformation: it takes the current rows and
returns new rows, never notifying anyone. Notification is the grid
controller's job after a transition succeeds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from ..debug_trace import get_logger
from ..errors import RowNotFoundError
from ..models.grid_row import KEY_FIELD, GridRow, RowKey, make_template_fields
from ..models.row_patch import RowPatch

logger = get_logger(__name__)

Rows = tuple[GridRow, ...]


class MissingKeyPolicy(Enum):
    """What update() does when no row has the requested key."""

    RAISE = "raise"  # raise RowNotFoundError
    LAST_ROW = "last_row"  # legacy behavior: overwrite the last row


class RowStore:
    """Pure add/remove/update operations on an ordered row tuple.

    All methods are static as the store keeps no state of its own; the
    rows live in the grid controller's GridState.
    """

    @staticmethod
    def initialize(records: Iterable[Mapping[str, Any]]) -> Rows:
        """Ingest the initial records, keyed by stringified position.

        Args:
            records: Field maps in display order. Any "key" entry is replaced.

        Returns:
            Rows keyed "0", "1", ... in input order.
        """
        rows = []
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise TypeError(f"Row {index} is not a mapping: {record!r}")
            fields = {name: value for name, value in record.items() if name != KEY_FIELD}
            rows.append(GridRow(key=str(index), fields=fields))
        return tuple(rows)

    @staticmethod
    def add(
        rows: Rows,
        counter: int,
        template: Mapping[str, Any] | None = None,
        *,
        string_keys: bool = False,
    ) -> tuple[Rows, int, GridRow]:
        """Append a new row keyed by the counter.

        Args:
            rows: Current rows
            counter: Counter value to use as the new key
            template: Field values for the new row (default template if None)
            string_keys: Mint str(counter) instead of counter

        Returns:
            Tuple of (new_rows, next_counter, new_row). next_counter is
            always counter + 1.
        """
        fields = dict(template) if template is not None else make_template_fields(counter)
        key: RowKey = str(counter) if string_keys else counter
        new_row = GridRow(key=key, fields=fields)
        return rows + (new_row,), counter + 1, new_row

    @staticmethod
    def find_index(rows: Rows, key: RowKey) -> int:
        """Index of the first row with the given key, or -1."""
        for index, row in enumerate(rows):
            if row.key == key:
                return index
        return -1

    @staticmethod
    def get(rows: Rows, key: RowKey) -> GridRow | None:
        """Row with the given key, or None."""
        index = RowStore.find_index(rows, key)
        return rows[index] if index >= 0 else None

    @staticmethod
    def remove(rows: Rows, key: RowKey) -> Rows:
        """Remove the first row with the given key.

        A missing key is not an error: the rows are returned unchanged.
        """
        index = RowStore.find_index(rows, key)
        if index < 0:
            logger.debug("remove: no row with key %r, rows unchanged", key)
            return rows
        return rows[:index] + rows[index + 1 :]

    @staticmethod
    def update(
        rows: Rows,
        key: RowKey,
        patch: Mapping[str, Any],
        *,
        missing: MissingKeyPolicy = MissingKeyPolicy.RAISE,
    ) -> Rows:
        """Replace the row with the given key by the row merged with patch.

        Only the patched fields change; all other fields and the key are
        preserved.

        Args:
            rows: Current rows
            key: Key of the row to update
            patch: Partial field map (mapping or RowPatch)
            missing: Policy when no row has the key

        Returns:
            New rows with the updated row in place.

        Raises:
            RowNotFoundError: If the key is missing and the policy is RAISE,
                or the grid is empty.
        """
        row_patch = RowPatch.of(patch)
        index = RowStore.find_index(rows, key)
        if index < 0:
            if missing is MissingKeyPolicy.RAISE or not rows:
                raise RowNotFoundError(key)
            index = len(rows) - 1
            logger.warning(
                "update: no row with key %r, overwriting last row %r", key, rows[index].key
            )
        updated = row_patch.freeze(rows[index])
        return rows[:index] + (updated,) + rows[index + 1 :]

    @staticmethod
    def to_records(rows: Rows) -> list[dict[str, Any]]:
        """Materialize rows as plain dicts, each including its key."""
        return [row.to_dict() for row in rows]
