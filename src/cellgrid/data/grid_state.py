"""Explicit state record for a grid.

GridState bundles everything a grid controller owns: the rows, the key
counter, and the key of a delete awaiting confirmation. It is immutable;
transitions build a new state with dataclasses.replace() and the controller
swaps it in only after the transition succeeds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from ..models.grid_row import GridRow, RowKey
from .row_store import MissingKeyPolicy, Rows, RowStore


@dataclass(frozen=True)
class GridState:
    rows: Rows = ()
    counter: int = 0
    pending_delete: RowKey | None = None

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def records(self) -> list[dict[str, Any]]:
        return RowStore.to_records(self.rows)


def initial_state(records: Iterable[Mapping[str, Any]], counter: int) -> GridState:
    """State for freshly ingested records; the counter is supplied by settings."""
    return GridState(rows=RowStore.initialize(records), counter=counter)


def add_row(
    state: GridState,
    template: Mapping[str, Any] | None = None,
    *,
    string_keys: bool = False,
) -> tuple[GridState, GridRow]:
    rows, counter, new_row = RowStore.add(
        state.rows, state.counter, template, string_keys=string_keys
    )
    return replace(state, rows=rows, counter=counter), new_row


def remove_row(state: GridState, key: RowKey) -> GridState:
    return replace(state, rows=RowStore.remove(state.rows, key))


def update_row(
    state: GridState,
    key: RowKey,
    patch: Mapping[str, Any],
    *,
    missing: MissingKeyPolicy = MissingKeyPolicy.RAISE,
) -> GridState:
    return replace(state, rows=RowStore.update(state.rows, key, patch, missing=missing))
