"""Import service for appending spreadsheet (CSV) data to a grid.

This service handles the business logic of turning imported records into
grid rows. It separates data manipulation from UI concerns.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..data.csv_source import load_records_from_csv
from ..data.grid_state import GridState, add_row
from ..debug_trace import get_logger

if TYPE_CHECKING:
    from ..models.column_schema import ColumnDefinition
    from ..models.grid_row import GridRow
    from ..settings import GridSettings

logger = get_logger(__name__)


class ImportService:
    """Service for importing records as new grid rows.

    All methods are static as the service is stateless. The caller (the
    grid controller) swaps in the returned state and notifies the owner.
    """

    @staticmethod
    def merge_records(
        state: GridState,
        records: Sequence[Mapping[str, Any]],
        settings: GridSettings,
    ) -> tuple[GridState, list[GridRow]]:
        """Append each record as a new row, keyed like the add action.

        Fields missing from a record take the new-row template values.
        Empty cells are treated as missing.

        Args:
            state: Current grid state
            records: Imported field maps
            settings: Grid settings (template values, key minting)

        Returns:
            Tuple of (new_state, added_rows).
        """
        added: list[GridRow] = []
        for record in records:
            template = settings.template_for(state.counter)
            template.update({name: value for name, value in record.items() if value != ""})
            state, new_row = add_row(state, template, string_keys=settings.unify_keys)
            added.append(new_row)
        return state, added

    @staticmethod
    def import_csv(
        state: GridState,
        csv_path: str | Path,
        columns: Sequence[ColumnDefinition],
        settings: GridSettings,
    ) -> tuple[GridState, list[GridRow]]:
        """Read a CSV file and append its records as new rows.

        Raises:
            CsvImportError: If the file can't be read.
        """
        records = load_records_from_csv(csv_path, columns, encoding=settings.csv_encoding)
        logger.info("Importing %d rows from %s", len(records), csv_path)
        return ImportService.merge_records(state, records, settings)
