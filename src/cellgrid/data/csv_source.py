"""CSV reading and writing of grid records.

Headers are matched to columns by display name or field id, ignoring case,
so both an exported grid ("Name,Value") and a hand-written file
("name,value") load.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..errors import CsvImportError
from ..models.column_schema import ColumnDefinition
from ..models.grid_row import KEY_FIELD

# Cells that look like integers or decimals are loaded as numbers
INT_PATTERN = re.compile(r"^[+-]?\d+$")
FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")


def coerce_number(text: str) -> Any:
    """Convert a numeric-looking string to int/float, else return it stripped."""
    value = text.strip()
    if INT_PATTERN.match(value):
        return int(value)
    if FLOAT_PATTERN.match(value):
        return float(value)
    return value


def _header_map(headers: Sequence[str], columns: Sequence[ColumnDefinition]) -> dict[str, str]:
    """Map CSV header -> field id for headers that name an editable column."""
    lookup: dict[str, str] = {}
    for col in columns:
        if not col.editable:
            continue
        lookup[col.name.strip().lower()] = col.field_id
        lookup[col.field_id.strip().lower()] = col.field_id

    mapping = {}
    for header in headers:
        field_id = lookup.get((header or "").strip().lower())
        if field_id is not None:
            mapping[header] = field_id
    return mapping


def load_records_from_csv(
    csv_path: str | Path,
    columns: Sequence[ColumnDefinition],
    encoding: str = "utf-8",
    numeric_fields: Sequence[str] = ("value",),
) -> list[dict[str, Any]]:
    """Load field maps from a CSV file.

    Unknown columns are ignored. Blank lines are skipped. Cells of
    numeric_fields are converted with coerce_number().

    Args:
        csv_path: Path to the CSV file (first line is the header)
        columns: Grid column schema used to match headers
        encoding: File encoding
        numeric_fields: Field ids whose cells are converted to numbers

    Returns:
        List of field maps containing only the matched fields.

    Raises:
        CsvImportError: If the file can't be read or has no usable header.
    """
    records: list[dict[str, Any]] = []
    try:
        with open(csv_path, newline="", encoding=encoding) as csvfile:
            reader = csv.DictReader(csvfile)
            mapping = _header_map(reader.fieldnames or [], columns)
            if not mapping:
                raise CsvImportError(f"No grid columns found in header of {csv_path}")

            for row in reader:
                record: dict[str, Any] = {}
                for header, field_id in mapping.items():
                    cell = row.get(header)
                    if cell is None:
                        continue
                    record[field_id] = (
                        coerce_number(cell) if field_id in numeric_fields else cell.strip()
                    )
                if any(value != "" for value in record.values()):
                    records.append(record)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise CsvImportError(f"Could not read {csv_path}: {e}") from e

    return records


def save_records_to_csv(
    csv_path: str | Path,
    records: Sequence[dict[str, Any]],
    columns: Sequence[ColumnDefinition],
    encoding: str = "utf-8",
) -> int:
    """Write records to CSV with one column per editable grid column.

    Keys are not written; a re-import mints new keys.

    Returns:
        Number of rows written.
    """
    export_columns = [col for col in columns if col.editable and col.field_id != KEY_FIELD]
    with open(csv_path, "w", newline="", encoding=encoding) as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow([col.name for col in export_columns])
        for record in records:
            cells = [record.get(col.field_id) for col in export_columns]
            writer.writerow(["" if cell is None else cell for cell in cells])
    return len(records)
