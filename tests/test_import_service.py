"""Tests for ImportService."""

import pytest

from cellgrid.data.grid_state import initial_state
from cellgrid.errors import CsvImportError
from cellgrid.models.column_schema import DEFAULT_COLUMNS
from cellgrid.services.import_service import ImportService
from cellgrid.settings import GridSettings


@pytest.fixture
def state():
    return initial_state([{"name": "a", "value": 1}], counter=2)


class TestMergeRecords:
    """Tests for merge_records()."""

    def test_appends_rows(self, state):
        new_state, added = ImportService.merge_records(
            state, [{"name": "x", "value": 9}], GridSettings()
        )

        assert [row.key for row in new_state.rows] == ["0", 2]
        assert added[0].fields == {"name": "x", "value": 9}
        assert new_state.counter == 3

    def test_missing_fields_use_template(self, state):
        _, added = ImportService.merge_records(state, [{"value": 5}], GridSettings())
        assert added[0].fields == {"name": "dooring 2", "value": 5}

    def test_empty_cells_use_template(self, state):
        _, added = ImportService.merge_records(state, [{"name": "", "value": ""}], GridSettings())
        assert added[0].fields == {"name": "dooring 2", "value": 32}

    def test_unified_keys(self):
        settings = GridSettings(unify_keys=True)
        state = initial_state([{"name": "a"}], counter=settings.initial_counter(1))

        new_state, _ = ImportService.merge_records(state, [{"name": "x"}], settings)

        assert [row.key for row in new_state.rows] == ["0", "1"]

    def test_original_state_unchanged(self, state):
        ImportService.merge_records(state, [{"name": "x"}], GridSettings())
        assert len(state.rows) == 1
        assert state.counter == 2


class TestImportCsv:
    """Tests for import_csv()."""

    def test_import_csv(self, state, tmp_path):
        path = tmp_path / "rows.csv"
        path.write_text("Name,Value\nx,3\ny,4\n", encoding="utf-8")

        new_state, added = ImportService.import_csv(state, path, DEFAULT_COLUMNS, GridSettings())

        assert [row.key for row in added] == [2, 3]
        assert new_state.records()[-1] == {"key": 3, "name": "y", "value": 4}

    def test_bad_file(self, state, tmp_path):
        with pytest.raises(CsvImportError):
            ImportService.import_csv(
                state, tmp_path / "missing.csv", DEFAULT_COLUMNS, GridSettings()
            )
