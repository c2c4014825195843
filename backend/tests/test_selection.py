"""
Dashboard API — Selectable Table Tests
=======================================

What we test:
    ✅ Row selection, select-all and the derived all/some flags
    ✅ Selection is pruned to the current page after every fetch
    ✅ Row id resolution (custom function, id field, JSON fallback)
"""

import json

import pytest

from dashboard_api.client import SelectableTableController

from test_table_controller import FakeBackend


class SelectionRecorder:
    def __init__(self):
        self.events = []

    def __call__(self, ids, rows):
        self.events.append((ids, rows))

    @property
    def last(self):
        return self.events[-1]


def make_table(rows, **kwargs):
    backend = FakeBackend(rows)
    recorder = SelectionRecorder()
    table = SelectableTableController(
        backend, columns=["name"], on_selection_change=recorder, **kwargs
    )
    return table, backend, recorder


class TestSelection:

    @pytest.mark.asyncio
    async def test_pruned_after_refetch(self):
        row1, row2, row3 = {"id": 1, "name": "a"}, {"id": 2, "name": "b"}, {"id": 3, "name": "c"}
        table, backend, recorder = make_table([row1, row2])
        await table.hydrate("")

        table.select_row("1", True)
        table.select_row("2", True)
        assert table.all_selected

        backend.rows = [row1, row3]
        await table.refresh()

        assert table.selected_keys == {"1"}
        assert recorder.last == (["1"], [row1])

    @pytest.mark.asyncio
    async def test_select_all_and_clear(self):
        table, _, recorder = make_table([{"id": 1}, {"id": 2}, {"id": 3}])
        await table.hydrate("")

        table.select_all(True)
        assert table.selected_keys == {"1", "2", "3"}
        assert table.all_selected and not table.some_selected

        table.select_row("2", False)
        assert table.some_selected and not table.all_selected

        table.select_all(False)
        assert table.selected_keys == set()
        assert recorder.last == ([], [])

        table.select_row("3", True)
        table.clear_selection()
        assert table.selected_keys == set()

    @pytest.mark.asyncio
    async def test_selected_keys_is_a_copy(self):
        table, _, _ = make_table([{"id": 1}])
        await table.hydrate("")

        table.selected_keys.add("1")

        assert table.selected_keys == set()

    @pytest.mark.asyncio
    async def test_notified_after_every_data_change(self):
        table, _, recorder = make_table([{"id": 1}])

        await table.hydrate("")
        await table.set_page(1)

        assert len(recorder.events) == 2

    @pytest.mark.asyncio
    async def test_empty_page_is_never_all_selected(self):
        table, _, _ = make_table([])
        await table.hydrate("")

        assert not table.all_selected
        assert not table.some_selected


class TestRowIds:

    @pytest.mark.asyncio
    async def test_custom_row_id(self):
        rows = [{"orderNo": "A-1"}, {"orderNo": "A-2"}]
        table, _, recorder = make_table(rows, row_id=lambda row: row["orderNo"])
        await table.hydrate("")

        table.select_all(True)

        assert recorder.last == (["A-1", "A-2"], rows)

    @pytest.mark.asyncio
    async def test_json_fallback_warns(self, caplog):
        row = {"name": "no id", "city": "Shanghai"}
        table, _, _ = make_table([row])
        await table.hydrate("")

        row_id = table.resolve_row_id(row)

        assert row_id == json.dumps(row, sort_keys=True)
        assert "falling back to JSON serialization" in caplog.text

    @pytest.mark.asyncio
    async def test_body_rows_include_checkbox_column(self):
        table, _, _ = make_table([{"id": 1}, {"id": 2}])
        await table.hydrate("")
        table.select_row("2", True)

        assert [(row.row_id, row.selected) for row in table.body_rows()] == [("1", False), ("2", True)]

        empty, _, _ = make_table([])
        await empty.hydrate("")
        assert empty.body_rows()[0].colspan == 2
