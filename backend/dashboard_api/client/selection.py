"""
Dashboard API — Selectable Table Controller
============================================

What:  TableController plus row selection (checkbox column).
How:   Selected rows are tracked by row id. After every data change the
       selection is pruned to ids present on the current page, then
       on_selection_change(ids, rows) is called. The same notification
       follows every select / clear action.

Row ids:
    row_id(row) when given, else str(row["id"]). Rows without an id fall
    back to a sorted JSON dump of the row, with a warning, since such ids
    change whenever any field changes.
"""

import json
import logging
from typing import Any, Callable, List, Optional, Set

from dashboard_api.client.table import BodyRow, Row, TableController

logger = logging.getLogger(__name__)

SelectionListener = Callable[[List[str], List[Row]], None]


class SelectableTableController(TableController):

    def __init__(
        self,
        *args: Any,
        on_selection_change: Optional[SelectionListener] = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.on_selection_change = on_selection_change
        self._selected: Set[str] = set()

    # ── Row identity ──────────────────────────────────────────────────────

    def resolve_row_id(self, row: Row) -> str:
        if self._row_id is not None:
            return self._row_id(row)

        candidate = row.get("id")
        if candidate is None:
            logger.warning(
                "Row has no id and no row_id function was given; "
                "falling back to JSON serialization, which may be unstable: %r",
                row,
            )
            return json.dumps(row, sort_keys=True, default=str)
        return str(candidate)

    def _valid_row_ids(self) -> Set[str]:
        return {self.resolve_row_id(row) for row in self.state.data}

    # ── Selection state ───────────────────────────────────────────────────

    @property
    def selected_keys(self) -> Set[str]:
        return set(self._selected)

    @property
    def all_selected(self) -> bool:
        return bool(self.state.data) and len(self._selected) == len(self.state.data)

    @property
    def some_selected(self) -> bool:
        return 0 < len(self._selected) < len(self.state.data)

    def selected_rows(self) -> List[Row]:
        return [row for row in self.state.data if self.resolve_row_id(row) in self._selected]

    # ── Actions ───────────────────────────────────────────────────────────

    def select_all(self, checked: bool = True) -> None:
        self._selected = self._valid_row_ids() if checked else set()
        self._emit_selection()

    def select_row(self, row_id: str, checked: bool) -> None:
        if checked:
            self._selected.add(row_id)
        else:
            self._selected.discard(row_id)
        self._emit_selection()

    def clear_selection(self) -> None:
        self._selected = set()
        self._emit_selection()

    # ── Rendering ─────────────────────────────────────────────────────────

    @property
    def column_count(self) -> int:
        # Checkbox column
        return len(self.columns) + 1

    def body_rows(self) -> List[BodyRow]:
        rows = super().body_rows()
        return [
            BodyRow(
                kind=row.kind,
                row=row.row,
                row_id=row.row_id,
                selected=row.row_id in self._selected,
            )
            if row.kind == "data"
            else row
            for row in rows
        ]

    # ── Internals ─────────────────────────────────────────────────────────

    def _data_changed(self) -> None:
        self._selected &= self._valid_row_ids()
        self._emit_selection()

    def _emit_selection(self) -> None:
        if self.on_selection_change is None:
            return
        self.on_selection_change(sorted(self._selected), self.selected_rows())
