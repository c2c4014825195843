"""
Dashboard API — Paginated Table Controller
===========================================

What:  The state machine behind a dashboard data table: paging, tri-state
       column sorting, search, select filters, and URL state sync.
Why:   Keeps table behaviour independent of any UI toolkit. A page renders
       body_rows() and pagination_controls() and forwards user actions to
       the async set_* / toggle_sort methods.
How:   One TableController owns one TableState. Every user action mutates
       the state, hands the new query string to url_writer (replace, no
       history entry), then fetches through fetch_data. When the response
       corrects page or pageSize, the corrected query string is written too.

Lifecycle:
    Idle ──hydrate()──▶ Loading ──response──▶ Ready ──action──▶ Loading ...
                           │
                           └──error──▶ Ready (previous rows kept, error logged)

Stale responses:
    Every fetch takes the next sequence number. A response that is not
    from the latest fetch is discarded, so a slow page-1 response can
    never overwrite the page-3 rows the user asked for afterwards.

Example:
    table = TableController(
        fetch_data=api.table_fetcher("orders"),
        columns=["orderNo", "status", "totalAmount"],
        filters=[FilterConfig(key="status", label="Status", options=[...])],
        url_writer=lambda qs: router.replace(f"?{qs}"),
    )
    await table.hydrate("page=2&pageSize=20&sortBy=totalAmount&sortOrder=desc")
    await table.toggle_sort("status")     # → sortBy=status asc, page 1
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence
from urllib.parse import parse_qs, urlencode

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE_OPTIONS = (5, 10, 15, 20, 25, 50)
DEFAULT_PAGE_SIZE = 10
DEFAULT_EMPTY_MESSAGE = "No data found"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

Row = Dict[str, Any]


def _parse_int(raw: str) -> Optional[int]:
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


# ── Types ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FilterOption:
    key: str
    label: str


@dataclass(frozen=True)
class FilterConfig:
    """A select filter in the table toolbar; key is the field it filters."""
    key: str
    label: str
    placeholder: str = ""
    options: Sequence[FilterOption] = ()


@dataclass
class PaginationRequest:
    page: int
    page_size: int
    search: str = ""
    sort_by: str = ""
    sort_order: str = "asc"
    filters: Dict[str, str] = field(default_factory=dict)


@dataclass
class PaginationResponse:
    data: List[Row]
    total_pages: int
    total_count: int
    current_page: int
    page_size: int


@dataclass
class TableState:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: str = ""
    sort_by: str = ""
    sort_order: str = "asc"
    filter_values: Dict[str, str] = field(default_factory=dict)
    data: List[Row] = field(default_factory=list)
    is_loading: bool = False
    total_count: int = 0
    total_pages: int = 0


@dataclass(frozen=True)
class TableStateSnapshot:
    page: int
    page_size: int
    total_pages: int
    total_count: int
    is_loading: bool


@dataclass(frozen=True)
class BodyRow:
    """
    One rendered body row.

    kind is "loading" (spinner cell), "empty" (message cell) or "data".
    Placeholder rows span every column, including a selection column.
    """
    kind: str
    colspan: int = 1
    message: str = ""
    row: Optional[Row] = None
    row_id: str = ""
    selected: bool = False


@dataclass(frozen=True)
class PaginationControls:
    page: int
    total_pages: int
    page_size: int
    page_size_options: Sequence[int]


FetchData = Callable[[PaginationRequest], Awaitable[PaginationResponse]]
UrlWriter = Callable[[str], None]
StateListener = Callable[[TableStateSnapshot], None]


# ── Controller ────────────────────────────────────────────────────────────

class TableController:
    """
    Paginated table state owned by a single table instance.

    Action summary:
        set_page(n)          page only
        set_page_size(n)     page size, page → 1
        set_search(text)     search, page → 1
        set_filter(key, v)   one filter value, page → 1
        toggle_sort(column)  none → asc → desc → none, page → 1
        refresh()            refetch with the current state
        reset_page()         page → 1
    """

    def __init__(
        self,
        fetch_data: FetchData,
        columns: Sequence[str],
        filters: Sequence[FilterConfig] = (),
        page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        empty_message: str = DEFAULT_EMPTY_MESSAGE,
        url_writer: Optional[UrlWriter] = None,
        on_state_change: Optional[StateListener] = None,
        row_id: Optional[Callable[[Row], str]] = None,
    ):
        self.fetch_data = fetch_data
        self.columns = list(columns)
        self.filters = list(filters)
        self.page_size_options = list(page_size_options)
        self.default_page_size = default_page_size
        self.empty_message = empty_message
        self.url_writer = url_writer
        self.on_state_change = on_state_change
        self._row_id = row_id

        self.state = TableState(page_size=default_page_size)
        self._sequence = 0
        self._last_snapshot: Optional[TableStateSnapshot] = None
        self._written_query: Optional[str] = None

    # ── Read-only accessors ───────────────────────────────────────────────

    @property
    def total_count(self) -> int:
        return self.state.total_count

    @property
    def current_page(self) -> int:
        return self.state.page

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def data(self) -> List[Row]:
        return self.state.data

    def snapshot(self) -> TableStateSnapshot:
        return TableStateSnapshot(
            page=self.state.page,
            page_size=self.state.page_size,
            total_pages=self.state.total_pages,
            total_count=self.state.total_count,
            is_loading=self.state.is_loading,
        )

    def sort_indicator(self, column: str) -> Optional[str]:
        """"asc" / "desc" for the sorted column, None for the others."""
        if self.state.sort_by and self.state.sort_by == column:
            return self.state.sort_order
        return None

    # ── URL state ─────────────────────────────────────────────────────────

    def to_query_string(self) -> str:
        """
        page and pageSize always; search when set; sortBy with sortOrder
        only while a column is sorted; filters with a non-empty value.
        """
        state = self.state
        pairs = [("page", str(state.page)), ("pageSize", str(state.page_size))]
        if state.search:
            pairs.append(("search", state.search))
        if state.sort_by:
            pairs.append(("sortBy", state.sort_by))
            pairs.append(("sortOrder", state.sort_order))
        pairs.extend((key, value) for key, value in state.filter_values.items() if value)
        return urlencode(pairs)

    def load_query_string(self, query_string: str) -> None:
        """
        Reset the state, then apply whatever the query string carries.

        Missing or unparsable numbers keep their defaults. Only keys of
        configured filters are read.
        """
        params = parse_qs(query_string.lstrip("?"), keep_blank_values=False)

        def first(key: str) -> str:
            values = params.get(key)
            return values[0] if values else ""

        state = TableState(page_size=self.default_page_size)

        page = _parse_int(first("page")) if first("page") else None
        if page is not None:
            state.page = max(page, 1)
        page_size = _parse_int(first("pageSize")) if first("pageSize") else None
        if page_size is not None and page_size > 0:
            state.page_size = page_size
        state.search = first("search")
        state.sort_by = first("sortBy")
        state.sort_order = "desc" if first("sortOrder") == "desc" else "asc"
        state.filter_values = {
            config.key: first(config.key) for config in self.filters if first(config.key)
        }

        self.state = state

    async def hydrate(self, query_string: str = "") -> None:
        """Initialize from the current URL and load the first page."""
        self.load_query_string(query_string)
        await self._commit()

    # ── Actions ───────────────────────────────────────────────────────────

    async def set_page(self, page: int) -> None:
        await self._update(page=max(page, 1))

    async def set_page_size(self, page_size: int) -> None:
        await self._update(page_size=max(page_size, 1), page=1)

    async def set_search(self, search: str) -> None:
        await self._update(search=search, page=1)

    async def set_filter(self, key: str, value: str) -> None:
        if key not in {config.key for config in self.filters}:
            raise ValueError(f"Unknown filter: {key}")
        filter_values = dict(self.state.filter_values)
        filter_values[key] = value
        await self._update(filter_values=filter_values, page=1)

    async def toggle_sort(self, column: str) -> None:
        state = self.state
        if state.sort_by == column:
            if state.sort_order == "asc":
                await self._update(sort_order="desc", page=1)
            else:
                await self._update(sort_by="", sort_order="asc", page=1)
        else:
            await self._update(sort_by=column, sort_order="asc", page=1)

    async def reset_page(self) -> None:
        await self._update(page=1)

    async def refresh(self) -> None:
        await self._fetch()

    # ── Rendering contract ────────────────────────────────────────────────

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def resolve_row_id(self, row: Row) -> str:
        if self._row_id is not None:
            return self._row_id(row)
        return str(row.get("id"))

    def body_rows(self) -> List[BodyRow]:
        if self.state.is_loading:
            return [BodyRow(kind="loading", colspan=self.column_count)]
        if not self.state.data:
            return [BodyRow(kind="empty", colspan=self.column_count, message=self.empty_message)]
        return [
            BodyRow(kind="data", row=row, row_id=self.resolve_row_id(row))
            for row in self.state.data
        ]

    def pagination_controls(self) -> Optional[PaginationControls]:
        """None hides the controls (no pages known yet)."""
        if self.state.total_pages <= 0:
            return None
        return PaginationControls(
            page=self.state.page,
            total_pages=self.state.total_pages,
            page_size=self.state.page_size,
            page_size_options=list(self.page_size_options),
        )

    # ── Internals ─────────────────────────────────────────────────────────

    def build_request(self) -> PaginationRequest:
        state = self.state
        return PaginationRequest(
            page=state.page,
            page_size=state.page_size,
            search=state.search,
            sort_by=state.sort_by,
            sort_order=state.sort_order,
            filters=dict(state.filter_values),
        )

    async def _update(self, **changes: Any) -> None:
        self.state = replace(self.state, **changes)
        await self._commit()

    async def _commit(self) -> None:
        self._write_url(force=True)
        await self._fetch()

    def _write_url(self, force: bool = False) -> None:
        if self.url_writer is None:
            return
        query = self.to_query_string()
        if force or query != self._written_query:
            self._written_query = query
            self.url_writer(query)

    async def _fetch(self) -> None:
        self._sequence += 1
        sequence = self._sequence
        request = self.build_request()

        self.state.is_loading = True
        self._notify()

        try:
            response = await self.fetch_data(request)
        except Exception as e:
            logger.error("Failed to load data: %s", str(e), exc_info=True)
            if sequence == self._sequence:
                self.state.is_loading = False
                self._notify()
            return

        if sequence != self._sequence:
            logger.debug("Discarding stale table response #%d (latest #%d)", sequence, self._sequence)
            return

        self.state.data = list(response.data)
        self.state.total_pages = response.total_pages
        self.state.total_count = response.total_count
        self.state.page = response.current_page
        self.state.page_size = response.page_size
        self.state.is_loading = False
        # the server may have clamped page or pageSize
        self._write_url()
        self._data_changed()
        self._notify()

    def _data_changed(self) -> None:
        """Hook for subclasses; runs after rows from the latest fetch land."""

    def _notify(self) -> None:
        if self.on_state_change is None:
            return
        snapshot = self.snapshot()
        if snapshot != self._last_snapshot:
            self._last_snapshot = snapshot
            self.on_state_change(snapshot)
