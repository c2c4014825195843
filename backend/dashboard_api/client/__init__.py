# Client package init
"""
Dashboard API — Python Client
==============================

    api.py        ResourceClient: typed httpx wrapper for /api/{resource}
    table.py      TableController: paginated table state + URL sync
    selection.py  SelectableTableController: table with row selection
"""

from dashboard_api.client.api import ListParams, ResourceAPIError, ResourceClient, build_query
from dashboard_api.client.selection import SelectableTableController
from dashboard_api.client.table import (
    FilterConfig,
    FilterOption,
    PaginationRequest,
    PaginationResponse,
    TableController,
    TableState,
    TableStateSnapshot,
)

__all__ = [
    "FilterConfig",
    "FilterOption",
    "ListParams",
    "PaginationRequest",
    "PaginationResponse",
    "ResourceAPIError",
    "ResourceClient",
    "SelectableTableController",
    "TableController",
    "TableState",
    "TableStateSnapshot",
    "build_query",
]
