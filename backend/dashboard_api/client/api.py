"""
Dashboard API — Resource Client
================================

What:  Typed async wrapper around the /api/{resource} endpoints.
Why:   Dashboard tables, scripts and tests talk to the API through one
       place that knows the query-string conventions and the error shape.
How:   httpx.AsyncClient underneath. Pass base_url for a remote server, or
       an already configured client (e.g. one bound to ASGITransport(app)).

Example:
    async with ResourceClient(base_url="http://localhost:8000") as api:
        page = await api.fetch_list("orders", ListParams(page=2, filters={"status": ["paid", "pending"]}))
        order = await api.update("orders", page.data[0]["id"], {"remark": "call first"})
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import httpx

from dashboard_api.client.table import PaginationRequest, PaginationResponse
from dashboard_api.schemas.resource import ListResponse

logger = logging.getLogger(__name__)

FilterScalar = Union[str, int, float, bool, None]
FilterValue = Union[FilterScalar, List[FilterScalar], Tuple[FilterScalar, ...]]


class ResourceAPIError(Exception):
    """
    Raised for any non-2xx response.

    Attributes:
        status:   HTTP status code
        message:  The server's "error" field, else the raw body, else a
                  generic "Request failed for <path>"
    """

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


@dataclass
class ListParams:
    page: Optional[int] = None
    page_size: Optional[int] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    filters: Dict[str, FilterValue] = field(default_factory=dict)


def _query_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Optional[ListParams] = None) -> str:
    """
    Encode list parameters the way the list endpoint reads them.

    - page, pageSize, search, sortBy, sortOrder only when truthy
    - list filter values: one key=value pair per non-None entry
    - None filter value: key=null (an IS NULL filter)
    """
    params = params or ListParams()
    pairs: List[Tuple[str, str]] = []

    if params.page:
        pairs.append(("page", str(params.page)))
    if params.page_size:
        pairs.append(("pageSize", str(params.page_size)))
    if params.search:
        pairs.append(("search", params.search))
    if params.sort_by:
        pairs.append(("sortBy", params.sort_by))
    if params.sort_order:
        pairs.append(("sortOrder", params.sort_order))

    for key, value in params.filters.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_text(entry)) for entry in value if entry is not None)
        elif value is None:
            pairs.append((key, "null"))
        else:
            pairs.append((key, _query_text(value)))

    return urlencode(pairs)


class ResourceClient:
    """Async client for one Dashboard API server."""

    def __init__(
        self,
        base_url: str = "",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "ResourceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── Endpoints ─────────────────────────────────────────────────────────

    async def fetch_list(self, resource: str, params: Optional[ListParams] = None) -> ListResponse:
        query = build_query(params)
        path = f"/api/{resource}?{query}" if query else f"/api/{resource}"
        payload = await self._request("GET", path)
        return ListResponse.model_validate(payload)

    async def fetch_item(self, resource: str, item_id: Union[str, int]) -> Dict[str, Any]:
        return await self._request("GET", f"/api/{resource}/{item_id}")

    async def create(self, resource: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/api/{resource}", json=dict(data))

    async def update(
        self, resource: str, item_id: Union[str, int], data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        return await self._request("PATCH", f"/api/{resource}/{item_id}", json=dict(data))

    async def delete(self, resource: str, item_id: Union[str, int]) -> None:
        await self._request("DELETE", f"/api/{resource}/{item_id}")

    def table_fetcher(self, resource: str):
        """
        Adapt fetch_list to TableController's fetch_data signature.

        Empty filter values from the table toolbar mean "no filter" and are
        not sent.
        """
        async def fetch(request: PaginationRequest) -> PaginationResponse:
            result = await self.fetch_list(
                resource,
                ListParams(
                    page=request.page,
                    page_size=request.page_size,
                    search=request.search or None,
                    sort_by=request.sort_by or None,
                    sort_order=request.sort_order if request.sort_by else None,
                    filters={key: value for key, value in request.filters.items() if value},
                ),
            )
            return PaginationResponse(
                data=result.data,
                total_pages=result.pagination.total_pages,
                total_count=result.pagination.total_count,
                current_page=result.pagination.page,
                page_size=result.pagination.page_size,
            )

        return fetch

    # ── Transport ─────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        response = await self._client.request(method, path, json=json)
        if response.is_success:
            return response.json()

        message = ""
        if response.headers.get("content-type", "").startswith("application/json"):
            body = response.json()
            if isinstance(body, dict):
                message = str(body.get("error") or "")
        message = message or response.text or f"Request failed for {path}"

        logger.warning("%s %s failed: %d %s", method, path, response.status_code, message)
        raise ResourceAPIError(status=response.status_code, message=message)
