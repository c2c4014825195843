"""
Dashboard API — List Query Building
====================================

What:  Turns the query string of GET /api/{resource} into a ListQuery, and
       a ListQuery into SQLAlchemy WHERE / ORDER BY clauses.
Why:   Keeps all parameter marshalling in one place, testable without HTTP
       or a database.

Query string contract:
    page       leading integer (like JS parseInt), invalid → 1, floor 1
    pageSize   leading integer, invalid → default (20), clamped to [1, max]
    search     case-insensitive "contains" over the resource's search fields
    sortBy     a scalar field of the resource; anything else → default order
    sortOrder  "desc" (exact literal) → descending, anything else → ascending
    <field>    equality filter; repeated key → IN filter; unknown keys ignored

Example:
    /api/pets?page=2&pageSize=10&search=lab&species=dog&species=cat&sortBy=name
    → WHERE (name ILIKE '%lab%' OR breed ILIKE ... OR color ILIKE ...)
        AND species IN ('dog', 'cat')
      ORDER BY name ASC, id DESC LIMIT 10 OFFSET 10
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from dashboard_api.config import settings
from dashboard_api.resources.registry import ResourceDescriptor
from dashboard_api.services.coercion import adapt_to_column, coerce_for_column

RESERVED_QUERY_KEYS = frozenset({"page", "pageSize", "search", "sortBy", "sortOrder"})

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(raw: Optional[str]) -> Optional[int]:
    """parseInt-style: "25abc" → 25, "abc" → None, None → None."""
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


def clamp_page_size(raw: Optional[str]) -> int:
    size = parse_leading_int(raw)
    if size is None:
        size = settings.default_page_size
    return max(1, min(size, settings.max_page_size))


def total_pages_for(total_count: int, page_size: int) -> int:
    return max(1, math.ceil(total_count / page_size))


@dataclass
class ListQuery:
    """
    Validated list request for one resource.

    filters maps API field names to their raw values; a key with several
    values becomes an IN filter. Values are coerced when the WHERE clause
    is built, not here.
    """

    page: int = 1
    page_size: int = field(default_factory=lambda: settings.default_page_size)
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: str = "asc"
    filters: Dict[str, List[Any]] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @classmethod
    def from_query_params(
        cls,
        descriptor: ResourceDescriptor,
        items: Iterable[Tuple[str, str]],
    ) -> "ListQuery":
        """
        Build from raw (key, value) pairs, e.g. request.query_params.multi_items().

        Lenient: bad numbers fall back to defaults and unknown filter keys
        are dropped, so a stale bookmark never turns into an error page.
        """
        first: Dict[str, str] = {}
        multi: Dict[str, List[str]] = {}
        for key, value in items:
            first.setdefault(key, value)
            if key not in RESERVED_QUERY_KEYS:
                multi.setdefault(key, []).append(value)

        page = parse_leading_int(first.get("page"))
        known = descriptor.filter_fields(multi.keys())

        return cls(
            page=max(page if page is not None else 1, 1),
            page_size=clamp_page_size(first.get("pageSize")),
            search=first.get("search") or None,
            sort_by=first.get("sortBy") or None,
            sort_order="desc" if first.get("sortOrder") == "desc" else "asc",
            filters={key: multi[key] for key in known},
        )

def build_where(descriptor: ResourceDescriptor, query: ListQuery) -> List[ColumnElement]:
    """
    WHERE clauses for a list query (combined with AND by the caller).

    Raises:
        ValidationError: a filter value cannot be adapted to its column type
    """
    clauses: List[ColumnElement] = []

    if query.search and descriptor.search_fields:
        clauses.append(
            or_(
                *(
                    descriptor.column(name).icontains(query.search, autoescape=True)
                    for name in descriptor.search_fields
                )
            )
        )

    for key, raw_values in query.filters.items():
        column = descriptor.column(key)
        values = [adapt_to_column(column, coerce_for_column(column, key, raw)) for raw in raw_values]
        if not values:
            continue

        if len(values) == 1:
            value = values[0]
            clauses.append(column.is_(None) if value is None else column == value)
            continue

        present = [value for value in values if value is not None]
        clause = column.in_(present)
        if len(present) != len(values):
            clause = or_(clause, column.is_(None))
        clauses.append(clause)

    return clauses


def build_order_by(descriptor: ResourceDescriptor, query: ListQuery) -> List[ColumnElement]:
    """
    ORDER BY clauses: requested scalar sort, else the resource default,
    else id descending. id is appended as a tie-breaker so that equal sort
    keys never reshuffle rows between identical requests.
    """
    if query.sort_by and descriptor.is_scalar(query.sort_by):
        order = [(query.sort_by, query.sort_order)]
    elif descriptor.default_order_by:
        order = list(descriptor.default_order_by)
    else:
        order = [("id", "desc")]

    clauses = [
        descriptor.column(name).desc() if direction == "desc" else descriptor.column(name).asc()
        for name, direction in order
    ]
    if all(name != "id" for name, _ in order):
        clauses.append(descriptor.column("id").desc())
    return clauses
