"""
Dashboard API — Generic Resource Route Handlers
================================================

What:  /api/{resource}        GET (list), POST (create)
       /api/{resource}/{id}   GET, PATCH, DELETE
Why:   Every dashboard table talks to the same five handlers; the resource
       registry decides which path segments are valid.
How:   Each handler resolves the resource (unknown → 404) and, for item
       routes, normalizes the id (malformed → 400) BEFORE the database is
       touched, then delegates to ResourceService.
Who:   Called by ResourceClient and the table controllers.

Why the list route reads raw query params:
    Filters are arbitrary field names that differ per resource and may be
    repeated (?status=paid&status=pending), so they cannot be declared as
    Query() parameters. The reserved keys are still documented below.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.database import get_db_session
from dashboard_api.exceptions import ValidationError
from dashboard_api.resources import resolve_resource
from dashboard_api.schemas.resource import DeleteResponse, ErrorResponse, ListResponse
from dashboard_api.services.coercion import normalize_id
from dashboard_api.services.query_builder import ListQuery
from dashboard_api.services.resource_service import resource_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Resources"])

_ERRORS = {
    400: {"description": "Invalid id or value", "model": ErrorResponse},
    404: {"description": "Unknown resource or row", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


async def _read_json_object(request: Request) -> Dict[str, Any]:
    """Request body as a dict; anything else is a client error."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(message="Request body must be valid JSON", field="body")
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object", field="body")
    return payload


@router.get(
    "/{resource}",
    response_model=ListResponse,
    responses=_ERRORS,
    summary="List rows of a resource",
    description=(
        "Paginated, searchable, sortable and filterable listing. Reserved query "
        "keys: page, pageSize (max 100), search, sortBy, sortOrder (asc|desc). "
        "Any other key naming a field is an equality filter; repeat it for IN."
    ),
)
async def list_resource(
    resource: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ListResponse:
    """
    Example:
        GET /api/orders?page=1&pageSize=20&status=paid&status=pending&sortBy=totalAmount&sortOrder=desc
    """
    descriptor = resolve_resource(resource)
    query = ListQuery.from_query_params(descriptor, request.query_params.multi_items())
    return await resource_service.list_resources(db=db, descriptor=descriptor, query=query)


@router.post(
    "/{resource}",
    status_code=201,
    responses=_ERRORS,
    summary="Create a row",
    description="Unknown and read-only fields (id, createdAt, updatedAt, ...) are ignored.",
)
async def create_resource(
    resource: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    descriptor = resolve_resource(resource)
    payload = await _read_json_object(request)
    return await resource_service.create_resource(db=db, descriptor=descriptor, payload=payload)


@router.get(
    "/{resource}/{item_id}",
    responses=_ERRORS,
    summary="Get one row by id",
)
async def get_resource(
    resource: str,
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    descriptor = resolve_resource(resource)
    key = normalize_id(item_id)
    return await resource_service.get_resource(db=db, descriptor=descriptor, raw_id=key)


@router.patch(
    "/{resource}/{item_id}",
    responses=_ERRORS,
    summary="Partially update a row",
    description="Only writable fields present in the body are changed.",
)
async def update_resource(
    resource: str,
    item_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    descriptor = resolve_resource(resource)
    key = normalize_id(item_id)
    payload = await _read_json_object(request)
    return await resource_service.update_resource(
        db=db, descriptor=descriptor, raw_id=key, payload=payload
    )


@router.delete(
    "/{resource}/{item_id}",
    response_model=DeleteResponse,
    responses=_ERRORS,
    summary="Delete a row",
)
async def delete_resource(
    resource: str,
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    descriptor = resolve_resource(resource)
    key = normalize_id(item_id)
    await resource_service.delete_resource(db=db, descriptor=descriptor, raw_id=key)
    return DeleteResponse(success=True)
