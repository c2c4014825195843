"""
Dashboard API — Pydantic Response Schemas
==========================================

What:  Pydantic models defining the JSON contract of the resource API.
Why:   FastAPI uses them to serialize responses and generate the OpenAPI
       document; the table client parses the same shapes.

Why records are plain dicts:
    The resource routes serve many tables through one endpoint, so the
    item shape is decided at runtime by the resource descriptor
    (see services/serialization.py). Only the envelope is typed here.

Aliases:
    Python attributes are snake_case; the wire format is camelCase
    (pageSize, totalCount, totalPages). FastAPI serializes by alias.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """
    What:  Pagination block of a list response.
    Invariant: total_pages == max(1, ceil(total_count / page_size))
    """
    page: int = Field(ge=1, description="Current page (1-based)")
    page_size: int = Field(alias="pageSize", ge=1, description="Items per page")
    total_count: int = Field(alias="totalCount", ge=0, description="Rows matching the filters")
    total_pages: int = Field(alias="totalPages", ge=1, description="Number of pages (minimum 1)")

    model_config = {"populate_by_name": True}


class ListResponse(BaseModel):
    """
    What:  Envelope returned by GET /api/{resource}.
    Who:   Consumed by ResourceClient.fetch_list and the table controllers.
    """
    data: List[Dict[str, Any]] = Field(description="Serialized rows of the requested page")
    pagination: PaginationMeta


class DeleteResponse(BaseModel):
    success: bool = Field(default=True)


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Example:
        {"error": "Unknown resource: widgets", "code": "unknown_resource",
         "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error message")
    code: Optional[str] = Field(default=None, description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    resources: List[str] = Field(description="Whitelisted resource keys")
    uptime_seconds: float = Field(description="Seconds since service started")
