"""
Dashboard API — Resource Service (Generic CRUD)
================================================

What:  List / get / create / update / delete for any whitelisted resource.
Why:   Routes stay thin HTTP adapters; every store interaction, payload
       sanitization and error translation lives here.
How:   Each call receives the request's AsyncSession and the resolved
       ResourceDescriptor. No state is kept between calls.

Error Handling Strategy:
    - Client mistakes found before the store is touched (bad id, value that
      does not fit its column) raise ValidationError → 400.
    - A missing row raises NotFoundError → 404 (get, update and delete).
    - Any other failure is logged with resource + operation context and
      re-raised as DatabaseError carrying the generic per-operation message
      ("Failed to fetch resource", ...). Driver details never reach clients.
    - No retries: a failed request fails once, loudly.

Concurrency:
    Requests are independent. There is no optimistic locking; a PATCH and a
    concurrent DELETE on the same row race and the store decides.
"""

import logging
from typing import Any, Dict, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.exceptions import DashboardError, DatabaseError, NotFoundError, ValidationError
from dashboard_api.resources.registry import ResourceDescriptor
from dashboard_api.schemas.resource import ListResponse, PaginationMeta
from dashboard_api.services.coercion import adapt_to_column, coerce_for_column, normalize_id
from dashboard_api.services.query_builder import (
    ListQuery,
    build_order_by,
    build_where,
    total_pages_for,
)
from dashboard_api.services.serialization import serialize_record

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch resource"
CREATE_FAILED = "Failed to create resource"
UPDATE_FAILED = "Failed to update resource"
DELETE_FAILED = "Failed to delete resource"


def sanitize_payload(descriptor: ResourceDescriptor, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Keep only writable scalar fields of the resource.

    Unknown keys, relation names and read-only fields (id, createdAt,
    updatedAt and whatever the descriptor adds) are dropped silently.
    An explicit null is kept: it clears the column.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(message="Request body must be a JSON object", field="body")
    return {key: value for key, value in payload.items() if key in descriptor.writable_fields}


def build_column_values(descriptor: ResourceDescriptor, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Sanitize, coerce and adapt a payload into model attribute values."""
    values = {}
    for key, raw in sanitize_payload(descriptor, payload).items():
        column = descriptor.column(key)
        values[descriptor.attribute_name(key)] = adapt_to_column(
            column, coerce_for_column(column, key, raw)
        )
    return values


class ResourceService:
    """
    Stateless CRUD orchestrator shared by every resource.

    Responsibilities:
        - list_resources(): filtered, sorted, paginated listing
        - get_resource(): single row with not-found handling
        - create_resource() / update_resource(): sanitized writes
        - delete_resource(): removal by id
    """

    async def list_resources(
        self,
        db: AsyncSession,
        descriptor: ResourceDescriptor,
        query: ListQuery,
    ) -> ListResponse:
        """
        Return one page of rows plus pagination metadata.

        The count and the page are read with the same WHERE clause, one
        after the other on the request's session.

        Raises:
            ValidationError: a filter value does not fit its column (→ 400)
            DatabaseError: query execution failed (→ 500)
        """
        where = build_where(descriptor, query)
        order_by = build_order_by(descriptor, query)
        model = descriptor.model

        try:
            page_result = await db.execute(
                select(model)
                .where(*where)
                .order_by(*order_by)
                .offset(query.offset)
                .limit(query.page_size)
            )
            rows = list(page_result.scalars().all())

            count_result = await db.execute(
                select(func.count()).select_from(model).where(*where)
            )
            total_count = count_result.scalar() or 0
        except Exception as e:
            logger.error(
                "Resource %s list failed: %s", descriptor.key, str(e), exc_info=True
            )
            raise DatabaseError(
                message=FETCH_FAILED,
                context={"resource": descriptor.key, "operation": "list", "error_type": type(e).__name__},
            )

        return ListResponse(
            data=[serialize_record(descriptor, row) for row in rows],
            pagination=PaginationMeta(
                page=query.page,
                page_size=query.page_size,
                total_count=total_count,
                total_pages=total_pages_for(total_count, query.page_size),
            ),
        )

    async def get_resource(
        self,
        db: AsyncSession,
        descriptor: ResourceDescriptor,
        raw_id: Any,
    ) -> Dict[str, Any]:
        """
        Fetch one row by primary key.

        Raises:
            ValidationError: malformed id (→ 400)
            NotFoundError: no such row (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        item_id = normalize_id(raw_id)
        instance = await self._load(db, descriptor, item_id, operation="get", failure=FETCH_FAILED)
        return serialize_record(descriptor, instance)

    async def create_resource(
        self,
        db: AsyncSession,
        descriptor: ResourceDescriptor,
        payload: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Insert a row built from the sanitized payload and echo it back.

        flush() assigns the id and runs column defaults; refresh() reloads
        the row so the response shows exactly what was stored.
        """
        values = build_column_values(descriptor, payload)

        try:
            instance = descriptor.model(**values)
            db.add(instance)
            await db.flush()
            await db.refresh(instance)
        except Exception as e:
            logger.error(
                "Resource %s create failed: %s", descriptor.key, str(e), exc_info=True
            )
            raise DatabaseError(
                message=CREATE_FAILED,
                context={"resource": descriptor.key, "operation": "create", "error_type": type(e).__name__},
            )

        logger.info("Created %s %s", descriptor.key, instance.id)
        return serialize_record(descriptor, instance)

    async def update_resource(
        self,
        db: AsyncSession,
        descriptor: ResourceDescriptor,
        raw_id: Any,
        payload: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Apply a partial update. Read-only and unknown keys are ignored, so
        {"id": "999", "createdAt": "...", "name": "X"} only writes name.
        """
        item_id = normalize_id(raw_id)
        values = build_column_values(descriptor, payload)
        instance = await self._load(db, descriptor, item_id, operation="update", failure=UPDATE_FAILED)

        try:
            for attribute, value in values.items():
                setattr(instance, attribute, value)
            await db.flush()
            await db.refresh(instance)
        except Exception as e:
            logger.error(
                "Resource %s update of %s failed: %s", descriptor.key, item_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message=UPDATE_FAILED,
                context={"resource": descriptor.key, "operation": "update", "id": str(item_id)},
            )

        logger.info("Updated %s %s (%d fields)", descriptor.key, item_id, len(values))
        return serialize_record(descriptor, instance)

    async def delete_resource(
        self,
        db: AsyncSession,
        descriptor: ResourceDescriptor,
        raw_id: Any,
    ) -> None:
        item_id = normalize_id(raw_id)
        instance = await self._load(db, descriptor, item_id, operation="delete", failure=DELETE_FAILED)

        try:
            await db.delete(instance)
            await db.flush()
        except Exception as e:
            logger.error(
                "Resource %s delete of %s failed: %s", descriptor.key, item_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message=DELETE_FAILED,
                context={"resource": descriptor.key, "operation": "delete", "id": str(item_id)},
            )

        logger.info("Deleted %s %s", descriptor.key, item_id)

    async def _load(
        self,
        db: AsyncSession,
        descriptor: ResourceDescriptor,
        item_id: int,
        operation: str,
        failure: str,
    ) -> Any:
        """Load a row by id; NotFoundError when absent, DatabaseError on failure."""
        try:
            instance = await db.get(descriptor.model, item_id)
        except DashboardError:
            raise
        except Exception as e:
            logger.error(
                "Resource %s %s of %s failed: %s", descriptor.key, operation, item_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message=failure,
                context={"resource": descriptor.key, "operation": operation, "id": str(item_id)},
            )

        if instance is None:
            raise NotFoundError(resource=descriptor.key, resource_id=str(item_id))
        return instance


# ── Singleton Instance ────────────────────────────────────────────────────
resource_service = ResourceService()
