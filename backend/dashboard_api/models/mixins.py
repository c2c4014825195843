"""
Shared column definitions for resource models.

Every resource table carries a 64-bit surrogate key and UTC timestamps.
Those three columns are always read-only at the API boundary.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.database import BigIntegerKey


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdentifierMixin:
    # BIGINT on PostgreSQL; serialized as a string so precision survives
    # values beyond 2^53 in JavaScript clients
    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
