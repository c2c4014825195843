"""
Dashboard API — User and Pet Models
====================================

What:  ORM models for the `users` and `pets` tables.
Who:   Exposed as the "users" and "pets" resources.

Foreign keys (current_membership_level_id, user_id) surface at the API as
`currentMembershipLevelId` / `userId`; the "...Id" suffix is what makes
query-string coercion treat them as opaque 64-bit identifiers.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.database import Base, BigIntegerKey
from dashboard_api.models.mixins import IdentifierMixin, TimestampMixin


class User(IdentifierMixin, TimestampMixin, Base):
    """An end user of the customer-facing app, managed from the dashboard."""

    __tablename__ = "users"

    open_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    points_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_membership_level_id: Mapped[Optional[int]] = mapped_column(
        BigIntegerKey, ForeignKey("membership_levels.id"), nullable=True
    )
    membership_expire_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, nickname='{self.nickname}')>"


class Pet(IdentifierMixin, TimestampMixin, Base):
    """A pet registered by a user."""

    __tablename__ = "pets"

    user_id: Mapped[int] = mapped_column(BigIntegerKey, ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    # dog | cat | other
    species: Mapped[str] = mapped_column(String(16), nullable=False, default="dog")
    breed: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    gender: Mapped[str] = mapped_column(String(16), nullable=False, default="unknown")
    birthdate: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    weight_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 1), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    neutered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    vaccinated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}')>"
