"""
Dashboard API — Membership Level Model
=======================================

What:  ORM model for the `membership_levels` table.
Who:   Exposed as the "membership-levels" resource.

Column notes:
    - price_cents: integer cents, so no float rounding anywhere
    - points_multiplier / service_discount: NUMERIC, serialized as strings
      ("1.50") so clients never see binary floating point
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.database import Base
from dashboard_api.models.mixins import IdentifierMixin, TimestampMixin


class MembershipLevel(IdentifierMixin, TimestampMixin, Base):
    """A purchasable membership tier (free, silver, gold...)."""

    __tablename__ = "membership_levels"

    # Stable machine code, e.g. "gold"
    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_multiplier: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), nullable=False, default=Decimal("1.00")
    )
    service_discount: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), nullable=False, default=Decimal("0.00")
    )
    highlight: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<MembershipLevel(id={self.id}, code='{self.code}')>"
