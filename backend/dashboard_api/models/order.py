"""
Dashboard API — Order Models
=============================

What:  ORM models for `orders` and `order_items`.
Who:   Exposed as the "orders" and "order-items" resources.

Money columns are NUMERIC(10, 2). Clients send them as decimal strings
("129.90"); query coercion keeps such strings intact and the store
boundary turns them into Decimal, never float.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.database import Base, BigIntegerKey
from dashboard_api.models.mixins import IdentifierMixin, TimestampMixin


class Order(IdentifierMixin, TimestampMixin, Base):
    """A service order placed by a user at a store."""

    __tablename__ = "orders"

    order_no: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    user_id: Mapped[int] = mapped_column(BigIntegerKey, ForeignKey("users.id"), nullable=False)
    store_id: Mapped[Optional[int]] = mapped_column(
        BigIntegerKey, ForeignKey("stores.id"), nullable=True
    )
    # pending | paid | completed | cancelled
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="pending")
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    remark: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, order_no='{self.order_no}', status='{self.status}')>"


class OrderItem(IdentifierMixin, TimestampMixin, Base):
    """One line of an order."""

    __tablename__ = "order_items"

    order_id: Mapped[int] = mapped_column(BigIntegerKey, ForeignKey("orders.id"), nullable=False)
    service_name: Mapped[str] = mapped_column(String(128), nullable=False)
    service_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, order_id={self.order_id})>"
