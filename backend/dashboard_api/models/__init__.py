# Models package init
"""
Dashboard API — SQLAlchemy Models
==================================

Importing this package registers every resource table with Base.metadata
(used by create_tables() and the test fixtures).
"""

from dashboard_api.models.membership import MembershipLevel
from dashboard_api.models.order import Order, OrderItem
from dashboard_api.models.store import Store
from dashboard_api.models.user import Pet, User

__all__ = [
    "MembershipLevel",
    "Order",
    "OrderItem",
    "Pet",
    "Store",
    "User",
]
