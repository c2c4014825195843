"""
Dashboard API — Resource Registry (Whitelist)
==============================================

What:  The closed set of resources reachable through /api/{resource}.
Why:   The generic routes accept any path segment; this module is the only
       place that decides which segments map to a table, which fields are
       searchable and how lists are ordered by default.
How:   ResourceKind is an Enum of public keys. RESOURCES maps every kind to
       exactly one ResourceDescriptor; a mismatch fails at import time.
       resolve_resource() turns a raw path segment into a descriptor or
       raises UnknownResourceError before any session is touched.

Field naming:
    Models use snake_case attributes. The API (query keys, JSON bodies,
    responses) uses camelCase: created_at ↔ createdAt, user_id ↔ userId.
    A descriptor's scalar fields are derived from the model's mapped
    columns, so adding a column exposes it without touching this file.
"""

import enum
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple, Type

from sqlalchemy import inspect
from sqlalchemy.orm import InstrumentedAttribute

from dashboard_api.database import Base
from dashboard_api.exceptions import UnknownResourceError
from dashboard_api.models import MembershipLevel, Order, OrderItem, Pet, Store, User

logger = logging.getLogger(__name__)

# Managed by the store, never written by clients
ALWAYS_READ_ONLY: FrozenSet[str] = frozenset(
    {"id", "createdAt", "updatedAt", "created_at", "updated_at"}
)

SortDirection = str  # "asc" | "desc"


def to_camel(name: str) -> str:
    """created_at → createdAt"""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class ResourceKind(str, enum.Enum):
    """Public resource keys, as they appear in /api/{resource}."""

    MEMBERSHIP_LEVELS = "membership-levels"
    USERS = "users"
    PETS = "pets"
    STORES = "stores"
    ORDERS = "orders"
    ORDER_ITEMS = "order-items"


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Describes how one resource maps onto its table.

    Attributes:
        kind:              Public key
        model:             SQLAlchemy model class
        search_fields:     API field names matched by ?search= (OR, case-insensitive)
        default_order_by:  (field, direction) pairs used when no valid sortBy is given
    """

    kind: ResourceKind
    model: Type[Base]
    search_fields: Tuple[str, ...] = ()
    default_order_by: Tuple[Tuple[str, SortDirection], ...] = ()

    @property
    def key(self) -> str:
        return self.kind.value

    @cached_property
    def scalar_fields(self) -> Dict[str, InstrumentedAttribute]:
        """API field name → mapped column attribute, in declaration order."""
        mapper = inspect(self.model)
        return {
            to_camel(attr.key): getattr(self.model, attr.key)
            for attr in mapper.column_attrs
        }

    @cached_property
    def writable_fields(self) -> FrozenSet[str]:
        return frozenset(name for name in self.scalar_fields if name not in ALWAYS_READ_ONLY)

    def is_scalar(self, name: str) -> bool:
        return name in self.scalar_fields

    def column(self, name: str) -> InstrumentedAttribute:
        """Mapped attribute for an API field name (KeyError if unknown)."""
        return self.scalar_fields[name]

    def attribute_name(self, name: str) -> str:
        """Model attribute name for an API field name."""
        return self.scalar_fields[name].key

    def filter_fields(self, keys: Iterable[str]) -> List[str]:
        """Keep only keys that name scalar fields; unknown keys are dropped."""
        return [key for key in keys if key in self.scalar_fields]


RESOURCES: Mapping[ResourceKind, ResourceDescriptor] = {
    ResourceKind.MEMBERSHIP_LEVELS: ResourceDescriptor(
        kind=ResourceKind.MEMBERSHIP_LEVELS,
        model=MembershipLevel,
        search_fields=("code", "name"),
        default_order_by=(("createdAt", "desc"),),
    ),
    ResourceKind.USERS: ResourceDescriptor(
        kind=ResourceKind.USERS,
        model=User,
        search_fields=("openId", "phone", "nickname"),
        default_order_by=(("createdAt", "desc"),),
    ),
    ResourceKind.PETS: ResourceDescriptor(
        kind=ResourceKind.PETS,
        model=Pet,
        search_fields=("name", "breed", "color"),
        default_order_by=(("createdAt", "desc"),),
    ),
    ResourceKind.STORES: ResourceDescriptor(
        kind=ResourceKind.STORES,
        model=Store,
        search_fields=("name", "slug", "city", "province"),
        default_order_by=(("createdAt", "desc"),),
    ),
    ResourceKind.ORDERS: ResourceDescriptor(
        kind=ResourceKind.ORDERS,
        model=Order,
        search_fields=("orderNo", "status"),
        default_order_by=(("createdAt", "desc"),),
    ),
    ResourceKind.ORDER_ITEMS: ResourceDescriptor(
        kind=ResourceKind.ORDER_ITEMS,
        model=OrderItem,
        search_fields=("serviceName", "serviceType"),
        default_order_by=(("id", "desc"),),
    ),
}


def _check_registry() -> None:
    """Every kind has exactly one descriptor whose fields exist on its model."""
    missing = set(ResourceKind) - set(RESOURCES)
    if missing:
        raise RuntimeError(f"Resources without descriptor: {sorted(k.value for k in missing)}")
    for kind, descriptor in RESOURCES.items():
        if descriptor.kind is not kind:
            raise RuntimeError(f"Descriptor for {kind.value} is registered as {descriptor.key}")
        declared = list(descriptor.search_fields) + [name for name, _ in descriptor.default_order_by]
        unknown = [name for name in declared if not descriptor.is_scalar(name)]
        if unknown:
            raise RuntimeError(f"Resource {kind.value} references unknown fields: {unknown}")


_check_registry()

resource_keys: Tuple[str, ...] = tuple(kind.value for kind in ResourceKind)


def resolve_resource(name: str) -> ResourceDescriptor:
    """
    Map a raw path segment to its descriptor.

    Raises:
        UnknownResourceError: name is not a whitelisted resource key (→ 404)
    """
    try:
        kind = ResourceKind(name)
    except ValueError:
        logger.info("Rejected unknown resource '%s'", name)
        raise UnknownResourceError(resource=name)
    return RESOURCES[kind]
