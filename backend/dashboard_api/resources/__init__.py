# Resources package init
"""
Resource whitelist: which /api/{resource} keys exist and how each one maps
onto its table. See registry.py.
"""

from dashboard_api.resources.registry import (
    RESOURCES,
    ResourceDescriptor,
    ResourceKind,
    resolve_resource,
    resource_keys,
)

__all__ = [
    "RESOURCES",
    "ResourceDescriptor",
    "ResourceKind",
    "resolve_resource",
    "resource_keys",
]
