"""
Dashboard API — Application Package Initializer
================================================

What: Marks the `dashboard_api` directory as a Python package.
Why:  Enables imports like `from dashboard_api.config import settings`.
Who:  Used by uvicorn, pytest, and the table client.

Architecture Note:
    The server half follows a layered architecture:

    ┌─────────────────────────────────────┐
    │     Routes (/api/{resource}...)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (query, coerce, CRUD)     │  ← Marshalling + store calls
    ├─────────────────────────────────────┤
    │  Resource registry + Models         │  ← Whitelist + SQLAlchemy ORM
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The client half (`dashboard_api.client`) talks to the routes over HTTP:
    a typed httpx wrapper plus the paginated table controllers that own
    page/sort/filter/search state and keep it mirrored in a query string.
"""

__version__ = "1.0.0"
