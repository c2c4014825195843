"""
Dashboard API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       the module-level `app` is what uvicorn serves
       (uvicorn dashboard_api.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:  Request ID → Logging → GZip → CORS         │
    │                                                          │
    │  Routes:                                                 │
    │  ┌─────────────────────────────┐ ┌─────────────────────┐ │
    │  │ /api/{resource}[/{id}]      │ │ GET /health         │ │
    │  └─────────────────────────────┘ └─────────────────────┘ │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ValidationError→400 │ Unknown/NotFound→404 │ DB→500     │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, optional table creation
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from dashboard_api import __version__
from dashboard_api.config import settings
from dashboard_api.database import create_tables, dispose_engine
from dashboard_api.exceptions import (
    DashboardError,
    DatabaseError,
    NotFoundError,
    UnknownResourceError,
    ValidationError,
)
from dashboard_api.middleware.logging import RequestLoggingMiddleware
from dashboard_api.middleware.request_id import RequestIDMiddleware, request_id_var
from dashboard_api.routes import health, resources

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] dashboard_api.access: GET /api/users 200 ...
    Output goes to stdout; the container runtime collects it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-statement and per-connection chatter
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Configure logging
        2. Check configuration: a production deployment with missing settings
           refuses to start; other environments log a warning per problem
        3. Create missing tables when AUTO_CREATE_TABLES is set
    Shutdown:
        1. Dispose the engine
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Dashboard API %s starting (%s)", __version__, settings.environment)

    try:
        problems = settings.validate_required_for_production()
    except ValueError as e:
        logger.critical("Configuration error: %s", str(e))
        raise
    for problem in problems:
        logger.warning("Configuration: %s", problem)

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Resource tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Dashboard API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(exc: DashboardError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "code": exc.code,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the DashboardError hierarchy onto JSON error responses.

    Handler hierarchy:
        ValidationError       → 400
        UnknownResourceError  → 404
        NotFoundError         → 404
        DatabaseError         → 500 (generic per-operation message)
        DashboardError (base) → its own status_code
        Exception (fallback)  → 500

    Context dicts (resource, id, driver error type) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc)

    @app.exception_handler(UnknownResourceError)
    async def handle_unknown_resource(request: Request, exc: UnknownResourceError):
        return _error_response(exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(exc)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(exc)

    @app.exception_handler(DashboardError)
    async def handle_dashboard_error(request: Request, exc: DashboardError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log; the client only gets the request id."""
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "An unexpected error occurred",
                "code": "internal_server_error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble a fully configured application."""
    app = FastAPI(
        title="Dashboard API",
        description=(
            "Generic list / create / read / update / delete endpoints for the "
            "whitelisted dashboard resources, with pagination, search, sorting "
            "and field filters."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(resources.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
