"""
NeuroNotes Backend: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn neuronotes.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────────┐ │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│  CORS    │ │
    │  └──────────┘ └─────────────┘ └──────┘ └──────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌───────────────────┐ ┌─────────┐ │
    │  │ /api/notes   │ │ /functions/v1/... │ │ /health │ │
    │  └──────────────┘ └───────────────────┘ └─────────┘ │
    │                                                     │
    │  Exception Handlers (notes API):                    │
    │  Validation→400 │ Auth→401 │ NotFound→404 │ DB→500  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check configuration (log, don't exit)
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from neuronotes import __version__
from neuronotes.config import settings
from neuronotes.database import dispose_engine
from neuronotes.exceptions import (
    AuthenticationError,
    AuthServiceError,
    DatabaseError,
    NeuroNotesError,
    NotFoundError,
    ValidationError,
)
from neuronotes.middleware.logging import RequestLoggingMiddleware
from neuronotes.middleware.request_id import RequestIDMiddleware, request_id_var
from neuronotes.routes import functions, health, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every request/query at INFO or DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("NeuroNotes Backend %s starting up...", __version__)

    # Missing AI / auth settings only break the endpoints that need them,
    # so the server keeps running and reports the problem.
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("AI model: %s via %s", settings.ai_model, settings.ai_gateway_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("NeuroNotes Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int, error: str, message: str, details: dict | None = None, headers: dict | None = None
) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses for the notes API.

    Handler hierarchy:
        ValidationError      → 400
        AuthenticationError  → 401 (WWW-Authenticate: Bearer)
        NotFoundError        → 404
        DatabaseError        → 500 (generic message, details logged)
        AuthServiceError     → 503
        NeuroNotesError      → its status_code
        Exception            → 500 (generic message, stack trace logged)

    The AI function routes format their own `{"error": ...}` bodies and
    never reach these handlers.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(
            401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(AuthServiceError)
    async def handle_auth_service_error(request: Request, exc: AuthServiceError):
        logger.error(
            "[%s] Auth service error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(503, "service_unavailable", exc.message)

    @app.exception_handler(NeuroNotesError)
    async def handle_application_error(request: Request, exc: NeuroNotesError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(exc.status_code, "application_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="NeuroNotes API",
        description=(
            "Markdown notes with favorites, search, and AI-assisted tagging and "
            "summaries. Authentication is delegated to a hosted auth service."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(functions.router)
    app.include_router(health.router)

    return app


app = create_app()
