"""
BizTime Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn biztime.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌───────────┐ ┌──────┐ ┌──────┐            │
    │  │  Req ID  │→│  Logging  │→│ GZip │→│ CORS │            │
    │  └──────────┘ └───────────┘ └──────┘ └──────┘            │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────────┐ ┌────────────┐ ┌─────────────┐           │
    │  │ /companies │ │ /invoices  │ │ GET /health │           │
    │  └────────────┘ └────────────┘ └─────────────┘           │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ BadRequest→400 │ NotFound→404 │ Constraint/DB→500  │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from biztime import __version__
from biztime.config import settings
from biztime.database import dispose_engine, engine
from biztime.exceptions import (
    BadRequestError,
    BizTimeError,
    ConstraintViolationError,
    DatabaseError,
    NotFoundError,
)
from biztime.middleware.logging import RequestLoggingMiddleware
from biztime.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    new_request_id,
    request_id_var,
)
from biztime.routes import (
    register_company_routes,
    register_health_routes,
    register_invoice_routes,
)
from biztime.services.company_service import CompanyService
from biztime.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before any other initialization.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    # Third-party libraries log every operation at DEBUG/INFO
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
    Code before yield runs on startup, code after yield runs on shutdown.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("BizTime Backend starting up (%s)...", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")
        # Keep serving so /health can report the problem

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("BizTime Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def bad_request_response(exc: BadRequestError) -> JSONResponse:
    rid = request_id_var.get("")
    logger.warning("[%s] Bad request: %s", rid, exc.message)
    return JSONResponse(
        status_code=400,
        content={
            "error": "bad_request",
            "message": exc.message,
            "details": exc.context,
            "request_id": rid,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError   → 400 Bad Request (converted to BadRequestError)
        BadRequestError          → 400 Bad Request
        NotFoundError            → 404 Not Found
        ConstraintViolationError → 500 Internal Server Error ("constraint_violation")
        DatabaseError            → 500 Internal Server Error ("server_error")
        BizTimeError (base)      → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Exception handlers never expose SQL, driver messages or stack traces in
    the response body. Details are logged server-side.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body or path parameters failed schema validation; reported as 400, not 422."""
        return bad_request_response(BadRequestError.from_validation_errors(exc.errors()))

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        return bad_request_response(exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Requested row doesn't exist."""
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ConstraintViolationError)
    async def handle_constraint_violation(request: Request, exc: ConstraintViolationError):
        """Storage rejected the write (duplicate key, foreign key, check)."""
        rid = request_id_var.get("")
        logger.error("[%s] Constraint violation: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "constraint_violation",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the client; details go to the server log."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(BizTimeError)
    async def handle_biztime_error(request: Request, exc: BizTimeError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Returns a generic 500 with the request ID; the stack trace is
        logged server-side only. This handler runs outside
        RequestIDMiddleware, so it sets the X-Request-ID header itself.
        """
        rid = request_id_var.get("") or new_request_id()
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
            headers={REQUEST_ID_HEADER: rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.

    Every call builds a fresh router and fresh services, so tests can create
    isolated app instances.
    """
    app = FastAPI(
        title="BizTime API",
        description="CRUD API for companies and the invoices billed to them.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Small responses are not worth compressing
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    router = APIRouter()
    register_company_routes(router, CompanyService())
    register_invoice_routes(router, InvoiceService())
    register_health_routes(router, engine)
    app.include_router(router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `biztime.main:app` to be importable
app = create_app()
