"""
Catalog Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (uvicorn catalog.main:app, or the catalog-server script).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: RequestID → Logging → Security → CORS  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ POST /upload │ │ /api/products│ │ GET /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │  Static: GET /uploads/<file> (blob store root)      │
    │                                                     │
    │  Exception Handlers:                                │
    │  NotFound → 404 │ OperationFailed → 500 │ * → 500   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → database engine → ping (logged, never fatal)
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from catalog import __version__
from catalog.config import Settings
from catalog.config import settings as default_settings
from catalog.database import Database
from catalog.exceptions import NotFoundError, OperationFailedError, describe_error
from catalog.middleware.logging import RequestLoggingMiddleware
from catalog.middleware.request_id import RequestIDMiddleware, request_id_var
from catalog.middleware.security_headers import SecurityHeadersMiddleware
from catalog.routes import health, products, upload
from catalog.services.blob_store import BlobStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] catalog.services.blob_store: File stored: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the database on startup and close it on shutdown.

    A failed connection check is logged and startup continues; product
    routes then fail with 500 until the database is reachable.
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("Catalog Backend %s starting up...", __version__)

    database = Database.from_settings(settings)
    app.state.database = database
    if await database.ping():
        logger.info("Database connected")

    logger.info("Storage directory: %s", app.state.blob_store.storage_root)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    try:
        yield
    finally:
        logger.info("Catalog Backend shutting down...")
        await database.dispose()
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the two error kinds onto HTTP responses.

        NotFoundError         → 404 {"message": "Product not found"}
        OperationFailedError  → 500 {"message", "error"} or the raw error
        Exception (fallback)  → 500 {"message", "error"}
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("[%s] Not found: %s", request_id_var.get(""), exc.context)
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(OperationFailedError)
    async def handle_operation_failed(request: Request, exc: OperationFailedError):
        logger.error(
            "[%s] %s: %s",
            request_id_var.get(""),
            exc.message,
            exc.error_detail["message"],
        )
        return JSONResponse(status_code=500, content=exc.to_body())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "error": describe_error(exc)},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application.

    Args:
        settings: Explicit settings (tests); defaults to the module singleton.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Catalog API",
        description="Product catalog with image uploads.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # The static mount below needs the directory to exist already
    blob_store = BlobStore(settings.storage_root, settings.public_prefix)
    app.state.blob_store = blob_store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → SecurityHeaders → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(upload.router)
    app.include_router(products.router)
    app.include_router(health.router)

    # Stored references ("uploads/<file>") resolve to GET /uploads/<file>
    app.mount(
        f"/{settings.public_prefix}",
        StaticFiles(directory=str(blob_store.storage_root)),
        name="uploads",
    )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
