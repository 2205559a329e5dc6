"""
MediaShare Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handling, backend wiring and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn mediashare.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌──────────┐     │
    │  │  Req ID  │→│ Logging  │→│   GZip   │→│   CORS   │     │
    │  └──────────┘ └──────────┘ └──────────┘ └──────────┘     │
    │                                                          │
    │  Routes:                                                 │
    │  /api/photos  /api/photos/{id}/comments  /api/files      │
    │  /api/photos/{id}/rating  /  /health  /api/_debug/env    │
    │                                                          │
    │  app.state:                                              │
    │  settings, metadata_store, blob_store,                   │
    │  photo_service, comment_service, rating_service          │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, report missing credentials (the server
               still starts; affected requests fail with a 500)
    Shutdown:  close the metadata store and blob store clients
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediashare import __version__
from mediashare.config import Settings, settings as default_settings
from mediashare.dependencies import build_blob_store, build_metadata_store
from mediashare.exceptions import (
    ConflictError,
    MediaShareError,
    NotFoundError,
    StorageUnavailableError,
    StoreUnavailableError,
    ValidationError,
)
from mediashare.middleware.logging import RequestLoggingMiddleware
from mediashare.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from mediashare.routes import comments, files, health, photos, ratings
from mediashare.services.blob_base import BlobStore
from mediashare.services.comment_service import CommentService
from mediashare.services.photo_service import PhotoService
from mediashare.services.rating_service import RatingService
from mediashare.services.store_base import MetadataStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole application.

    Format: 2025-10-18T12:00:00 [INFO] mediashare.services.photo_service: ...
    Output goes to stdout, which the container runtime collects.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every request or query at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("MediaShare API %s starting up...", __version__)
    logger.info(
        "Backends: metadata=%s blob=%s container=%s",
        settings.metadata_backend,
        settings.blob_backend,
        settings.blob_container_name,
    )

    # Missing credentials do not stop the server: the adapters report them
    # on the requests that need them.
    for name in settings.missing_for_backends():
        logger.warning("Missing environment variable: %s", name)

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("MediaShare API shutting down...")
    await app.state.metadata_store.close()
    await app.state.blob_store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": request_id_var.get("")},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP status codes and the {"error": ...} body.

    Handler hierarchy:
        ValidationError           → 400
        RequestValidationError    → 400 (malformed JSON / form body)
        NotFoundError             → 404
        ConflictError             → 409
        StoreUnavailableError     → 500, underlying fault text
        StorageUnavailableError   → 500, underlying fault text
        MediaShareError (base)    → 500
        HTTPException             → its own status, {"error": detail}
        Exception (fallback)      → 500, generic message
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        else:
            message = "Invalid request"
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), message)
        return _error_response(400, message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return _error_response(409, exc.message)

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_error(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Metadata store error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(StorageUnavailableError)
    async def handle_storage_error(request: Request, exc: StorageUnavailableError):
        logger.error(
            "[%s] Blob storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(MediaShareError)
    async def handle_mediashare_error(request: Request, exc: MediaShareError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "request_id": request_id_var.get("")},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Stack trace stays in the server log.
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), exc, exc_info=True)
        return _error_response(500, "Internal Server Error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    metadata_store: Optional[MetadataStore] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:        configuration (defaults to the environment)
        metadata_store:  store to use instead of the one METADATA_BACKEND selects
        blob_store:      blob store to use instead of the one BLOB_BACKEND selects

    Building the adapters performs no network I/O; Cosmos and Azure clients
    connect on first use.
    """
    settings = settings or default_settings
    metadata_store = metadata_store or build_metadata_store(settings)
    blob_store = blob_store or build_blob_store(settings)

    app = FastAPI(
        title="MediaShare API",
        description=(
            "Photo sharing backend: upload photos with title, caption, location and "
            "people, search them, comment on them and rate them from 1 to 5."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Wiring ────────────────────────────────────────────────────────────
    app.state.settings = settings
    app.state.metadata_store = metadata_store
    app.state.blob_store = blob_store
    app.state.photo_service = PhotoService(
        store=metadata_store,
        blob_store=blob_store,
        max_upload_size=settings.max_upload_size,
    )
    app.state.comment_service = CommentService(store=metadata_store)
    app.state.rating_service = RatingService(store=metadata_store)

    # ── Middleware ────────────────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Exception Handlers ────────────────────────────────────────────────
    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(photos.router)
    app.include_router(comments.router)
    app.include_router(ratings.router)
    app.include_router(files.router)
    app.include_router(health.router)

    return app


# uvicorn expects `mediashare.main:app` to be importable
app = create_app()
