"""
MediaShare Backend — Health & Diagnostics Routes
==================================================

What:  Liveness banner, dependency health check and a configuration echo.
Who:   Load balancer probes (/health), humans checking a deployment.

Endpoints:
    GET /                 plain-text banner, no dependency calls
    GET /health           metadata store and blob storage reachability
                          healthy → 200, unhealthy → 503
    GET /api/_debug/env   non-secret configuration plus HAS_* flags for
                          the secrets (their values are never returned)
"""

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from mediashare import __version__
from mediashare.config import Settings
from mediashare.dependencies import get_blob_store, get_metadata_store, get_settings
from mediashare.schemas.photo import HealthResponse
from mediashare.services.blob_base import BlobStore
from mediashare.services.store_base import MetadataStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness banner")
async def root() -> str:
    return "MediaShare API is running"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A dependency is unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    store: MetadataStore = Depends(get_metadata_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Probe both external services with lightweight calls.

    Check details:
        Metadata store: database read (Cosmos) or SELECT 1 (SQL)
        Blob storage: container existence (Azure) or writable root (local)
    """
    store_ok = await store.ping()
    blob_ok = await blob_store.ping()

    health = HealthResponse(
        status="healthy" if store_ok and blob_ok else "unhealthy",
        version=__version__,
        metadata_store="available" if store_ok else "unavailable",
        blob_storage="available" if blob_ok else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if health.status != "healthy":
        logger.warning("Health check failed: store=%s blob=%s", store_ok, blob_ok)
        return JSONResponse(status_code=503, content=health.model_dump())
    return health


@router.get("/api/_debug/env", summary="Non-secret configuration")
async def debug_env(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "CORS_ORIGIN": settings.cors_origin,
        "METADATA_BACKEND": settings.metadata_backend,
        "BLOB_BACKEND": settings.blob_backend,
        "BLOB_CONTAINER_NAME": settings.blob_container_name,
        "COSMOS_DB_NAME": settings.cosmos_db_name,
        "COSMOS_CONTAINER": settings.cosmos_container,
        "COSMOS_COMMENT_CONTAINER": settings.cosmos_comment_container,
        "COSMOS_RATINGS_CONTAINER": settings.cosmos_ratings_container,
        "HAS_STORAGE": bool(settings.azure_storage_connection_string),
        "HAS_COSMOS_ENDPOINT": bool(settings.cosmos_endpoint),
        "HAS_COSMOS_KEY": bool(settings.cosmos_key),
    }
