"""
MediaShare Backend — Backend Wiring & Route Dependencies
==========================================================

What:  Builds the configured store/blob adapters and exposes services to routes.
Why:   Handlers get their collaborators by injection: create_app() puts the
       services on app.state, routes receive them through Depends(). Tests
       pass fakes to create_app() instead of patching module globals.
"""

from fastapi import Request

from mediashare.config import Settings
from mediashare.services.azure_blob_service import AzureBlobStore
from mediashare.services.blob_base import BlobStore
from mediashare.services.comment_service import CommentService
from mediashare.services.cosmos_store import CosmosMetadataStore
from mediashare.services.file_service import LocalBlobStore
from mediashare.services.photo_service import PhotoService
from mediashare.services.rating_service import RatingService
from mediashare.services.sql_store import SqlMetadataStore
from mediashare.services.store_base import MetadataStore


def build_metadata_store(settings: Settings) -> MetadataStore:
    """Metadata store selected by METADATA_BACKEND. No network I/O happens here."""
    if settings.metadata_backend == "sql":
        return SqlMetadataStore(settings)
    return CosmosMetadataStore(settings)


def build_blob_store(settings: Settings) -> BlobStore:
    """Blob store selected by BLOB_BACKEND. No network I/O happens here."""
    if settings.blob_backend == "local":
        return LocalBlobStore(
            storage_root=settings.storage_root,
            container_name=settings.blob_container_name,
            public_base_url=settings.public_base_url,
        )
    return AzureBlobStore(
        connection_string=settings.azure_storage_connection_string,
        container_name=settings.blob_container_name,
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_metadata_store(request: Request) -> MetadataStore:
    return request.app.state.metadata_store


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_photo_service(request: Request) -> PhotoService:
    return request.app.state.photo_service


def get_comment_service(request: Request) -> CommentService:
    return request.app.state.comment_service


def get_rating_service(request: Request) -> RatingService:
    return request.app.state.rating_service
