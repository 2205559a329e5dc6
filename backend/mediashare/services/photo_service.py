"""
MediaShare Backend — Photo Service (Upload Orchestrator)
==========================================================

What:  Creates, lists, searches and fetches photos.
Why:   Keeps the upload workflow and its ordering rules out of the routes.
How:   Composes a BlobStore and the photos collection of a MetadataStore,
       both injected at construction.
Who:   Called by routes/photos.py through app.state.

Upload Flow (POST /api/photos), a two-phase write without a transaction:
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │ Validate │───▶│ Ensure      │───▶│ Upload blob  │───▶│ Upsert photo │
    │ (no I/O) │    │ container   │    │ (BlobStore)  │    │ metadata     │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

    Upload fails   → StorageUnavailableError, no metadata is written
    Upsert fails   → StoreUnavailableError, the blob stays behind (orphan);
                     its name is logged, nothing tries to delete it
"""

import logging
from typing import Any, List, Optional

from mediashare.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from mediashare.identity import blob_name, new_photo_id, now_iso
from mediashare.schemas.photo import Photo
from mediashare.services.blob_base import BlobStore
from mediashare.services.shaping import shape_photo_fields
from mediashare.services.store_base import MetadataStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


class PhotoService:
    """
    Business logic for photo operations.

    Args:
        store:            metadata store (photos collection is used)
        blob_store:       storage for the image bytes
        max_upload_size:  largest accepted upload in bytes
    """

    def __init__(self, store: MetadataStore, blob_store: BlobStore, max_upload_size: int):
        self.store = store
        self.blob_store = blob_store
        self.max_upload_size = max_upload_size

    async def list_photos(self, q: Optional[str] = None) -> List[Photo]:
        """
        All photos newest first, optionally filtered by a search term.

        The term matches title, caption, location and people, case-insensitive
        substring. A missing or blank term returns the same list as no filter.
        """
        docs = await self.store.photos.query_search(q)
        return [Photo.model_validate(doc) for doc in docs]

    async def get_photo(self, photo_id: str) -> Photo:
        """
        Raises:
            NotFoundError: no photo has this id (→ 404)
        """
        doc = await self.store.photos.query_by_id(photo_id)
        if doc is None:
            raise NotFoundError(resource="Photo", resource_id=photo_id)
        return Photo.model_validate(doc)

    async def create_photo(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str],
        title: Any,
        caption: Any = None,
        location: Any = None,
        people: Any = None,
    ) -> Photo:
        """
        Store an uploaded photo and its metadata.

        Workflow Steps:
            1. Validate file presence, metadata and size (no I/O yet)
            2. Derive the photo id and blob name
            3. Ensure the blob container exists, upload the bytes
            4. Upsert the photo document (only after the upload succeeded)

        Raises:
            ValidationError: missing file, missing title, file too large
            StorageUnavailableError: blob storage failed (nothing persisted)
            StoreUnavailableError: metadata write failed (blob is orphaned)
        """
        # ── Step 1: Validate before any I/O ───────────────────────────────
        if not content:
            raise ValidationError(message="file is required", field="file")
        fields = shape_photo_fields(title, caption, location, people)
        if len(content) > self.max_upload_size:
            max_mb = self.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB",
                field="file",
                context={"actual_size": len(content)},
            )

        # ── Step 2: Identity ──────────────────────────────────────────────
        photo_id = new_photo_id()
        name = blob_name(photo_id, filename)
        mime = content_type or DEFAULT_CONTENT_TYPE

        # ── Step 3: Blob first ────────────────────────────────────────────
        await self.blob_store.ensure_container_exists()
        url = await self.blob_store.upload(name, content, mime)

        # ── Step 4: Metadata second ───────────────────────────────────────
        photo = Photo(
            id=photo_id,
            photo_id=photo_id,
            url=url,
            blob_name=name,
            content_type=mime,
            created_at=now_iso(),
            **fields,
        )
        try:
            await self.store.photos.upsert(photo.to_document())
        except StoreUnavailableError:
            logger.warning(
                "Metadata write failed after upload; blob %s/%s is orphaned",
                self.blob_store.container_name,
                name,
            )
            raise

        logger.info("Photo %s stored (%d bytes, %d people)", photo_id, len(content), len(photo.people))
        return photo
