"""
MediaShare Backend — Local File Route
=======================================

What:  Serves photos stored by LocalBlobStore (BLOB_BACKEND=local).
Why:   URLs returned for local uploads point here, so they resolve through
       this API the way Azure blob URLs resolve through the storage account.

Security:
    The requested path is resolved and must stay inside STORAGE_ROOT
    (rejects ../ traversal). With the Azure backend every path is 404.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from mediashare.dependencies import get_blob_store
from mediashare.exceptions import NotFoundError, ValidationError
from mediashare.schemas.photo import ErrorResponse
from mediashare.services.blob_base import BlobStore
from mediashare.services.file_service import LocalBlobStore

router = APIRouter(prefix="/api", tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid path", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Serve a locally stored photo",
)
async def serve_file(
    file_path: str,
    blob_store: BlobStore = Depends(get_blob_store),
) -> FileResponse:
    if not isinstance(blob_store, LocalBlobStore):
        raise NotFoundError(resource="File", resource_id=file_path)

    try:
        full_path = blob_store.resolve(file_path)
    except ValueError:
        raise ValidationError(message="Invalid file path", field="file_path")

    if not full_path.is_file():
        raise NotFoundError(resource="File", resource_id=file_path)

    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
