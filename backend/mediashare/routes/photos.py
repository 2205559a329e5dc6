"""
MediaShare Backend — Photo Route Handlers
===========================================

What:  List/search, fetch and upload photos.
How:   Multipart fields are read here and handed to PhotoService untouched;
       PhotoService applies the shaping rules and the upload ordering.

Upload form fields:
    file      the image (required)
    title     required, trimmed
    caption   optional
    location  optional
    people    "Alice, Bob" or the field repeated once per person
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile

from mediashare.dependencies import get_photo_service
from mediashare.schemas.photo import ErrorResponse, Photo
from mediashare.services.photo_service import PhotoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Photos"])


@router.get(
    "/photos",
    response_model=List[Photo],
    responses={500: {"description": "Metadata store failure", "model": ErrorResponse}},
    summary="List or search photos",
    description=(
        "Returns every photo, newest first. With `q`, only photos whose title, "
        "caption, location or people contain the term (case-insensitive)."
    ),
)
async def list_photos(
    q: Optional[str] = Query(default=None, description="Free-text search term"),
    service: PhotoService = Depends(get_photo_service),
) -> List[Photo]:
    return await service.list_photos(q)


@router.get(
    "/photos/{photo_id}",
    response_model=Photo,
    responses={
        404: {"description": "Photo not found", "model": ErrorResponse},
        500: {"description": "Metadata store failure", "model": ErrorResponse},
    },
    summary="Get a single photo by ID",
)
async def get_photo(
    photo_id: str,
    response: Response,
    service: PhotoService = Depends(get_photo_service),
) -> Photo:
    photo = await service.get_photo(photo_id)
    # Photos never change after upload.
    response.headers["Cache-Control"] = "private, max-age=3600"
    return photo


@router.post(
    "/photos",
    status_code=201,
    response_model=Photo,
    responses={
        201: {"description": "Photo stored", "model": Photo},
        400: {"description": "Missing file or title, file too large", "model": ErrorResponse},
        500: {"description": "Blob storage or metadata store failure", "model": ErrorResponse},
    },
    summary="Upload a photo with its metadata",
)
async def create_photo(
    file: Optional[UploadFile] = File(default=None, description="Image file"),
    title: Optional[str] = Form(default=None),
    caption: Optional[str] = Form(default=None),
    location: Optional[str] = Form(default=None),
    people: Optional[List[str]] = Form(default=None),
    service: PhotoService = Depends(get_photo_service),
) -> Photo:
    """
    Store the image in blob storage, then its metadata.

    Error responses (handled by global exception handlers):
        HTTP 400: file or title missing, file too large (ValidationError)
        HTTP 500: blob storage or metadata store failure
    """
    content = None
    filename = None
    content_type = None
    if file is not None:
        try:
            content = await file.read()
            filename = file.filename
            content_type = file.content_type
        finally:
            await file.close()

    logger.info(
        "Received photo upload: filename=%s, size=%d bytes",
        filename or "none",
        len(content or b""),
    )

    # A single field is the comma-separated form; repeated fields are a list.
    people_value = people[0] if people and len(people) == 1 else people

    return await service.create_photo(
        filename=filename,
        content=content,
        content_type=content_type,
        title=title,
        caption=caption,
        location=location,
        people=people_value,
    )
