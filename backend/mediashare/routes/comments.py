"""
MediaShare Backend — Comment Route Handlers
=============================================

What:  Read and append the comments of a photo.
Unknown photo ids are not an error here: GET returns [] and POST is accepted.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from mediashare.dependencies import get_comment_service
from mediashare.schemas.photo import Comment, CommentCreate, ErrorResponse
from mediashare.services.comment_service import CommentService

router = APIRouter(prefix="/api", tags=["Comments"])


@router.get(
    "/photos/{photo_id}/comments",
    response_model=List[Comment],
    summary="List the comments of a photo, newest first",
)
async def list_comments(
    photo_id: str,
    service: CommentService = Depends(get_comment_service),
) -> List[Comment]:
    return await service.list_comments(photo_id)


@router.post(
    "/photos/{photo_id}/comments",
    status_code=201,
    response_model=Comment,
    responses={
        400: {"description": "Comment text missing", "model": ErrorResponse},
        500: {"description": "Metadata store failure", "model": ErrorResponse},
    },
    summary="Add a comment to a photo",
)
async def add_comment(
    photo_id: str,
    body: Optional[CommentCreate] = Body(default=None),
    service: CommentService = Depends(get_comment_service),
) -> Comment:
    body = body or CommentCreate()
    return await service.add_comment(photo_id, name=body.name, text=body.text)
