"""
MediaShare Backend — Rating Route Handlers
============================================

What:  Submit a rating and read a photo's rating summary.
How:   POST upserts the caller's rating (one per userKey per photo);
       GET recomputes {photoId, count, average} from all stored ratings.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from mediashare.dependencies import get_rating_service
from mediashare.schemas.photo import (
    ErrorResponse,
    RatingCreate,
    RatingSaveResponse,
    RatingSummary,
)
from mediashare.services.rating_service import RatingService

router = APIRouter(prefix="/api", tags=["Ratings"])


@router.get(
    "/photos/{photo_id}/rating",
    response_model=RatingSummary,
    summary="Rating count and average of a photo",
    description="Average is rounded to 2 decimals; a photo without ratings reports 0.",
)
async def get_rating_summary(
    photo_id: str,
    service: RatingService = Depends(get_rating_service),
) -> RatingSummary:
    return await service.summary(photo_id)


@router.post(
    "/photos/{photo_id}/rating",
    status_code=201,
    response_model=RatingSaveResponse,
    responses={
        400: {"description": "Value is not a number in 1..5", "model": ErrorResponse},
        500: {"description": "Metadata store failure", "model": ErrorResponse},
    },
    summary="Rate a photo (1-5); resubmitting replaces the previous rating",
)
async def rate_photo(
    photo_id: str,
    body: Optional[RatingCreate] = Body(default=None),
    service: RatingService = Depends(get_rating_service),
) -> RatingSaveResponse:
    body = body or RatingCreate()
    rating = await service.rate(photo_id, value=body.value, user_key=body.user_key)
    return RatingSaveResponse(rating=rating)
