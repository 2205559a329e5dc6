"""
MediaShare Backend — Rating Service & Aggregator
==================================================

What:  Saves 1-5 star ratings and summarizes them per photo.
Why:   "One rating per user per photo" is enforced by identity, not by a
       lookup: the rating id is "{photoId}::{userKey}", so upsert() by id is
       find-or-create-and-overwrite in a single write.

Aggregation:
    summarize(photo_id) recomputes from scratch on every call:
        values  = every rating of the photo (one per user key by construction)
        count   = len(values)
        average = sum / count rounded half-up to 2 decimals; 0 when count == 0

    Decimal arithmetic keeps the rounding exact (4.125 → 4.13), which binary
    floats with round() do not.

Concurrency:
    Two submissions for the same (photo, user) race in the store; its
    last-write-wins upsert decides. No concurrency token is used.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from mediashare.identity import now_iso, rating_id
from mediashare.schemas.photo import Rating, RatingSummary
from mediashare.services.shaping import clean_user_key, parse_rating_value
from mediashare.services.store_base import DocumentCollection, MetadataStore

logger = logging.getLogger(__name__)

AVERAGE_QUANTUM = Decimal("0.01")


class RatingAggregator:
    """Computes the count and mean rating of a photo from its rating documents."""

    def __init__(self, ratings: DocumentCollection):
        self.ratings = ratings

    async def summarize(self, photo_id: str) -> RatingSummary:
        docs = await self.ratings.query_by_parent(photo_id, order_by="updatedAt")

        values = []
        for doc in docs:
            value = doc.get("value")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.warning("Skipping rating %s with non-numeric value", doc.get("id"))
                continue
            values.append(Decimal(str(value)))

        if not values:
            return RatingSummary(photo_id=photo_id, count=0, average=0)

        mean = sum(values) / Decimal(len(values))
        average = float(mean.quantize(AVERAGE_QUANTUM, rounding=ROUND_HALF_UP))
        return RatingSummary(photo_id=photo_id, count=len(values), average=average)


class RatingService:
    """
    Business logic for rating operations.

    Args:
        store:       metadata store (ratings collection is used)
        aggregator:  optional replacement aggregator (defaults to full recomputation)
    """

    def __init__(self, store: MetadataStore, aggregator: Optional[RatingAggregator] = None):
        self.store = store
        self.aggregator = aggregator or RatingAggregator(store.ratings)

    async def rate(self, photo_id: str, value: Any, user_key: Any = None) -> Rating:
        """
        Save or replace a user's rating of a photo.

        Raises:
            ValidationError: value not a finite number in 1..5 (nothing is written)
            StoreUnavailableError: the ratings collection failed
        """
        parsed_value = parse_rating_value(value)
        key = clean_user_key(user_key)

        rating = Rating(
            id=rating_id(photo_id, key),
            photo_id=photo_id,
            user_key=key,
            value=parsed_value,
            updated_at=now_iso(),
        )
        await self.store.ratings.upsert(rating.to_document())

        logger.info("Rating %s saved for photo %s: %s", rating.id, photo_id, parsed_value)
        return rating

    async def summary(self, photo_id: str) -> RatingSummary:
        return await self.aggregator.summarize(photo_id)
