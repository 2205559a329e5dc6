"""
MediaShare Backend — Rating Service & Aggregator Tests
========================================================

What we test:
    ✅ Summary count/average, rounding half-up to 2 decimals
    ✅ Zero ratings → count 0, average 0
    ✅ Malformed stored values are skipped
    ✅ rate() upserts under the composite id; invalid values write nothing
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mediashare.exceptions import ValidationError
from mediashare.services.rating_service import RatingAggregator, RatingService


def _ratings_collection(values):
    collection = MagicMock()
    collection.query_by_parent = AsyncMock(
        return_value=[
            {"id": f"p1::u{i}", "photoId": "p1", "value": value}
            for i, value in enumerate(values)
        ]
    )
    collection.upsert = AsyncMock(side_effect=lambda doc: doc)
    return collection


class TestRatingAggregator:

    @pytest.mark.asyncio
    async def test_count_and_average(self):
        summary = await RatingAggregator(_ratings_collection([5, 4, 3])).summarize("p1")
        assert summary.photo_id == "p1"
        assert summary.count == 3
        assert summary.average == 4.0

    @pytest.mark.asyncio
    async def test_no_ratings(self):
        summary = await RatingAggregator(_ratings_collection([])).summarize("p1")
        assert summary.count == 0
        assert summary.average == 0

    @pytest.mark.asyncio
    async def test_rounds_to_two_decimals(self):
        summary = await RatingAggregator(_ratings_collection([5, 4, 4])).summarize("p1")
        assert summary.average == 4.33

    @pytest.mark.asyncio
    async def test_rounds_half_up(self):
        # mean 4.125 exactly
        values = [4.5, 4, 4, 4, 4, 4, 4, 4.5]
        summary = await RatingAggregator(_ratings_collection(values)).summarize("p1")
        assert summary.average == 4.13

    @pytest.mark.asyncio
    async def test_skips_malformed_values(self):
        summary = await RatingAggregator(
            _ratings_collection([5, "oops", None, True, 3])
        ).summarize("p1")
        assert summary.count == 2
        assert summary.average == 4.0

    @pytest.mark.asyncio
    async def test_serializes_camel_case(self):
        summary = await RatingAggregator(_ratings_collection([2])).summarize("p1")
        assert summary.model_dump(by_alias=True) == {"photoId": "p1", "count": 1, "average": 2.0}


class TestRatingService:

    def setup_method(self):
        self.store = MagicMock()
        self.store.ratings = _ratings_collection([])
        self.service = RatingService(self.store)

    @pytest.mark.asyncio
    async def test_rate_upserts_composite_id(self):
        rating = await self.service.rate("p1", 4, "user-1")

        assert rating.id == "p1::user-1"
        assert rating.value == 4
        doc = self.store.ratings.upsert.await_args.args[0]
        assert doc["id"] == "p1::user-1"
        assert doc["photoId"] == "p1"
        assert doc["userKey"] == "user-1"
        assert doc["value"] == 4
        assert doc["updatedAt"].endswith("Z")

    @pytest.mark.asyncio
    async def test_rate_defaults_user_key(self):
        rating = await self.service.rate("p1", "5")
        assert rating.user_key == "anon"
        assert rating.id == "p1::anon"
        assert rating.value == 5

    @pytest.mark.asyncio
    async def test_invalid_value_writes_nothing(self):
        with pytest.raises(ValidationError):
            await self.service.rate("p1", 6, "user-1")
        self.store.ratings.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_summary_delegates_to_aggregator(self):
        self.store.ratings.query_by_parent.return_value = [
            {"id": "p1::a", "photoId": "p1", "value": 1},
            {"id": "p1::b", "photoId": "p1", "value": 2},
        ]
        summary = await self.service.summary("p1")
        assert summary.count == 2
        assert summary.average == 1.5
        self.store.ratings.query_by_parent.assert_awaited_once_with("p1", order_by="updatedAt")
