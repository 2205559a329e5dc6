"""
MediaShare Backend — SQL Metadata Store Tests
===============================================

What:  Exercises SqlMetadataStore against a real SQLite file (aiosqlite).

What we test:
    ✅ create / query_by_id round trip, duplicate create → ConflictError
    ✅ upsert replaces by id (last write wins)
    ✅ Ordering newest first; parent filtering
    ✅ Search is case-insensitive over title/caption/location/people
    ✅ Blank search term behaves like query_all
    ✅ Collections are isolated from each other
"""

import pytest
import pytest_asyncio

from mediashare.exceptions import ConflictError


def _photo(photo_id, created_at, **fields):
    doc = {
        "id": photo_id,
        "photoId": photo_id,
        "title": "",
        "caption": "",
        "location": "",
        "people": [],
        "url": f"/api/files/images/{photo_id}.jpg",
        "blobName": f"{photo_id}.jpg",
        "contentType": "image/jpeg",
        "createdAt": created_at,
    }
    doc.update(fields)
    return doc


class TestSqlCollections:

    @pytest.mark.asyncio
    async def test_create_and_get(self, sql_store):
        doc = _photo("p1", "2025-01-01T00:00:00.000Z", title="Sunset", people=["Alice"])
        await sql_store.photos.create(doc)

        assert await sql_store.photos.query_by_id("p1") == doc
        assert await sql_store.photos.query_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_create_conflicts(self, sql_store):
        await sql_store.comments.create({"id": "c1", "photoId": "p1", "createdAt": "x"})
        with pytest.raises(ConflictError):
            await sql_store.comments.create({"id": "c1", "photoId": "p1", "createdAt": "y"})

    @pytest.mark.asyncio
    async def test_upsert_replaces(self, sql_store):
        await sql_store.ratings.upsert({"id": "p1::u", "photoId": "p1", "value": 2, "updatedAt": "a"})
        await sql_store.ratings.upsert({"id": "p1::u", "photoId": "p1", "value": 5, "updatedAt": "b"})

        docs = await sql_store.ratings.query_by_parent("p1", order_by="updatedAt")
        assert len(docs) == 1
        assert docs[0]["value"] == 5

    @pytest.mark.asyncio
    async def test_same_id_in_two_partitions(self, sql_store):
        await sql_store.ratings.upsert({"id": "a::b::c", "photoId": "a::b", "value": 5, "updatedAt": "a"})
        await sql_store.ratings.upsert({"id": "a::b::c", "photoId": "a", "value": 1, "updatedAt": "b"})

        first = await sql_store.ratings.query_by_parent("a::b", order_by="updatedAt")
        second = await sql_store.ratings.query_by_parent("a", order_by="updatedAt")
        assert [doc["value"] for doc in first] == [5]
        assert [doc["value"] for doc in second] == [1]

    @pytest.mark.asyncio
    async def test_query_all_newest_first(self, sql_store):
        await sql_store.photos.create(_photo("old", "2025-01-01T00:00:00.000Z"))
        await sql_store.photos.create(_photo("new", "2025-03-01T00:00:00.000Z"))
        await sql_store.photos.create(_photo("mid", "2025-02-01T00:00:00.000Z"))

        ids = [doc["id"] for doc in await sql_store.photos.query_all()]
        assert ids == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_query_by_parent(self, sql_store):
        await sql_store.comments.create({"id": "c1", "photoId": "p1", "createdAt": "2025-01-01"})
        await sql_store.comments.create({"id": "c2", "photoId": "p2", "createdAt": "2025-01-02"})
        await sql_store.comments.create({"id": "c3", "photoId": "p1", "createdAt": "2025-01-03"})

        ids = [doc["id"] for doc in await sql_store.comments.query_by_parent("p1")]
        assert ids == ["c3", "c1"]
        assert await sql_store.comments.query_by_parent("nope") == []

    @pytest.mark.asyncio
    async def test_collections_isolated(self, sql_store):
        await sql_store.photos.create(_photo("same-id", "2025-01-01"))
        await sql_store.comments.create({"id": "same-id", "photoId": "p1", "createdAt": "x"})

        assert len(await sql_store.photos.query_all()) == 1
        assert len(await sql_store.comments.query_all()) == 1


class TestSqlSearch:

    @pytest_asyncio.fixture(autouse=True)
    async def _seed(self, sql_store):
        await sql_store.photos.create(_photo(
            "p1", "2025-01-01", title="Beach Day", location="Lisbon", people=["Alice", "Bob"],
        ))
        await sql_store.photos.create(_photo(
            "p2", "2025-01-02", title="Mountains", caption="Snowy PEAKS",
        ))
        await sql_store.photos.create(_photo(
            "p3", "2025-01-03", title="Party", people=["Carol"],
        ))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("term,expected", [
        ("beach", ["p1"]),
        ("LISBON", ["p1"]),
        ("peaks", ["p2"]),
        ("ali", ["p1"]),
        ("carol", ["p3"]),
        ("a", ["p3", "p2", "p1"]),
        ("zebra", []),
    ])
    async def test_matches_fields(self, sql_store, term, expected):
        ids = [doc["id"] for doc in await sql_store.photos.query_search(term)]
        assert ids == expected

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, sql_store):
        assert await sql_store.photos.query_search("%") == []
        assert await sql_store.photos.query_search("_") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("term", [None, "", "   "])
    async def test_blank_term_lists_all(self, sql_store, term):
        assert await sql_store.photos.query_search(term) == await sql_store.photos.query_all()

    @pytest.mark.asyncio
    async def test_term_is_trimmed(self, sql_store):
        ids = [doc["id"] for doc in await sql_store.photos.query_search("  beach  ")]
        assert ids == ["p1"]


class TestSqlHealth:

    @pytest.mark.asyncio
    async def test_ping(self, sql_store):
        assert await sql_store.ping() is True
