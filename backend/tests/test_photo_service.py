"""
MediaShare Backend — Photo & Comment Service Unit Tests
=========================================================

What:  Tests for the upload orchestration and comment append logic.
How:   Uses mock stores and mock blob storage (no database, no Azure).

What we test:
    ✅ Successful upload: blob first, then metadata upsert
    ✅ Validation failures perform no I/O at all
    ✅ Blob failure → no metadata written
    ✅ Metadata failure after upload → error propagates, blob left orphaned
    ✅ Photo not found raises NotFoundError
    ✅ Comment id conflict is retried once under a new id
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mediashare.exceptions import (
    ConflictError,
    NotFoundError,
    StorageUnavailableError,
    StoreUnavailableError,
    ValidationError,
)
from mediashare.services.comment_service import CommentService
from mediashare.services.photo_service import PhotoService


def _mock_store():
    store = MagicMock()
    for name in ("photos", "comments", "ratings"):
        collection = getattr(store, name)
        collection.create = AsyncMock(side_effect=lambda doc: doc)
        collection.upsert = AsyncMock(side_effect=lambda doc: doc)
        collection.query_by_id = AsyncMock(return_value=None)
        collection.query_by_parent = AsyncMock(return_value=[])
        collection.query_search = AsyncMock(return_value=[])
    return store


def _mock_blob_store():
    blob_store = MagicMock()
    blob_store.container_name = "images"
    blob_store.ensure_container_exists = AsyncMock()
    blob_store.upload = AsyncMock(
        side_effect=lambda name, data, content_type: f"https://blob.example/images/{name}"
    )
    return blob_store


class TestPhotoServiceCreate:

    def setup_method(self):
        self.store = _mock_store()
        self.blob_store = _mock_blob_store()
        self.service = PhotoService(self.store, self.blob_store, max_upload_size=1024)

    @pytest.mark.asyncio
    async def test_create_photo_success(self):
        photo = await self.service.create_photo(
            filename="Beach.PNG",
            content=b"png-bytes",
            content_type="image/png",
            title="  Beach  ",
            caption="Sunny",
            location="Lisbon",
            people="Alice, Bob, , Alice",
        )

        assert photo.title == "Beach"
        assert photo.people == ["Alice", "Bob", "Alice"]
        assert photo.id == photo.photo_id
        assert photo.blob_name == f"{photo.id}.png"
        assert photo.url == f"https://blob.example/images/{photo.id}.png"
        assert photo.content_type == "image/png"

        self.blob_store.ensure_container_exists.assert_awaited_once()
        self.blob_store.upload.assert_awaited_once_with(photo.blob_name, b"png-bytes", "image/png")
        doc = self.store.photos.upsert.await_args.args[0]
        assert doc["id"] == photo.id
        assert doc["photoId"] == photo.id
        assert doc["blobName"] == photo.blob_name
        assert doc["createdAt"] == photo.created_at

    @pytest.mark.asyncio
    async def test_default_content_type(self):
        photo = await self.service.create_photo(
            filename=None, content=b"x", content_type=None, title="T",
        )
        assert photo.content_type == "image/jpeg"
        assert photo.blob_name.endswith(".jpg")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content,title,message", [
        (None, "Title", "file is required"),
        (b"", "Title", "file is required"),
        (b"x", "   ", "title is required"),
        (b"x" * 2048, "Title", "File size exceeds maximum of 0MB"),
    ])
    async def test_validation_failures_do_no_io(self, content, title, message):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_photo(
                filename="a.jpg", content=content, content_type="image/jpeg", title=title,
            )
        assert exc_info.value.message == message
        self.blob_store.ensure_container_exists.assert_not_awaited()
        self.blob_store.upload.assert_not_awaited()
        self.store.photos.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blob_failure_writes_no_metadata(self):
        self.blob_store.upload.side_effect = StorageUnavailableError(message="blob down")

        with pytest.raises(StorageUnavailableError):
            await self.service.create_photo(
                filename="a.jpg", content=b"x", content_type="image/jpeg", title="T",
            )
        self.store.photos.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_metadata_failure_leaves_orphan(self, caplog):
        self.store.photos.upsert.side_effect = StoreUnavailableError(message="cosmos down")

        with pytest.raises(StoreUnavailableError):
            await self.service.create_photo(
                filename="a.jpg", content=b"x", content_type="image/jpeg", title="T",
            )
        self.blob_store.upload.assert_awaited_once()
        assert "orphaned" in caplog.text


class TestPhotoServiceRead:

    def setup_method(self):
        self.store = _mock_store()
        self.service = PhotoService(self.store, _mock_blob_store(), max_upload_size=1024)

    @pytest.mark.asyncio
    async def test_get_photo_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_photo("missing")
        assert exc_info.value.message == "Photo not found"

    @pytest.mark.asyncio
    async def test_get_photo_ignores_store_metadata(self):
        self.store.photos.query_by_id.return_value = {
            "id": "p1", "photoId": "p1", "title": "T", "caption": "", "location": "",
            "people": [], "url": "u", "blobName": "p1.jpg", "contentType": "image/jpeg",
            "createdAt": "2025-01-01T00:00:00.000Z", "_rid": "abc", "_etag": "\"0\"", "_ts": 1,
        }
        photo = await self.service.get_photo("p1")
        assert photo.id == "p1"
        assert "_rid" not in photo.model_dump(by_alias=True)

    @pytest.mark.asyncio
    async def test_list_passes_search_term(self):
        await self.service.list_photos("beach")
        self.store.photos.query_search.assert_awaited_once_with("beach")


class TestCommentService:

    def setup_method(self):
        self.store = _mock_store()
        self.service = CommentService(self.store)

    @pytest.mark.asyncio
    async def test_add_comment(self):
        comment = await self.service.add_comment("p1", name=None, text="  Lovely  ")

        assert comment.photo_id == "p1"
        assert comment.name == "Anonymous"
        assert comment.text == "Lovely"
        assert comment.id.startswith("p1-")
        self.store.comments.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_blank_text_rejected(self):
        with pytest.raises(ValidationError):
            await self.service.add_comment("p1", name="Ann", text="  ")
        self.store.comments.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_conflict_retried_with_new_id(self):
        self.store.comments.create.side_effect = [
            ConflictError(collection="comments", document_id="dup"),
            None,
        ]
        comment = await self.service.add_comment("p1", name="Ann", text="Hi")

        assert self.store.comments.create.await_count == 2
        first_id = self.store.comments.create.await_args_list[0].args[0]["id"]
        second_id = self.store.comments.create.await_args_list[1].args[0]["id"]
        assert first_id != second_id
        assert comment.id == second_id

    @pytest.mark.asyncio
    async def test_list_comments(self):
        self.store.comments.query_by_parent.return_value = [
            {"id": "c2", "photoId": "p1", "name": "B", "text": "2", "createdAt": "2025-01-02"},
            {"id": "c1", "photoId": "p1", "name": "A", "text": "1", "createdAt": "2025-01-01"},
        ]
        comments = await self.service.list_comments("p1")
        assert [c.id for c in comments] == ["c2", "c1"]
        self.store.comments.query_by_parent.assert_awaited_once_with("p1", order_by="createdAt")
