"""
MediaShare Backend — Comment Service
======================================

What:  Lists and appends comments on photos.
How:   Strict create() into the comments collection with a freshly derived
       id. Comments are append-only: nothing here updates or deletes.

Id collisions:
    A ConflictError from create() means the derived id already exists. The
    comment is then written once more under a new id; the conflict never
    reaches the client.

Unknown photos:
    The photo id is not checked against the photos collection. Listing the
    comments of an unknown photo returns an empty list, and posting to one
    is accepted.
"""

import logging
from typing import Any, List

from mediashare.exceptions import ConflictError
from mediashare.identity import comment_id, now_iso
from mediashare.schemas.photo import Comment
from mediashare.services.shaping import shape_comment
from mediashare.services.store_base import MetadataStore

logger = logging.getLogger(__name__)


class CommentService:
    """Business logic for comment operations."""

    def __init__(self, store: MetadataStore):
        self.store = store

    async def list_comments(self, photo_id: str) -> List[Comment]:
        """Comments of a photo, newest first."""
        docs = await self.store.comments.query_by_parent(photo_id, order_by="createdAt")
        return [Comment.model_validate(doc) for doc in docs]

    async def add_comment(self, photo_id: str, name: Any, text: Any) -> Comment:
        """
        Append a comment to a photo.

        Raises:
            ValidationError: text missing or blank (nothing is written)
            StoreUnavailableError: the comments collection failed
        """
        clean_name, clean_text = shape_comment(name, text)
        comment = Comment(
            id=comment_id(photo_id),
            photo_id=photo_id,
            name=clean_name,
            text=clean_text,
            created_at=now_iso(),
        )

        try:
            await self.store.comments.create(comment.to_document())
        except ConflictError:
            logger.warning("Comment id %s already taken; writing under a new id", comment.id)
            comment = comment.model_copy(update={"id": comment_id(photo_id)})
            await self.store.comments.create(comment.to_document())

        logger.info("Comment %s added to photo %s", comment.id, photo_id)
        return comment
