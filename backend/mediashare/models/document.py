"""
MediaShare Backend — Document Row Model
=========================================

What:  ORM model of the `documents` table used by the SQL metadata store.
Why:   Stores photos, comments and ratings as JSON documents so the SQL
       backend honours the same document-collection contract as Cosmos DB.
How:   One row per (collection, partition value, id), the same identity a
       Cosmos item has: ids are unique within a partition, not across it.
       Other columns beside the JSON body make the queries indexable.

Table Design:
    collection       logical collection name (photos, comments, ratings)
    partition_value  value of the collection's partition key field (id for
                     photos, photoId for comments and ratings)
    id               document id; (collection, partition_value, id) is the
                     primary key, which gives create() its duplicate-id
                     conflict and upsert() its replace-by-id semantics
    parent_id        copy of body.photoId, indexed for query_by_parent
    search_text      lowercased searchable values, matched with LIKE
    body             the full JSON document as returned to callers
"""

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mediashare.database import Base


class DocumentRow(Base):
    """A stored JSON document of one logical collection."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    partition_value: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    parent_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    body: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_documents_parent", "collection", "parent_id"),
    )

    def __repr__(self) -> str:
        return f"<DocumentRow(collection='{self.collection}', partition='{self.partition_value}', id='{self.id}')>"
