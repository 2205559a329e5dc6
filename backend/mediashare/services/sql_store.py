"""
MediaShare Backend — SQL Metadata Store
=========================================

What:  MetadataStore implementation over async SQLAlchemy.
Why:   Runs the API without a Cosmos account (local development, tests)
       while keeping the same document semantics.
How:   All three collections share the `documents` table (models/document.py).
       Ordering uses the JSON body field (body->>'createdAt'); timestamps are
       ISO strings, so string order is chronological order.

Semantics kept identical to Cosmos:
    identity (collection, partition key value, id); the same id may exist
             once per partition, as in a Cosmos container
    create   primary key violation → ConflictError
    upsert   session.merge() on that identity, last write wins
    search   LIKE over a lowercased copy of the searchable values
    faults   any SQLAlchemy / OS error → StoreUnavailableError(str(error))

The schema is created with create_all() the first time a collection is
touched, guarded by a lock so concurrent first requests create it once.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from mediashare.config import Settings
from mediashare.database import Base, create_engine_for, create_session_factory
from mediashare.exceptions import ConflictError, StoreUnavailableError
from mediashare.models.document import DocumentRow
from mediashare.services.store_base import (
    PARENT_FIELD,
    CollectionSpec,
    DocumentCollection,
    MetadataStore,
    build_collection_specs,
    build_search_text,
)

logger = logging.getLogger(__name__)


class SqlCollection(DocumentCollection):
    """Rows of the documents table belonging to one logical collection."""

    def __init__(self, spec: CollectionSpec, store: "SqlMetadataStore"):
        super().__init__(spec)
        self._store = store

    def _row(self, doc: Dict[str, Any]) -> DocumentRow:
        return DocumentRow(
            collection=self.name,
            partition_value=str(doc.get(self.spec.partition_field, doc["id"])),
            id=str(doc["id"]),
            parent_id=doc.get(PARENT_FIELD),
            search_text=build_search_text(doc, self.spec),
            body=dict(doc),
        )

    def _order(self, order_by: str):
        # id breaks ties between documents written in the same millisecond
        return desc(DocumentRow.body[order_by].as_string()), desc(DocumentRow.id)

    async def create(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        await self._store.ensure_schema()
        try:
            async with self._store.session_factory() as session:
                session.add(self._row(doc))
                await session.commit()
        except IntegrityError:
            raise ConflictError(collection=self.name, document_id=doc.get("id"))
        except (SQLAlchemyError, OSError) as e:
            raise self._fault("create", e)
        return dict(doc)

    async def upsert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        await self._store.ensure_schema()
        try:
            async with self._store.session_factory() as session:
                await session.merge(self._row(doc))
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise self._fault("upsert", e)
        return dict(doc)

    async def query_all(self, order_by: str = "createdAt") -> List[Dict[str, Any]]:
        query = (
            select(DocumentRow)
            .where(DocumentRow.collection == self.name)
            .order_by(*self._order(order_by))
        )
        return await self._fetch(query)

    async def query_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        query = select(DocumentRow).where(
            DocumentRow.collection == self.name,
            DocumentRow.id == doc_id,
        )
        rows = await self._fetch(query)
        return rows[0] if rows else None

    async def query_by_parent(
        self, photo_id: str, order_by: str = "createdAt"
    ) -> List[Dict[str, Any]]:
        query = (
            select(DocumentRow)
            .where(
                DocumentRow.collection == self.name,
                DocumentRow.parent_id == photo_id,
            )
            .order_by(*self._order(order_by))
        )
        return await self._fetch(query)

    async def _search(self, term: str, order_by: str) -> List[Dict[str, Any]]:
        query = (
            select(DocumentRow)
            .where(
                DocumentRow.collection == self.name,
                DocumentRow.search_text.contains(term.lower(), autoescape=True),
            )
            .order_by(*self._order(order_by))
        )
        return await self._fetch(query)

    async def _fetch(self, query) -> List[Dict[str, Any]]:
        await self._store.ensure_schema()
        try:
            async with self._store.session_factory() as session:
                result = await session.execute(query)
                return [dict(row.body) for row in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise self._fault("query", e)

    def _fault(self, operation: str, error: Exception) -> StoreUnavailableError:
        logger.error("SQL %s on %s failed: %s", operation, self.name, error)
        return StoreUnavailableError(
            message=str(error),
            context={"collection": self.name, "operation": operation},
        )


class SqlMetadataStore(MetadataStore):
    """
    Photos, comments and ratings kept in one SQL database.

    Args:
        settings: database_url and pool sizing are read from here
        engine:   optional pre-built engine (shared engine in embedding apps)
    """

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        self.engine = engine or create_engine_for(settings)
        self.session_factory = create_session_factory(self.engine)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

        specs = build_collection_specs(settings)
        self.photos = SqlCollection(specs["photos"], self)
        self.comments = SqlCollection(specs["comments"], self)
        self.ratings = SqlCollection(specs["ratings"], self)

    async def ensure_schema(self) -> None:
        """Create the documents table once per store instance."""
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except (SQLAlchemyError, OSError) as e:
                logger.error("Could not create document tables: %s", e)
                raise StoreUnavailableError(message=str(e), context={"operation": "schema"})
            self._schema_ready = True
            logger.info("SQL document store ready at %s", self.engine.url.render_as_string())

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Health check: database unreachable: %s", e)
            return False

    async def close(self) -> None:
        await self.engine.dispose()
