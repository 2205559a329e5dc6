"""
MediaShare Backend — Abstract Metadata Store Interface
========================================================

What:  Contract for the document collections holding photos, comments and
       ratings, independent of the database behind them.
Why:   The services only speak this interface, so Cosmos DB, the SQL
       rendition and test fakes are interchangeable (Strategy pattern).
How:   A MetadataStore groups three DocumentCollection objects. Each
       collection is described by a CollectionSpec resolved once from
       configuration when the store is built.

Contract (every implementation):
    create(doc)                        insert; ConflictError if the id exists
    upsert(doc)                        insert or replace by id, last write wins
    query_all(order_by)                every document, newest first
    query_by_id(id)                    the document or None
    query_by_parent(photo_id, order_by) documents whose photoId matches, newest first
    query_search(term)                 case-insensitive substring match over the
                                       collection's search fields; blank term == query_all

    Not found is an empty result, never an exception. Any database, network
    or configuration fault surfaces as StoreUnavailableError carrying the
    underlying fault text.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from mediashare.config import Settings

PARENT_FIELD = "photoId"
SEARCH_TEXT_SEPARATOR = "\x1f"

PHOTO_SEARCH_FIELDS = ("title", "caption", "location", "people")


@dataclass(frozen=True)
class CollectionSpec:
    """
    Static description of one logical collection.

    Attributes:
        name:           Logical name (photos, comments, ratings)
        container:      Physical container / collection name in the database
        partition_key:  Partition key path ("/id", "/photoId"); decides whether
                        parent queries can target a single partition
        search_fields:  Fields matched by query_search
        list_fields:    Subset of search_fields holding lists of strings
    """
    name: str
    container: str
    partition_key: str = "/id"
    search_fields: Tuple[str, ...] = ()
    list_fields: FrozenSet[str] = frozenset()

    @property
    def partition_field(self) -> str:
        return self.partition_key.lstrip("/")

    @property
    def partitioned_by_parent(self) -> bool:
        return self.partition_field == PARENT_FIELD


def build_collection_specs(settings: Settings) -> Dict[str, CollectionSpec]:
    """Resolve the three collection specs from configuration."""
    return {
        "photos": CollectionSpec(
            name="photos",
            container=settings.cosmos_container,
            partition_key=settings.cosmos_photos_partition_key,
            search_fields=PHOTO_SEARCH_FIELDS,
            list_fields=frozenset({"people"}),
        ),
        "comments": CollectionSpec(
            name="comments",
            container=settings.cosmos_comment_container,
            partition_key=settings.cosmos_comments_partition_key,
        ),
        "ratings": CollectionSpec(
            name="ratings",
            container=settings.cosmos_ratings_container,
            partition_key=settings.cosmos_ratings_partition_key,
        ),
    }


def build_search_text(doc: Dict[str, Any], spec: CollectionSpec) -> str:
    """
    Lowercased concatenation of a document's searchable values.

    Values are joined with a unit separator so that a search term cannot
    match across two fields.
    """
    parts: List[str] = []
    for field in spec.search_fields:
        value = doc.get(field)
        if value is None:
            continue
        if field in spec.list_fields and isinstance(value, (list, tuple)):
            parts.extend(str(item) for item in value)
        else:
            parts.append(str(value))
    return SEARCH_TEXT_SEPARATOR.join(parts).lower()


class DocumentCollection(ABC):
    """
    One logical collection of JSON documents keyed by their "id" field.
    """

    def __init__(self, spec: CollectionSpec):
        self.spec = spec

    @property
    def name(self) -> str:
        return self.spec.name

    @abstractmethod
    async def create(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new document.

        Raises:
            ConflictError: a document with the same id already exists
            StoreUnavailableError: any database fault
        """
        ...

    @abstractmethod
    async def upsert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Insert the document or replace the one with the same id."""
        ...

    @abstractmethod
    async def query_all(self, order_by: str = "createdAt") -> List[Dict[str, Any]]:
        """All documents, ordered by `order_by` descending."""
        ...

    @abstractmethod
    async def query_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """The document whose id field equals doc_id, or None."""
        ...

    @abstractmethod
    async def query_by_parent(
        self, photo_id: str, order_by: str = "createdAt"
    ) -> List[Dict[str, Any]]:
        """Documents whose photoId equals photo_id, ordered descending."""
        ...

    @abstractmethod
    async def _search(self, term: str, order_by: str) -> List[Dict[str, Any]]:
        """Backend-specific substring search with a non-blank, trimmed term."""
        ...

    async def query_search(
        self, term: Optional[str], order_by: str = "createdAt"
    ) -> List[Dict[str, Any]]:
        """
        Case-insensitive substring search over the collection's search fields.

        A missing or blank term returns the unfiltered, ordered collection,
        identical to query_all().
        """
        clean_term = (term or "").strip()
        if not clean_term:
            return await self.query_all(order_by=order_by)
        return await self._search(clean_term, order_by)


class MetadataStore(ABC):
    """
    The three collections used by the API plus lifecycle hooks.

    Implementations:
        - CosmosMetadataStore: Azure Cosmos DB (production)
        - SqlMetadataStore: async SQLAlchemy (local development, tests)
    """

    photos: DocumentCollection
    comments: DocumentCollection
    ratings: DocumentCollection

    @abstractmethod
    async def ping(self) -> bool:
        """
        Lightweight connectivity test for the health endpoint.
        Returns False instead of raising.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release client connections (called on application shutdown)."""
        ...
