"""
MediaShare Backend — Azure Cosmos DB Metadata Store
=====================================================

What:  MetadataStore implementation over Azure Cosmos DB (SQL API).
Why:   Cosmos is the production document database of the deployment.
How:   Uses the asyncio SDK (azure.cosmos.aio). One CosmosClient is created
       lazily on first use and reused by every request; credentials are
       checked at that point so a missing COSMOS_ENDPOINT shows up as a
       per-request error, not as a crash at startup.

Query Plans:
    query_all        SELECT * FROM c ORDER BY c.createdAt DESC
    query_by_id      SELECT * FROM c WHERE c.id = @id
    query_by_parent  SELECT * FROM c WHERE c.photoId = @photoId ORDER BY c.createdAt DESC
    query_search     SELECT * FROM c WHERE CONTAINS(c.title, @q, true) OR ...
                     OR EXISTS(SELECT VALUE p FROM p IN c.people WHERE CONTAINS(p, @q, true))
                     ORDER BY c.createdAt DESC

Partitioning:
    The id used to partition a container does not match the query
    predicates, so queries run without a partition key and the SDK fans
    them out across all partitions. The one exception is query_by_parent on
    a container configured with partition key /photoId: the photo id is the
    partition key there, so the query targets that single partition.
    The partition layout comes from configuration (see CollectionSpec);
    writes never probe it by trial and error.
"""

import logging
from typing import Any, Dict, List, Optional

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.cosmos.aio import ContainerProxy, CosmosClient, DatabaseProxy

from mediashare.config import Settings
from mediashare.exceptions import ConflictError, StoreUnavailableError
from mediashare.services.store_base import (
    PARENT_FIELD,
    CollectionSpec,
    DocumentCollection,
    MetadataStore,
    build_collection_specs,
)

logger = logging.getLogger(__name__)


def _field(name: str) -> str:
    """Property reference for a Cosmos SQL query; names are never user input."""
    if not name.isidentifier():
        raise ValueError(f"Invalid document field name: {name!r}")
    return f"c.{name}"


class CosmosCollection(DocumentCollection):
    """A Cosmos container seen through the DocumentCollection contract."""

    def __init__(self, spec: CollectionSpec, store: "CosmosMetadataStore"):
        super().__init__(spec)
        self._store = store

    def _container(self) -> ContainerProxy:
        return self._store.container(self.spec.container)

    async def create(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        container = self._container()
        try:
            return await container.create_item(body=doc)
        except ResourceExistsError:
            raise ConflictError(collection=self.name, document_id=doc.get("id"))
        except AzureError as e:
            raise self._fault("create", e)

    async def upsert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        container = self._container()
        try:
            return await container.upsert_item(body=doc)
        except AzureError as e:
            raise self._fault("upsert", e)

    async def query_all(self, order_by: str = "createdAt") -> List[Dict[str, Any]]:
        query = f"SELECT * FROM c ORDER BY {_field(order_by)} DESC"
        return await self._run_query(query)

    async def query_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        resources = await self._run_query(
            "SELECT * FROM c WHERE c.id = @id",
            parameters=[{"name": "@id", "value": doc_id}],
        )
        return resources[0] if resources else None

    async def query_by_parent(
        self, photo_id: str, order_by: str = "createdAt"
    ) -> List[Dict[str, Any]]:
        query = (
            f"SELECT * FROM c WHERE {_field(PARENT_FIELD)} = @photoId "
            f"ORDER BY {_field(order_by)} DESC"
        )
        partition_key = photo_id if self.spec.partitioned_by_parent else None
        return await self._run_query(
            query,
            parameters=[{"name": "@photoId", "value": photo_id}],
            partition_key=partition_key,
        )

    async def _search(self, term: str, order_by: str) -> List[Dict[str, Any]]:
        conditions = []
        for field in self.spec.search_fields:
            if field in self.spec.list_fields:
                conditions.append(
                    f"EXISTS(SELECT VALUE p FROM p IN {_field(field)} "
                    f"WHERE CONTAINS(p, @q, true))"
                )
            else:
                conditions.append(f"CONTAINS({_field(field)}, @q, true)")
        if not conditions:
            return []
        query = (
            f"SELECT * FROM c WHERE {' OR '.join(conditions)} "
            f"ORDER BY {_field(order_by)} DESC"
        )
        return await self._run_query(query, parameters=[{"name": "@q", "value": term}])

    async def _run_query(
        self,
        query: str,
        parameters: Optional[List[Dict[str, Any]]] = None,
        partition_key: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute a query and drain every page.

        Without a partition key the asyncio SDK runs a cross-partition query.
        """
        container = self._container()
        kwargs: Dict[str, Any] = {}
        if parameters:
            kwargs["parameters"] = parameters
        if partition_key is not None:
            kwargs["partition_key"] = partition_key
        try:
            items = container.query_items(query=query, **kwargs)
            return [item async for item in items]
        except AzureError as e:
            raise self._fault("query", e)

    def _fault(self, operation: str, error: Exception) -> StoreUnavailableError:
        logger.error("Cosmos %s on %s failed: %s", operation, self.spec.container, error)
        return StoreUnavailableError(
            message=str(error),
            context={"collection": self.name, "operation": operation},
        )


class CosmosMetadataStore(MetadataStore):
    """
    Photos, comments and ratings containers of one Cosmos database.

    Lifecycle:
        - Constructed by the app factory (no network I/O)
        - First data call creates the CosmosClient (credentials checked here)
        - close() on application shutdown
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._client: Optional[CosmosClient] = None
        self._database: Optional[DatabaseProxy] = None

        specs = build_collection_specs(settings)
        self.photos = CosmosCollection(specs["photos"], self)
        self.comments = CosmosCollection(specs["comments"], self)
        self.ratings = CosmosCollection(specs["ratings"], self)

    def database(self) -> DatabaseProxy:
        """
        Return the database proxy, creating the client on first use.

        Raises:
            StoreUnavailableError: credentials missing or client creation failed
        """
        if self._database is not None:
            return self._database

        for name, value in (
            ("COSMOS_ENDPOINT", self._settings.cosmos_endpoint),
            ("COSMOS_KEY", self._settings.cosmos_key),
        ):
            if not value:
                raise StoreUnavailableError(message=f"Missing environment variable: {name}")

        try:
            self._client = CosmosClient(
                self._settings.cosmos_endpoint, credential=self._settings.cosmos_key
            )
        except (AzureError, ValueError) as e:
            raise StoreUnavailableError(message=str(e), context={"operation": "connect"})

        self._database = self._client.get_database_client(self._settings.cosmos_db_name)
        logger.info(
            "Cosmos client initialized for database=%s", self._settings.cosmos_db_name
        )
        return self._database

    def container(self, name: str) -> ContainerProxy:
        return self.database().get_container_client(name)

    async def ping(self) -> bool:
        try:
            await self.database().read()
            return True
        except (AzureError, StoreUnavailableError) as e:
            logger.warning("Health check: Cosmos unreachable: %s", e)
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._database = None
