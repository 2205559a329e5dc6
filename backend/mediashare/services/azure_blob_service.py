"""
MediaShare Backend — Azure Blob Storage Service
=================================================

What:  BlobStore implementation over Azure Blob Storage.
Why:   Photos are served to browsers straight from the storage account.
How:   asyncio SDK (azure.storage.blob.aio). The BlobServiceClient is built
       lazily from the connection string on first use and reused afterwards;
       a missing AZURE_STORAGE_CONNECTION_STRING is reported per request.

Container access:
    The container is created with public access level "blob": anonymous
    clients can read a blob by URL but cannot list the container. This is
    what makes the returned URL publicly resolvable.
"""

import logging
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from mediashare.exceptions import StorageUnavailableError
from mediashare.services.blob_base import BlobStore

logger = logging.getLogger(__name__)


class AzureBlobStore(BlobStore):
    """
    One blob container of an Azure storage account.

    Args:
        connection_string: storage account connection string (may be empty;
                           checked when the first call needs it)
        container_name:    blob container for photos
    """

    def __init__(self, connection_string: str, container_name: str):
        self._connection_string = connection_string
        self.container_name = container_name
        self._service: Optional[BlobServiceClient] = None

    def _container(self) -> ContainerClient:
        if self._service is None:
            if not self._connection_string:
                raise StorageUnavailableError(
                    message="Missing environment variable: AZURE_STORAGE_CONNECTION_STRING"
                )
            try:
                self._service = BlobServiceClient.from_connection_string(
                    self._connection_string
                )
            except (AzureError, ValueError) as e:
                raise StorageUnavailableError(message=str(e), context={"operation": "connect"})
            logger.info("Blob service client initialized for container=%s", self.container_name)
        return self._service.get_container_client(self.container_name)

    async def ensure_container_exists(self) -> None:
        container = self._container()
        try:
            await container.create_container(public_access="blob")
            logger.info("Created blob container %s", self.container_name)
        except ResourceExistsError:
            return
        except AzureError as e:
            logger.error("Could not create blob container %s: %s", self.container_name, e)
            raise StorageUnavailableError(
                message=str(e), context={"container": self.container_name}
            )

    async def upload(self, name: str, data: bytes, content_type: str) -> str:
        blob = self._container().get_blob_client(name)
        try:
            await blob.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except AzureError as e:
            logger.error("Blob upload of %s failed: %s", name, e)
            raise StorageUnavailableError(
                message=str(e), context={"container": self.container_name, "blob": name}
            )
        logger.info("Blob stored: %s (%d bytes)", name, len(data))
        return blob.url

    async def ping(self) -> bool:
        try:
            return await self._container().exists()
        except (AzureError, StorageUnavailableError) as e:
            logger.warning("Health check: blob storage unreachable: %s", e)
            return False

    async def close(self) -> None:
        if self._service is not None:
            await self._service.close()
            self._service = None
