"""
MediaShare Backend — Abstract Blob Store Interface
====================================================

What:  Contract for storing uploaded photo bytes and getting a public URL.
Why:   PhotoService does not care whether bytes land in Azure Blob Storage or
       on the local disk; tests substitute fakes that fail on demand.
How:   Concrete implementations inherit from BlobStore.

Contract:
    ensure_container_exists()   idempotent; creates the namespace with public
                                read access for blob content. Called before
                                every upload (handlers keep no state between
                                requests), never once at startup.
    upload(name, data, type)    stores the bytes and returns a stable, publicly
                                resolvable URL. Same name overwrites.
    Faults surface as StorageUnavailableError with the underlying fault text.

Implementations:
    - AzureBlobStore: Azure Blob Storage (production)
    - LocalBlobStore: files under STORAGE_ROOT, served by GET /api/files/...
"""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Abstract blob storage for uploaded photos."""

    container_name: str

    @abstractmethod
    async def ensure_container_exists(self) -> None:
        """
        Create the container if it does not exist yet.

        Raises:
            StorageUnavailableError: permission, network or configuration fault
        """
        ...

    @abstractmethod
    async def upload(self, name: str, data: bytes, content_type: str) -> str:
        """
        Store `data` under `name` and return its public URL.

        No deduplication or content hashing; uploads are single-shot (size is
        bounded by the upload limit before this is called).

        Raises:
            StorageUnavailableError: the bytes could not be stored
        """
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Connectivity test for the health endpoint; never raises."""
        ...

    async def close(self) -> None:
        """Release client connections (called on application shutdown)."""
        return None
