"""
MediaShare Backend — Local File Blob Storage
==============================================

What:  BlobStore implementation that writes photos to the local disk.
Why:   Lets the API run end to end without a storage account (development,
       tests, single-box deployments).
How:   Each container is a directory under STORAGE_ROOT; blobs are files in
       it written with aiofiles. URLs point at GET /api/files/{container}/{name},
       which serves them back (routes/files.py).

Directory Structure:
    storage/
    └── images/
        ├── 1760816400123-9f1c2a.jpg
        └── 1760816455310-04be7d.png

Blob names are derived from photo ids (identity.blob_name), never from
user input, so they cannot escape the container directory.
"""

import logging
import os
from pathlib import Path

import aiofiles

from mediashare.exceptions import StorageUnavailableError
from mediashare.services.blob_base import BlobStore

logger = logging.getLogger(__name__)

FILES_ROUTE_PREFIX = "/api/files"


class LocalBlobStore(BlobStore):
    """
    Blob storage on the local file system.

    Args:
        storage_root:    directory holding one sub-directory per container
        container_name:  container (sub-directory) for photos
        public_base_url: prefix for returned URLs; empty gives relative URLs
    """

    def __init__(self, storage_root: str, container_name: str, public_base_url: str = ""):
        self.storage_root = Path(storage_root).resolve()
        self.container_name = container_name
        self.public_base_url = public_base_url.rstrip("/")
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info(
            "LocalBlobStore initialized with storage_root=%s container=%s",
            self.storage_root,
            container_name,
        )

    @property
    def container_path(self) -> Path:
        return self.storage_root / self.container_name

    def url_for(self, name: str) -> str:
        return f"{self.public_base_url}{FILES_ROUTE_PREFIX}/{self.container_name}/{name}"

    async def ensure_container_exists(self) -> None:
        try:
            self.container_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Could not create container directory %s: %s", self.container_path, e)
            raise StorageUnavailableError(
                message=str(e), context={"path": str(self.container_path)}
            )

    async def upload(self, name: str, data: bytes, content_type: str) -> str:
        path = self.container_path / name
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, e)
            raise StorageUnavailableError(message=str(e), context={"path": str(path)})

        logger.info("File stored: %s/%s (%d bytes, %s)", self.container_name, name, len(data), content_type)
        return self.url_for(name)

    def resolve(self, relative_path: str) -> Path:
        """
        Map a URL path below /api/files to a file inside storage_root.

        Raises:
            ValueError: the path escapes storage_root (e.g. "../../etc/passwd")
        """
        full_path = (self.storage_root / relative_path).resolve()
        full_path.relative_to(self.storage_root)
        return full_path

    async def ping(self) -> bool:
        return self.storage_root.is_dir() and os.access(self.storage_root, os.W_OK)
