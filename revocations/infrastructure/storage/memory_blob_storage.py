"""
In-memory implementation of BlobStorage port.

Suitable for development and tests. Objects live in process memory,
so it only coordinates writers within one process.
"""
import logging
import threading
from typing import Dict, Optional

from revocations.ports.blob_storage import (
    BlobNotFoundError,
    BlobStorage,
    StoredBlob,
    VersionMismatchError,
)

logger = logging.getLogger(__name__)


class InMemoryBlobStorage(BlobStorage):
    """
    Dict-backed blob storage with generation numbers.

    The lock is the backend's own atomicity for compare-and-swap,
    equivalent to what a real object store does server-side.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._objects: Dict[str, StoredBlob] = {}
        self._lock = threading.Lock()

    async def read(self, path: str) -> StoredBlob:
        """Read an object."""
        with self._lock:
            blob = self._objects.get(path)
        if blob is None:
            raise BlobNotFoundError(path)
        return blob

    async def conditional_write(
        self, path: str, data: bytes, expected_generation: Optional[int]
    ) -> int:
        """Replace an object's content if its generation is unchanged."""
        with self._lock:
            current = self._objects.get(path)
            actual = current.generation if current else None
            if actual != expected_generation:
                raise VersionMismatchError(path, expected_generation, actual)
            generation = (actual or 0) + 1
            self._objects[path] = StoredBlob(data=bytes(data), generation=generation)
        logger.debug("Stored %s at generation %s", path, generation)
        return generation

    def snapshot(self, path: str) -> Optional[StoredBlob]:
        """Return the current object without going through the async API."""
        with self._lock:
            return self._objects.get(path)
