"""
Blob storage port (interface).

This defines the contract for the shared object that holds the
revocation record. The only write primitive is a conditional write
guarded by the object's version token (its generation).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StoredBlob:
    """Content of a stored object and its version token."""

    data: bytes
    generation: int


class BlobNotFoundError(Exception):
    """Raised when the requested object does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Object not found: {path}")
        self.path = path


class VersionMismatchError(Exception):
    """Raised when a conditional write loses to another writer."""

    def __init__(self, path: str, expected: Optional[int], actual: Optional[int] = None):
        super().__init__(
            f"Version mismatch on {path}: expected {expected}, found {actual}"
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class BlobStorage(ABC):
    """
    Abstract blob storage.

    Implementations must apply conditional_write atomically: a reader
    sees either the previous content or the new content, never a mix.
    """

    @abstractmethod
    async def read(self, path: str) -> StoredBlob:
        """
        Read an object.

        Args:
            path: Object path

        Returns:
            StoredBlob with data and current generation

        Raises:
            BlobNotFoundError: If the object does not exist
            StorageUnavailableError: If the backend fails
        """
        pass

    @abstractmethod
    async def conditional_write(
        self, path: str, data: bytes, expected_generation: Optional[int]
    ) -> int:
        """
        Replace an object's content if its generation is unchanged.

        Args:
            path: Object path
            data: New content
            expected_generation: Generation read earlier, or None to
                create the object only if it does not exist yet

        Returns:
            The new generation

        Raises:
            VersionMismatchError: If the current generation differs
            StorageUnavailableError: If the backend fails
        """
        pass
