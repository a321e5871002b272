"""
Process-wide adapters built from settings.

Views and management commands get their collaborators here instead of
constructing them inline.
"""
from functools import lru_cache

from django.conf import settings

from licenses.infrastructure.keys.file_key_provider import FileSystemKeyProvider
from licenses.ports.key_provider import KeyProvider
from revocations.domain.services import RetryPolicy, RevocationStore
from revocations.infrastructure.storage.django_blob_storage import DjangoBlobStorage
from revocations.infrastructure.storage.memory_blob_storage import InMemoryBlobStorage

STORAGE_BACKENDS = {
    "django": DjangoBlobStorage,
    "memory": InMemoryBlobStorage,
}


@lru_cache(maxsize=None)
def get_key_provider() -> KeyProvider:
    """Return the key provider for LICENSE_KEYS_DIR."""
    return FileSystemKeyProvider()


@lru_cache(maxsize=None)
def get_revocation_store() -> RevocationStore:
    """Return the revocation store for REVOCATION_STORAGE_BACKEND."""
    try:
        storage_class = STORAGE_BACKENDS[settings.REVOCATION_STORAGE_BACKEND]
    except KeyError:
        raise ValueError(
            f"Unknown REVOCATION_STORAGE_BACKEND: {settings.REVOCATION_STORAGE_BACKEND!r}"
        ) from None
    return RevocationStore(
        storage=storage_class(),
        path=settings.REVOCATION_BLOB_PATH,
        retry_policy=RetryPolicy(**settings.REVOCATION_RETRY),
    )
