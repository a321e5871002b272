"""
Pytest configuration and shared fixtures.
"""

import asyncio
from typing import List, Optional

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from licenses.infrastructure.keys.file_key_provider import InMemoryKeyProvider
from revocations.domain.services import RetryPolicy, RevocationStore
from revocations.infrastructure.storage.memory_blob_storage import InMemoryBlobStorage
from revocations.ports.blob_storage import StoredBlob, VersionMismatchError

SIGNER_NAME = "plugin"
RECORD_PATH = "revocations.json"


class ConflictInjectingBlobStorage(InMemoryBlobStorage):
    """
    In-memory storage that simulates a contended backend.

    Every read and write yields to the event loop so concurrent callers
    interleave between their read and their conditional write. Every
    ``conflict_every``-th conditional write is rejected as if another
    writer had committed the same content first.
    """

    def __init__(self, conflict_every: Optional[int] = None):
        super().__init__()
        self.conflict_every = conflict_every
        self.write_calls = 0
        self.injected_conflicts = 0

    async def read(self, path: str) -> StoredBlob:
        blob = await super().read(path)
        await asyncio.sleep(0)
        return blob

    async def conditional_write(self, path, data, expected_generation):
        await asyncio.sleep(0)
        self.write_calls += 1
        if self.conflict_every and self.write_calls % self.conflict_every == 0:
            self.injected_conflicts += 1
            self._phantom_rewrite(path)
            raise VersionMismatchError(path, expected_generation)
        return await super().conditional_write(path, data, expected_generation)

    def _phantom_rewrite(self, path: str) -> None:
        """Bump the generation without changing the content."""
        with self._lock:
            current = self._objects.get(path)
            if current is not None:
                self._objects[path] = StoredBlob(current.data, current.generation + 1)


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


@pytest.fixture(scope="session")
def rsa_private_key():
    """Fixture for an RSA signing key shared by the test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def rsa_public_key(rsa_private_key):
    """Fixture for the public half of the signing key."""
    return rsa_private_key.public_key()


@pytest.fixture
def key_provider(rsa_private_key):
    """Fixture for a KeyProvider holding the signing key."""
    return InMemoryKeyProvider({SIGNER_NAME: rsa_private_key})


@pytest.fixture
def keys_dir(tmp_path, rsa_private_key):
    """Fixture for a directory containing plugin.pem."""
    directory = tmp_path / "keys"
    directory.mkdir()
    (directory / f"{SIGNER_NAME}.pem").write_bytes(
        rsa_private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return directory


@pytest.fixture
def blob_storage():
    """Fixture for in-memory blob storage."""
    return InMemoryBlobStorage()


@pytest.fixture
def contended_storage_factory():
    """Fixture returning the conflict-injecting storage class."""
    return ConflictInjectingBlobStorage


@pytest.fixture
def recording_sleep():
    """Fixture for a sleep function that records backoff delays."""
    return RecordingSleep()


@pytest.fixture
def revocation_store(blob_storage, recording_sleep):
    """Fixture for a RevocationStore over in-memory storage."""
    return RevocationStore(
        storage=blob_storage,
        path=RECORD_PATH,
        retry_policy=RetryPolicy(max_attempts=5, base_delay=0.01, max_delay=0.1, jitter=False),
        sleep=recording_sleep,
    )


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
