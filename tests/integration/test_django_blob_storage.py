"""
Integration tests for the Django blob storage adapter.
"""

import asyncio

import pytest
from asgiref.sync import async_to_sync

from revocations.domain.services import RetryPolicy, RevocationStore
from revocations.infrastructure.models import Blob
from revocations.infrastructure.storage.django_blob_storage import DjangoBlobStorage
from revocations.ports.blob_storage import BlobNotFoundError, VersionMismatchError

PATH = "revocations.json"


@pytest.fixture
def storage():
    """Fixture for Django blob storage."""
    return DjangoBlobStorage()


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoBlobStorage:
    """Integration tests for DjangoBlobStorage."""

    def test_read_missing(self, storage):
        """Test reading an object that does not exist."""
        with pytest.raises(BlobNotFoundError):
            async_to_sync(storage.read)(PATH)

    def test_create(self, storage):
        """Test creating an object."""
        generation = async_to_sync(storage.conditional_write)(PATH, b"first", None)

        blob = async_to_sync(storage.read)(PATH)
        assert generation == 1
        assert blob.data == b"first"
        assert blob.generation == 1
        assert Blob.objects.filter(path=PATH).count() == 1

    def test_create_existing(self, storage):
        """Test create-only write conflicts with an existing object."""
        async_to_sync(storage.conditional_write)(PATH, b"first", None)

        with pytest.raises(VersionMismatchError) as exc_info:
            async_to_sync(storage.conditional_write)(PATH, b"second", None)

        assert exc_info.value.actual == 1
        assert async_to_sync(storage.read)(PATH).data == b"first"

    def test_update(self, storage):
        """Test update with the current generation."""
        async_to_sync(storage.conditional_write)(PATH, b"first", None)

        generation = async_to_sync(storage.conditional_write)(PATH, b"second", 1)

        blob = async_to_sync(storage.read)(PATH)
        assert generation == 2
        assert blob.data == b"second"
        assert blob.generation == 2

    def test_update_stale(self, storage):
        """Test update with a stale generation is rejected."""
        async_to_sync(storage.conditional_write)(PATH, b"first", None)
        async_to_sync(storage.conditional_write)(PATH, b"second", 1)

        with pytest.raises(VersionMismatchError) as exc_info:
            async_to_sync(storage.conditional_write)(PATH, b"stale", 1)

        assert exc_info.value.actual == 2
        assert async_to_sync(storage.read)(PATH).data == b"second"

    def test_concurrent_revocations(self, storage):
        """Test concurrent revocations through the database all persist."""
        store = RevocationStore(
            storage=storage,
            path=PATH,
            retry_policy=RetryPolicy(max_attempts=20, base_delay=0.0, max_delay=0.0, jitter=False),
        )
        license_ids = [f"license{i}" for i in range(10)]

        async def revoke_all():
            return await asyncio.gather(*(store.revoke(i) for i in license_ids))

        async_to_sync(revoke_all)()

        assert async_to_sync(store.list_revoked)() == sorted(license_ids)
