"""
Django implementation of BlobStorage port.

Conditional writes are a single UPDATE filtered on the expected
generation; creation relies on the unique path constraint.
"""
import logging
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from core.domain.exceptions import StorageUnavailableError
from revocations.infrastructure.models import Blob as BlobModel
from revocations.ports.blob_storage import (
    BlobNotFoundError,
    BlobStorage,
    StoredBlob,
    VersionMismatchError,
)

logger = logging.getLogger(__name__)


class DjangoBlobStorage(BlobStorage):
    """
    Django ORM implementation of BlobStorage.

    Any database instance shared between service processes is a valid
    consistency authority because the generation check happens inside
    the database statement.
    """

    def _current_generation(self, path: str) -> Optional[int]:
        return (
            BlobModel.objects.filter(path=path)
            .values_list("generation", flat=True)
            .first()
        )

    @sync_to_async
    def read(self, path: str) -> StoredBlob:
        """
        Read an object.

        Args:
            path: Object path

        Returns:
            StoredBlob with data and generation
        """
        try:
            model = BlobModel.objects.get(path=path)
        except BlobModel.DoesNotExist:
            raise BlobNotFoundError(path) from None
        except DatabaseError as e:
            logger.error("Error reading blob %s: %s", path, e, exc_info=True)
            raise StorageUnavailableError(f"Could not read {path}") from e
        return StoredBlob(data=bytes(model.data), generation=model.generation)

    @sync_to_async
    def conditional_write(
        self, path: str, data: bytes, expected_generation: Optional[int]
    ) -> int:
        """
        Replace an object's content if its generation is unchanged.

        Args:
            path: Object path
            data: New content
            expected_generation: Generation read earlier, or None to create

        Returns:
            New generation
        """
        try:
            if expected_generation is None:
                return self._create(path, data)

            updated = BlobModel.objects.filter(
                path=path, generation=expected_generation
            ).update(
                data=data,
                generation=F("generation") + 1,
                updated_at=timezone.now(),
            )
            if updated == 0:
                raise VersionMismatchError(
                    path, expected_generation, self._current_generation(path)
                )
            return expected_generation + 1
        except DatabaseError as e:
            logger.error("Error writing blob %s: %s", path, e, exc_info=True)
            raise StorageUnavailableError(f"Could not write {path}") from e

    def _create(self, path: str, data: bytes) -> int:
        try:
            with transaction.atomic():
                model = BlobModel.objects.create(path=path, data=data, generation=1)
        except IntegrityError:
            raise VersionMismatchError(path, None, self._current_generation(path)) from None
        return model.generation
