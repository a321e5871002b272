"""
Revocation domain services.

RevocationStore owns the shared revocation record. Every change goes
through an optimistic read / conditional-write loop against the blob
storage, so concurrent revocations from any number of processes are
never lost.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple

from core.domain.exceptions import (
    ConcurrentUpdateFailedError,
    InvalidLicenseIdError,
    StorageUnavailableError,
)
from core.domain.value_objects import LicenseId
from core.metrics import revocation_conflicts_total, revocations_total
from revocations.domain.revocation_record import CorruptRecordError, RevocationRecord
from revocations.ports.blob_storage import BlobNotFoundError, BlobStorage, VersionMismatchError

logger = logging.getLogger(__name__)

DEFAULT_RECORD_PATH = "revocations.json"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for conditional-write conflicts."""

    max_attempts: int = 5
    base_delay: float = 0.05
    max_delay: float = 1.0
    jitter: bool = True

    def __post_init__(self):
        """Validate retry policy."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Delays cannot be negative")

    def delay_for(self, attempt: int) -> float:
        """
        Return the pause after a failed attempt.

        Args:
            attempt: 1-based number of the attempt that just failed

        Returns:
            Seconds to wait before the next attempt
        """
        delay = min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))
        if self.jitter:
            return random.uniform(0, delay)
        return delay


@dataclass(frozen=True)
class RevocationOutcome:
    """Result of a successful revoke call."""

    license_id: str
    already_revoked: bool
    attempts: int


class RevocationStore:
    """
    Domain service maintaining the set of revoked license identifiers.

    State machine per revoke call:
    Reading -> Deciding (member: Done) -> Writing -> Done,
    or back to Reading on a version conflict until attempts run out.
    """

    def __init__(
        self,
        storage: BlobStorage,
        path: str = DEFAULT_RECORD_PATH,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize store.

        Args:
            storage: Blob storage holding the record
            path: Object path of the record
            retry_policy: Backoff configuration
            sleep: Coroutine used to wait between attempts
        """
        self.storage = storage
        self.path = path
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    @staticmethod
    def _validate(license_id: str) -> str:
        try:
            return LicenseId(license_id).value
        except ValueError as e:
            raise InvalidLicenseIdError(str(e)) from e

    async def _load(self) -> Tuple[RevocationRecord, Optional[int]]:
        """Read the record and its generation (None if never written)."""
        try:
            blob = await self.storage.read(self.path)
        except BlobNotFoundError:
            return RevocationRecord.empty(), None

        try:
            return RevocationRecord.parse(blob.data), blob.generation
        except CorruptRecordError as e:
            logger.error("Revocation record %s is corrupt: %s", self.path, e)
            raise StorageUnavailableError(f"Revocation record is unreadable: {e}") from e

    async def revoke(self, license_id: str) -> RevocationOutcome:
        """
        Add a license identifier to the revocation record.

        Revoking an identifier twice is a successful no-op.

        Args:
            license_id: Identifier to revoke

        Returns:
            RevocationOutcome

        Raises:
            InvalidLicenseIdError: If the identifier is malformed
            ConcurrentUpdateFailedError: If every attempt lost to another writer
            StorageUnavailableError: If the backend fails
        """
        license_id = self._validate(license_id)
        max_attempts = self.retry_policy.max_attempts

        for attempt in range(1, max_attempts + 1):
            record, generation = await self._load()

            if record.contains(license_id):
                revocations_total.labels(outcome="already_revoked").inc()
                logger.info(
                    "License already revoked",
                    extra={"license_id": license_id, "attempt": attempt},
                )
                return RevocationOutcome(license_id, already_revoked=True, attempts=attempt)

            data = record.with_id(license_id).serialize()
            try:
                new_generation = await self.storage.conditional_write(self.path, data, generation)
            except VersionMismatchError as e:
                revocation_conflicts_total.inc()
                logger.warning(
                    "Revocation write conflict: %s",
                    e,
                    extra={"license_id": license_id, "attempt": attempt},
                )
                if attempt < max_attempts:
                    await self._sleep(self.retry_policy.delay_for(attempt))
                continue

            revocations_total.labels(outcome="revoked").inc()
            logger.info(
                "License revoked",
                extra={
                    "license_id": license_id,
                    "attempt": attempt,
                    "generation": new_generation,
                    "revoked_count": len(record) + 1,
                },
            )
            return RevocationOutcome(license_id, already_revoked=False, attempts=attempt)

        revocations_total.labels(outcome="conflict_exhausted").inc()
        logger.error(
            "Gave up revoking license after %s attempts",
            max_attempts,
            extra={"license_id": license_id},
        )
        raise ConcurrentUpdateFailedError(
            f"Could not revoke {license_id} after {max_attempts} attempts",
            attempts=max_attempts,
        )

    async def is_revoked(self, license_id: str) -> bool:
        """
        Check whether a license identifier is revoked.

        Args:
            license_id: Identifier to check

        Returns:
            True if revoked

        Raises:
            InvalidLicenseIdError: If the identifier is malformed
            StorageUnavailableError: If the backend fails
        """
        license_id = self._validate(license_id)
        record, _ = await self._load()
        return record.contains(license_id)

    async def list_revoked(self) -> list:
        """Return all revoked identifiers, sorted."""
        record, _ = await self._load()
        return record.sorted_ids()
