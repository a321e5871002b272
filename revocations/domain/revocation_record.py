"""
RevocationRecord domain entity.

The set of revoked license identifiers, and its serialized form::

    {"revoked": ["<id>", "<id>", ...]}

Identifiers are sorted and unique. The legacy newline-delimited text
form (one identifier per line) is still accepted on read.
"""
import json
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

from core.domain.value_objects import LicenseId


class CorruptRecordError(ValueError):
    """Raised when stored revocation data cannot be parsed."""


@dataclass(frozen=True)
class RevocationRecord:
    """
    RevocationRecord domain entity.

    Membership only grows: there is no way to remove an identifier.
    """

    revoked: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def empty(cls) -> "RevocationRecord":
        """Return the record for a store that has never been written."""
        return cls(frozenset())

    @classmethod
    def of(cls, ids: Iterable[str]) -> "RevocationRecord":
        """Build a record from identifiers."""
        return cls(frozenset(ids))

    def contains(self, license_id: str) -> bool:
        """Check if an identifier is revoked."""
        return license_id in self.revoked

    def with_id(self, license_id: str) -> "RevocationRecord":
        """
        Return a new record with an identifier added.

        Args:
            license_id: Identifier to revoke

        Returns:
            New RevocationRecord (or self if already a member)
        """
        LicenseId(license_id)
        if license_id in self.revoked:
            return self
        return RevocationRecord(self.revoked | {license_id})

    def sorted_ids(self) -> List[str]:
        """Return identifiers in a stable order."""
        return sorted(self.revoked)

    def __len__(self) -> int:
        return len(self.revoked)

    def serialize(self) -> bytes:
        """Serialize to the stored JSON form."""
        return json.dumps({"revoked": self.sorted_ids()}, separators=(",", ":")).encode("utf-8")

    @classmethod
    def parse(cls, data: bytes) -> "RevocationRecord":
        """
        Parse stored content.

        Args:
            data: Raw stored bytes (JSON, or legacy one-id-per-line text)

        Returns:
            RevocationRecord

        Raises:
            CorruptRecordError: If the content is not a valid record
        """
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptRecordError("Revocation record is not valid UTF-8") from e

        stripped = text.strip()
        if not stripped:
            return cls.empty()

        if stripped.startswith("{"):
            try:
                document = json.loads(stripped)
            except ValueError as e:
                raise CorruptRecordError(f"Revocation record is not valid JSON: {e}") from e
            ids = document.get("revoked") if isinstance(document, dict) else None
            if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
                raise CorruptRecordError("Revocation record must hold a list of identifiers")
            return cls._checked(ids)

        # Legacy revocations.txt: newline separated, may start with a blank line.
        return cls._checked(line.strip() for line in text.splitlines() if line.strip())

    @classmethod
    def _checked(cls, ids: Iterable[str]) -> "RevocationRecord":
        record = cls.of(ids)
        for license_id in record.revoked:
            try:
                LicenseId(license_id)
            except ValueError as e:
                raise CorruptRecordError(f"Revocation record is corrupt: {e}") from e
        return record
