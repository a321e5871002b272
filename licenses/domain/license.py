"""
License domain entity.

This is the core domain entity representing an issued license.
It contains business logic and is independent of infrastructure.
"""
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.domain.value_objects import LicenseId, ProductName

ISSUED_AT_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_issued_at(value: datetime) -> str:
    """Render a timestamp in the canonical UTC form used in tokens."""
    return value.astimezone(timezone.utc).strftime(ISSUED_AT_FORMAT)


def parse_issued_at(value: str) -> datetime:
    """Inverse of format_issued_at."""
    return datetime.strptime(value, ISSUED_AT_FORMAT).replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents a grant of use for a named product. Licenses are never
    mutated or deleted; revocation is tracked by the revocations app.
    """

    id: str
    product: str
    issued_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        LicenseId(self.id)
        ProductName(self.product)
        if self.issued_at.tzinfo is None:
            raise ValueError("Issue timestamp must be timezone aware")
        if self.issued_at.microsecond:
            raise ValueError("Issue timestamp must be whole seconds")

    @classmethod
    def create(
        cls,
        product: str,
        license_id: Optional[str] = None,
        issued_at: Optional[datetime] = None,
    ) -> "License":
        """
        Create a new License entity.

        Args:
            product: Licensed product name
            license_id: Optional identifier (128-bit random hex if not provided)
            issued_at: Optional issue time (defaults to now, whole seconds)

        Returns:
            License entity instance
        """
        now = issued_at or datetime.now(timezone.utc)
        return cls(
            id=license_id or uuid.uuid4().hex,
            product=product,
            issued_at=now.astimezone(timezone.utc).replace(microsecond=0),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Return the signed fields as a plain dict."""
        return {
            "id": self.id,
            "issued_at": format_issued_at(self.issued_at),
            "product": self.product,
        }

    def canonical_bytes(self) -> bytes:
        """
        Return the exact bytes covered by the license signature.

        Compact JSON with sorted keys (id, issued_at, product), UTF-8 encoded.
        """
        return json.dumps(
            self.to_payload(), ensure_ascii=False, sort_keys=True, separators=(",", ":")
        ).encode("utf-8")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "License":
        """Rebuild a License from the dict produced by to_payload."""
        return cls(
            id=payload["id"],
            product=payload["product"],
            issued_at=parse_issued_at(payload["issued_at"]),
        )
