"""
Revocation DTOs for API responses.
"""
from dataclasses import dataclass
from typing import List


@dataclass
class RevocationResultDTO:
    """DTO for a completed revoke call."""

    license_id: str
    already_revoked: bool
    attempts: int


@dataclass
class RevocationStatusDTO:
    """DTO for revocation status of one license."""

    license_id: str
    revoked: bool


@dataclass
class RevocationListDTO:
    """DTO for the published revocation list."""

    revoked: List[str]
