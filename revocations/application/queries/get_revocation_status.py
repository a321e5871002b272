"""
GetRevocationStatusQuery.

Query to check whether a license has been revoked.
"""
from dataclasses import dataclass


@dataclass
class GetRevocationStatusQuery:
    """Query revocation status for a license identifier."""

    license_id: str
