"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class IssuedLicenseDTO:
    """DTO for a freshly issued license."""

    id: str
    product: str
    issued_at: datetime
    token: str
