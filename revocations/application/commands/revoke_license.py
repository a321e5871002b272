"""
RevokeLicenseCommand.

Command to revoke a previously issued license.
"""
from dataclasses import dataclass


@dataclass
class RevokeLicenseCommand:
    """Command to add a license identifier to the revocation record."""

    license_id: str
