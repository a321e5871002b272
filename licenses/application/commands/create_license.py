"""
CreateLicenseCommand.

Command to issue a signed license for a product.
"""

from dataclasses import dataclass


@dataclass
class CreateLicenseCommand:
    """Command to issue a license for a named product."""

    product: str
