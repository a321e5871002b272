"""
CreateLicenseHandler.

Handles the create license command.
"""

import logging

from core.domain.exceptions import InvalidProductError, KeyUnavailableError, SigningFailedError
from core.domain.value_objects import ProductName
from core.metrics import licenses_issued_total
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.dto.license_dto import IssuedLicenseDTO
from licenses.domain.license import License
from licenses.domain.services import LicenseSigner
from licenses.ports.key_provider import KeyProvider

logger = logging.getLogger(__name__)

DEFAULT_SIGNER_NAME = "plugin"


class CreateLicenseHandler:
    """Handler for CreateLicenseCommand."""

    def __init__(self, key_provider: KeyProvider, signer_name: str = DEFAULT_SIGNER_NAME):
        """Initialize handler with the key provider and signer identity."""
        self.key_provider = key_provider
        self.signer_name = signer_name

    async def handle(self, command: CreateLicenseCommand) -> IssuedLicenseDTO:
        """
        Handle create license command.

        Args:
            command: CreateLicenseCommand

        Returns:
            IssuedLicenseDTO with the signed token

        Raises:
            InvalidProductError: If product is empty or malformed
            KeyUnavailableError: If the signing key cannot be loaded
            SigningFailedError: If signing or encoding fails
        """
        try:
            product = ProductName(command.product)
        except ValueError as e:
            raise InvalidProductError(str(e)) from e

        license = License.create(product=product.value)

        try:
            key = await self.key_provider.get_private_key(self.signer_name)
        except KeyUnavailableError:
            raise
        except Exception as e:
            raise KeyUnavailableError(
                f"Could not load private key {self.signer_name!r}: {e}"
            ) from e

        try:
            signed = LicenseSigner.sign(license, key)
            token = signed.encode()
        except SigningFailedError:
            raise
        except Exception as e:
            raise SigningFailedError(f"Could not encode the license: {e}") from e

        licenses_issued_total.labels(product=license.product).inc()
        logger.info(
            "License issued",
            extra={"license_id": license.id, "product": license.product},
        )

        return IssuedLicenseDTO(
            id=license.id,
            product=license.product,
            issued_at=license.issued_at,
            token=token,
        )
