"""
RevokeLicenseHandler.

Handles the revoke license command.
"""

from revocations.application.commands.revoke_license import RevokeLicenseCommand
from revocations.application.dto.revocation_dto import RevocationResultDTO
from revocations.domain.services import RevocationStore


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, revocation_store: RevocationStore):
        """Initialize handler with the revocation store."""
        self.revocation_store = revocation_store

    async def handle(self, command: RevokeLicenseCommand) -> RevocationResultDTO:
        """
        Handle revoke license command.

        Args:
            command: RevokeLicenseCommand

        Returns:
            RevocationResultDTO

        Raises:
            InvalidLicenseIdError: If the identifier is malformed
            ConcurrentUpdateFailedError: If contention exhausted the retries
            StorageUnavailableError: If the storage backend fails
        """
        outcome = await self.revocation_store.revoke(command.license_id)
        return RevocationResultDTO(
            license_id=outcome.license_id,
            already_revoked=outcome.already_revoked,
            attempts=outcome.attempts,
        )
