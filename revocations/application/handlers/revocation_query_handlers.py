"""
Revocation query handlers.

Read-side handlers used by verifiers.
"""

from revocations.application.dto.revocation_dto import RevocationListDTO, RevocationStatusDTO
from revocations.application.queries.get_revocation_status import GetRevocationStatusQuery
from revocations.domain.services import RevocationStore


class GetRevocationStatusHandler:
    """Handler for GetRevocationStatusQuery."""

    def __init__(self, revocation_store: RevocationStore):
        """Initialize handler with the revocation store."""
        self.revocation_store = revocation_store

    async def handle(self, query: GetRevocationStatusQuery) -> RevocationStatusDTO:
        """
        Handle revocation status query.

        Args:
            query: GetRevocationStatusQuery

        Returns:
            RevocationStatusDTO
        """
        revoked = await self.revocation_store.is_revoked(query.license_id)
        return RevocationStatusDTO(license_id=query.license_id, revoked=revoked)


class ListRevocationsHandler:
    """Handler returning the whole revocation list."""

    def __init__(self, revocation_store: RevocationStore):
        """Initialize handler with the revocation store."""
        self.revocation_store = revocation_store

    async def handle(self) -> RevocationListDTO:
        """Return every revoked identifier."""
        return RevocationListDTO(revoked=await self.revocation_store.list_revoked())
