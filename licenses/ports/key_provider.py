"""
Key provider port (interface).

This defines the contract for retrieving signing keys.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod

from cryptography.hazmat.primitives.asymmetric import rsa


class KeyProvider(ABC):
    """
    Abstract provider of private signing keys.

    This is a port in hexagonal architecture - the issuer depends on
    it instead of looking keys up globally.
    """

    @abstractmethod
    async def get_private_key(self, name: str) -> rsa.RSAPrivateKey:
        """
        Get a private key by logical name.

        Args:
            name: Signer name, e.g. "plugin"

        Returns:
            Private key

        Raises:
            KeyUnavailableError: If the key cannot be retrieved
        """
        pass
