"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from core.domain.exceptions import SigningFailedError
from licenses.domain.license import License
from licenses.domain.token import SignedToken


class LicenseSigner:
    """
    Domain service for signing licenses.

    Signatures are RSA PKCS#1 v1.5 over SHA-256 of License.canonical_bytes().
    """

    @staticmethod
    def sign(license: License, private_key: rsa.RSAPrivateKey) -> SignedToken:
        """
        Sign a license.

        Args:
            license: License entity to sign
            private_key: RSA private key

        Returns:
            SignedToken carrying the license and its signature

        Raises:
            SigningFailedError: If the key is not usable for signing
        """
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise SigningFailedError(
                f"Signing key must be an RSA private key, got {type(private_key).__name__}"
            )
        try:
            signature = private_key.sign(
                license.canonical_bytes(), padding.PKCS1v15(), hashes.SHA256()
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningFailedError(f"Could not sign license: {e}") from e
        return SignedToken(license=license, signature=signature)

    @staticmethod
    def verify(token: SignedToken, public_key: rsa.RSAPublicKey) -> bool:
        """
        Check a token's signature against a public key.

        Args:
            token: Decoded signed token
            public_key: RSA public key matching the signing key

        Returns:
            True if the signature is valid, False otherwise
        """
        try:
            public_key.verify(token.signature, token.payload, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True
