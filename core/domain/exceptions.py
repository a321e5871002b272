"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license issuance errors."""

    pass


class InvalidProductError(LicenseException):
    """Raised when a license is requested for an empty or malformed product."""

    def __init__(self, message: str = "Product is required"):
        super().__init__(message, code="INVALID_PRODUCT")


class KeyUnavailableError(LicenseException):
    """Raised when the signing key cannot be retrieved."""

    def __init__(self, message: str = "Could not load private key for signing"):
        super().__init__(message, code="KEY_UNAVAILABLE")


class SigningFailedError(LicenseException):
    """Raised when the license could not be signed or encoded."""

    def __init__(self, message: str = "Could not encode the license"):
        super().__init__(message, code="SIGNING_FAILED")


class RevocationException(DomainException):
    """Base exception for revocation errors."""

    pass


class InvalidLicenseIdError(RevocationException):
    """Raised when a license identifier is malformed."""

    def __init__(self, message: str = "Invalid license identifier"):
        super().__init__(message, code="INVALID_LICENSE_ID")


class ConcurrentUpdateFailedError(RevocationException):
    """Raised when contention exhausted the revocation retry budget."""

    def __init__(
        self,
        message: str = "The revocation record is busy, please retry",
        attempts: int = 0,
    ):
        super().__init__(message, code="CONCURRENT_UPDATE_FAILED")
        self.attempts = attempts


class StorageUnavailableError(RevocationException):
    """Raised when the revocation storage backend fails."""

    def __init__(self, message: str = "An error occurred updating the revocations file"):
        super().__init__(message, code="STORAGE_UNAVAILABLE")
