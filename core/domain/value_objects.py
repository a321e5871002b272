"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass

PRODUCT_MAX_LENGTH = 255
LICENSE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,128}")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class ProductName(ValueObject):
    """Name of a licensed product, e.g. 'domain_changer'."""

    value: str

    def __post_init__(self):
        """Validate product name."""
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Product name cannot be empty")
        if len(self.value) > PRODUCT_MAX_LENGTH:
            raise ValueError("Product name too long")
        try:
            self.value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError("Product name must be valid Unicode text") from e

    def __str__(self) -> str:
        """Return product name as string."""
        return self.value


@dataclass(frozen=True)
class LicenseId(ValueObject):
    """
    License identifier value object.

    Issued identifiers are 32 lowercase hex characters; operator supplied
    identifiers may use any of [A-Za-z0-9_-] up to 128 characters.
    """

    value: str

    def __post_init__(self):
        """Validate identifier format."""
        if not isinstance(self.value, str) or not LICENSE_ID_PATTERN.fullmatch(self.value):
            raise ValueError(f"Invalid license identifier: {self.value!r}")

    def __str__(self) -> str:
        """Return identifier as string."""
        return self.value
