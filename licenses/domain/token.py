"""
Signed license token codec.

Wire format::

    <base64url(payload)>.<base64url(signature)>

``payload`` is ``License.canonical_bytes()`` and ``signature`` is computed
over exactly those bytes. Base64 padding is stripped. The alphabet of
base64url never contains ".", so the two parts split unambiguously.
"""
import base64
import binascii
import json
from dataclasses import dataclass

from licenses.domain.license import License

TOKEN_SEPARATOR = "."


class MalformedTokenError(ValueError):
    """Raised when a token string cannot be decoded."""


@dataclass(frozen=True)
class SignedToken:
    """A license together with the signature over its canonical bytes."""

    license: License
    signature: bytes

    @property
    def payload(self) -> bytes:
        """Bytes the signature covers."""
        return self.license.canonical_bytes()

    def encode(self) -> str:
        """Return the opaque token string handed to clients."""
        return encode_token(self.license, self.signature)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    padded = data + "=" * (-len(data) % 4)
    return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)


def encode_token(license: License, signature: bytes) -> str:
    """Encode license fields and signature into a token string."""
    return _b64encode(license.canonical_bytes()) + TOKEN_SEPARATOR + _b64encode(signature)


def decode_token(token: str) -> SignedToken:
    """
    Decode a token string produced by encode_token.

    This does not verify the signature; it only recovers the fields.

    Raises:
        MalformedTokenError: If the token is not in the expected format
    """
    parts = token.split(TOKEN_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedTokenError("Token must have exactly two non-empty parts")

    try:
        payload = _b64decode(parts[0])
        signature = _b64decode(parts[1])
        license = License.from_payload(json.loads(payload.decode("utf-8")))
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        raise MalformedTokenError(f"Could not decode token: {e}") from e

    return SignedToken(license=license, signature=signature)
