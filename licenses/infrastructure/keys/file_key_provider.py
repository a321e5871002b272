"""
Filesystem implementation of KeyProvider port.

Keys are PEM files named ``<name>.pem`` inside a configured directory.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from asgiref.sync import sync_to_async
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from django.conf import settings

from core.domain.exceptions import KeyUnavailableError
from licenses.ports.key_provider import KeyProvider

logger = logging.getLogger(__name__)


class FileSystemKeyProvider(KeyProvider):
    """
    KeyProvider that loads PEM private keys from disk.

    Loaded keys are cached per name for the life of the provider.
    """

    def __init__(
        self,
        keys_dir: Optional[Union[str, Path]] = None,
        password: Optional[str] = None,
    ):
        """
        Initialize provider.

        Args:
            keys_dir: Directory holding ``<name>.pem`` (defaults to LICENSE_KEYS_DIR)
            password: Optional PEM password (defaults to LICENSE_KEY_PASSWORD)
        """
        self.keys_dir = Path(keys_dir or settings.LICENSE_KEYS_DIR)
        password = password if password is not None else getattr(settings, "LICENSE_KEY_PASSWORD", "")
        self._password = password.encode() if password else None
        self._cache: Dict[str, object] = {}

    def path_for(self, name: str) -> Path:
        """Return the PEM path for a signer name."""
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise KeyUnavailableError(f"Invalid signing key name: {name!r}")
        return self.keys_dir / f"{name}.pem"

    def _load(self, name: str):
        path = self.path_for(name)
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error("Could not read signing key %s: %s", path, e)
            raise KeyUnavailableError(f"Signing key {name!r} not found") from e

        try:
            return serialization.load_pem_private_key(data, password=self._password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            logger.error("Could not parse signing key %s: %s", path, e)
            raise KeyUnavailableError(f"Signing key {name!r} is unreadable") from e

    async def get_private_key(self, name: str):
        """
        Get a private key by name, loading it on first use.

        Args:
            name: Signer name

        Returns:
            Private key object

        Raises:
            KeyUnavailableError: If the file is missing or unreadable
        """
        key = self._cache.get(name)
        if key is None:
            key = await sync_to_async(self._load)(name)
            self._cache[name] = key
            logger.debug("Loaded signing key: %s", name)
        return key


class InMemoryKeyProvider(KeyProvider):
    """KeyProvider backed by a dict of already loaded keys."""

    def __init__(self, keys: Optional[Dict[str, object]] = None):
        """Initialize provider with a name -> key mapping."""
        self._keys = dict(keys or {})

    def add(self, name: str, key) -> None:
        """Register a key under a name."""
        self._keys[name] = key

    async def get_private_key(self, name: str):
        """Get a private key by name."""
        try:
            return self._keys[name]
        except KeyError as e:
            raise KeyUnavailableError(f"Signing key {name!r} not found") from e
