"""
Django management command to create an RSA signing key.

Writes ``<name>.pem`` (private, PKCS#8) and ``<name>.pub.pem`` (public,
SubjectPublicKeyInfo) into LICENSE_KEYS_DIR.
"""

import logging
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to generate a signing key pair."""

    help = "Generate an RSA key pair for signing licenses"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "name",
            nargs="?",
            default=None,
            help="Signer name (defaults to LICENSE_SIGNER_NAME)",
        )
        parser.add_argument(
            "--bits",
            type=int,
            default=2048,
            help="RSA modulus size",
        )
        parser.add_argument(
            "--keys-dir",
            default=None,
            help="Output directory (defaults to LICENSE_KEYS_DIR)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite an existing key",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        name = options["name"] or settings.LICENSE_SIGNER_NAME
        keys_dir = Path(options["keys_dir"] or settings.LICENSE_KEYS_DIR)
        private_path = keys_dir / f"{name}.pem"
        public_path = keys_dir / f"{name}.pub.pem"

        if options["bits"] < 2048:
            raise CommandError("Refusing to create an RSA key smaller than 2048 bits")
        if private_path.exists() and not options["force"]:
            raise CommandError(f"{private_path} already exists, use --force to replace it")

        password = settings.LICENSE_KEY_PASSWORD
        encryption = (
            serialization.BestAvailableEncryption(password.encode())
            if password
            else serialization.NoEncryption()
        )

        key = rsa.generate_private_key(public_exponent=65537, key_size=options["bits"])
        keys_dir.mkdir(parents=True, exist_ok=True)
        private_path.write_bytes(
            key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=encryption,
            )
        )
        private_path.chmod(0o600)
        public_path.write_bytes(
            key.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        )

        logger.info("Generated signing key %s in %s", name, keys_dir)
        self.stdout.write(self.style.SUCCESS(f"Private key written to {private_path}"))
        self.stdout.write(self.style.SUCCESS(f"Public key written to {public_path}"))
