"""
Django management command to import revoked license IDs.

Reads a legacy revocations file (one ID per line, or the JSON record
form) and revokes every ID through the revocation store, so the import
is safe to run while the service is serving traffic.
"""

import logging
from pathlib import Path

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import RevocationException
from core.infrastructure.container import get_revocation_store
from revocations.domain.revocation_record import CorruptRecordError, RevocationRecord

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to import revocations from a file."""

    help = "Revoke every license ID listed in a revocations file"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("path", help="File with revoked license IDs")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - list IDs without revoking them",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        path = Path(options["path"])
        try:
            record = RevocationRecord.parse(path.read_bytes())
        except OSError as e:
            raise CommandError(f"Could not read {path}: {e}") from e
        except CorruptRecordError as e:
            raise CommandError(f"Could not parse {path}: {e}") from e

        ids = record.sorted_ids()
        self.stdout.write(f"Found {len(ids)} license ID(s)")

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license_id in ids[:10]:
                self.stdout.write(f"  - {license_id}")
            return

        store = get_revocation_store()
        revoked = skipped = failed = 0
        for license_id in ids:
            try:
                outcome = async_to_sync(store.revoke)(license_id)
            except RevocationException as e:
                failed += 1
                logger.error("Failed to import revocation %s: %s", license_id, e.message)
                self.stdout.write(self.style.ERROR(f"  - {license_id}: {e.message}"))
                continue
            if outcome.already_revoked:
                skipped += 1
            else:
                revoked += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Revoked {revoked}, already revoked {skipped}, failed {failed}"
            )
        )
        if failed:
            raise CommandError(f"{failed} revocation(s) could not be imported")
