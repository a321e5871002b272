"""
Unit tests for License domain entity.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from licenses.domain.license import License, format_issued_at, parse_issued_at


class TestLicenseEntity:
    """Tests for License domain entity."""

    def test_create_license(self):
        """Test creating a license entity."""
        license = License.create(product="domain_changer")

        assert license.product == "domain_changer"
        assert len(license.id) == 32
        assert int(license.id, 16) >= 0
        assert license.issued_at.tzinfo is not None
        assert license.issued_at.microsecond == 0

    def test_create_license_unique_ids(self):
        """Test every license gets a fresh identifier."""
        ids = {License.create(product="domain_changer").id for _ in range(100)}
        assert len(ids) == 100

    def test_create_license_with_explicit_fields(self):
        """Test creating a license with a fixed id and timestamp."""
        issued_at = datetime(2024, 3, 1, 12, 30, 45, 999, tzinfo=timezone.utc)
        license = License.create(
            product="domain_changer", license_id="abc123", issued_at=issued_at
        )

        assert license.id == "abc123"
        assert license.issued_at == datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone.utc)

    def test_create_license_normalizes_timezone(self):
        """Test issue time is converted to UTC."""
        cet = timezone(timedelta(hours=1))
        license = License.create(
            product="p", issued_at=datetime(2024, 3, 1, 13, 0, 0, tzinfo=cet)
        )
        assert license.issued_at == datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_empty_product_rejected(self):
        """Test empty product is rejected."""
        with pytest.raises(ValueError, match="Product name cannot be empty"):
            License.create(product="")

    def test_naive_timestamp_rejected(self):
        """Test naive timestamps are rejected."""
        with pytest.raises(ValueError, match="timezone aware"):
            License(id="abc123", product="p", issued_at=datetime(2024, 1, 1))

    def test_sub_second_timestamp_rejected(self):
        """Test timestamps finer than the token format are rejected."""
        with pytest.raises(ValueError, match="whole seconds"):
            License(
                id="abc123",
                product="p",
                issued_at=datetime(2024, 3, 1, 12, 0, 0, 500, tzinfo=timezone.utc),
            )

    def test_license_is_immutable(self):
        """Test License cannot be mutated."""
        license = License.create(product="domain_changer")
        with pytest.raises(AttributeError):
            license.product = "other"

    def test_canonical_bytes(self):
        """Test canonical encoding is compact sorted JSON."""
        license = License(
            id="abc123",
            product="domain_changer",
            issued_at=datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc),
        )

        assert license.canonical_bytes() == (
            b'{"id":"abc123","issued_at":"2024-03-01T12:00:00Z","product":"domain_changer"}'
        )

    def test_canonical_bytes_escape_product(self):
        """Test product text containing JSON syntax stays unambiguous."""
        license = License.create(product='we"ird,product}', license_id="abc123")
        payload = json.loads(license.canonical_bytes())
        assert payload["product"] == 'we"ird,product}'

    def test_payload_roundtrip(self):
        """Test from_payload inverts to_payload."""
        license = License.create(product="Ünïcode product")
        assert License.from_payload(license.to_payload()) == license

    def test_issued_at_format(self):
        """Test timestamp formatting helpers."""
        value = datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert format_issued_at(value) == "2024-12-31T23:59:59Z"
        assert parse_issued_at("2024-12-31T23:59:59Z") == value
