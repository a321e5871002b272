"""
Integration tests for License API endpoints.
"""

import hashlib

import pytest
from django.urls import reverse

from core.domain.exceptions import StorageUnavailableError
from licenses.domain.services import LicenseSigner
from licenses.domain.token import decode_token
from licenses.infrastructure.keys.file_key_provider import InMemoryKeyProvider
from revocations.domain.services import RetryPolicy, RevocationStore
from revocations.ports.blob_storage import BlobStorage


class UnavailableBlobStorage(BlobStorage):
    """Storage whose backend is down."""

    async def read(self, path):
        raise StorageUnavailableError(f"Could not read {path}")

    async def conditional_write(self, path, data, expected_generation):
        raise StorageUnavailableError(f"Could not write {path}")


@pytest.fixture
def use_key_provider(monkeypatch):
    """Fixture installing a key provider for the views."""

    def install(provider):
        monkeypatch.setattr("api.v1.licenses.views.get_key_provider", lambda: provider)
        return provider

    return install


@pytest.fixture
def use_revocation_store(monkeypatch):
    """Fixture installing a revocation store for the views."""

    def install(storage, max_attempts=5):
        store = RevocationStore(
            storage=storage,
            retry_policy=RetryPolicy(
                max_attempts=max_attempts, base_delay=0.0, max_delay=0.0, jitter=False
            ),
        )
        monkeypatch.setattr("api.v1.licenses.views.get_revocation_store", lambda: store)
        return store

    return install


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateLicenseAPI:
    """Integration tests for license issuance."""

    def test_create_license_success(
        self, api_client, key_provider, use_key_provider, rsa_public_key
    ):
        """Test issuing a license returns a verifiable token."""
        use_key_provider(key_provider)

        response = api_client.post(
            reverse("licenses:create-license"), {"product": "domain_changer"}, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["product"] == "domain_changer"
        decoded = decode_token(data["license"])
        assert decoded.license.id == data["id"]
        assert decoded.license.product == "domain_changer"
        assert LicenseSigner.verify(decoded, rsa_public_key) is True

    def test_create_license_empty_product(self, api_client, key_provider, use_key_provider):
        """Test empty product returns 400 INVALID_PRODUCT."""
        use_key_provider(key_provider)

        response = api_client.post(
            reverse("licenses:create-license"), {"product": ""}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PRODUCT"

    def test_create_license_unencodable_product(self, api_client, key_provider, use_key_provider):
        """Test a JSON-escaped lone surrogate returns 400 INVALID_PRODUCT."""
        use_key_provider(key_provider)

        response = api_client.post(
            reverse("licenses:create-license"),
            data='{"product": "\\ud800"}',
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PRODUCT"

    def test_create_license_missing_product(self, api_client, key_provider, use_key_provider):
        """Test a request without product returns 400."""
        use_key_provider(key_provider)

        response = api_client.post(reverse("licenses:create-license"), {}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_create_license_malformed_body(self, api_client, key_provider, use_key_provider):
        """Test an undecodable body returns 400."""
        use_key_provider(key_provider)

        response = api_client.post(
            reverse("licenses:create-license"),
            data="{not json",
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "PARSE_ERROR"

    def test_create_license_key_unavailable(self, api_client, use_key_provider):
        """Test a missing signing key returns 500 KEY_UNAVAILABLE."""
        use_key_provider(InMemoryKeyProvider())

        response = api_client.post(
            reverse("licenses:create-license"), {"product": "domain_changer"}, format="json"
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "KEY_UNAVAILABLE"


@pytest.mark.django_db
@pytest.mark.integration
class TestRevocationAPI:
    """Integration tests for revocation endpoints."""

    def test_revoke_license(self, api_client, blob_storage, use_revocation_store):
        """Test revoking a license and reading its status."""
        use_revocation_store(blob_storage)

        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"})
        )

        assert response.status_code == 200
        assert response.json() == {
            "status": "SUCCESS",
            "license_id": "abc123",
            "already_revoked": False,
        }

        response = api_client.get(
            reverse("licenses:revocation-status", kwargs={"license_id": "abc123"})
        )
        assert response.json() == {"id": "abc123", "revoked": True}

    def test_revoke_twice(self, api_client, blob_storage, use_revocation_store):
        """Test revoking twice succeeds both times."""
        use_revocation_store(blob_storage)
        url = reverse("licenses:revoke-license", kwargs={"license_id": "abc123"})

        api_client.post(url)
        response = api_client.post(url)

        assert response.status_code == 200
        assert response.json()["already_revoked"] is True

    def test_status_not_revoked(self, api_client, blob_storage, use_revocation_store):
        """Test status of a license that was never revoked."""
        use_revocation_store(blob_storage)

        response = api_client.get(
            reverse("licenses:revocation-status", kwargs={"license_id": "abc123"})
        )

        assert response.status_code == 200
        assert response.json() == {"id": "abc123", "revoked": False}

    def test_list_revocations(self, api_client, blob_storage, use_revocation_store):
        """Test listing revoked ids."""
        use_revocation_store(blob_storage)
        for license_id in ["def456", "abc123"]:
            api_client.post(reverse("licenses:revoke-license", kwargs={"license_id": license_id}))

        response = api_client.get(reverse("licenses:list-revocations"))

        assert response.status_code == 200
        assert response.json() == {"revoked": ["abc123", "def456"]}

    def test_revoke_invalid_id(self, api_client, blob_storage, use_revocation_store):
        """Test a malformed id returns 400."""
        use_revocation_store(blob_storage)

        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "bad.id"})
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_LICENSE_ID"

    def test_revoke_contended(
        self, api_client, contended_storage_factory, use_revocation_store
    ):
        """Test exhausted retries return 503 with Retry-After."""
        use_revocation_store(contended_storage_factory(conflict_every=1), max_attempts=3)

        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"})
        )

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "CONCURRENT_UPDATE_FAILED"
        assert response["Retry-After"] == "1"

    def test_storage_unavailable(self, api_client, use_revocation_store):
        """Test a failing backend returns 503."""
        use_revocation_store(UnavailableBlobStorage())

        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"})
        )

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "STORAGE_UNAVAILABLE"

    def test_revoke_with_database_storage(self, api_client):
        """Test the configured database backend persists revocations."""
        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"})
        )
        assert response.status_code == 200

        response = api_client.get(reverse("licenses:list-revocations"))
        assert response.json() == {"revoked": ["abc123"]}


@pytest.mark.django_db
@pytest.mark.integration
class TestOperatorAuthentication:
    """Integration tests for operator API key checks on revocation."""

    @pytest.fixture(autouse=True)
    def operator_key(self, settings, blob_storage, use_revocation_store):
        settings.OPERATOR_API_KEY_HASHES = [hashlib.sha256(b"operator-secret").hexdigest()]
        use_revocation_store(blob_storage)

    def test_missing_key(self, api_client):
        """Test revocation without a key returns 401."""
        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"})
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_API_KEY"

    def test_invalid_key(self, api_client):
        """Test revocation with a wrong key returns 401."""
        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"}),
            HTTP_X_API_KEY="wrong",
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_API_KEY"

    def test_valid_key(self, api_client):
        """Test revocation with the operator key succeeds."""
        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"}),
            HTTP_X_API_KEY="operator-secret",
        )

        assert response.status_code == 200

    def test_missing_key_behind_script_prefix(self, api_client):
        """Test revocation under a mount prefix still requires the key."""
        response = api_client.post(
            reverse("licenses:revoke-license", kwargs={"license_id": "abc123"}),
            SCRIPT_NAME="/licensing",
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_API_KEY"

    def test_status_is_public(self, api_client):
        """Test status lookups need no key."""
        response = api_client.get(
            reverse("licenses:revocation-status", kwargs={"license_id": "abc123"})
        )

        assert response.status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthAPI:
    """Integration tests for health endpoints."""

    def test_health(self, api_client):
        """Test liveness endpoint."""
        response = api_client.get(reverse("health"))
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_with_key(self, api_client, settings, keys_dir):
        """Test readiness when the signing key is present."""
        settings.LICENSE_KEYS_DIR = keys_dir

        response = api_client.get(reverse("ready"))

        assert response.status_code == 200
        assert response.json()["checks"]["signing_keys"] is True

    def test_ready_without_key(self, api_client, settings, tmp_path):
        """Test readiness fails when the signing key is missing."""
        settings.LICENSE_KEYS_DIR = tmp_path

        response = api_client.get(reverse("ready"))

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
