"""
Serializers for License API endpoints.
"""

from rest_framework import serializers


class CreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for create license request."""

    # Blank values are rejected by the domain with INVALID_PRODUCT
    product = serializers.CharField(required=True, allow_blank=True, trim_whitespace=False)


class CreateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for create license response."""

    license = serializers.CharField(source="token")
    id = serializers.CharField()
    product = serializers.CharField()
    issued_at = serializers.DateTimeField()


class RevokeLicenseResponseSerializer(serializers.Serializer):
    """Serializer for revoke license response."""

    status = serializers.SerializerMethodField()
    license_id = serializers.CharField()
    already_revoked = serializers.BooleanField()

    def get_status(self, _obj) -> str:
        """Revocations that return always succeeded."""
        return "SUCCESS"


class RevocationStatusResponseSerializer(serializers.Serializer):
    """Serializer for revocation status response."""

    id = serializers.CharField(source="license_id")
    revoked = serializers.BooleanField()


class RevocationListResponseSerializer(serializers.Serializer):
    """Serializer for the published revocation list."""

    revoked = serializers.ListField(child=serializers.CharField())
