"""
License API views.

These endpoints are used to:
- Issue signed licenses
- Revoke licenses (operators)
- Check revocation status (verifiers)
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.licenses.serializers import (
    CreateLicenseRequestSerializer,
    CreateLicenseResponseSerializer,
    RevocationListResponseSerializer,
    RevocationStatusResponseSerializer,
    RevokeLicenseResponseSerializer,
)
from core.infrastructure.container import get_key_provider, get_revocation_store
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.handlers.create_license_handler import CreateLicenseHandler
from revocations.application.commands.revoke_license import RevokeLicenseCommand
from revocations.application.handlers.revocation_query_handlers import (
    GetRevocationStatusHandler,
    ListRevocationsHandler,
)
from revocations.application.handlers.revoke_license_handler import RevokeLicenseHandler
from revocations.application.queries.get_revocation_status import GetRevocationStatusQuery

tracer = get_tracer(__name__)


class CreateLicenseView(APIView):
    """View for issuing licenses."""

    @extend_schema(
        operation_id="create_license",
        summary="Create License",
        description=(
            "Issue a license for a product. The returned token carries the license "
            "fields and an RSA signature and can be verified offline."
        ),
        tags=["License API"],
        request=CreateLicenseRequestSerializer,
        responses={
            200: CreateLicenseResponseSerializer,
            400: {"description": "Empty product or undecodable request"},
            500: {"description": "Signing key unavailable or signing failed"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_create_license)(request)

    async def _handle_create_license(self, request: Request) -> Response:
        """Async handler for create license."""
        with tracer.start_as_current_span("create_license") as span:
            serializer = CreateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {"error": {"code": "VALIDATION_ERROR", "message": serializer.errors}},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            handler = CreateLicenseHandler(
                key_provider=get_key_provider(),
                signer_name=settings.LICENSE_SIGNER_NAME,
            )
            command = CreateLicenseCommand(product=serializer.validated_data["product"])

            result = await handler.handle(command)

            span.set_attribute("license.id", result.id)
            span.set_attribute("license.product", result.product)
            span.set_status(Status(StatusCode.OK))
            return Response(
                CreateLicenseResponseSerializer(result).data, status=status.HTTP_200_OK
            )


class RevokeLicenseView(APIView):
    """View for revoking licenses."""

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description=(
            "Add a license ID to the revocation record. Revoking an already "
            "revoked license succeeds without changing the record."
        ),
        tags=["License API"],
        request=None,
        responses={
            200: RevokeLicenseResponseSerializer,
            400: {"description": "Malformed license ID"},
            401: {"description": "Missing or invalid operator API key"},
            503: {"description": "Record contended or storage unavailable, retry later"},
        },
    )
    def post(self, request: Request, license_id: str) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke_license)(request, license_id)

    async def _handle_revoke_license(self, request: Request, license_id: str) -> Response:
        """Async handler for revoke license."""
        with tracer.start_as_current_span("revoke_license") as span:
            span.set_attribute("license.id", license_id)

            handler = RevokeLicenseHandler(revocation_store=get_revocation_store())
            result = await handler.handle(RevokeLicenseCommand(license_id=license_id))

            span.set_attribute("revocation.attempts", result.attempts)
            span.set_attribute("revocation.already_revoked", result.already_revoked)
            span.set_status(Status(StatusCode.OK))
            return Response(
                RevokeLicenseResponseSerializer(result).data, status=status.HTTP_200_OK
            )


class RevocationStatusView(APIView):
    """View for checking whether a license is revoked."""

    @extend_schema(
        operation_id="get_revocation_status",
        summary="Check Revocation Status",
        tags=["License API"],
        responses={
            200: RevocationStatusResponseSerializer,
            400: {"description": "Malformed license ID"},
            503: {"description": "Storage unavailable"},
        },
    )
    def get(self, request: Request, license_id: str) -> Response:
        """Get revocation status."""
        return async_to_sync(self._handle_revocation_status)(license_id)

    async def _handle_revocation_status(self, license_id: str) -> Response:
        """Async handler for revocation status."""
        handler = GetRevocationStatusHandler(revocation_store=get_revocation_store())
        result = await handler.handle(GetRevocationStatusQuery(license_id=license_id))
        return Response(
            RevocationStatusResponseSerializer(result).data, status=status.HTTP_200_OK
        )


class RevocationListView(APIView):
    """View publishing every revoked license ID."""

    @extend_schema(
        operation_id="list_revocations",
        summary="List Revocations",
        description="Return the full revocation record for offline verifiers.",
        tags=["License API"],
        responses={200: RevocationListResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """List revoked license IDs."""
        handler = ListRevocationsHandler(revocation_store=get_revocation_store())
        result = async_to_sync(handler.handle)()
        return Response(RevocationListResponseSerializer(result).data, status=status.HTTP_200_OK)
