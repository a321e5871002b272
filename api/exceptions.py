"""
API exception handlers.

This module translates domain exceptions into REST API responses.
The domain layer never builds responses itself.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ConcurrentUpdateFailedError,
    DomainException,
    InvalidLicenseIdError,
    InvalidProductError,
    KeyUnavailableError,
    SigningFailedError,
    StorageUnavailableError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Seconds a client should wait before retrying a contended revocation
RETRY_AFTER_SECONDS = 1

DOMAIN_STATUS_CODES = {
    InvalidProductError: status.HTTP_400_BAD_REQUEST,
    InvalidLicenseIdError: status.HTTP_400_BAD_REQUEST,
    KeyUnavailableError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    SigningFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConcurrentUpdateFailedError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        response.data = {
            "error": {
                "code": exc.default_code.upper().replace("-", "_"),
                "message": _api_message(response.data, exc),
            }
        }
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _api_message(data: Any, exc: APIException) -> Any:
    """Return 'detail' for plain API errors, field errors for validation failures."""
    if isinstance(data, dict) and "detail" in data:
        return data["detail"]
    return data or exc.default_detail


def _endpoint(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return view.__class__.__name__ if view else "unknown"


def status_code_for(exc: DomainException) -> int:
    """Return the HTTP status for a domain exception."""
    for exc_type, status_code in DOMAIN_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_code_for(exc)

    if status_code >= 500:
        errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
        logger.error(
            "Domain exception: %s - %s",
            exc.code,
            exc.message,
            extra={"trace_id": trace_id},
            exc_info=exc.__cause__ is not None,
        )
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )

    response = Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)
    if isinstance(exc, ConcurrentUpdateFailedError):
        response["Retry-After"] = str(RETRY_AFTER_SECONDS)
    return response


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
