"""
Operator API key authentication middleware.

Revocation is an operator action; this middleware requires an operator
API key on revocation writes when keys are configured.
"""

import hashlib
import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class OperatorAPIKeyMiddleware(MiddlewareMixin):
    """
    Middleware for operator API key authentication.

    This middleware:
    1. Matches POST requests to /api/v1/licenses/<id>/revoke
    2. Compares the SHA-256 of the X-API-Key header with OPERATOR_API_KEY_HASHES
    3. Returns 401 Unauthorized if authentication fails

    With no hashes configured, revocation is left open (local development).
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not self._requires_operator(request):
            return None

        key_hashes = getattr(settings, "OPERATOR_API_KEY_HASHES", [])
        if not key_hashes:
            return None

        api_key = request.headers.get("X-API-Key") or request.headers.get(
            "Authorization", ""
        ).replace("Bearer ", "")

        if not api_key:
            return JsonResponse(
                {"error": {"code": "MISSING_API_KEY", "message": "Provide X-API-Key header."}},
                status=401,
            )

        api_key_hash = hashlib.sha256(api_key.encode()).hexdigest()
        if not any(hmac.compare_digest(api_key_hash, known) for known in key_hashes):
            logger.warning("Invalid operator API key attempted: %s...", api_key[:4])
            return JsonResponse(
                {"error": {"code": "INVALID_API_KEY", "message": "Invalid API key"}},
                status=401,
            )

        request.operator_authenticated = True  # type: ignore
        return None

    def _requires_operator(self, request: HttpRequest) -> bool:
        """Check if the request is a revocation write."""
        return (
            request.method == "POST"
            and request.path_info.startswith("/api/v1/licenses/")
            and request.path_info.rstrip("/").endswith("/revoke")
        )
