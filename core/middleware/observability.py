"""
Observability middleware.

Adds correlation IDs and one structured log line per request phase.
Requests against a single license carry its ID in every log record.
"""

import logging
import re
import time
import uuid
from typing import Callable, Dict, Optional, Tuple

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

LICENSE_PATH = re.compile(r"^/api/v1/licenses/(?P<license_id>[^/]+)/")


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    This middleware:
    1. Reuses or generates the X-Correlation-ID of a request
    2. Logs request start and completion with duration
    3. Echoes correlation and trace IDs in response headers
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request and add observability.

        Args:
            request: HTTP request

        Returns:
            HTTP response with observability headers
        """
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore

        trace_id, span_id = _current_trace()
        if trace_id:
            request.trace_id = trace_id  # type: ignore

        context = _request_context(request, correlation_id, trace_id, span_id)
        logger.info("Request started", extra=context)
        started = time.perf_counter()

        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={**context, "error_type": type(e).__name__, "duration_ms": _ms(started)},
                exc_info=True,
            )
            raise

        duration_ms = _ms(started)
        context.update(status_code=response.status_code, duration_ms=duration_ms)
        if getattr(request, "operator_authenticated", False):
            context["operator"] = True

        if response.status_code >= 500:
            logger.error("Request completed with server error", extra=context)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", extra=context)
        else:
            logger.info("Request completed", extra=context)

        response["X-Correlation-ID"] = correlation_id
        response["X-Request-Duration"] = f"{duration_ms / 1000:.3f}"
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response


def _current_trace() -> Tuple[Optional[str], Optional[str]]:
    """Return hex trace and span ids of the active span, if any."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None, None
    return format_trace_id(span_context.trace_id), format_span_id(span_context.span_id)


def _request_context(
    request: HttpRequest,
    correlation_id: str,
    trace_id: Optional[str],
    span_id: Optional[str],
) -> Dict[str, object]:
    context: Dict[str, object] = {
        "correlation_id": correlation_id,
        "method": request.method,
        "path": request.path,
        "remote_addr": request.META.get("REMOTE_ADDR"),
    }
    match = LICENSE_PATH.match(request.path)
    if match:
        context["license_id"] = match.group("license_id")
    if trace_id:
        context["trace_id"] = trace_id
        context["span_id"] = span_id
    return context


def _ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
