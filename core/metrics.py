"""
Prometheus metrics for the licensing service.

Custom metrics for issuance, revocation and HTTP traffic.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
    ["product"],
)

# Revocation metrics
revocations_total = Counter(
    "revocations_total",
    "Total revoke calls by outcome",
    ["outcome"],
)

revocation_conflicts_total = Counter(
    "revocation_conflicts_total",
    "Conditional writes to the revocation record rejected by a version mismatch",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
