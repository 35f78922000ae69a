"""Prometheus metrics for filedrop.

Usage::

    from filedrop.observability.metrics import FILE_OPERATIONS_TOTAL

    FILE_OPERATIONS_TOTAL.labels(operation="upload", outcome="ok").inc()
"""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS_TOTAL = Counter(
    "http_server_requests_total",
    "Total HTTP requests by method, path pattern, and status code.",
    labelnames=["method", "path", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request latency in seconds.",
    labelnames=["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "http_server_requests_in_flight",
    "Number of HTTP requests currently being processed.",
    registry=REGISTRY,
)

# ---------------------------------------------------------------------------
# File operation metrics
# ---------------------------------------------------------------------------

FILE_OPERATIONS_TOTAL = Counter(
    "filedrop_file_operations_total",
    "File operations by operation name and outcome (ok or error class).",
    labelnames=["operation", "outcome"],
    registry=REGISTRY,
)

UPLOADED_BYTES_TOTAL = Counter(
    "filedrop_uploaded_bytes_total",
    "Bytes written to the storage root by uploads.",
    registry=REGISTRY,
)


def metrics_text() -> tuple[bytes, str]:
    """Generate Prometheus exposition text and content-type header."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
