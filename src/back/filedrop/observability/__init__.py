"""Observability infrastructure for filedrop.

Provides structured logging, Prometheus metrics, and request-ID
correlation middleware for the file API.

Quick start::

    from filedrop.observability import configure_logging, get_logger
    from filedrop.observability.middleware import (
        MetricsMiddleware,
        RequestIdMiddleware,
        RequestLoggingMiddleware,
    )

    configure_logging(config.log_level, config.log_format)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)
"""

from .logging import configure_logging, get_logger, request_id_ctx
from .metrics import metrics_text

__all__ = [
    "configure_logging",
    "get_logger",
    "metrics_text",
    "request_id_ctx",
]
