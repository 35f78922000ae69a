"""structlog setup for filedrop.

filedrop's own structlog loggers and plain stdlib records (uvicorn, starlette)
go through one stdout handler, so a request's access line and its
``file_uploaded``/``file_renamed`` events come out in the same format with
the same ``request_id``. Level and format come from ``APIConfig``::

    configure_logging(config.log_level, config.log_format)
    logger = get_logger(__name__)
    logger.info("file_uploaded", storage_name="report_1000.pdf", size=1024)
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog

LOG_FORMATS = ("json", "console")

# Set by RequestIdMiddleware for the lifetime of one request.
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# (level, format) currently installed on the root logger
_installed: tuple[int, str] | None = None


def _add_request_id(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Attach the current request id unless the caller bound one already."""
    rid = request_id_ctx.get()
    if rid is not None:
        event_dict.setdefault("request_id", rid)
    return event_dict


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return number


def _build_formatter(log_format: str) -> structlog.stdlib.ProcessorFormatter:
    if log_format == "console":
        # ConsoleRenderer prints tracebacks itself
        tail = [structlog.dev.ConsoleRenderer()]
    else:
        tail = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_request_id,
        ],
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Install the stdout handler and the structlog processor chain.

    Repeated calls with the same settings do nothing; different settings
    replace the handler. The structlog chain itself never changes, so
    loggers created before a reconfiguration keep working.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR).
        log_format: ``json`` for one object per line, ``console`` for
            human-readable output.

    Raises:
        ValueError: On an unknown level or format.
    """
    global _installed
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format!r}. Use one of {LOG_FORMATS}.")
    settings = (_level_number(level), log_format)
    if settings == _installed:
        return

    if _installed is None:
        structlog.configure(
            processors=[
                _add_request_id,
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.processors.StackInfoRenderer(),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
    _installed = settings

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(log_format))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings[0])

    # RequestLoggingMiddleware writes one line per request instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)
