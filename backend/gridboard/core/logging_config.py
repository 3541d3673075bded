"""structlog setup.

Service code logs through ``logging.getLogger(__name__)``; the HTTP layer
uses structlog loggers directly. Both end up in one handler on stdout, as
console lines in development and JSON everywhere else. Per-request context
(request_id, method, path) is merged from structlog contextvars.
"""

import logging
import sys

import structlog

from gridboard.core.config import settings

# Loggers that are chatty at INFO and add nothing to request logs.
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _add_service(_logger, _method_name, event_dict):
    event_dict.setdefault("service", "gridboard")
    event_dict.setdefault("env", settings.app_env)
    return event_dict


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Install the structlog-backed root handler. Safe to call more than once."""
    if json_logs is None:
        json_logs = settings.app_env != "development"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel((level or settings.log_level).upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
