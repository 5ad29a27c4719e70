"""Structured logging configuration for the Stream API client."""

import logging
import os
import sys
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

import structlog
from structlog.types import Processor

API_KEY_HEADER = "stream-api-master-key"


def _is_development() -> bool:
    """Check if running in development mode."""
    from .config import get_settings

    return get_settings().debug or os.getenv("ENV", "development") == "development"


def _add_app_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> Mapping[str, Any] | str | bytes | bytearray | tuple[Any, ...]:
    event_dict["app"] = "stream_client"
    return event_dict


def _redact_api_key(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> Mapping[str, Any] | str | bytes | bytearray | tuple[Any, ...]:
    """Mask the master key wherever request headers end up in a log entry."""
    headers = event_dict.get("headers")
    if isinstance(headers, Mapping) and API_KEY_HEADER in headers:
        event_dict["headers"] = {**headers, API_KEY_HEADER: "***"}
    return event_dict


def get_processors() -> list[Processor]:
    """Console output while developing, JSON lines otherwise."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_context,
        _redact_api_key,
    ]

    if _is_development():
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return processors


def _resolve_level(level: Optional[str]) -> int:
    if level is None:
        from .config import get_settings

        level = get_settings().log_level
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structured logging at ``level`` (defaults to LOG_LEVEL).

    Safe to call repeatedly: later calls change the root logger level even
    after handlers have been installed.
    """
    resolved = _resolve_level(level)
    if not structlog.is_configured():
        logging.basicConfig(format="%(message)s", stream=sys.stderr)
        structlog.configure(
            processors=get_processors(),
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    logging.getLogger().setLevel(resolved)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(method="GET", url=url):
            logger.info("api_request")  # Includes method and url
        logger.info("done")  # Does not include method or url
    """

    def __init__(self, **kwargs: Any):
        self.kwargs = kwargs

    def __enter__(self):
        structlog.contextvars.bind_contextvars(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        structlog.contextvars.unbind_contextvars(*self.kwargs)
        return False


__all__ = ["configure_logging", "get_logger", "LogContext"]
