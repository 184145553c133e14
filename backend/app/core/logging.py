"""
Structured logging configuration.

Provides JSON-structured logging for production and readable logs for development.
"""
import logging
import sys
from typing import IO, Any

import structlog

from app.core.config import settings

# Fields to redact completely
SENSITIVE_FIELDS = (
    "password",
    "token",
    "api_key",
    "apikey",
    "secret",
    "authorization",
    "x-api-key",
)


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    In production: JSON format with timestamps
    In development: Readable text format
    """
    log_level = getattr(logging, settings.LOG_LEVEL)

    if settings.DEBUG:
        configure_development_logging(log_level)
    else:
        configure_production_logging(log_level)


def configure_development_logging(level: int) -> None:
    """Configure logging for development (readable format)."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
    )

    # Silence noisy SQLAlchemy engine logs
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)


def configure_production_logging(level: int, stream: IO[str] | None = None) -> None:
    """
    Configure logging for production (JSON format).

    Records from plain stdlib loggers run through the same processors as
    structlog loggers, so ``extra`` fields and the bound request id reach
    the rendered JSON after redaction.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            redact_sensitive_data,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            *shared_processors,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.format_exc_info,
            redact_sensitive_data,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)


def redact_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Redact sensitive data from logs.

    API keys, tokens and credentials are replaced outright. Other string
    values that look like issued API keys are masked.
    """
    redacted = event_dict.copy()

    for key, value in redacted.items():
        if not isinstance(key, str):
            continue
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_FIELDS):
            redacted[key] = "***REDACTED***"
        elif isinstance(value, str):
            redacted[key] = redact_string(value)

    return redacted


def redact_string(value: str) -> str:
    """Mask values that look like API keys (long alphanumeric strings)."""
    if len(value) > 20 and value.replace('_', '').replace('-', '').isalnum():
        return mask_api_key(value)
    return value


def mask_api_key(api_key: str | None) -> str:
    """Keep just enough of a key to recognise it in logs."""
    if not api_key:
        return "<empty>"
    if len(api_key) <= 12:
        return "***"
    return f"{api_key[:8]}...{api_key[-4:]}"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class LogHelper:
    """
    Helper for consistent structured logging.

    Usage:
        logger = LogHelper(__name__)
        logger.info("Logs archived", requested=3, archived=12)
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.name = name

    def _add_context(self, **kwargs: Any) -> dict[str, Any]:
        """Add standard context to all log entries."""
        context = {
            "service": "softlog-backend",
            "logger_name": self.name,
        }
        context.update(kwargs)
        return context

    def info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(message, extra=self._add_context(**kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(message, extra=self._add_context(**kwargs))
