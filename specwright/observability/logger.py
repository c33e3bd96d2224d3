"""
Logger configuration.

Provides configured logger with structured extras, request id injection
and field redaction.

Dependencies: logging (stdlib), specwright.configs
System role: Centralized logging configuration
"""

import json
import logging
import sys

from specwright.observability.correlation import get_correlation_id

REDACTED = "[REDACTED]"

# Always masked
SECRET_FIELDS = frozenset({"api_key", "apikey", "password", "secret", "token", "authorization"})
# Masked in production only
CONTENT_FIELDS = frozenset({"prompt", "response", "system_prompt", "user_prompt"})

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "request_id"}


class RedactionFilter(logging.Filter):
    """Mask sensitive structured fields before a record is formatted."""

    def __init__(self, redact_content: bool = False) -> None:
        super().__init__()
        self.redact_content = redact_content

    def filter(self, record: logging.LogRecord) -> bool:
        for key in list(vars(record)):
            lowered = key.lower()
            if lowered in SECRET_FIELDS or (self.redact_content and lowered in CONTENT_FIELDS):
                setattr(record, key, REDACTED)
        return True


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_correlation_id() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """Standard line format with the record's extra fields appended as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extras:
            line = f"{line} {json.dumps(extras, default=str, ensure_ascii=False)}"
        return line


def configure_logging(level: str | None = None, redact_content: bool | None = None) -> None:
    """Configure Python logging with ISO timestamp and structured format."""
    from specwright.configs import get_settings

    settings = get_settings()
    level = level or settings.log_level
    if redact_content is None:
        redact_content = settings.is_production

    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(RedactionFilter(redact_content=redact_content))
    handler.setFormatter(
        StructuredFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # Reduce noise from verbose third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
