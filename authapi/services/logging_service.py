"""structlog setup: JSON lines, correlation ids, and credential redaction."""

import logging
import sys
from typing import Any, Dict, Mapping

import structlog

REDACTED = "REDACTED"

# Substrings matched against lower-cased keys
SENSITIVE_KEYS = (
    "authorization",
    "secret",
    "password",
    "access_token",
    "refresh_token",
    "token_hash",
    "cookie",
)


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _redact_mapping(values: Mapping[str, Any]) -> Dict[str, Any]:
    redacted = {}
    for key, value in values.items():
        if _is_sensitive(str(key)):
            redacted[key] = REDACTED
        elif isinstance(value, Mapping):
            redacted[key] = _redact_mapping(value)
        else:
            redacted[key] = value
    return redacted


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Replace credentials with ``REDACTED`` before rendering.

    Top-level keys are matched against SENSITIVE_KEYS; nested mappings such
    as a ``headers`` dict are walked the same way.
    """
    for key, value in list(event_dict.items()):
        if _is_sensitive(key):
            event_dict[key] = REDACTED
        elif isinstance(value, Mapping):
            event_dict[key] = _redact_mapping(value)

    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        json_logs: Render JSON lines; False switches to the console renderer
            for local development
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, bound to ``logger_name`` when given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
