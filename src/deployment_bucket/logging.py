"""Structured logging configuration for the deployment bucket reconciler."""

import json
import logging
import sys
from typing import Any

from .constants import CONTROLLER_NAME

# Toggled by setup_structured_logging; read by log_bucket_event
_json_output = False


def setup_structured_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Configure logging for status lines, optionally as JSON events.

    Args:
        level: Root log level
        json_output: Emit one JSON document per event instead of plain status lines
    """
    global _json_output
    _json_output = json_output

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # botocore is very chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def json_output_enabled() -> bool:
    """Return whether structured JSON events are enabled."""
    return _json_output


def log_bucket_event(
    logger: logging.Logger,
    bucket_name: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured bucket event."""
    log_data = {
        "controller": CONTROLLER_NAME,
        "bucket": bucket_name,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(sanitize_secrets(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Remove secret fields from log data."""
    secret_fields = {"access_key", "secret_key", "session_token", "password"}
    sanitized = log_data.copy()
    for field in secret_fields:
        if field in sanitized:
            sanitized[field] = "***REDACTED***"
    return sanitized
