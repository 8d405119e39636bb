"""Error types and sanitization utilities to prevent credential leakage."""

from __future__ import annotations

import re
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..constants import NOT_FOUND_ERROR_CODES


class DeploymentBucketError(Exception):
    """Base class for all deployment bucket errors."""


class ConfigurationError(DeploymentBucketError):
    """Raised when the configuration tree cannot be turned into a desired state."""


class ProviderError(DeploymentBucketError):
    """Raised when the S3 API rejects or fails a call."""

    def __init__(self, operation: str, message: str, code: str | None = None) -> None:
        self.operation = operation
        self.code = code
        self.message = message
        super().__init__(f"{operation} failed: {message}" if code is None else f"{operation} failed ({code}): {message}")

    @classmethod
    def from_exception(cls, operation: str, error: Exception) -> "ProviderError":
        """Build a ProviderError from a botocore exception.

        Args:
            operation: S3 operation name (e.g. "CreateBucket")
            error: ClientError, BotoCoreError or WaiterError raised by botocore

        Returns:
            ProviderError carrying the provider's code and message
        """
        if isinstance(error, ClientError):
            details = error.response.get("Error", {})
            code = details.get("Code")
            message = details.get("Message") or str(error)
            return cls(operation, message, code=code)
        if isinstance(error, BotoCoreError):
            return cls(operation, str(error))
        return cls(operation, str(error), code=type(error).__name__)

    @property
    def is_not_found(self) -> bool:
        """Whether the provider reported the resource as absent."""
        return self.code in NOT_FOUND_ERROR_CODES


# Patterns that might expose credentials
SENSITIVE_PATTERNS = [
    r"access[_\s]?key[_\s]?id[:\s]+([A-Z0-9]{20})",
    r"secret[_\s]?access[_\s]?key[:\s]+([A-Za-z0-9/+=]{40})",
    r"session[_\s]?token[:\s]+([A-Za-z0-9/+=]+)",
    r"X-Amz-Security-Token=([A-Za-z0-9%/+=]+)",
    r"X-Amz-Credential=([A-Za-z0-9%/+=\-_]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_key_id",
    "secret_access_key",
    "session_token",
    "password",
    "secret",
    "credentials",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:\s]+([^\s,;\)]+)",
            f"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
