"""Utility functions for the deployment bucket reconciler."""

from .errors import (
    ConfigurationError,
    DeploymentBucketError,
    ProviderError,
    sanitize_dict,
    sanitize_error_message,
    sanitize_exception,
)

__all__ = [
    "DeploymentBucketError",
    "ConfigurationError",
    "ProviderError",
    "sanitize_error_message",
    "sanitize_exception",
    "sanitize_dict",
]
