"""Base handler class with common logging and error reporting."""

from __future__ import annotations

import logging
from typing import Any

from .. import metrics
from ..constants import ERROR_BANNER, EVENT_REASON_RECONCILE_FAILED
from ..logging import json_output_enabled, log_bucket_event
from ..utils.errors import sanitize_exception


class BaseHandler:
    """Status-line and error-block reporting shared by handlers."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def _log(
        self,
        level: int,
        bucket_name: str,
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        if json_output_enabled():
            log_bucket_event(self.logger, bucket_name, event, reason, message, level=level, **kwargs)
        else:
            self.logger.log(level, message)

    def log_info(
        self,
        bucket_name: str,
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log a human-readable status line.

        Args:
            bucket_name: Bucket the line refers to
            message: Status line
            event: Event type (default: "info")
            reason: Reason for the event (default: "Info")
            **kwargs: Additional fields for the structured event
        """
        self._log(logging.INFO, bucket_name, message, event, reason, **kwargs)

    def log_warning(
        self,
        bucket_name: str,
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning status line."""
        self._log(logging.WARNING, bucket_name, message, event, reason, **kwargs)

    def log_error(
        self,
        bucket_name: str,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error with sanitized details.

        Args:
            bucket_name: Bucket the error refers to
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields for the structured event
        """
        log_data = kwargs.copy()
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__
        self._log(logging.ERROR, bucket_name, message, event, reason, **log_data)

    def handle_reconciliation_error(self, bucket_name: str, error: Exception) -> None:
        """Report a failed run once, as a single delimited block.

        The error is counted and logged but never re-raised.
        """
        sanitized_error = sanitize_exception(error)
        error_type = type(error).__name__

        metrics.error_total.labels(error_type=error_type).inc()
        metrics.reconcile_total.labels(result="error").inc()

        self.log_error(
            bucket_name,
            f"\n{ERROR_BANNER}\n{sanitized_error}\n",
            error=error,
            reason=EVENT_REASON_RECONCILE_FAILED,
        )
