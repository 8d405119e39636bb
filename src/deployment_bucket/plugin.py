"""Activation gate: decides whether the reconciler runs, and when."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from .builders.desired_state import create_plugin_settings_from_config
from .builders.provider import create_provider_from_config
from .constants import HOOK_BEFORE_VALIDATE, PACKAGE_COMMAND
from .handlers.base import BaseHandler
from .handlers.bucket import DeploymentBucketHandler
from .services.aws.models import ReconcileResult
from .services.s3.base import S3Provider

logger = logging.getLogger(__name__)


class DeploymentBucketPlugin:
    """Registers the deployment bucket reconciler against a lifecycle hook.

    The decision is made once, at construction: ``hooks`` is left empty when
    the plugin is disabled, when no bucket is declared, or when the current
    operation only packages the service.
    """

    def __init__(
        self,
        service: Mapping[str, Any],
        commands: Sequence[str] = (),
        host_version: str | None = None,
        provider_factory: Callable[[], S3Provider] | None = None,
    ) -> None:
        """Initialize the plugin.

        Args:
            service: Parsed service configuration tree
            commands: Commands of the current deployment tool invocation
            host_version: Version of the deployment tool
            provider_factory: Builds the S3 provider when the hook fires
        """
        self.settings = create_plugin_settings_from_config(service, host_version)
        self.desired_state = self.settings.desired_state
        self.provider_factory = provider_factory or (lambda: create_provider_from_config(service))
        self.hooks: dict[str, Callable[[], ReconcileResult]] = {}

        if not self.settings.enabled:
            logger.debug("Deployment bucket plugin disabled by configuration")
            return

        if not self.desired_state.bucket_name:
            logger.debug("No deployment bucket declared, plugin inactive")
            return

        if PACKAGE_COMMAND in commands:
            logger.debug("Package-only invocation, not touching the deployment bucket")
            return

        self.hooks[HOOK_BEFORE_VALIDATE] = self.apply_deployment_bucket

    @property
    def active(self) -> bool:
        return bool(self.hooks)

    def apply_deployment_bucket(self) -> ReconcileResult:
        """Run one reconciliation of the deployment bucket.

        Failures building the provider (unknown profile, malformed overrides)
        are reported like any other failed run and never raised.
        """
        try:
            provider = self.provider_factory()
        except Exception as e:
            bucket_name = self.desired_state.bucket_name
            BaseHandler().handle_reconciliation_error(bucket_name or "", e)
            return ReconcileResult(bucket_name=bucket_name, error=e)

        handler = DeploymentBucketHandler(provider)
        return handler.reconcile(self.desired_state)

    def run_hook(self, hook: str) -> ReconcileResult | None:
        """Fire ``hook`` if registered; returns None when nothing ran."""
        callback = self.hooks.get(hook)
        if callback is None:
            return None
        return callback()
