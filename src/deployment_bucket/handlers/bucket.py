"""Handler that reconciles the deployment bucket against its desired state."""

from __future__ import annotations

import time

from .. import metrics
from ..constants import (
    EVENT_REASON_ACCELERATION_UPDATED,
    EVENT_REASON_BUCKET_CREATED,
    EVENT_REASON_BUCKET_EXISTS,
    EVENT_REASON_ENCRYPTION_APPLIED,
    EVENT_REASON_POLICY_APPLIED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_RECONCILE_SUCCEEDED,
    EVENT_REASON_VERSIONING_UPDATED,
    EVENT_REASON_WAIT_FAILED,
    FACET_ACCELERATION,
    FACET_ENCRYPTION,
    FACET_EXISTENCE,
    FACET_POLICY,
    FACET_VERSIONING,
)
from ..services.aws.models import DesiredState, ReconcileResult
from ..services.s3.base import S3Provider
from ..services.s3.mutator import RemoteStateMutator
from ..services.s3.reader import RemoteStateReader
from ..services.s3.waiter import WaitHelper
from ..tracing import set_span_status, trace_span
from .base import BaseHandler


class DeploymentBucketHandler(BaseHandler):
    """Single-pass reconciler for the deployment bucket.

    Facets are handled strictly in order: existence, encryption, versioning,
    acceleration, policy. Each decision re-reads the live state of its own
    facet right before acting on it. The first failure aborts the remaining
    steps and is reported, never raised.
    """

    def __init__(
        self,
        provider: S3Provider,
        reader: RemoteStateReader | None = None,
        mutator: RemoteStateMutator | None = None,
        waiter: WaitHelper | None = None,
    ) -> None:
        super().__init__()
        self.reader = reader or RemoteStateReader(provider)
        self.mutator = mutator or RemoteStateMutator(provider)
        self.waiter = waiter or WaitHelper(provider)

    def reconcile(self, desired: DesiredState) -> ReconcileResult:
        """Converge the bucket to ``desired``.

        Args:
            desired: Target configuration, read-only for the whole run

        Returns:
            ReconcileResult listing the applied changes and any error
        """
        bucket_name = desired.bucket_name
        result = ReconcileResult(bucket_name=bucket_name)

        if not bucket_name:
            self.logger.debug("No deployment bucket declared, nothing to reconcile")
            result.skipped = True
            return result

        metrics.reconcile_total.labels(result="started").inc()
        self.log_info(bucket_name, f"Reconciling deployment bucket '{bucket_name}'",
                      reason=EVENT_REASON_RECONCILE_STARTED)

        start_time = time.time()
        with trace_span("reconcile_deployment_bucket", attributes={"bucket.name": bucket_name}):
            try:
                self._reconcile_existence(desired, result)
                self._reconcile_encryption(desired, result)
                self._reconcile_versioning(desired, result)
                self._reconcile_acceleration(desired, result)
                self._reconcile_policy(desired, result)
            except Exception as e:
                result.error = e
                self.handle_reconciliation_error(bucket_name, e)
                set_span_status(False, str(e))
            else:
                metrics.reconcile_total.labels(result="success").inc()
                self.log_info(
                    bucket_name,
                    f"Deployment bucket '{bucket_name}' reconciled ({len(result.applied)} change(s))",
                    reason=EVENT_REASON_RECONCILE_SUCCEEDED,
                    changes=result.applied,
                )
                set_span_status(True)
            finally:
                metrics.reconcile_duration_seconds.observe(time.time() - start_time)

        return result

    def _applied(self, result: ReconcileResult, facet: str, message: str, reason: str) -> None:
        result.applied.append(message)
        self.log_info(result.bucket_name or "", message, event="changed", reason=reason, facet=facet)

    def _reconcile_existence(self, desired: DesiredState, result: ReconcileResult) -> None:
        name = desired.bucket_name
        with trace_span("reconcile_existence", attributes={"bucket.name": name}):
            if self.reader.exists(name):
                self.log_info(name, f"Using deployment bucket '{name}'", reason=EVENT_REASON_BUCKET_EXISTS)
                return

            metrics.drift_detected_total.labels(facet=FACET_EXISTENCE).inc()
            self.log_info(name, f"Creating deployment bucket '{name}'...")
            self.mutator.create(name)
            result.applied.append(f"Created deployment bucket '{name}'")

            if not self.waiter.wait_until_exists(name):
                # Later facet calls surface the problem if the bucket really is not there
                self.log_warning(name, f"Deployment bucket '{name}' not confirmed yet, continuing",
                                 reason=EVENT_REASON_WAIT_FAILED)
            else:
                self.log_info(name, f"Created deployment bucket '{name}'", reason=EVENT_REASON_BUCKET_CREATED)

    def _reconcile_encryption(self, desired: DesiredState, result: ReconcileResult) -> None:
        name = desired.bucket_name
        algorithm = desired.server_side_encryption
        if not algorithm:
            return

        with trace_span("reconcile_encryption", attributes={"bucket.name": name}):
            # Encryption is additive only: an existing configuration is never replaced
            if self.reader.has_encryption(name):
                return

            metrics.drift_detected_total.labels(facet=FACET_ENCRYPTION).inc()
            self.mutator.apply_encryption(name, algorithm)
            self._applied(result, FACET_ENCRYPTION, f"Applied SSE ({algorithm}) to deployment bucket",
                          EVENT_REASON_ENCRYPTION_APPLIED)

    def _reconcile_versioning(self, desired: DesiredState, result: ReconcileResult) -> None:
        name = desired.bucket_name
        enabled = desired.versioning_enabled
        with trace_span("reconcile_versioning", attributes={"bucket.name": name}):
            if self.reader.has_versioning(name) == enabled:
                return

            metrics.drift_detected_total.labels(facet=FACET_VERSIONING).inc()
            self.mutator.set_versioning(name, enabled)
            message = "Enabled versioning on deployment bucket" if enabled else "Suspended versioning on deployment bucket"
            self._applied(result, FACET_VERSIONING, message, EVENT_REASON_VERSIONING_UPDATED)

    def _reconcile_acceleration(self, desired: DesiredState, result: ReconcileResult) -> None:
        name = desired.bucket_name
        enabled = desired.acceleration_enabled
        with trace_span("reconcile_acceleration", attributes={"bucket.name": name}):
            if self.reader.has_acceleration(name) == enabled:
                return

            metrics.drift_detected_total.labels(facet=FACET_ACCELERATION).inc()
            self.mutator.set_acceleration(name, enabled)
            message = (
                "Enabled acceleration on deployment bucket"
                if enabled
                else "Suspended acceleration on deployment bucket"
            )
            self._applied(result, FACET_ACCELERATION, message, EVENT_REASON_ACCELERATION_UPDATED)

    def _reconcile_policy(self, desired: DesiredState, result: ReconcileResult) -> None:
        name = desired.bucket_name
        if desired.policy_document is None:
            return

        with trace_span("reconcile_policy", attributes={"bucket.name": name}):
            # Not diffed against the live policy: always overwritten
            self.mutator.apply_policy(name, desired.policy_document)
            self._applied(result, FACET_POLICY, "Applied deployment bucket policy", EVENT_REASON_POLICY_APPLIED)
