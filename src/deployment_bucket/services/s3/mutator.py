"""Issue configuration changes against a bucket."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from ... import metrics
from ...constants import DEFAULT_ACL, DEFAULT_REGION, STATUS_ENABLED, STATUS_SUSPENDED
from ...utils.errors import ProviderError
from .base import S3Provider

logger = logging.getLogger(__name__)

# Lowercase/camelCase policy keys accepted in configuration, mapped to the S3 wire format
POLICY_KEYS = {
    "version": "Version",
    "id": "Id",
    "statement": "Statement",
}

STATEMENT_KEYS = {
    "sid": "Sid",
    "effect": "Effect",
    "principal": "Principal",
    "notPrincipal": "NotPrincipal",
    "action": "Action",
    "notAction": "NotAction",
    "resource": "Resource",
    "notResource": "NotResource",
    "condition": "Condition",
}


def _convert_principal(principal: Any) -> Any:
    # A bare ARN is shorthand for an AWS principal
    if isinstance(principal, str) and principal.startswith("arn:"):
        return {"AWS": principal}
    return principal


def convert_policy_to_aws_format(policy: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a policy written with lowercase keys to the S3 policy format.

    Keys already in PascalCase are kept as they are, so a policy copied from
    the AWS documentation passes through unchanged.
    """
    aws_policy: dict[str, Any] = {}
    for key, value in policy.items():
        aws_policy[POLICY_KEYS.get(key, key)] = value

    statements = aws_policy.get("Statement")
    if isinstance(statements, Mapping):
        statements = [statements]
    if isinstance(statements, list):
        aws_statements = []
        for stmt in statements:
            aws_stmt = {}
            for key, value in stmt.items():
                if key in STATEMENT_KEYS:
                    aws_key = STATEMENT_KEYS[key]
                    if aws_key in ("Principal", "NotPrincipal"):
                        value = _convert_principal(value)
                    aws_stmt[aws_key] = value
                else:
                    aws_stmt[key] = value
            aws_statements.append(aws_stmt)
        aws_policy["Statement"] = aws_statements

    return aws_policy


class RemoteStateMutator:
    """Idempotent create/update calls, one per facet.

    Every method raises ProviderError when the provider rejects the change.
    """

    def __init__(self, provider: S3Provider) -> None:
        self.provider = provider

    def _mutate(self, operation: str, metric_name: str, **params: Any) -> None:
        try:
            self.provider.request(operation, **params)
        except ProviderError:
            metrics.bucket_operations_total.labels(operation=metric_name, result="failed").inc()
            raise
        metrics.bucket_operations_total.labels(operation=metric_name, result="success").inc()

    def create(self, name: str) -> None:
        """Create a private bucket in the provider's region."""
        params: dict[str, Any] = {"Bucket": name, "ACL": DEFAULT_ACL}
        region = getattr(self.provider, "region", DEFAULT_REGION)
        if region and region != DEFAULT_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}

        self._mutate("create_bucket", "create", **params)

    def apply_encryption(self, name: str, algorithm: str) -> None:
        """Set the default server-side encryption algorithm."""
        self._mutate(
            "put_bucket_encryption",
            "put_encryption",
            Bucket=name,
            ServerSideEncryptionConfiguration={
                "Rules": [
                    {
                        "ApplyServerSideEncryptionByDefault": {
                            "SSEAlgorithm": algorithm,
                        }
                    }
                ]
            },
        )

    def set_versioning(self, name: str, enabled: bool) -> None:
        """Set versioning to Enabled or Suspended."""
        self._mutate(
            "put_bucket_versioning",
            "put_versioning",
            Bucket=name,
            VersioningConfiguration={"Status": STATUS_ENABLED if enabled else STATUS_SUSPENDED},
        )

    def set_acceleration(self, name: str, enabled: bool) -> None:
        """Set transfer acceleration to Enabled or Suspended."""
        self._mutate(
            "put_bucket_accelerate_configuration",
            "put_acceleration",
            Bucket=name,
            AccelerateConfiguration={"Status": STATUS_ENABLED if enabled else STATUS_SUSPENDED},
        )

    def apply_policy(self, name: str, policy: Mapping[str, Any]) -> None:
        """Overwrite the bucket policy."""
        policy_json = json.dumps(convert_policy_to_aws_format(policy))
        logger.debug(f"Policy JSON for bucket {name}: {policy_json}")
        self._mutate("put_bucket_policy", "put_policy", Bucket=name, Policy=policy_json)
