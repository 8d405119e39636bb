"""Tests for the deployment bucket reconciler."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from deployment_bucket.constants import ERROR_BANNER
from deployment_bucket.handlers.bucket import DeploymentBucketHandler
from deployment_bucket.services.aws.models import DesiredState
from deployment_bucket.utils.errors import ProviderError

MUTATIONS = {
    "create_bucket",
    "put_bucket_encryption",
    "put_bucket_versioning",
    "put_bucket_accelerate_configuration",
    "put_bucket_policy",
}

POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {
            "Effect": "Deny",
            "Principal": "*",
            "Action": "s3:*",
            "Resource": "arn:aws:s3:::b1/*",
            "Condition": {"Bool": {"aws:SecureTransport": "false"}},
        }
    ],
}


def mutations(provider) -> list[str]:
    return [op for op in provider.operations if op in MUTATIONS]


class TestScenarios:
    """End-to-end runs against an in-memory provider."""

    def test_existing_bucket_only_versioning_changes(self, fake_provider):
        """Test that only versioning is touched when only versioning drifted."""
        fake_provider.add_bucket("b1", versioning="Suspended")
        handler = DeploymentBucketHandler(fake_provider)

        result = handler.reconcile(DesiredState(bucket_name="b1", versioning_enabled=True, acceleration_enabled=False))

        assert result.succeeded
        assert mutations(fake_provider) == ["put_bucket_versioning"]
        assert fake_provider.params("put_bucket_versioning") == [
            {"Bucket": "b1", "VersioningConfiguration": {"Status": "Enabled"}}
        ]
        assert fake_provider.count("create_bucket") == 0
        assert fake_provider.count("put_bucket_accelerate_configuration") == 0

    def test_missing_bucket_with_defaults(self, fake_provider):
        """Test that a missing bucket is created and nothing else is changed."""
        handler = DeploymentBucketHandler(fake_provider)

        result = handler.reconcile(DesiredState(bucket_name="b2"))

        assert result.succeeded
        assert mutations(fake_provider) == ["create_bucket"]
        assert fake_provider.params("create_bucket") == [{"Bucket": "b2", "ACL": "private"}]
        assert fake_provider.count("wait:bucket_exists") == 1
        assert result.applied == ["Created deployment bucket 'b2'"]

    def test_create_and_wait_precede_every_other_facet(self, fake_provider):
        """Test that creation and the wait happen before any other facet call."""
        handler = DeploymentBucketHandler(fake_provider)

        handler.reconcile(
            DesiredState(
                bucket_name="b3",
                server_side_encryption="AES256",
                versioning_enabled=True,
                acceleration_enabled=True,
                policy_document=POLICY,
            )
        )

        assert fake_provider.operations[:3] == ["head_bucket", "create_bucket", "wait:bucket_exists"]
        assert fake_provider.operations[3:] == [
            "get_bucket_encryption",
            "put_bucket_encryption",
            "get_bucket_versioning",
            "put_bucket_versioning",
            "get_bucket_accelerate_configuration",
            "put_bucket_accelerate_configuration",
            "put_bucket_policy",
        ]

    def test_create_uses_region_location_constraint(self, eu_provider):
        """Test that buckets outside us-east-1 get a location constraint."""
        DeploymentBucketHandler(eu_provider).reconcile(DesiredState(bucket_name="b4"))

        assert eu_provider.params("create_bucket") == [
            {"Bucket": "b4", "ACL": "private", "CreateBucketConfiguration": {"LocationConstraint": "eu-west-1"}}
        ]


class TestIdempotence:
    """Repeated runs converge and stop mutating."""

    @pytest.mark.parametrize("enabled", [True, False])
    def test_versioning_converges(self, fake_provider, enabled):
        """Test versioning matches the desired state and a second run is a no-op."""
        fake_provider.add_bucket("b1", versioning="Suspended" if enabled else "Enabled")
        handler = DeploymentBucketHandler(fake_provider)
        desired = DesiredState(bucket_name="b1", versioning_enabled=enabled)

        handler.reconcile(desired)
        assert handler.reader.has_versioning("b1") is enabled
        assert fake_provider.count("put_bucket_versioning") == 1

        second = handler.reconcile(desired)
        assert fake_provider.count("put_bucket_versioning") == 1
        assert second.applied == []

    @pytest.mark.parametrize("enabled", [True, False])
    def test_acceleration_converges(self, fake_provider, enabled):
        """Test acceleration matches the desired state and a second run is a no-op."""
        fake_provider.add_bucket("b1", acceleration="Suspended" if enabled else "Enabled")
        handler = DeploymentBucketHandler(fake_provider)
        desired = DesiredState(bucket_name="b1", acceleration_enabled=enabled)

        handler.reconcile(desired)
        assert handler.reader.has_acceleration("b1") is enabled
        assert fake_provider.count("put_bucket_accelerate_configuration") == 1

        handler.reconcile(desired)
        assert fake_provider.count("put_bucket_accelerate_configuration") == 1

    def test_never_configured_versioning_left_alone_when_disabled(self, fake_provider):
        """Test that an unversioned bucket is not suspended needlessly."""
        fake_provider.add_bucket("b1")

        DeploymentBucketHandler(fake_provider).reconcile(DesiredState(bucket_name="b1"))

        assert mutations(fake_provider) == []

    def test_existing_bucket_is_not_recreated(self, fake_provider):
        """Test that a second run uses the bucket created by the first."""
        handler = DeploymentBucketHandler(fake_provider)
        handler.reconcile(DesiredState(bucket_name="b2"))
        handler.reconcile(DesiredState(bucket_name="b2"))

        assert fake_provider.count("create_bucket") == 1
        assert fake_provider.count("wait:bucket_exists") == 1


class TestEncryption:
    """Encryption is additive only."""

    def test_encryption_applied_when_missing(self, fake_provider):
        """Test encryption is applied once when none is configured."""
        fake_provider.add_bucket("b1")
        handler = DeploymentBucketHandler(fake_provider)
        desired = DesiredState(bucket_name="b1", server_side_encryption="aws:kms")

        result = handler.reconcile(desired)
        handler.reconcile(desired)

        assert fake_provider.params("put_bucket_encryption") == [
            {
                "Bucket": "b1",
                "ServerSideEncryptionConfiguration": {
                    "Rules": [{"ApplyServerSideEncryptionByDefault": {"SSEAlgorithm": "aws:kms"}}]
                },
            }
        ]
        assert result.applied == ["Applied SSE (aws:kms) to deployment bucket"]

    def test_existing_encryption_never_reapplied(self, fake_provider):
        """Test a different configured algorithm is left in place."""
        fake_provider.add_bucket("b1", encryption="AES256")

        DeploymentBucketHandler(fake_provider).reconcile(
            DesiredState(bucket_name="b1", server_side_encryption="aws:kms")
        )

        assert fake_provider.count("put_bucket_encryption") == 0

    def test_unmanaged_encryption_not_read(self, fake_provider):
        """Test encryption is not even queried when not declared."""
        fake_provider.add_bucket("b1")

        DeploymentBucketHandler(fake_provider).reconcile(DesiredState(bucket_name="b1"))

        assert fake_provider.count("get_bucket_encryption") == 0


class TestPolicy:
    """Policy is overwritten unconditionally."""

    def test_policy_applied_every_run(self, fake_provider):
        """Test the policy is written exactly once per run."""
        fake_provider.add_bucket("b1")
        handler = DeploymentBucketHandler(fake_provider)
        desired = DesiredState(bucket_name="b1", policy_document=POLICY)

        handler.reconcile(desired)
        assert fake_provider.count("put_bucket_policy") == 1

        handler.reconcile(desired)
        assert fake_provider.count("put_bucket_policy") == 2

    def test_no_policy_no_call(self, fake_provider):
        """Test nothing is written when no policy is declared."""
        fake_provider.add_bucket("b1")

        DeploymentBucketHandler(fake_provider).reconcile(DesiredState(bucket_name="b1"))

        assert fake_provider.count("put_bucket_policy") == 0

    def test_empty_policy_is_still_written(self, fake_provider):
        fake_provider.add_bucket("b1")

        DeploymentBucketHandler(fake_provider).reconcile(DesiredState(bucket_name="b1", policy_document={}))

        assert fake_provider.count("put_bucket_policy") == 1
        assert fake_provider.params("put_bucket_policy")[0]["Policy"] == "{}"


class TestErrorBoundary:
    """Failures end the run without propagating."""

    def test_create_failure_stops_run(self, fake_provider, caplog):
        """Test a failed create aborts every later facet and is reported once."""
        caplog.set_level(logging.INFO)
        fake_provider.fail("create_bucket", code="BucketAlreadyExists", message="The requested bucket name is not available")
        handler = DeploymentBucketHandler(fake_provider)

        result = handler.reconcile(
            DesiredState(
                bucket_name="taken",
                server_side_encryption="AES256",
                versioning_enabled=True,
                acceleration_enabled=True,
                policy_document=POLICY,
            )
        )

        assert not result.succeeded
        assert isinstance(result.error, ProviderError)
        assert result.error.code == "BucketAlreadyExists"
        assert fake_provider.operations == ["head_bucket", "create_bucket"]
        assert caplog.text.count(ERROR_BANNER) == 1
        assert "The requested bucket name is not available" in caplog.text

    def test_mid_run_failure_keeps_earlier_changes(self, fake_provider):
        """Test a versioning failure skips acceleration and policy."""
        fake_provider.add_bucket("b1")
        fake_provider.fail("put_bucket_versioning")
        handler = DeploymentBucketHandler(fake_provider)

        result = handler.reconcile(
            DesiredState(
                bucket_name="b1",
                server_side_encryption="AES256",
                versioning_enabled=True,
                acceleration_enabled=True,
                policy_document=POLICY,
            )
        )

        assert result.error is not None
        assert result.applied == ["Applied SSE (AES256) to deployment bucket"]
        assert fake_provider.count("get_bucket_accelerate_configuration") == 0
        assert fake_provider.count("put_bucket_policy") == 0

    def test_unexpected_exception_is_contained(self, fake_provider):
        """Test a non-provider exception is reported, not raised."""
        reader = MagicMock()
        reader.exists.side_effect = RuntimeError("boom")
        handler = DeploymentBucketHandler(fake_provider, reader=reader)

        result = handler.reconcile(DesiredState(bucket_name="b1"))

        assert isinstance(result.error, RuntimeError)
        assert fake_provider.calls == []

    def test_wait_failure_is_not_fatal(self, fake_provider, caplog):
        """Test the run continues after the waiter gives up."""
        caplog.set_level(logging.INFO)
        fake_provider.wait_error = ProviderError("Wait(bucket_exists)", "Max attempts exceeded")
        handler = DeploymentBucketHandler(fake_provider)

        result = handler.reconcile(DesiredState(bucket_name="b2", versioning_enabled=True))

        assert result.succeeded
        assert fake_provider.count("put_bucket_versioning") == 1
        assert "Unable to wait for 'bucket_exists' - Max attempts exceeded" in caplog.text


class TestStatusLines:
    """Human-readable output of a run."""

    def test_status_lines_logged(self, fake_provider, caplog):
        """Test each applied change emits its status line."""
        caplog.set_level(logging.INFO)
        fake_provider.add_bucket("b1", versioning="Enabled", acceleration="Suspended")
        handler = DeploymentBucketHandler(fake_provider)

        handler.reconcile(
            DesiredState(bucket_name="b1", versioning_enabled=False, acceleration_enabled=True, policy_document=POLICY)
        )

        assert "Using deployment bucket 'b1'" in caplog.text
        assert "Suspended versioning on deployment bucket" in caplog.text
        assert "Enabled acceleration on deployment bucket" in caplog.text
        assert "Applied deployment bucket policy" in caplog.text

    def test_creating_line_logged(self, fake_provider, caplog):
        """Test creation is announced before it happens."""
        caplog.set_level(logging.INFO)

        DeploymentBucketHandler(fake_provider).reconcile(DesiredState(bucket_name="b2"))

        assert "Creating deployment bucket 'b2'..." in caplog.text

    def test_missing_bucket_name_is_noop(self, fake_provider):
        """Test nothing happens without a bucket name."""
        result = DeploymentBucketHandler(fake_provider).reconcile(DesiredState(bucket_name=None))

        assert result.skipped
        assert result.succeeded
        assert fake_provider.calls == []
