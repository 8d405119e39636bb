"""Shared fixtures for deployment bucket tests."""

from __future__ import annotations

from typing import Any

import pytest

from deployment_bucket.services.aws.client import api_operation_name
from deployment_bucket.utils.errors import ProviderError


class FakeS3Provider:
    """In-memory S3 stand-in that records every call made through it."""

    def __init__(self, region: str = "us-east-1") -> None:
        self.region = region
        self.buckets: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[str, Exception] = {}
        self.wait_error: Exception | None = None

    def add_bucket(
        self,
        name: str,
        versioning: str | None = None,
        acceleration: str | None = None,
        encryption: str | None = None,
    ) -> None:
        self.buckets[name] = {
            "versioning": versioning,
            "acceleration": acceleration,
            "encryption": encryption,
            "policy": None,
        }

    def fail(self, operation: str, code: str = "AccessDenied", message: str = "Access Denied") -> None:
        self.failures[operation] = ProviderError(api_operation_name(operation), message, code=code)

    @property
    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]

    def count(self, operation: str) -> int:
        return self.operations.count(operation)

    def params(self, operation: str) -> list[dict[str, Any]]:
        return [params for op, params in self.calls if op == operation]

    def request(self, operation: str, **params: Any) -> dict[str, Any]:
        self.calls.append((operation, params))
        if operation in self.failures:
            raise self.failures[operation]

        name = params["Bucket"]
        bucket = self.buckets.get(name)
        api_name = api_operation_name(operation)

        if operation == "create_bucket":
            if bucket is not None:
                raise ProviderError(api_name, "Your previous request to create the named bucket succeeded",
                                    code="BucketAlreadyOwnedByYou")
            self.add_bucket(name)
            return {"Location": f"/{name}"}

        if bucket is None:
            raise ProviderError(api_name, "Not Found", code="404" if operation == "head_bucket" else "NoSuchBucket")

        if operation == "head_bucket":
            return {}
        if operation == "get_bucket_encryption":
            if bucket["encryption"] is None:
                raise ProviderError(api_name, "The server side encryption configuration was not found",
                                    code="ServerSideEncryptionConfigurationNotFoundError")
            return {
                "ServerSideEncryptionConfiguration": {
                    "Rules": [{"ApplyServerSideEncryptionByDefault": {"SSEAlgorithm": bucket["encryption"]}}]
                }
            }
        if operation == "put_bucket_encryption":
            rule = params["ServerSideEncryptionConfiguration"]["Rules"][0]
            bucket["encryption"] = rule["ApplyServerSideEncryptionByDefault"]["SSEAlgorithm"]
            return {}
        if operation == "get_bucket_versioning":
            return {"Status": bucket["versioning"]} if bucket["versioning"] else {}
        if operation == "put_bucket_versioning":
            bucket["versioning"] = params["VersioningConfiguration"]["Status"]
            return {}
        if operation == "get_bucket_accelerate_configuration":
            return {"Status": bucket["acceleration"]} if bucket["acceleration"] else {}
        if operation == "put_bucket_accelerate_configuration":
            bucket["acceleration"] = params["AccelerateConfiguration"]["Status"]
            return {}
        if operation == "put_bucket_policy":
            bucket["policy"] = params["Policy"]
            return {}
        raise AssertionError(f"Unexpected operation {operation}")

    def wait_for(self, waiter_name: str, **params: Any) -> None:
        self.calls.append((f"wait:{waiter_name}", params))
        if self.wait_error is not None:
            raise self.wait_error
        if params["Bucket"] not in self.buckets:
            raise ProviderError(f"Wait({waiter_name})", "Max attempts exceeded")


@pytest.fixture
def fake_provider() -> FakeS3Provider:
    """Create an empty in-memory S3 provider."""
    return FakeS3Provider()


@pytest.fixture
def eu_provider() -> FakeS3Provider:
    """Create an empty in-memory S3 provider outside us-east-1."""
    return FakeS3Provider(region="eu-west-1")
