"""AWS S3 client implementation."""

from __future__ import annotations

import logging
import time
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import DEFAULT_REGION
from ...utils.errors import ProviderError

logger = logging.getLogger(__name__)


def api_operation_name(method_name: str) -> str:
    """Convert a boto3 method name to its S3 API operation name.

    ``get_bucket_versioning`` becomes ``GetBucketVersioning``.
    """
    return "".join(part.capitalize() for part in method_name.split("_"))


class AWSProvider:
    """AWS S3 provider implementation."""

    def __init__(
        self,
        region: str = DEFAULT_REGION,
        profile: str | None = None,
        endpoint: str | None = None,
        path_style: bool = False,
        insecure_skip_verify: bool = False,
        wait_delay: int | None = None,
        wait_max_attempts: int | None = None,
    ) -> None:
        """Initialize AWS S3 provider.

        Credentials come from the boto3 default chain (environment, shared
        config, instance metadata), optionally narrowed to a named profile.

        Args:
            region: AWS region
            profile: Optional shared-config profile name
            endpoint: Optional S3 endpoint URL for S3-compatible services
            path_style: Use path-style addressing
            insecure_skip_verify: Skip TLS verification
            wait_delay: Override for the waiter's seconds between polls
            wait_max_attempts: Override for the waiter's attempt budget
        """
        self.region = region
        self.endpoint = endpoint
        self.path_style = path_style
        self.wait_delay = wait_delay
        self.wait_max_attempts = wait_max_attempts

        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if path_style else "auto"},
        )

        session = boto3.session.Session(profile_name=profile, region_name=region)
        self.client = session.client(
            "s3",
            endpoint_url=endpoint,
            region_name=region,
            config=config,
            verify=not insecure_skip_verify,
        )

    def request(self, operation: str, **params: Any) -> dict[str, Any]:
        """Issue a single S3 API call.

        Args:
            operation: boto3 client method name (e.g. "head_bucket")
            **params: Request parameters in the S3 wire format

        Returns:
            The response dict

        Raises:
            ProviderError: If the call is rejected or fails
        """
        api_name = api_operation_name(operation)
        start_time = time.time()
        try:
            response = getattr(self.client, operation)(**params)
            metrics.api_call_total.labels(operation=api_name, result="success").inc()
            return response
        except (ClientError, BotoCoreError) as e:
            metrics.api_call_total.labels(operation=api_name, result="error").inc()
            logger.debug(f"{api_name} failed for bucket {params.get('Bucket')}: {e}")
            raise ProviderError.from_exception(api_name, e) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(operation=api_name).observe(duration)

    def wait_for(self, waiter_name: str, **params: Any) -> None:
        """Block on a botocore waiter until it succeeds.

        The polling interval and attempt budget are botocore's unless
        overridden at construction time.

        Raises:
            ProviderError: If the waiter times out or the poll fails
        """
        waiter_config: dict[str, int] = {}
        if self.wait_delay is not None:
            waiter_config["Delay"] = self.wait_delay
        if self.wait_max_attempts is not None:
            waiter_config["MaxAttempts"] = self.wait_max_attempts
        if waiter_config:
            params["WaiterConfig"] = waiter_config

        try:
            self.client.get_waiter(waiter_name).wait(**params)
        except (ClientError, BotoCoreError) as e:
            raise ProviderError.from_exception(f"Wait({waiter_name})", e) from e
