"""Builder for S3 provider instances."""

from __future__ import annotations

import os
from typing import Any, Mapping

from ..constants import DEFAULT_REGION
from ..services.aws.client import AWSProvider
from ..utils.errors import ConfigurationError
from .desired_state import lookup


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def create_provider_from_config(
    service: Mapping[str, Any] | None = None,
    region: str | None = None,
    profile: str | None = None,
    endpoint: str | None = None,
) -> AWSProvider:
    """Create an S3 provider instance.

    Explicit arguments win over the service configuration tree, which wins
    over the environment.

    Args:
        service: Parsed service configuration, for provider.region/provider.profile
        region: AWS region override
        profile: Shared-config profile override
        endpoint: S3 endpoint URL override

    Returns:
        Configured S3 provider instance

    Raises:
        ConfigurationError: If an environment override is malformed
    """
    region = (
        region
        or lookup(service, ("provider", "region"))
        or os.getenv("AWS_REGION")
        or os.getenv("AWS_DEFAULT_REGION")
        or DEFAULT_REGION
    )
    profile = profile or lookup(service, ("provider", "profile")) or os.getenv("AWS_PROFILE") or None
    endpoint = endpoint or os.getenv("DEPLOYMENT_BUCKET_ENDPOINT_URL") or None

    return AWSProvider(
        region=region,
        profile=profile,
        endpoint=endpoint,
        # S3-compatible endpoints generally need path-style addressing
        path_style=endpoint is not None,
        wait_delay=_env_int("DEPLOYMENT_BUCKET_WAIT_DELAY"),
        wait_max_attempts=_env_int("DEPLOYMENT_BUCKET_WAIT_MAX_ATTEMPTS"),
    )
