"""Builder for the desired state of the deployment bucket."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from packaging.version import InvalidVersion, Version

from ..constants import (
    CONFIG_PATH_DEPLOYMENT_BUCKET,
    CONFIG_PATH_DEPLOYMENT_BUCKET_LEGACY,
    CONFIG_PATH_PLUGIN,
    DEPLOYMENT_BUCKET_FIELD_MIN_VERSION,
)
from ..services.aws.models import DesiredState, PluginSettings
from ..utils.errors import ConfigurationError


def lookup(tree: Mapping[str, Any] | None, path: Sequence[str], default: Any = None) -> Any:
    """Walk ``path`` through nested mappings, returning ``default`` on any gap."""
    node: Any = tree
    for step in path:
        if not isinstance(node, Mapping):
            return default
        node = node.get(step)
        if node is None:
            return default
    return node


def _as_bool(value: Any, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ConfigurationError(f"{field} must be a boolean, got {type(value).__name__}")


def _as_optional_str(value: Any, field: str) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field} must be a string, got {type(value).__name__}")
    return value


def deployment_bucket_path(host_version: str | None) -> tuple[str, ...]:
    """Pick the config path holding the bucket declaration for a host tool version.

    Args:
        host_version: Version of the deployment tool, or None for a current one

    Returns:
        Path to the deployment bucket declaration

    Raises:
        ConfigurationError: If the version cannot be parsed
    """
    if host_version is None:
        return CONFIG_PATH_DEPLOYMENT_BUCKET
    try:
        version = Version(host_version)
    except InvalidVersion as e:
        raise ConfigurationError(f"Invalid host tool version: {host_version!r}") from e
    if version >= Version(DEPLOYMENT_BUCKET_FIELD_MIN_VERSION):
        return CONFIG_PATH_DEPLOYMENT_BUCKET
    return CONFIG_PATH_DEPLOYMENT_BUCKET_LEGACY


def create_plugin_settings_from_config(
    service: Mapping[str, Any],
    host_version: str | None = None,
) -> PluginSettings:
    """Create plugin settings from a service configuration tree.

    Args:
        service: Parsed service configuration (e.g. serverless.yml)
        host_version: Version of the deployment tool

    Returns:
        PluginSettings with a normalized DesiredState

    Raises:
        ConfigurationError: If a field has the wrong type
    """
    # Bucket identity and encryption come from the deployment target declaration
    deployment_bucket = lookup(service, deployment_bucket_path(host_version), {})
    if not isinstance(deployment_bucket, Mapping):
        # A plain string is the bucket name with no further settings
        if isinstance(deployment_bucket, str):
            deployment_bucket = {"name": deployment_bucket}
        else:
            raise ConfigurationError("provider.deploymentBucket must be a mapping or a bucket name")

    # Everything else comes from the plugin's own namespace
    plugin_config = lookup(service, CONFIG_PATH_PLUGIN, {})
    if not isinstance(plugin_config, Mapping):
        raise ConfigurationError("custom.deploymentBucket must be a mapping")

    policy = plugin_config.get("policy")
    if policy is not None and not isinstance(policy, Mapping):
        raise ConfigurationError(f"custom.deploymentBucket.policy must be a mapping, got {type(policy).__name__}")

    desired_state = DesiredState(
        bucket_name=_as_optional_str(deployment_bucket.get("name"), "provider.deploymentBucket.name"),
        server_side_encryption=_as_optional_str(
            deployment_bucket.get("serverSideEncryption"),
            "provider.deploymentBucket.serverSideEncryption",
        ),
        versioning_enabled=_as_bool(plugin_config.get("versioning"), "custom.deploymentBucket.versioning", False),
        acceleration_enabled=_as_bool(plugin_config.get("accelerate"), "custom.deploymentBucket.accelerate", False),
        policy_document=policy,
    )

    return PluginSettings(
        desired_state=desired_state,
        enabled=_as_bool(plugin_config.get("enabled"), "custom.deploymentBucket.enabled", True),
    )


def create_desired_state_from_config(
    service: Mapping[str, Any],
    host_version: str | None = None,
) -> DesiredState:
    """Create a DesiredState from a service configuration tree."""
    return create_plugin_settings_from_config(service, host_version).desired_state
