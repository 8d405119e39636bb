"""Builders for provider instances and desired state."""

from .desired_state import create_desired_state_from_config, create_plugin_settings_from_config
from .provider import create_provider_from_config

__all__ = [
    "create_desired_state_from_config",
    "create_plugin_settings_from_config",
    "create_provider_from_config",
]
