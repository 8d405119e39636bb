"""Reconcile a deployment bucket's configuration against its desired state."""

from .handlers.bucket import DeploymentBucketHandler
from .plugin import DeploymentBucketPlugin
from .services.aws.models import DesiredState, PluginSettings, ReconcileResult

__version__ = "0.1.0"

__all__ = [
    "DeploymentBucketHandler",
    "DeploymentBucketPlugin",
    "DesiredState",
    "PluginSettings",
    "ReconcileResult",
]
