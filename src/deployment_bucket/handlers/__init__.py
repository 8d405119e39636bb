"""Handlers for deployment bucket reconciliation."""

from .base import BaseHandler
from .bucket import DeploymentBucketHandler

__all__ = ["BaseHandler", "DeploymentBucketHandler"]
