"""Models for deployment bucket reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class DesiredState:
    """Declared target configuration for the deployment bucket.

    ``None`` for ``server_side_encryption`` or ``policy_document`` means the
    facet is not managed at all.
    """

    bucket_name: str | None
    server_side_encryption: str | None = None
    versioning_enabled: bool = False
    acceleration_enabled: bool = False
    policy_document: Mapping[str, Any] | None = None


@dataclass
class ReconcileResult:
    """Outcome of a single reconciliation run."""

    bucket_name: str | None
    applied: list[str] = field(default_factory=list)
    error: Exception | None = None
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return bool(self.applied)


@dataclass(frozen=True)
class PluginSettings:
    """Everything read from the configuration tree, decided once at startup."""

    desired_state: DesiredState
    enabled: bool = True
