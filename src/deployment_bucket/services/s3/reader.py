"""Read the current configuration of a bucket, one facet at a time."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ...constants import STATUS_ENABLED
from ...utils.errors import ProviderError
from .base import S3Provider

logger = logging.getLogger(__name__)


class RemoteStateReader:
    """Boolean probes over a bucket's live configuration.

    Every probe folds a provider failure into ``False``: an error and an
    unconfigured facet are indistinguishable to the caller. Failures that are
    not a plain "not found" are still logged at WARNING.
    """

    def __init__(self, provider: S3Provider) -> None:
        self.provider = provider

    def _probe(
        self,
        operation: str,
        name: str,
        predicate: Callable[[dict[str, Any]], bool],
    ) -> bool:
        try:
            response = self.provider.request(operation, Bucket=name)
        except ProviderError as e:
            if e.is_not_found:
                logger.debug(f"{e.operation} for bucket {name}: not found")
            else:
                logger.warning(f"Treating {e.operation} failure for bucket {name} as unset: {e}")
            return False
        return predicate(response)

    def exists(self, name: str) -> bool:
        """Check whether the bucket exists and is reachable."""
        return self._probe("head_bucket", name, lambda response: True)

    def has_encryption(self, name: str) -> bool:
        """Check whether any default encryption rule is configured."""
        return self._probe(
            "get_bucket_encryption",
            name,
            lambda response: bool(
                response.get("ServerSideEncryptionConfiguration", {}).get("Rules")
            ),
        )

    def has_versioning(self, name: str) -> bool:
        """Check whether versioning is currently Enabled."""
        return self._probe(
            "get_bucket_versioning",
            name,
            lambda response: response.get("Status") == STATUS_ENABLED,
        )

    def has_acceleration(self, name: str) -> bool:
        """Check whether transfer acceleration is currently Enabled."""
        return self._probe(
            "get_bucket_accelerate_configuration",
            name,
            lambda response: response.get("Status") == STATUS_ENABLED,
        )
