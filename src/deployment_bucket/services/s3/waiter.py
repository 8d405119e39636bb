"""Block until a freshly created bucket is usable."""

from __future__ import annotations

import logging

from ...constants import WAITER_BUCKET_EXISTS
from ...utils.errors import ProviderError
from .base import S3Provider

logger = logging.getLogger(__name__)


class WaitHelper:
    """Wraps the provider's native waiter; never raises."""

    def __init__(self, provider: S3Provider) -> None:
        self.provider = provider

    def wait_until_exists(self, name: str) -> bool:
        """Wait for the bucket to exist.

        Returns:
            True once the bucket is reachable, False if the waiter gave up
        """
        try:
            self.provider.wait_for(WAITER_BUCKET_EXISTS, Bucket=name)
        except ProviderError as e:
            logger.warning(f"Unable to wait for '{WAITER_BUCKET_EXISTS}' - {e.message}")
            return False
        return True
