"""Base S3 provider interface."""

from __future__ import annotations

from typing import Any, Protocol


class S3Provider(Protocol):
    """Protocol defining the provider calls the reconciler depends on."""

    region: str

    def request(self, operation: str, **params: Any) -> dict[str, Any]:
        """Issue a single S3 API call.

        Raises:
            ProviderError: If the provider rejects or fails the call
        """
        ...

    def wait_for(self, waiter_name: str, **params: Any) -> None:
        """Block on the provider's native waiter until it succeeds.

        Raises:
            ProviderError: If the waiter times out or the poll fails
        """
        ...
