"""
Protocols for pluggable extraction steps and document sources.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .models import PluginResult, Resource


@runtime_checkable
class Plugin(Protocol):
    """A single extraction step.

    Plugins share no base class. Anything with these two methods can be placed
    in a pipeline.
    """

    def can_handle(self, url: Optional[str]) -> bool:
        """Cheap applicability check.

        Args:
            url: URL of the resource being processed, or None for raw HTML input

        Returns:
            True if ``handle`` should be called for this resource
        """
        ...

    async def handle(self, resource: Resource) -> Optional[PluginResult]:
        """Extract from the accumulated resource.

        Must not mutate ``resource``; return a ``Contribution`` to merge, a
        ``Replacement`` to switch documents, or None to contribute nothing.
        """
        ...


@runtime_checkable
class DocumentFetcher(Protocol):
    """Fetches a URL and returns a resource seeded with its parsed document."""

    async def fetch_resource(self, url: str) -> Resource:
        """Fetch and parse ``url``.

        Raises:
            FetchError: network failure, timeout, non-2xx status or non-HTML content
            ParseError: the body could not be parsed by any backend
        """
        ...
