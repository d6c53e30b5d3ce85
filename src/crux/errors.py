"""
Exception hierarchy for Crux.

Only ``FetchError`` on the primary document and ``ParseError`` ever reach the
caller. Everything raised inside a plugin is contained by the pipeline runner.
"""

from __future__ import annotations

from typing import Optional


class CruxError(Exception):
    """Base class for all Crux errors."""


class FetchError(CruxError):
    """A document could not be fetched (network, timeout, status or content type)."""

    def __init__(self, url: str, reason: str, *, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        message = f"Failed to fetch {url}: {reason}"
        if status is not None:
            message = f"{message} (status {status})"
        super().__init__(message)


class ParseError(CruxError):
    """No parser backend could build a tree from the markup."""


class PluginError(CruxError):
    """A single plugin failed; the runner records it and moves on."""

    def __init__(self, plugin: str, message: str) -> None:
        self.plugin = plugin
        super().__init__(f"{plugin}: {message}")
