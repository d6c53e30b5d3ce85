"""
Standalone favicon lookup.
"""

from __future__ import annotations

from typing import Optional

from ..metadata import extract_canonical_url, extract_favicon_url
from ..models import Contribution, Fields, PluginResult, Resource
from ..utils.urls import is_likely_article, resolve_url


class FaviconPlugin:
    """Picks the largest declared icon, resolved against the canonical URL."""

    name = "favicon"

    def can_handle(self, url: Optional[str]) -> bool:
        return url is None or is_likely_article(url)

    async def handle(self, resource: Resource) -> Optional[PluginResult]:
        if resource.document is None:
            return None
        base_url = resolve_url(resource.url, extract_canonical_url(resource.document)) or resource.url
        favicon = extract_favicon_url(resource.document, base_url)
        if favicon is None:
            return None
        return Contribution(Resource(urls={Fields.FAVICON_URL: favicon}))
