"""
Resolves AMP and mirror pages to their canonical article.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup

from ..errors import FetchError, ParseError
from ..metadata import extract_canonical_url, is_amp_document
from ..models import Contribution, Fields, PluginResult, Replacement, Resource
from ..protocols import DocumentFetcher
from ..utils.urls import is_amp_url, is_likely_article, resolve_url

logger = structlog.get_logger(__name__)


def _is_amp(url: Optional[str], document: BeautifulSoup) -> bool:
    return is_amp_document(document) or is_amp_url(url)


class AmpPlugin:
    """Follows ``link[rel=canonical]`` and substitutes the canonical document.

    Hops are followed until a page is its own canonical, a URL repeats, or
    ``max_hops`` is reached. The pipeline then continues on the last non-AMP
    page of the chain. If a canonical page cannot be fetched the original
    document is kept.

    With ``refetch_canonical`` off nothing is fetched; the plugin only records
    the canonical URL.
    """

    name = "amp"

    def __init__(self, fetcher: Optional[DocumentFetcher], refetch_canonical: bool = True, max_hops: int = 3):
        if refetch_canonical and fetcher is None:
            raise ValueError("A fetcher is required to re-fetch canonical documents")
        if max_hops < 1:
            raise ValueError("max_hops must be at least 1")
        self.fetcher = fetcher
        self.refetch_canonical = refetch_canonical
        self.max_hops = max_hops

    def can_handle(self, url: Optional[str]) -> bool:
        return url is None or is_likely_article(url)

    def _canonical_of(self, url: Optional[str], document: BeautifulSoup) -> Optional[str]:
        return resolve_url(url, extract_canonical_url(document))

    async def handle(self, resource: Resource) -> Optional[PluginResult]:
        if resource.document is None:
            return None

        fetcher = self.fetcher
        if not self.refetch_canonical or fetcher is None:
            canonical = self._canonical_of(resource.url, resource.document)
            if canonical is None or canonical == resource.url:
                return None
            return Contribution(Resource(urls={Fields.CANONICAL_URL: canonical}))

        chain: List[Tuple[Optional[str], BeautifulSoup]] = [(resource.url, resource.document)]
        visited = {resource.url} if resource.url else set()

        for _ in range(self.max_hops):
            url, document = chain[-1]
            canonical = self._canonical_of(url, document)
            if canonical is None or canonical == url:
                break
            if canonical in visited:
                logger.info("Canonical loop detected", url=url, canonical=canonical)
                break
            visited.add(canonical)
            try:
                fetched = await fetcher.fetch_resource(canonical)
            except (FetchError, ParseError) as e:
                logger.warning(
                    "Canonical fetch failed, keeping current document",
                    url=url,
                    canonical=canonical,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                break
            if fetched.document is None:
                break
            fetched_url = fetched.url or canonical
            visited.add(fetched_url)
            logger.info("Followed canonical link", url=url, canonical=fetched_url)
            chain.append((fetched_url, fetched.document))

        # Settle on the last page of the chain that is not an AMP variant.
        target = next((entry for entry in reversed(chain) if not _is_amp(*entry)), chain[-1])
        if target is chain[0]:
            return None
        target_url, target_document = target
        return Replacement(
            Resource(url=target_url, document=target_document, urls={Fields.CANONICAL_URL: target_url})
        )
