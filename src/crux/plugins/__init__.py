"""
Bundled extraction plugins.
"""

from __future__ import annotations

from typing import List, Optional

from ..config.config import ExtractionSettings
from ..protocols import DocumentFetcher, Plugin
from .amp import AmpPlugin
from .article import ArticleExtractorPlugin
from .favicon import FaviconPlugin
from .html_metadata import HtmlMetadataPlugin

__all__ = ["AmpPlugin", "ArticleExtractorPlugin", "FaviconPlugin", "HtmlMetadataPlugin", "default_plugins"]


def default_plugins(fetcher: Optional[DocumentFetcher], settings: Optional[ExtractionSettings] = None) -> List[Plugin]:
    """AMP resolution first so later plugins see canonical content, metadata last as the fallback.

    Without a fetcher the AMP plugin only records the canonical URL.
    """
    settings = settings or ExtractionSettings()
    refetch = settings.refetch_canonical and fetcher is not None
    return [
        AmpPlugin(fetcher, refetch_canonical=refetch, max_hops=settings.max_canonical_hops),
        HtmlMetadataPlugin(),
    ]
