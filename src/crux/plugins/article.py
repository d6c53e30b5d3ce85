"""
Plugin wrapper around the main-content extractor.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from ..config.config import ExtractionSettings
from ..extractor import extract_article
from ..models import Contribution, Fields, PluginResult, Resource
from ..observability import metrics
from ..utils.urls import is_likely_article

logger = structlog.get_logger(__name__)


class ArticleExtractorPlugin:
    """Adds the cleaned main content as ``article`` and its reading time as ``duration-ms``.

    Scoring is CPU-bound and runs in the default executor so it never blocks
    the event loop. No match is a normal outcome: the plugin contributes nothing.
    """

    name = "article"

    def __init__(self, settings: Optional[ExtractionSettings] = None):
        self.settings = settings or ExtractionSettings()

    def can_handle(self, url: Optional[str]) -> bool:
        return url is None or is_likely_article(url)

    async def handle(self, resource: Resource) -> Optional[PluginResult]:
        if resource.document is None:
            return None

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None, extract_article, resource.document, self.settings, resource.url
        )
        if result is None:
            metrics.increment("articles", outcome="no_candidate")
            return None

        metrics.increment("articles", outcome="extracted")
        logger.debug("Article contributed", url=resource.url, words=result.word_count, weight=result.weight)
        return Contribution(Resource(fields={Fields.DURATION_MS: result.duration_ms}, article=result.article))
