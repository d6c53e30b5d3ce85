"""
Fetches a URL and turns it into a resource carrying the parsed document.
"""

from __future__ import annotations

import structlog

from ..models import Resource
from ..utils.html import parse_html
from .http_client import HttpClient

logger = structlog.get_logger(__name__)


class DocumentSource:
    """Default ``DocumentFetcher`` backed by a shared ``HttpClient``."""

    def __init__(self, http_client: HttpClient, parser: str = "lxml"):
        self.http_client = http_client
        self.parser = parser

    async def fetch_resource(self, url: str) -> Resource:
        response = await self.http_client.fetch(url)
        document = parse_html(response.text(), self.parser)
        if response.final_url != url:
            logger.debug("Followed redirects", url=url, final_url=response.final_url)
        return Resource(url=response.final_url, document=document)

