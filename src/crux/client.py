"""
Caller-facing entry points: ``extract()`` and the reusable ``Crux`` session.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog
from structlog.contextvars import bound_contextvars

from .config.config import Config
from .crawler import DocumentSource, HttpClient
from .models import Resource
from .pipeline import PipelineRunner
from .plugins import default_plugins
from .protocols import Plugin
from .utils.html import parse_html
from .utils.urls import rewrite_url

logger = structlog.get_logger(__name__)


async def _extract(
    url: Optional[str],
    html: Optional[str],
    plugins: Optional[Sequence[Plugin]],
    http_client: HttpClient,
    config: Config,
) -> Resource:
    extraction = config.extraction
    if url is not None and extraction.rewrite_urls:
        rewritten = rewrite_url(url)
        if rewritten != url:
            logger.debug("Rewrote URL", url=url, rewritten=rewritten)
        url = rewritten

    with bound_contextvars(request_url=url):
        source = DocumentSource(http_client, extraction.parser)
        if html is not None:
            seed = Resource(url=url, document=parse_html(html, extraction.parser))
        elif url is not None:
            seed = await source.fetch_resource(url)
        else:
            raise ValueError("Either url or html is required")

        plugin_list: List[Plugin] = list(plugins) if plugins is not None else default_plugins(source, extraction)
        return await PipelineRunner().run(plugin_list, seed)


async def extract(
    url: Optional[str] = None,
    *,
    html: Optional[str] = None,
    plugins: Optional[Sequence[Plugin]] = None,
    http_client: Optional[HttpClient] = None,
    config: Optional[Config] = None,
) -> Resource:
    """Extract metadata (and, with the article plugin, main content) from a page.

    Args:
        url: page URL; fetched when ``html`` is not given, otherwise used as the base URL
        html: raw markup to parse instead of fetching
        plugins: ordered plugin list; defaults to ``default_plugins()``
        http_client: shared client to fetch with; a temporary one is opened if needed
        config: configuration; defaults to ``Config()``

    Raises:
        ValueError: neither ``url`` nor ``html`` was given
        FetchError: the page itself could not be fetched
        ParseError: the page could not be parsed
    """
    if url is None and html is None:
        raise ValueError("Either url or html is required")
    config = config or Config()
    if http_client is not None:
        return await _extract(url, html, plugins, http_client, config)
    async with HttpClient(config.fetch) as client:
        return await _extract(url, html, plugins, client, config)


class Crux:
    """Reusable extraction session owning one pooled HTTP client.

    Example::

        async with Crux() as crux:
            results = await asyncio.gather(*(crux.extract(url) for url in urls))
    """

    def __init__(
        self,
        plugins: Optional[Sequence[Plugin]] = None,
        config: Optional[Config] = None,
        http_client: Optional[HttpClient] = None,
    ):
        self.config = config or Config()
        self.plugins = list(plugins) if plugins is not None else None
        self._owns_client = http_client is None
        self.http_client = http_client or HttpClient(self.config.fetch)

    async def __aenter__(self) -> "Crux":
        await self.http_client.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.close()

    async def extract(
        self,
        url: Optional[str] = None,
        *,
        html: Optional[str] = None,
        plugins: Optional[Sequence[Plugin]] = None,
    ) -> Resource:
        if not self.http_client.is_initialized:
            await self.http_client.initialize()
        return await _extract(url, html, plugins if plugins is not None else self.plugins, self.http_client, self.config)
