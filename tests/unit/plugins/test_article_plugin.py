"""
Tests for the article extractor plugin.
"""

import pytest
from crux.config import ExtractionSettings
from crux.models import Contribution, Fields, Resource
from crux.observability.metrics import METRICS
from crux.plugins import ArticleExtractorPlugin
from crux.utils.html import parse_html

from tests.helpers import metric_delta, page


@pytest.mark.unit
class TestArticleExtractorPlugin:
    @pytest.mark.asyncio
    async def test_contributes_article_and_duration(self, article_html):
        plugin = ArticleExtractorPlugin()
        with metric_delta(METRICS["articles"].labels(outcome="extracted")):
            result = await plugin.handle(Resource(url="https://example.com/news/bridge", document=parse_html(article_html)))

        assert isinstance(result, Contribution)
        assert result.resource.article is not None
        assert result.resource.fields[Fields.DURATION_MS] > 0
        assert result.resource.url is None
        assert result.resource.document is None

    @pytest.mark.asyncio
    async def test_no_match_contributes_nothing(self):
        with metric_delta(METRICS["articles"].labels(outcome="no_candidate")):
            result = await ArticleExtractorPlugin().handle(Resource(document=parse_html(page("<nav>menu</nav>"))))
        assert result is None

    @pytest.mark.asyncio
    async def test_without_document(self):
        assert await ArticleExtractorPlugin().handle(Resource(url="https://example.com/")) is None

    @pytest.mark.asyncio
    async def test_uses_configured_reading_speed(self, article_html):
        document = parse_html(article_html)
        slow = await ArticleExtractorPlugin(ExtractionSettings(reading_speed_wpm=50)).handle(Resource(document=document))
        fast = await ArticleExtractorPlugin(ExtractionSettings(reading_speed_wpm=500)).handle(Resource(document=document))
        assert slow.resource.fields[Fields.DURATION_MS] > fast.resource.fields[Fields.DURATION_MS]

    def test_can_handle(self):
        plugin = ArticleExtractorPlugin()
        assert plugin.can_handle(None)
        assert not plugin.can_handle("https://example.com/movie.mkv")
