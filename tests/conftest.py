"""
Shared fixtures for the Crux test suite.

Network access is never needed: HTTP is mocked with aioresponses and plugins
that fetch get the in-memory ``FakeFetcher`` from ``tests.helpers``.
"""

# Standard library imports
from typing import AsyncGenerator

# Third-party imports
import pytest
import pytest_asyncio

# Local imports
from crux.config import FetchConfig, LazyConfig
from crux.crawler import HttpClient
from crux.observability import set_enabled

from tests.helpers import FakeFetcher, prose_paragraphs

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_state():
    """Metrics on and no cached global configuration for every test."""
    set_enabled(True)
    LazyConfig.reset()
    yield
    LazyConfig.reset()


@pytest.fixture
def fetch_config() -> FetchConfig:
    """Fast-failing fetch configuration: no backoff delay between retries."""
    return FetchConfig(max_retries=2, backoff_base=0.0, timeout=5.0, connect_timeout=1.0)


@pytest_asyncio.fixture
async def http_client(fetch_config) -> AsyncGenerator[HttpClient, None]:
    """An initialized client, closed after the test."""
    client = HttpClient(fetch_config)
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


# ============================================================================
# Sample Documents
# ============================================================================


@pytest.fixture
def article_html() -> str:
    """A typical news page: navigation, an article, a sidebar and a footer."""
    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <title>Council approves new bridge | Example News</title>
        <meta name="description" content="The city council voted to fund the bridge.">
        <meta property="og:title" content="Council approves new bridge">
        <meta property="og:image" content="/images/bridge.jpg">
        <meta property="og:site_name" content="Example News">
        <link rel="canonical" href="https://example.com/news/bridge">
        <link rel="icon" href="/favicon.ico">
        <link rel="alternate" type="application/rss+xml" href="/feed.xml">
        <script>var tracking = "should never appear";</script>
        <style>body {{ color: black; }}</style>
    </head>
    <body>
        <nav class="menu">
            <ul>
                <li><a href="/">Home</a></li>
                <li><a href="/world">World</a></li>
                <li><a href="/sports">Sports</a></li>
            </ul>
        </nav>
        <div id="page">
            <article class="story">
                <h1>Council approves new bridge</h1>
                {prose_paragraphs(6)}
                <div class="share-buttons"><a href="https://twitter.com/share">Tweet this story</a></div>
            </article>
            <div class="sidebar">
                <h3>Most read</h3>
                <ul>
                    <li><a href="/a">Another story about something else</a></li>
                    <li><a href="/b">Yet another story worth reading today</a></li>
                </ul>
            </div>
        </div>
        <footer>Copyright Example News. All rights reserved.</footer>
    </body>
    </html>
    """
