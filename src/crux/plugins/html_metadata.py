"""
Fallback metadata plugin over standard HTML, Open Graph and Twitter Card tags.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import structlog

from .. import metadata
from ..models import Contribution, Fields, PluginResult, Resource
from ..utils.urls import is_likely_article, resolve_url

logger = structlog.get_logger(__name__)


def _lookup(field: str, func: Callable[..., Any], *args: Any) -> Any:
    """Run one lookup; a failure costs only its own field."""
    try:
        return func(*args)
    except Exception as e:
        logger.warning("Metadata lookup failed", field=field, error=str(e), error_type=type(e).__name__)
        return None


class HtmlMetadataPlugin:
    """Extracts title, description, images, feeds and other well-known metadata.

    URL-valued lookups are resolved against the page's canonical URL when it
    declares one, otherwise against the page URL.
    """

    name = "html_metadata"

    def can_handle(self, url: Optional[str]) -> bool:
        return url is None or is_likely_article(url)

    async def handle(self, resource: Resource) -> Optional[PluginResult]:
        document = resource.document
        if document is None:
            return None

        raw_canonical = _lookup(Fields.CANONICAL_URL, metadata.extract_canonical_url, document)
        canonical_url = resolve_url(resource.url, raw_canonical)
        base_url = canonical_url or resource.url
        keywords = _lookup(Fields.KEYWORDS_CSV, metadata.extract_keywords, document)

        return Contribution(
            Resource(
                fields={
                    Fields.TITLE: _lookup(Fields.TITLE, metadata.extract_title, document),
                    Fields.DESCRIPTION: _lookup(Fields.DESCRIPTION, metadata.extract_description, document),
                    Fields.SITE_NAME: _lookup(Fields.SITE_NAME, metadata.extract_site_name, document),
                    Fields.LANGUAGE: _lookup(Fields.LANGUAGE, metadata.extract_language, document),
                    Fields.THEME_COLOR_HEX: _lookup(Fields.THEME_COLOR_HEX, metadata.extract_theme_color, document),
                    Fields.KEYWORDS_CSV: ",".join(keywords) if keywords else None,
                },
                urls={
                    Fields.CANONICAL_URL: canonical_url,
                    Fields.FAVICON_URL: _lookup(Fields.FAVICON_URL, metadata.extract_favicon_url, document, base_url),
                    Fields.BANNER_IMAGE_URL: _lookup(
                        Fields.BANNER_IMAGE_URL, metadata.extract_image_url, document, base_url
                    ),
                    Fields.FEED_URL: _lookup(Fields.FEED_URL, metadata.extract_feed_url, document, base_url),
                    Fields.AMP_URL: _lookup(Fields.AMP_URL, metadata.extract_amp_url, document, base_url),
                    Fields.VIDEO_URL: _lookup(Fields.VIDEO_URL, metadata.extract_video_url, document, base_url),
                },
            )
        )
