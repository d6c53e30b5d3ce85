"""
Single-attribute metadata lookups over a parsed HTML document.

Supports the common conventions:
- Open Graph Protocol: https://ogp.me/
- Twitter Cards: https://developer.twitter.com/en/docs/twitter-for-websites/cards/overview/markup
- AMP: https://amp.dev/documentation/guides-and-tutorials/learn/spec/amphtml/

Every function returns None rather than an empty value, and URL-valued
lookups return absolute http(s) URLs resolved against ``base_url``.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from ..utils.html import normalize_whitespace
from ..utils.urls import resolve_url

_HEX_COLOR = re.compile(r"^#?([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)
_ICON_SIZE = re.compile(r"(\d+)\s*x\s*(\d+)", re.IGNORECASE)
_ICON_RELS = frozenset({"icon", "apple-touch-icon", "apple-touch-icon-precomposed"})
_FEED_TYPES = frozenset({"application/rss+xml", "application/atom+xml", "application/feed+json"})

# Apple documents 180x180 as the size used when none is declared.
_APPLE_TOUCH_ICON_DEFAULT_SIZE = 180
_SCALABLE_ICON_SIZE = 10_000


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = normalize_whitespace(str(value))
    return value or None


def _meta_content(document: BeautifulSoup, selectors: Iterable[str]) -> Optional[str]:
    for selector in selectors:
        for element in document.select(selector):
            content = _clean(element.get("content"))
            if content:
                return content
    return None


def _link_href(document: BeautifulSoup, selector: str) -> Optional[str]:
    for element in document.select(selector):
        href = _clean(element.get("href"))
        if href:
            return href
    return None


def _og(name: str) -> List[str]:
    return [f'meta[property="{name}"]', f'meta[name="{name}"]']


def extract_title(document: BeautifulSoup) -> Optional[str]:
    """Open Graph and Twitter titles win over ``<title>``, then the first ``<h1>``."""
    title = _meta_content(document, [*_og("og:title"), *_og("twitter:title")])
    if title:
        return title
    if document.title is not None:
        title = _clean(document.title.get_text())
        if title:
            return title
    heading = document.find("h1")
    return _clean(heading.get_text(" ")) if heading is not None else None


def extract_canonical_url(document: BeautifulSoup) -> Optional[str]:
    """Raw (possibly relative) canonical URL from ``link[rel=canonical]`` or ``og:url``."""
    return _link_href(document, 'link[rel~="canonical"]') or _meta_content(document, _og("og:url"))


def extract_description(document: BeautifulSoup) -> Optional[str]:
    return _meta_content(
        document,
        [
            *_og("og:description"),
            *_og("twitter:description"),
            'meta[name="description"]',
            'meta[itemprop="description"]',
        ],
    )


def extract_site_name(document: BeautifulSoup) -> Optional[str]:
    return _meta_content(
        document,
        [*_og("og:site_name"), 'meta[name="application-name"]', 'meta[name="apple-mobile-web-app-title"]'],
    )


def extract_language(document: BeautifulSoup) -> Optional[str]:
    html = document.find("html")
    if isinstance(html, Tag):
        language = _clean(html.get("lang"))
        if language:
            return language
    return _meta_content(document, ['meta[http-equiv="content-language"]', 'meta[http-equiv="Content-Language"]'])


def extract_theme_color(document: BeautifulSoup) -> Optional[str]:
    """Theme color as ``#rrggbb``-style hex; named or functional colors are ignored."""
    color = _meta_content(document, ['meta[name="theme-color"]'])
    if not color or not _HEX_COLOR.match(color):
        return None
    return color if color.startswith("#") else f"#{color}"


def extract_keywords(document: BeautifulSoup) -> List[str]:
    content = _meta_content(document, ['meta[name="keywords"]', 'meta[name="news_keywords"]'])
    if not content:
        return []
    return [keyword.strip() for keyword in content.split(",") if keyword.strip()]


def _icon_size(link: Tag) -> int:
    sizes = str(link.get("sizes") or "").strip().lower()
    if sizes == "any":
        return _SCALABLE_ICON_SIZE
    declared = [max(int(width), int(height)) for width, height in _ICON_SIZE.findall(sizes)]
    if declared:
        return max(declared)
    rels = {rel.lower() for rel in (link.get("rel") or [])}
    if rels & {"apple-touch-icon", "apple-touch-icon-precomposed"}:
        return _APPLE_TOUCH_ICON_DEFAULT_SIZE
    return 0


def extract_favicon_url(document: BeautifulSoup, base_url: Optional[str]) -> Optional[str]:
    """Largest declared icon; document order breaks ties."""
    best_url: Optional[str] = None
    best_size = -1
    for link in document.find_all("link", rel=True):
        rels = {rel.lower() for rel in link.get("rel") or []}
        if not rels & _ICON_RELS:
            continue
        url = resolve_url(base_url, link.get("href"))
        if url is None:
            continue
        size = _icon_size(link)
        if size > best_size:
            best_url, best_size = url, size
    return best_url


def extract_image_url(document: BeautifulSoup, base_url: Optional[str]) -> Optional[str]:
    image = _meta_content(
        document,
        [
            *_og("og:image:secure_url"),
            *_og("og:image:url"),
            *_og("og:image"),
            *_og("twitter:image"),
            *_og("twitter:image:src"),
            'meta[itemprop="image"]',
        ],
    ) or _link_href(document, 'link[rel~="image_src"]')
    return resolve_url(base_url, image)


def extract_feed_url(document: BeautifulSoup, base_url: Optional[str]) -> Optional[str]:
    for link in document.select('link[rel~="alternate"]'):
        if str(link.get("type") or "").strip().lower() in _FEED_TYPES:
            url = resolve_url(base_url, link.get("href"))
            if url:
                return url
    return None


def extract_amp_url(document: BeautifulSoup, base_url: Optional[str]) -> Optional[str]:
    return resolve_url(base_url, _link_href(document, 'link[rel~="amphtml"]'))


def extract_video_url(document: BeautifulSoup, base_url: Optional[str]) -> Optional[str]:
    video = _meta_content(
        document,
        [*_og("og:video:secure_url"), *_og("og:video:url"), *_og("og:video"), *_og("twitter:player:stream")],
    )
    return resolve_url(base_url, video)


def is_amp_document(document: BeautifulSoup) -> bool:
    """True for documents declaring themselves AMP via ``<html amp>`` or ``<html ⚡>``."""
    html = document.find("html")
    return isinstance(html, Tag) and (html.has_attr("amp") or html.has_attr("⚡"))
