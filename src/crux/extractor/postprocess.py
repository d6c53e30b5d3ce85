"""
Cleanup of the selected article node.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from ..config.config import PostprocessSettings
from ..utils.html import (
    BLOCK_TAGS,
    element_text,
    has_media,
    has_negative_hint,
    is_hidden,
)
from ..utils.urls import resolve_url

# Text blocks that are dropped when they carry almost no text.
SHORT_BLOCK_TAGS = [
    "p", "div", "section", "article", "main", "ul", "ol", "dl", "blockquote",
    "aside", "header", "footer", "form", "address",
]
# A short block survives if it holds any of these.
KEEP_CONTENT_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "pre", "table"]
WHITESPACE_PRESERVING_TAGS = frozenset({"pre", "code", "textarea"})
URL_ATTRIBUTES = ("href", "src")

_INTERNAL_WHITESPACE = re.compile(r"\s+")


def _link_density(element: Tag) -> float:
    text_length = len(element_text(element))
    if text_length == 0:
        return 0.0
    link_length = sum(len(element_text(link)) for link in element.find_all("a"))
    return min(link_length / text_length, 1.0)


def _is_video_iframe(element: Tag, host_pattern: re.Pattern[str]) -> bool:
    try:
        host = urlparse(str(element.get("src", ""))).hostname or ""
    except ValueError:
        return False
    return bool(host and host_pattern.search(host.lower()))


def _remove_noise(root: Tag, settings: PostprocessSettings) -> None:
    host_pattern = re.compile(settings.video_iframe_hosts)
    for element in root.find_all(settings.remove_tags):
        if not element.decomposed:
            element.decompose()
    for iframe in root.find_all("iframe"):
        if not _is_video_iframe(iframe, host_pattern):
            iframe.decompose()
    for element in root.find_all(True):
        if element.decomposed:
            continue
        if is_hidden(element) or has_negative_hint(element):
            element.decompose()


def _remove_link_lists(root: Tag) -> None:
    # Reverse document order: inner lists go first, so a parent is judged on what is left.
    for element in reversed(root.find_all(sorted(BLOCK_TAGS - {"p"}))):
        if not element.decomposed and _link_density(element) > 0.5:
            element.decompose()


def _remove_short_blocks(root: Tag, settings: PostprocessSettings) -> None:
    for element in reversed(root.find_all(SHORT_BLOCK_TAGS)):
        if element.decomposed:
            continue
        if has_media(element) or element.find(KEEP_CONTENT_TAGS) is not None:
            continue
        if len(element_text(element)) < settings.min_paragraph_length:
            element.decompose()


def _clean_attributes(root: Tag, settings: PostprocessSettings, base_url: Optional[str]) -> None:
    allowed = set(settings.allowed_attributes)
    for element in [root, *root.find_all(True)]:
        element.attrs = {name: value for name, value in element.attrs.items() if name in allowed}
        for name in URL_ATTRIBUTES:
            value = element.get(name)
            if value is None:
                continue
            value = str(value).strip()
            if value.lower().startswith("javascript:"):
                del element[name]
            elif base_url and not value.startswith("#"):
                resolved = resolve_url(base_url, value)
                if resolved:
                    element[name] = resolved


def _in_preformatted(node: NavigableString) -> bool:
    return any(parent.name in WHITESPACE_PRESERVING_TAGS for parent in node.parents)


def _is_block_or_edge(node: object) -> bool:
    return node is None or (isinstance(node, Tag) and node.name in BLOCK_TAGS)


def _normalize_text(root: Tag) -> None:
    for node in list(root.find_all(string=True)):
        if isinstance(node, PreformattedString) or _in_preformatted(node):
            continue
        text = str(node)
        if not text.strip():
            if _is_block_or_edge(node.previous_sibling) and _is_block_or_edge(node.next_sibling):
                node.extract()
            elif text != " ":
                node.replace_with(" ")
            continue
        collapsed = _INTERNAL_WHITESPACE.sub(" ", text)
        if collapsed != text:
            node.replace_with(collapsed)


def postprocess(
    node: Tag,
    settings: Optional[PostprocessSettings] = None,
    base_url: Optional[str] = None,
) -> BeautifulSoup:
    """Return a cleaned, standalone copy of ``node``.

    The node itself is always kept; only its descendants are pruned.
    """
    settings = settings or PostprocessSettings()
    article = BeautifulSoup(str(node), "html.parser")
    root = article.find(True)
    if root is None:
        return article

    _remove_noise(root, settings)
    _remove_link_lists(root)
    _remove_short_blocks(root, settings)
    for element in root.find_all(settings.unwrap_tags):
        element.unwrap()
    _clean_attributes(root, settings, base_url)
    _normalize_text(root)
    return article
