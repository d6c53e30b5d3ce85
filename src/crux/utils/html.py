"""
Helpers over BeautifulSoup trees shared by the extractors.
"""

from __future__ import annotations

import re
from typing import List, Union

import structlog
from bs4 import BeautifulSoup, Tag

from ..errors import ParseError

logger = structlog.get_logger(__name__)

# Elements that start a new block of text. Text inside them is never counted
# as the "own" text of an enclosing element.
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "body", "dd", "details", "div", "dl", "dt",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "summary", "table",
        "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
    }
)

MEDIA_TAGS = frozenset({"img", "picture", "video", "audio", "iframe", "svg", "figure"})

# Matched against individual tokens of class and id attributes, so "ad" does
# not hit "header" or "download".
NEGATIVE_TOKENS = re.compile(
    r"^(ads?|adsense|advert\w*|aside|banner|breadcrumbs?|byline|combx|comments?|commentary|contact|"
    r"cookies?|disqus|foot|footer|footnotes?|header|login|masthead|menu|modal|nav|navbar|navigation|"
    r"newsletter|outbrain|pager|pagination|popup|promo\w*|recommended|related|rss|share|sharing|"
    r"shoutbox|side|sidebar|signup|social|sponsor\w*|subscribe|subscription|taboola|tags|toolbar|"
    r"tools|widget)$"
)
POSITIVE_TOKENS = re.compile(
    r"^(article|articles|artikel|blog|body|content|entry|haupt|hentry|main|page|post|prose|story|text)$"
)
# Tokens that keep an element alive during pruning even if it also looks negative.
RESCUE_TOKENS = frozenset({"article", "content", "main"})

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")
_HIDDEN_STYLE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)


def parse_html(markup: Union[str, bytes], parser: str = "lxml") -> BeautifulSoup:
    """Parse markup leniently.

    Falls back to the stdlib ``html.parser`` backend if the configured one
    fails; malformed HTML is repaired, never rejected.

    Raises:
        ParseError: if no backend can build a tree
    """
    try:
        return BeautifulSoup(markup, parser)
    except Exception as e:
        if parser == "html.parser":
            raise ParseError(f"Could not parse document: {e}") from e
        logger.warning("Parser failed, retrying with html.parser", parser=parser, error=str(e))
    try:
        return BeautifulSoup(markup, "html.parser")
    except Exception as e:
        raise ParseError(f"Could not parse document: {e}") from e


def class_id_tokens(element: Tag) -> List[str]:
    """Lower-cased word tokens of an element's class and id attributes."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    element_id = element.get("id") or ""
    joined = " ".join([*classes, element_id if isinstance(element_id, str) else ""]).lower()
    return [token for token in _TOKEN_SPLIT.split(joined) if token]


def has_negative_hint(element: Tag) -> bool:
    return any(NEGATIVE_TOKENS.match(token) for token in class_id_tokens(element))


def has_positive_hint(element: Tag) -> bool:
    return any(POSITIVE_TOKENS.match(token) for token in class_id_tokens(element))


def is_unlikely_candidate(element: Tag) -> bool:
    """Negative class/id hints with nothing to rescue the element."""
    tokens = class_id_tokens(element)
    if not any(NEGATIVE_TOKENS.match(token) for token in tokens):
        return False
    return not any(token in RESCUE_TOKENS for token in tokens)


def is_hidden(element: Tag) -> bool:
    if element.has_attr("hidden"):
        return True
    if str(element.get("aria-hidden", "")).lower() == "true":
        return True
    style = element.get("style")
    return bool(style and _HIDDEN_STYLE.search(str(style)))


def has_media(element: Tag) -> bool:
    if element.name in MEDIA_TAGS:
        return True
    return element.find(MEDIA_TAGS) is not None


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def element_text(element: Tag) -> str:
    """Visible text of an element with whitespace collapsed."""
    return normalize_whitespace(element.get_text(" "))


def word_count(text: str) -> int:
    return len(text.split())
