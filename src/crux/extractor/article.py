"""
Main-content extraction: prune, score, clean.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from bs4 import BeautifulSoup

from ..config.config import ExtractionSettings
from ..utils.html import element_text, word_count
from .postprocess import postprocess
from .preprocess import preprocess
from .weights import find_best_candidate

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ArticleResult:
    """Extracted article with the numbers derived from it."""

    article: BeautifulSoup
    weight: int
    word_count: int
    duration_ms: int


def estimated_reading_time_ms(words: int, words_per_minute: int) -> int:
    """Reading time in milliseconds at a fixed reading speed."""
    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be positive")
    return round(words * 60_000 / words_per_minute)


def extract_article(
    document: BeautifulSoup,
    settings: Optional[ExtractionSettings] = None,
    base_url: Optional[str] = None,
) -> Optional[ArticleResult]:
    """Find and clean the main content of ``document``.

    ``document`` is not modified. Returns None when no element qualifies as
    the main content or when cleanup leaves no text behind.
    """
    settings = settings or ExtractionSettings()
    pruned = preprocess(document)
    candidate = find_best_candidate(pruned, settings.scoring)
    if candidate is None:
        logger.debug("No article candidate found", url=base_url)
        return None

    article = postprocess(candidate.element, settings.postprocess, base_url=base_url)
    words = word_count(element_text(article))
    if words == 0:
        logger.debug("Article candidate was empty after cleanup", url=base_url, weight=candidate.weight)
        return None

    logger.debug(
        "Article extracted",
        url=base_url,
        tag=candidate.element.name,
        weight=candidate.weight,
        words=words,
    )
    return ArticleResult(
        article=article,
        weight=candidate.weight,
        word_count=words,
        duration_ms=estimated_reading_time_ms(words, settings.reading_speed_wpm),
    )
