"""
Data models threaded through the plugin pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

if TYPE_CHECKING:
    from bs4 import BeautifulSoup

FieldValue = Union[str, int, float]


class Fields:
    """Well-known keys for ``Resource.fields`` and ``Resource.urls``.

    Plugins are free to add their own keys; these are the ones the bundled
    plugins produce.
    """

    # Scalar fields
    TITLE = "title"
    DESCRIPTION = "description"
    SITE_NAME = "site-name"
    LANGUAGE = "language"
    THEME_COLOR_HEX = "theme-color-hex"
    KEYWORDS_CSV = "keywords-csv"
    DURATION_MS = "duration-ms"

    # URL-valued fields
    CANONICAL_URL = "canonical-url"
    FAVICON_URL = "favicon-url"
    BANNER_IMAGE_URL = "banner-image-url"
    FEED_URL = "feed-url"
    AMP_URL = "amp-url"
    VIDEO_URL = "video-url"


def _without_nulls(values: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not values:
        return {}
    return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class Resource:
    """Result of (partial) extraction.

    ``fields`` and ``urls`` never hold ``None`` values: they are stripped on
    construction, so a key is either present with a value or absent. An empty
    string is a value.
    """

    url: Optional[str] = None
    document: Optional["BeautifulSoup"] = None
    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    urls: Mapping[str, str] = field(default_factory=dict)
    article: Optional["BeautifulSoup"] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _without_nulls(self.fields))
        object.__setattr__(self, "urls", _without_nulls(self.urls))

    def merge(self, other: Resource) -> Resource:
        """Right-biased union: values from ``other`` win, absent values never erase."""
        return Resource(
            url=other.url if other.url is not None else self.url,
            document=other.document if other.document is not None else self.document,
            fields={**self.fields, **other.fields},
            urls={**self.urls, **other.urls},
            article=other.article if other.article is not None else self.article,
        )

    def __add__(self, other: Resource) -> Resource:
        if not isinstance(other, Resource):
            return NotImplemented
        return self.merge(other)

    def replace_origin(self, other: Resource) -> Resource:
        """Switch to a different origin document.

        URL and document come from ``other`` unconditionally. Fields gathered so
        far are kept (and overridden by ``other``); an article extracted from the
        previous document is dropped because it no longer matches the document.
        """
        return Resource(
            url=other.url,
            document=other.document,
            fields={**self.fields, **other.fields},
            urls={**self.urls, **other.urls},
            article=other.article,
        )


@dataclass(frozen=True)
class Contribution:
    """Plugin output that is merged field-by-field into the running result."""

    resource: Resource


@dataclass(frozen=True)
class Replacement:
    """Plugin output that replaces the document being processed.

    Used when a plugin resolves the page to a different origin (for example an
    AMP page to its canonical article). Downstream plugins see the new document.
    """

    resource: Resource

    def __post_init__(self) -> None:
        if self.resource.url is None or self.resource.document is None:
            raise ValueError("Replacement requires both a url and a document")


PluginResult = Union[Contribution, Replacement]
