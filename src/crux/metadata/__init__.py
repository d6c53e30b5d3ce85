"""Single-attribute metadata lookups (Open Graph, Twitter Cards, AMP, link tags)."""

from .extractors import (
    extract_amp_url,
    extract_canonical_url,
    extract_description,
    extract_favicon_url,
    extract_feed_url,
    extract_image_url,
    extract_keywords,
    extract_language,
    extract_site_name,
    extract_theme_color,
    extract_title,
    extract_video_url,
    is_amp_document,
)

__all__ = [
    "extract_amp_url",
    "extract_canonical_url",
    "extract_description",
    "extract_favicon_url",
    "extract_feed_url",
    "extract_image_url",
    "extract_keywords",
    "extract_language",
    "extract_site_name",
    "extract_theme_color",
    "extract_title",
    "extract_video_url",
    "is_amp_document",
]
