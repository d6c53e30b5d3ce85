"""Utility modules for Crux."""

from .html import parse_html
from .urls import is_likely_article, resolve_url, rewrite_url

__all__ = ["is_likely_article", "parse_html", "resolve_url", "rewrite_url"]
