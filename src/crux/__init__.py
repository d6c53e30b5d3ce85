"""
Crux - metadata and main-content extraction for HTML pages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .client import Crux, extract
from .config import Config
from .errors import CruxError, FetchError, ParseError, PluginError
from .models import Contribution, Fields, Replacement, Resource
from .pipeline import PipelineRunner
from .plugins import AmpPlugin, ArticleExtractorPlugin, FaviconPlugin, HtmlMetadataPlugin, default_plugins
from .protocols import DocumentFetcher, Plugin

__all__ = [
    "__version__",
    "AmpPlugin",
    "ArticleExtractorPlugin",
    "Config",
    "Contribution",
    "Crux",
    "CruxError",
    "DocumentFetcher",
    "FaviconPlugin",
    "FetchError",
    "Fields",
    "HtmlMetadataPlugin",
    "ParseError",
    "PipelineRunner",
    "Plugin",
    "PluginError",
    "Replacement",
    "Resource",
    "default_plugins",
    "extract",
]
