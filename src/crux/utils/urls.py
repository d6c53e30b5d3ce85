"""
URL helpers: article heuristics, resolution and cleanup.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

# File extensions that are never HTML pages worth parsing.
NON_ARTICLE_EXTENSIONS = frozenset(
    {
        # images
        "bmp", "gif", "ico", "jpeg", "jpg", "png", "svg", "tif", "tiff", "webp", "avif", "heic",
        # audio / video
        "aac", "avi", "flac", "m3u8", "m4a", "m4v", "mkv", "mov", "mp3", "mp4", "mpeg", "mpg", "ogg",
        "wav", "webm", "wmv",
        # archives / binaries
        "7z", "apk", "bin", "bz2", "deb", "dmg", "exe", "gz", "iso", "jar", "msi", "rar", "rpm", "tar",
        "tgz", "xz", "zip",
        # documents
        "csv", "doc", "docx", "epub", "odt", "pdf", "ppt", "pptx", "rtf", "txt", "xls", "xlsx",
        # feeds / data / code
        "atom", "css", "js", "json", "rss", "xml",
        # fonts
        "eot", "otf", "ttf", "woff", "woff2",
    }
)

TRACKING_PARAMETERS = frozenset(
    {
        "fbclid", "gclid", "dclid", "gclsrc", "msclkid", "yclid", "igshid", "mc_cid", "mc_eid",
        "_ga", "_gl", "_hsenc", "_hsmi", "mkt_tok", "oly_anon_id", "oly_enc_id", "vero_id", "wickedid",
    }
)
TRACKING_PREFIXES = ("utm_", "pk_", "hsa_")

_GOOGLE_HOST = re.compile(r"(^|\.)google\.[a-z.]+$")
_FACEBOOK_REDIRECT_HOSTS = frozenset({"l.facebook.com", "lm.facebook.com", "l.messenger.com"})
_AMP_PATH = re.compile(r"(/amp/?$|/amp/|\.amp(\.html?)?$)", re.IGNORECASE)


def is_http_url(url: Optional[str]) -> bool:
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        # e.g. unbalanced IPv6 brackets
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_likely_article(url: str) -> bool:
    """Return False for URLs that are obviously not HTML pages.

    Only the shape of the URL is inspected; nothing is fetched.
    """
    if not is_http_url(url):
        return False
    last_segment = urlparse(url).path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return True
    extension = last_segment.rsplit(".", 1)[-1].lower()
    return extension not in NON_ARTICLE_EXTENSIONS


def resolve_url(base: Optional[str], href: Optional[str]) -> Optional[str]:
    """Resolve ``href`` against ``base`` and return it only if it is an http(s) URL."""
    if href is None:
        return None
    href = href.strip()
    if not href:
        return None
    try:
        resolved = urljoin(base, href) if base else href
    except ValueError:
        return None
    return resolved if is_http_url(resolved) else None


def is_amp_url(url: Optional[str]) -> bool:
    """Heuristic for URLs of AMP page variants (``/amp``, ``.amp.html``, ``amp.`` hosts, ``?amp``)."""
    if not is_http_url(url):
        return False
    parsed = urlparse(url)
    if parsed.netloc.lower().startswith("amp."):
        return True
    if _AMP_PATH.search(parsed.path):
        return True
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key.lower() == "amp" or (key.lower() == "outputtype" and value.lower() == "amp"):
            return True
    return False


def unwrap_redirect(url: str, max_depth: int = 3) -> str:
    """Follow well-known static redirectors (Google, Facebook) without fetching anything."""
    for _ in range(max_depth):
        try:
            parsed = urlparse(url)
        except ValueError:
            return url
        host = parsed.netloc.lower()
        params = dict(parse_qsl(parsed.query))
        target: Optional[str] = None
        if _GOOGLE_HOST.search(host) and parsed.path == "/url":
            target = params.get("q") or params.get("url")
        elif host in _FACEBOOK_REDIRECT_HOSTS and parsed.path in ("/l.php", "/l/"):
            target = params.get("u")
        if not target or not is_http_url(target):
            return url
        url = target
    return url


def strip_tracking_params(url: str) -> str:
    """Remove analytics parameters (``utm_*``, ``fbclid``, ...) from the query string."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    if not parsed.query:
        return url
    pairs = parse_qsl(parsed.query, keep_blank_values=True)
    kept = [
        (key, value)
        for key, value in pairs
        if key.lower() not in TRACKING_PARAMETERS and not key.lower().startswith(TRACKING_PREFIXES)
    ]
    if len(kept) == len(pairs):
        return url
    return urlunparse(parsed._replace(query=urlencode(kept)))


def rewrite_url(url: str) -> str:
    """Unwrap redirectors, then strip tracking parameters."""
    return strip_tracking_params(unwrap_redirect(url))
