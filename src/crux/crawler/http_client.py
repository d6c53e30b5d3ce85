"""
Pooled HTTP client with retries, per-domain concurrency limits and observability.
"""

from __future__ import annotations

import asyncio
import random
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional
from urllib.parse import urlparse

import aiohttp
import structlog

from ..config.config import FetchConfig
from ..errors import FetchError
from ..observability import metrics

logger = structlog.get_logger(__name__)

RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass
class FetchResponse:
    """Body and metadata of a successful fetch."""

    url: str
    final_url: str
    status: int
    headers: Dict[str, str]
    body: bytes
    charset: Optional[str]
    content_type: str
    attempts: int
    elapsed: float

    def text(self) -> str:
        """Decode the body with the declared charset, falling back to UTF-8."""
        encoding = self.charset or "utf-8"
        try:
            return self.body.decode(encoding, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class HttpClient:
    """HTTP client for fetching HTML documents.

    One instance owns one connection pool; share it across extractions and
    close it when done (or use it as an async context manager).
    """

    def __init__(self, config: Optional[FetchConfig] = None):
        self.config = config or FetchConfig()
        self.session: Optional[aiohttp.ClientSession] = None
        self._domain_semaphores: Dict[str, asyncio.Semaphore] = {}
        self._domain_users: Dict[str, int] = {}

    @property
    def is_initialized(self) -> bool:
        return self.session is not None

    async def initialize(self) -> None:
        """Open the pooled session. Calling it twice is a no-op."""
        if self.session is not None:
            return
        connector = aiohttp.TCPConnector(
            limit=self.config.max_connections,
            ttl_dns_cache=30,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=self.config.timeout, connect=self.config.connect_timeout)
        self.session = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent, "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5"},
        )
        logger.info(
            "HTTP client initialized",
            max_connections=self.config.max_connections,
            max_concurrency_per_domain=self.config.max_concurrency_per_domain,
            max_retries=self.config.max_retries,
        )

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()
            self.session = None
        self._domain_semaphores.clear()
        self._domain_users.clear()
        logger.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @asynccontextmanager
    async def _domain_slot(self, domain: str) -> AsyncIterator[None]:
        """Hold one of the host's concurrency slots.

        A host's semaphore lives only while requests to it are pending, so a
        long-lived client does not accumulate one per host ever fetched.
        """
        semaphore = self._domain_semaphores.get(domain)
        if semaphore is None:
            semaphore = asyncio.Semaphore(self.config.max_concurrency_per_domain)
            self._domain_semaphores[domain] = semaphore
        self._domain_users[domain] = self._domain_users.get(domain, 0) + 1
        try:
            async with semaphore:
                yield
        finally:
            remaining = self._domain_users.get(domain, 1) - 1
            if remaining > 0:
                self._domain_users[domain] = remaining
            else:
                self._domain_users.pop(domain, None)
                self._domain_semaphores.pop(domain, None)

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with +/-20% jitter."""
        return self.config.backoff_base * 2 ** (attempt - 1) * random.uniform(0.8, 1.2)

    def _is_accepted_content_type(self, response: aiohttp.ClientResponse) -> bool:
        if aiohttp.hdrs.CONTENT_TYPE not in response.headers:
            return True
        return response.content_type.lower() in self.config.accepted_content_types

    async def _read_body(self, url: str, response: aiohttp.ClientResponse) -> bytes:
        limit = self.config.max_body_bytes
        if response.content_length is not None and response.content_length > limit:
            raise FetchError(url, f"body of {response.content_length} bytes exceeds limit", status=response.status)
        body = bytearray()
        async for chunk in response.content.iter_chunked(64 * 1024):
            body.extend(chunk)
            if len(body) > limit:
                raise FetchError(url, f"body exceeds limit of {limit} bytes", status=response.status)
        return bytes(body)

    async def fetch(self, url: str) -> FetchResponse:
        """Fetch ``url`` and return its body.

        Redirects are followed. 429 and 5xx responses, timeouts and connection
        errors are retried up to ``max_retries`` times.

        Raises:
            FetchError: the URL is malformed, every attempt failed, the final
                status is not 2xx, the content type is not HTML, or the body is
                too large
        """
        if self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise FetchError(url, f"malformed URL: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise FetchError(url, "malformed or non-http URL")
        domain = parsed.hostname or parsed.netloc

        start_time = time.monotonic()
        attempts = self.config.max_retries + 1
        last_error: Optional[FetchError] = None

        async with self._domain_slot(domain):
            for attempt in range(1, attempts + 1):
                try:
                    async with self.session.get(url, allow_redirects=True) as response:
                        metrics.increment("fetch_responses", status_class=f"{response.status // 100}xx")

                        if response.status in RETRY_STATUSES:
                            last_error = FetchError(url, "server returned retryable status", status=response.status)
                        elif not 200 <= response.status < 300:
                            raise FetchError(url, "unexpected status", status=response.status)
                        elif not self._is_accepted_content_type(response):
                            raise FetchError(
                                url, f"unsupported content type {response.content_type}", status=response.status
                            )
                        else:
                            body = await self._read_body(url, response)
                            elapsed = time.monotonic() - start_time
                            metrics.observe("fetch_latency", elapsed)
                            logger.debug(
                                "Fetched document",
                                url=url,
                                final_url=str(response.url),
                                status=response.status,
                                bytes=len(body),
                                attempts=attempt,
                            )
                            return FetchResponse(
                                url=url,
                                final_url=str(response.url),
                                status=response.status,
                                headers=dict(response.headers),
                                body=body,
                                charset=response.charset,
                                content_type=response.content_type,
                                attempts=attempt,
                                elapsed=elapsed,
                            )
                except asyncio.TimeoutError:
                    last_error = FetchError(url, f"timed out after {self.config.timeout}s")
                except aiohttp.ClientError as e:
                    last_error = FetchError(url, f"{type(e).__name__}: {e}")

                if attempt < attempts:
                    delay = self._backoff_delay(attempt)
                    logger.info(
                        "Retrying request",
                        url=url,
                        attempt=attempt,
                        max_retries=self.config.max_retries,
                        delay=round(delay, 3),
                        reason=last_error.reason if last_error else None,
                    )
                    await asyncio.sleep(delay)

        error = last_error or FetchError(url, "request failed")
        logger.warning("Fetch failed", url=url, attempts=attempts, reason=error.reason, status=error.status)
        raise error
