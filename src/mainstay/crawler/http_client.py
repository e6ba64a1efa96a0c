"""
HTTP client for fetching documents, with bounded retries and backoff.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from email.message import Message
from typing import Dict, Optional
from urllib.parse import urlparse

import aiohttp
import structlog

from mainstay.config.config import HttpConfig
from mainstay.exceptions import FetchError

logger = structlog.get_logger(__name__)

RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})


@dataclass
class FetchResponse:
    """Response from one fetch, including how many attempts it took."""

    status: int
    headers: Dict[str, str]
    body: bytes
    url: str
    final_url: str
    attempts: int
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def charset(self) -> Optional[str]:
        content_type = next((value for key, value in self.headers.items() if key.lower() == "content-type"), None)
        if not content_type:
            return None
        message = Message()
        message["content-type"] = content_type
        return message.get_content_charset()

    def text(self) -> str:
        """Decode the body with the declared charset, falling back to UTF-8."""
        charset = self.charset or "utf-8"
        try:
            return self.body.decode(charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class HttpClient:
    """Async HTTP client with retries on transient failures."""

    def __init__(self, config: Optional[HttpConfig] = None):
        self.config = config or HttpConfig()
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = logger.bind(component="HttpClient")

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            connector = aiohttp.TCPConnector(ssl=None if self.config.verify_ssl else False)
            self.session = aiohttp.ClientSession(
                connector=connector, timeout=timeout, headers={"User-Agent": self.config.user_agent}
            )
            self.logger.debug("HTTP client session initialized", user_agent=self.config.user_agent)

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None

    async def __aenter__(self) -> "HttpClient":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def _calculate_backoff_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay with jitter."""
        base_delay = self.config.backoff_base * 2 ** (attempt - 1)
        jitter = random.uniform(0.8, 1.2)  # ±20% jitter
        return min(base_delay * jitter, self.config.backoff_max)

    async def fetch(self, url: str, *, timeout: Optional[float] = None, max_retries: Optional[int] = None) -> FetchResponse:
        """
        Fetch URL, retrying on 429/502/503/504 and on connection errors.

        Args:
            url: URL to fetch
            timeout: Request timeout in seconds (None = use config default)
            max_retries: Maximum retry attempts (None = use config default)

        Returns:
            FetchResponse of the last attempt; status 0 when no response was
            ever received

        Raises:
            FetchError: If the URL is malformed
        """
        parsed_url = urlparse(url)
        if parsed_url.scheme not in ("http", "https") or not parsed_url.netloc:
            raise FetchError(url, "Malformed URL")

        if self.session is None:
            await self.initialize()
        assert self.session is not None

        if max_retries is None:
            max_retries = self.config.max_retries
        request_timeout = aiohttp.ClientTimeout(total=timeout or self.config.timeout)

        start_time = time.monotonic()
        attempt = 0
        last_error: Optional[str] = None

        while attempt < max_retries + 1:
            attempt += 1
            try:
                async with self.session.get(url, timeout=request_timeout) as response:
                    if response.status in RETRYABLE_STATUSES and attempt <= max_retries:
                        self.logger.info(
                            "Retrying request",
                            url=url,
                            status=response.status,
                            attempt=attempt,
                            max_retries=max_retries,
                        )
                        await asyncio.sleep(self._calculate_backoff_delay(attempt))
                        continue

                    body = await response.read()
                    result = FetchResponse(
                        status=response.status,
                        headers=dict(response.headers),
                        body=body,
                        url=url,
                        final_url=str(response.url),
                        attempts=attempt,
                        elapsed=time.monotonic() - start_time,
                    )
                    self.logger.debug("Fetched", url=url, status=result.status, attempts=attempt, size=len(body))
                    return result

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = str(e) or type(e).__name__
                self.logger.warning(
                    "Request failed",
                    url=url,
                    attempt=attempt,
                    max_retries=max_retries,
                    error=last_error,
                    error_type=type(e).__name__,
                )
                if attempt < max_retries + 1:
                    await asyncio.sleep(self._calculate_backoff_delay(attempt))

        self.logger.warning("All retries exhausted", url=url, attempts=attempt, error=last_error)
        return FetchResponse(
            status=0,
            headers={},
            body=b"",
            url=url,
            final_url=url,
            attempts=attempt,
            elapsed=time.monotonic() - start_time,
        )

    async def fetch_html(self, url: str, *, timeout: Optional[float] = None) -> str:
        """
        Fetch URL and return its decoded body.

        Raises:
            FetchError: On transport failure or a final non-2xx status
        """
        response = await self.fetch(url, timeout=timeout)
        if response.status == 0:
            raise FetchError(url, "Request failed after retries")
        if not response.ok:
            raise FetchError(url, f"HTTP {response.status}", status=response.status)
        return response.text()
