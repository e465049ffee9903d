"""
Page fetcher.

One outbound GET per audit: redirects followed, hard wall-clock timeout
enforced by cancelling the request, no retries. Every network failure
surfaces as a single FetchError.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

import httpx

from webaudit.config import settings

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The target could not be fetched (timeout, DNS, connect, TLS...)."""


@dataclass
class FetchResult:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    elapsed_ms: int = 0


@dataclass
class FetchConfig:
    timeout_ms: int = 8000
    user_agent: str = "WebAuditBot/0.1"
    follow_redirects: bool = True

    @classmethod
    def from_settings(cls) -> "FetchConfig":
        return cls(
            timeout_ms=settings.FETCH_TIMEOUT_MS,
            user_agent=settings.FETCH_USER_AGENT,
        )


class PageFetcher:
    """Fetches a single page for auditing."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or FetchConfig.from_settings()
        self._transport = transport

    async def fetch(self, url: str) -> FetchResult:
        """Fetch `url` or raise FetchError.

        elapsed_ms covers dispatch to response headers. The timeout covers
        the whole exchange including the body.
        """
        try:
            return await asyncio.wait_for(
                self._fetch(url),
                timeout=self.config.timeout_ms / 1000,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Timeout fetching {url} after {self.config.timeout_ms}ms")
            raise FetchError("timeout") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Error fetching {url}: {type(e).__name__}")
            raise FetchError(type(e).__name__) from e

    async def _fetch(self, url: str) -> FetchResult:
        async with httpx.AsyncClient(
            follow_redirects=self.config.follow_redirects,
            headers={"User-Agent": self.config.user_agent},
            timeout=None,
            transport=self._transport,
        ) as client:
            start_time = time.monotonic()
            async with client.stream("GET", url) as response:
                elapsed_ms = int((time.monotonic() - start_time) * 1000)
                await response.aread()
                return FetchResult(
                    status_code=response.status_code,
                    headers={k.lower(): v for k, v in response.headers.items()},
                    body=response.text,
                    elapsed_ms=elapsed_ms,
                )
