"""HTTP page fetcher with response caching and rate limit retries."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

import aiohttp
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ghtopdep.config import Settings
from ghtopdep.domain.exceptions import NetworkError, RateLimitError
from ghtopdep.domain.page_fetcher_interface import IPageFetcher
from ghtopdep.domain.response_cache_interface import IResponseCache


logger = logging.getLogger(__name__)


class AiohttpPageFetcher(IPageFetcher):
    """Fetches dependents pages over HTTP.

    Implements the IPageFetcher port. A cache hit never touches the network.
    Only HTTP 429 responses are retried, waiting 1, 2, 4, ... seconds between
    attempts; every other failure is raised on first occurrence.
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[IResponseCache] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the fetcher.

        Args:
            settings: Settings providing user agent, timeout and retry ceiling
            cache: Response cache consulted before every request
            sleep: Coroutine used to wait between rate limited attempts
        """
        self._settings = settings
        self._cache = cache
        self._sleep = sleep
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Create the HTTP session on first use."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self._settings.user_agent},
                timeout=aiohttp.ClientTimeout(total=self._settings.timeout_seconds),
            )
        return self._session

    async def _request(self, url: str) -> str:
        """Issue a single GET request.

        Raises:
            RateLimitError: On HTTP 429
            NetworkError: On any other HTTP or transport failure
        """
        session = await self._get_session()
        try:
            async with session.get(url) as response:
                if response.status == 429:
                    raise RateLimitError(url)
                if response.status >= 400:
                    raise NetworkError(
                        f"GET {url} failed with HTTP {response.status}",
                        url,
                        status=response.status,
                    )
                return await response.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"GET {url} failed: {e!r}", url) from e

    async def fetch_page(self, url: str) -> str:
        """Fetch a page, serving it from the cache when possible.

        Args:
            url: Absolute page URL

        Returns:
            Raw response body

        Raises:
            RateLimitError: If every attempt was rate limited
            NetworkError: On the first non rate limit failure
        """
        if self._cache is not None:
            cached = self._cache.get(url)
            if cached is not None:
                logger.debug(f"Cache hit for {url}")
                return cached

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RateLimitError),
            stop=stop_after_attempt(self._settings.max_retries),
            wait=wait_exponential(multiplier=1, exp_base=2),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        body = None
        async for attempt in retrying:
            with attempt:
                logger.debug(f"GET {url} (attempt {attempt.retry_state.attempt_number})")
                body = await self._request(url)

        if self._cache is not None:
            self._cache.set(url, body)
        return body

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
