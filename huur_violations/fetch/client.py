"""Browser-like HTTP session with retries."""
import logging
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from huur_violations.config import config

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
}


class HttpSession:
    """Cookie-bearing HTTP session used by a single finder invocation.

    Cookies set by a portal (anti-forgery cookies in particular) persist for
    the lifetime of the session and are replayed on later requests.
    Transport-level failures are retried with exponential backoff before
    being re-raised to the caller.
    """

    def __init__(
        self,
        origin: Optional[str] = None,
        referer: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        session_headers = dict(DEFAULT_HEADERS)
        if origin:
            session_headers["Origin"] = origin
        if referer:
            session_headers["Referer"] = referer
        if headers:
            session_headers.update(headers)

        limits = httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        )
        self.client = httpx.AsyncClient(
            http2=transport is None,
            headers=session_headers,
            timeout=config.TIMEOUT,
            follow_redirects=True,
            limits=limits,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying timeouts and network errors."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(config.MAX_RETRIES, 1)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(self.client.request, method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)
