"""
HTTP source adapter.

Builds the reusable client of an HTTP probe and times GET requests.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "collectd-shrimp"


@dataclass
class FetchOutcome:
    """Outcome of one timed GET request."""
    elapsed: float
    response: Optional[httpx.Response] = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.response is not None


def build_client(
    timeout: Optional[float] = None,
    user_agent: Optional[str] = None,
) -> httpx.AsyncClient:
    """
    Create the HTTP client shared by every request of one plugin instance.

    Args:
        timeout: Request timeout in seconds, None for no timeout.
        user_agent: User-Agent header value.

    Returns:
        Configured async client.
    """
    return httpx.AsyncClient(
        headers={"User-Agent": user_agent or DEFAULT_USER_AGENT},
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
    )


async def timed_get(client: httpx.AsyncClient, url: str) -> FetchOutcome:
    """
    Issue a GET request and measure how long it took.

    Errors are returned in the outcome rather than raised, so that the
    caller can turn them into values.

    Args:
        client: Client to send the request with.
        url: URL to fetch.

    Returns:
        Elapsed wall time and either the response or the error.
    """
    start = time.monotonic()
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        elapsed = time.monotonic() - start
        logger.debug(f"GET {url} failed after {elapsed:.3f}s: {e!r}")
        return FetchOutcome(elapsed=elapsed, error=e)

    return FetchOutcome(elapsed=time.monotonic() - start, response=response)
