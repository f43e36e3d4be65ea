"""
http_latency plugin.

Fetches URLs and reports the time the request took, in seconds. A
timeout or an expected response body can be configured; failures are
reported as negative values:

  * -1: transport error
  * -2: the body differs from the configured expected value
  * -3: the body cannot be decoded
  * -xxx: HTTP error status such as 404 or 503

A request slower than the timeout reports the timeout value itself.
"""
import logging
from enum import Enum
from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ...protocol.putval import format_number
from ...sources.http import FetchOutcome, build_client, timed_get
from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now

logger = logging.getLogger(__name__)

TRANSPORT_ERROR = "-1"
UNEXPECTED_RESPONSE = "-2"
DECODE_ERROR = "-3"


class ResponseCheck(str, Enum):
    """What a successful response is checked against."""
    NONE = "none"
    EXPECTED = "expected"


class HttpLatencySettings(BaseModel):
    """Settings of the http_latency plugin."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    expect: Optional[str] = Field(default=None, description="Expected response body")
    timeout: Optional[float] = Field(default=None, gt=0, description="Request timeout (seconds)")
    user_agent: Optional[str] = None


class HttpLatencyState(PluginState):
    """HTTP client and response check resolved once per instance."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = float("inf"),
        expected: Optional[str] = None,
    ):
        self.client = client
        self.timeout = timeout
        self.expected = expected
        self.check = ResponseCheck.EXPECTED if expected is not None else ResponseCheck.NONE

    @classmethod
    def new(
        cls,
        instance: str,
        config: PluginConfig,
        targets: Sequence[str],
    ) -> "HttpLatencyState":
        settings: HttpLatencySettings = config.settings or HttpLatencySettings()

        client = build_client(timeout=settings.timeout, user_agent=settings.user_agent)
        timeout = settings.timeout if settings.timeout is not None else float("inf")

        return cls(client, timeout=timeout, expected=settings.expect)

    def evaluate(self, outcome: FetchOutcome) -> str:
        """
        Turn the outcome of a request into the reported value.

        Args:
            outcome: Timed request outcome.

        Returns:
            Elapsed seconds, the timeout, or a negative error code.
        """
        if outcome.elapsed > self.timeout:
            return format_number(self.timeout)

        if outcome.error is not None:
            if isinstance(outcome.error, httpx.DecodingError):
                return DECODE_ERROR
            return TRANSPORT_ERROR

        response = outcome.response
        if response.is_error:
            return f"-{response.status_code}"

        if self.check == ResponseCheck.EXPECTED:
            try:
                body = response.content.decode(response.encoding or "utf-8")
            except (UnicodeDecodeError, LookupError):
                return DECODE_ERROR
            if body.strip() != self.expected:
                return UNEXPECTED_RESPONSE

        return format_number(round(outcome.elapsed, 6))

    async def close(self) -> None:
        await self.client.aclose()


class HttpLatencyPlugin(Plugin):
    """Latency of HTTP GET requests."""

    name = "http_latency"
    description = (
        "Fetch a URL using HTTP and report the time required to issue the query. "
        "A timeout or an expected body can be configured; errors are reported as "
        "negative values."
    )

    settings_model = HttpLatencySettings
    state_class = HttpLatencyState

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        config.check_targets_required(instance, targets)

    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: HttpLatencyState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        results: List[MeasurementResult] = []

        for target in targets:
            measurement_time = now()
            outcome = await timed_get(state.client, target)
            value = state.evaluate(outcome)

            if value.startswith("-"):
                logger.debug(f"{instance}: {target} reported {value}")

            results.append(MeasurementResult(time=measurement_time, value=value, target=target))

        return results
