"""
telnet_latency plugin.

Connects to ``host:port`` targets and reports the time until the peer
answers, in seconds. Without an expected value the first received byte
counts as an answer. Failures are reported as negative values:

  * -1: connection or IO error
  * -2: the response differs from the configured expected value
"""
import asyncio
import logging
import time
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ...protocol.putval import format_number
from ...sources.tcp import ReadMode, query_tcp
from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now

logger = logging.getLogger(__name__)

CONNECTION_ERROR = "-1"
UNEXPECTED_RESPONSE = "-2"


class TelnetLatencySettings(BaseModel):
    """Settings of the telnet_latency plugin."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    query: Optional[str] = Field(default=None, description="Text sent after connecting")
    expect: Optional[str] = Field(default=None, description="Expected response")
    timeout: Optional[float] = Field(default=None, gt=0, description="Timeout (seconds)")


class TelnetLatencyState(PluginState):
    """Timeout and read mode resolved once per instance."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        read_mode: ReadMode = ReadMode.ONE_BYTE,
        query: Optional[str] = None,
        expected: Optional[str] = None,
    ):
        self.timeout = timeout
        self.read_mode = read_mode
        self.query = query
        self.expected = expected

    @classmethod
    def new(
        cls,
        instance: str,
        config: PluginConfig,
        targets: Sequence[str],
    ) -> "TelnetLatencyState":
        settings: TelnetLatencySettings = config.settings or TelnetLatencySettings()

        read_mode = ReadMode.EXPECTED if settings.expect is not None else ReadMode.ONE_BYTE

        return cls(
            timeout=settings.timeout,
            read_mode=read_mode,
            query=settings.query,
            expected=settings.expect,
        )


class TelnetLatencyPlugin(Plugin):
    """Latency of TCP services."""

    name = "telnet_latency"
    description = (
        "Connect to a host and port and report the time required to receive a "
        "response. An expected response and a timeout can be configured; errors "
        "are reported as negative values."
    )

    settings_model = TelnetLatencySettings
    state_class = TelnetLatencyState

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        config.check_targets_required(instance, targets)

    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: TelnetLatencyState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        results: List[MeasurementResult] = []

        for target in targets:
            measurement_time = now()
            start = time.monotonic()

            try:
                matched = await query_tcp(
                    target,
                    timeout=state.timeout,
                    read_mode=state.read_mode,
                    query=state.query,
                    expected=state.expected,
                )
            except (OSError, asyncio.TimeoutError, asyncio.IncompleteReadError, ValueError) as e:
                logger.debug(f"{instance}: {target} failed: {e!r}")
                value = CONNECTION_ERROR
            else:
                if matched:
                    value = format_number(round(time.monotonic() - start, 6))
                else:
                    value = UNEXPECTED_RESPONSE

            results.append(MeasurementResult(time=measurement_time, value=value, target=target))

        return results
