"""
Polling scheduler for plugin instances.

Executes every plugin instance once per global tick, one after the
other, in configuration order.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..plugins.instance import PluginInstance
from ..protocol.putval import PutvalEmitter

logger = logging.getLogger(__name__)


class PollingScheduler:
    """
    Drives the execution of all plugin instances.

    Features:
    - One global tick interval, per-instance intervals enforced by
      the instances themselves
    - Strictly sequential execution within a tick
    - One output flush per tick
    - Cooperative shutdown between ticks
    """

    def __init__(
        self,
        instances: Sequence[PluginInstance],
        interval: float,
        emitter: Optional[PutvalEmitter] = None,
    ):
        """
        Initialize the polling scheduler.

        Args:
            instances: Plugin instances, in execution order.
            interval: Global tick interval in seconds.
            emitter: Emitter flushed after every tick.
        """
        self.instances: List[PluginInstance] = list(instances)
        self.interval = interval
        self.emitter = emitter or PutvalEmitter()

        # State
        self._running = False
        self._shutdown_event = asyncio.Event()
        self.ticks = 0

    async def tick(self) -> int:
        """
        Execute every instance once.

        Returns:
            Number of instances that actually ran.
        """
        executed = 0
        for instance in self.instances:
            if await instance.exec():
                executed += 1

        self.emitter.flush()
        self.ticks += 1

        logger.debug(f"Tick {self.ticks}: {executed}/{len(self.instances)} instances executed")
        return executed

    async def run(self) -> None:
        """
        Tick every interval until stopped.

        The first tick happens one interval after the start.
        """
        logger.info(
            f"Starting polling scheduler "
            f"(instances={len(self.instances)}, interval={self.interval}s)"
        )
        self._running = True
        self._shutdown_event.clear()

        while self._running:
            try:
                await asyncio.wait_for(
                    self._shutdown_event.wait(),
                    timeout=self.interval,
                )
                # Shutdown event was set
                break
            except asyncio.TimeoutError:
                # Normal timeout, tick
                pass

            await self.tick()

        self._running = False
        logger.info("Polling scheduler stopped")

    def stop(self) -> None:
        """Stop after the current tick."""
        logger.info("Stopping polling scheduler")
        self._running = False
        self._shutdown_event.set()

    async def close(self) -> None:
        """Release the resources held by every instance."""
        for instance in self.instances:
            await instance.close()

    @property
    def is_running(self) -> bool:
        return self._running

    def get_polling_stats(self) -> Dict[str, Any]:
        """
        Get polling statistics.

        Returns:
            Dictionary of polling stats.
        """
        return {
            "running": self._running,
            "ticks": self.ticks,
            "instances": len(self.instances),
            "executions": sum(instance.executions for instance in self.instances),
            "lines_written": self.emitter.lines_written,
        }
