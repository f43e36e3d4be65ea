"""
Plugin instance wrapper.

Binds one configuration block to one plugin kind and executes it on
scheduler ticks, honoring the instance's own interval.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..protocol.putval import PutvalEmitter, build_prefix, format_number
from .base import MeasurementResult, Plugin, PluginConfig
from .definitions import PluginConfigBlock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginIdentity:
    """Identifier parts shared by every value of one instance."""
    hostname: str
    plugin_name: str
    instance: str
    type_name: str

    @property
    def prefix(self) -> str:
        return build_prefix(self.hostname, self.plugin_name, self.instance, self.type_name)

    def __str__(self) -> str:
        return f"{self.hostname}/{self.plugin_name}-{self.instance}/{self.type_name}"


class PluginInstance:
    """
    One configured, named occurrence of a plugin kind.

    Everything that does not change between executions (targets,
    interval text, line prefix, runtime state) is computed once here.
    """

    def __init__(
        self,
        plugin: Plugin,
        block: PluginConfigBlock,
        hostname: str,
        instance: str,
        interval: str,
        emitter: Optional[PutvalEmitter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize and validate the instance.

        Args:
            plugin: Plugin kind implementation.
            block: Configuration block of the instance.
            hostname: Host name of the identifier.
            instance: Instance name.
            interval: Global interval text.
            emitter: Emitter receiving the results.
            clock: Monotonic clock used for the interval gate.

        Raises:
            ConfigurationError: If the block does not suit the plugin kind.
        """
        self.plugin = plugin
        self.instance = instance
        self.emitter = emitter or PutvalEmitter()
        self._clock = clock

        self.targets: List[str] = block.effective_targets()
        self.config = PluginConfig.from_block(instance, block, plugin.settings_model)

        if self.config.interval is not None:
            self.interval: Optional[float] = self.config.interval
            self.interval_str = format_number(self.config.interval)
        else:
            self.interval = None
            self.interval_str = interval

        self.identity = PluginIdentity(
            hostname=hostname,
            plugin_name=block.name or plugin.name,
            instance=instance,
            type_name=block.type_name,
        )
        self.prefix = self.identity.prefix

        self.plugin.pre(instance, self.config, self.targets)
        self.state = self.plugin.new_state(instance, self.config, self.targets)

        self._last: Optional[float] = None
        self.executions = 0

        logger.info(
            f"Loaded {self.identity} "
            f"(targets={len(self.targets)}, interval={self.interval_str})"
        )

    def is_due(self) -> bool:
        """Check whether the instance interval has elapsed."""
        if self.interval is None or self._last is None:
            return True
        return self._clock() - self._last >= self.interval

    async def exec(self) -> bool:
        """
        Execute the instance if it is due and emit its results.

        Returns:
            True if the plugin ran, False if this tick was skipped.
        """
        if not self.is_due():
            logger.debug(f"Skipping {self.identity}, interval not elapsed")
            return False

        if self.interval is not None:
            self._last = self._clock()

        results = await self.plugin.exec(self.instance, self.config, self.state, self.targets)
        self.executions += 1

        for result in results:
            self._emit(result)

        return True

    def _emit(self, result: MeasurementResult) -> None:
        self.emitter.emit(
            self.prefix,
            self.interval_str,
            result.time,
            result.value,
            result.sub_identifier,
        )

    async def close(self) -> None:
        await self.state.close()

    def __repr__(self) -> str:
        return f"PluginInstance({self.identity}, executions={self.executions})"
