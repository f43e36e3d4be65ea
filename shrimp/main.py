"""
Sampler - Main Entry Point.

Starts the sampler that:
1. Loads the plugin configuration file
2. Validates and initializes every plugin instance
3. Executes the instances on every tick
4. Writes PUTVAL lines on stdout for collectd's Exec plugin
"""
import asyncio
import logging
import signal
import socket
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .config import SamplerSettings, get_settings
from .exceptions import SamplerError
from .plugins.definitions import SamplerConfig
from .plugins.instance import PluginInstance
from .plugins.loader import ConfigLoader, load_plugins
from .plugins.registry import PluginRegistry
from .polling.scheduler import PollingScheduler
from .protocol.putval import PutvalEmitter, format_number

logger = logging.getLogger(__name__)


def configure_logging(level: str = "WARNING") -> None:
    """Send logs to stderr, stdout carries the protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


class Sampler:
    """
    Main sampler orchestrator.

    Coordinates configuration loading, plugin instances and the
    polling scheduler.
    """

    def __init__(
        self,
        settings: Optional[SamplerSettings] = None,
        config_file: Optional[Path] = None,
        registry: Optional[PluginRegistry] = None,
        emitter: Optional[PutvalEmitter] = None,
    ):
        """
        Initialize the sampler.

        Args:
            settings: Sampler settings.
            config_file: Configuration file, overriding the settings.
            registry: Registry of plugin kinds.
            emitter: Emitter receiving every value.
        """
        self.settings = settings or get_settings()
        self.config_file = Path(config_file) if config_file else self.settings.config_file
        self.registry = registry or PluginRegistry.with_builtins()
        self.emitter = emitter or PutvalEmitter()

        # Core components
        self.config: Optional[SamplerConfig] = None
        self.instances: List[PluginInstance] = []
        self.scheduler: Optional[PollingScheduler] = None

        # Resolved identity
        self.hostname: Optional[str] = None
        self.interval: Optional[float] = None

    def start(self) -> None:
        """
        Load the configuration and initialize every plugin instance.

        Raises:
            SamplerError: If the configuration or an instance is invalid.
        """
        logger.info("Starting sampler...")

        self.config = ConfigLoader().load_from_file(self.config_file)

        self.hostname = self._resolve_hostname(self.config)
        self.interval = self.config.interval or self.settings.interval
        interval_str = format_number(self.interval)

        self.instances = load_plugins(
            self.config,
            hostname=self.hostname,
            interval=interval_str,
            registry=self.registry,
            emitter=self.emitter,
        )

        self.scheduler = PollingScheduler(
            self.instances,
            interval=self.interval,
            emitter=self.emitter,
        )

        logger.info(
            f"Sampler started as {self.hostname} "
            f"(instances={len(self.instances)}, interval={interval_str}s)"
        )

    def _resolve_hostname(self, config: SamplerConfig) -> str:
        return self.settings.hostname or config.hostname or socket.gethostname()

    async def serve_forever(self) -> None:
        """Run the scheduler until stopped."""
        if self.scheduler is None:
            self.start()
        await self.scheduler.run()

    def stop(self) -> None:
        """Stop the sampler after the current tick."""
        if self.scheduler is not None:
            self.scheduler.stop()

    async def close(self) -> None:
        if self.scheduler is not None:
            await self.scheduler.close()

    def get_stats(self) -> dict:
        """Get sampler statistics."""
        stats = {
            "hostname": self.hostname,
            "interval": self.interval,
        }

        if self.scheduler:
            stats["polling"] = self.scheduler.get_polling_stats()

        return stats


def setup_signal_handlers(sampler: Sampler, loop: asyncio.AbstractEventLoop):
    """Setup signal handlers for graceful shutdown."""
    def signal_handler():
        logger.info("Received shutdown signal")
        sampler.stop()

    # Handle both SIGINT and SIGTERM
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            signal.signal(sig, lambda s, f: signal_handler())


async def _serve(sampler: Sampler) -> None:
    setup_signal_handlers(sampler, asyncio.get_running_loop())
    try:
        await sampler.serve_forever()
    finally:
        await sampler.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments; the first one, if any, is the
              configuration file.

    Returns:
        Process exit status.
    """
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"error: invalid environment settings: {e}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    config_file = Path(argv[0]) if argv else None
    sampler = Sampler(settings=settings, config_file=config_file)

    try:
        sampler.start()
        asyncio.run(_serve(sampler))
    except SamplerError as e:
        logger.debug(f"Fatal error: {e.to_dict()}", exc_info=True)
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
