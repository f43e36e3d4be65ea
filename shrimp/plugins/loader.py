"""
Plugin configuration loader.

Loads the YAML configuration file and turns every configured plugin
instance into an executable PluginInstance.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from ..protocol.putval import PutvalEmitter
from .definitions import SamplerConfig
from .instance import PluginInstance
from .registry import PluginRegistry

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Loads sampler configuration from YAML files.

    Parses the file and validates it into a SamplerConfig.
    """

    def load_from_file(self, file_path: Union[str, Path]) -> SamplerConfig:
        """
        Load the configuration from a YAML file.

        Args:
            file_path: Path to the YAML configuration file.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigurationError(f"cannot load configuration file '{file_path}'")

        logger.info(f"Loading configuration from {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"cannot load configuration file '{file_path}': {e}"
            ) from e

        return self.load_from_dict(data or {}, source=str(file_path))

    def load_from_dict(self, data: Dict[str, Any], source: str = "<dict>") -> SamplerConfig:
        """
        Validate already parsed configuration data.

        Args:
            data: Parsed configuration.
            source: Where the data came from, for error messages.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If the data does not match the schema.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"invalid configuration in '{source}': expected a mapping")

        try:
            config = SamplerConfig.model_validate(data)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise ConfigurationError(
                f"invalid configuration in '{source}': {'; '.join(errors)}",
                errors=errors,
            ) from e

        if not config.plugins:
            logger.warning(f"No plugins configured in {source}")

        return config


def load_plugins(
    config: SamplerConfig,
    hostname: str,
    interval: str,
    registry: Optional[PluginRegistry] = None,
    emitter: Optional[PutvalEmitter] = None,
) -> List[PluginInstance]:
    """
    Build one executable instance per configured plugin instance.

    Instances are returned in configuration file order.

    Args:
        config: Validated configuration.
        hostname: Host name of every identifier.
        interval: Global interval text.
        registry: Registry of plugin kinds, built-ins by default.
        emitter: Emitter shared by all instances.

    Returns:
        List of plugin instances.

    Raises:
        ConfigurationError: If a plugin kind is unknown or an instance
            is misconfigured.
    """
    registry = registry or PluginRegistry.with_builtins()
    emitter = emitter or PutvalEmitter()

    instances: List[PluginInstance] = []
    for kind, blocks in config.plugins.items():
        if kind not in registry:
            raise ConfigurationError(
                f"unknown plugin '{kind}', available plugins: {', '.join(registry.names())}"
            )

        for instance_name, block in blocks.items():
            plugin = registry.create(kind)
            instances.append(
                PluginInstance(
                    plugin=plugin,
                    block=block,
                    hostname=hostname,
                    instance=instance_name,
                    interval=interval,
                    emitter=emitter,
                )
            )

    logger.info(f"Loaded {len(instances)} plugin instances")
    return instances
