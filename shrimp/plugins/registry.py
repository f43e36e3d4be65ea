"""
Plugin registry.

Maps plugin kind names, as used for configuration sections, to the
classes implementing them.
"""
import logging
from typing import Dict, Iterator, List, Optional, Type

from .base import Plugin

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Central registry of plugin kinds.

    Kinds are kept in registration order.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._plugins: Dict[str, Type[Plugin]] = {}

    @classmethod
    def with_builtins(cls) -> "PluginRegistry":
        """
        Create a registry holding every built-in plugin kind.

        Returns:
            PluginRegistry with the built-in kinds.
        """
        from .kinds import BUILTIN_PLUGINS

        registry = cls()
        for plugin_class in BUILTIN_PLUGINS:
            registry.register(plugin_class)
        return registry

    def register(self, plugin_class: Type[Plugin]) -> None:
        """
        Register a plugin kind.

        Args:
            plugin_class: The plugin class to register.

        Raises:
            ValueError: If a kind with the same name is already registered.
        """
        name = plugin_class.name
        if name in self._plugins:
            raise ValueError(f"Plugin '{name}' is already registered")

        self._plugins[name] = plugin_class
        logger.debug(f"Registered plugin: {name} ({plugin_class.__name__})")

    def unregister(self, name: str) -> Optional[Type[Plugin]]:
        """
        Remove a plugin kind from the registry.

        Returns:
            The removed class, or None if not found.
        """
        return self._plugins.pop(name, None)

    def get(self, name: str) -> Optional[Type[Plugin]]:
        """Get a plugin class by kind name."""
        return self._plugins.get(name)

    def create(self, name: str) -> Optional[Plugin]:
        """
        Instantiate a plugin kind by name.

        Args:
            name: Plugin kind name.

        Returns:
            A new plugin object, or None if the kind is unknown.
        """
        plugin_class = self.get(name)
        if plugin_class is None:
            return None
        return plugin_class()

    def names(self) -> List[str]:
        return list(self._plugins)

    def describe(self) -> Dict[str, str]:
        """Get the description of every registered kind."""
        return {name: cls.description for name, cls in self._plugins.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def __iter__(self) -> Iterator[Type[Plugin]]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)
