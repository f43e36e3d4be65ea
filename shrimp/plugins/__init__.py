"""
Plugin framework.

Contract, instance wrapper, registry and loader of measurement plugins.
"""
from .base import (
    EmptyState,
    MeasurementResult,
    Plugin,
    PluginConfig,
    PluginState,
    now,
)
from .definitions import PluginConfigBlock, SamplerConfig
from .instance import PluginIdentity, PluginInstance
from .loader import ConfigLoader, load_plugins
from .registry import PluginRegistry

__all__ = [
    "ConfigLoader",
    "EmptyState",
    "MeasurementResult",
    "Plugin",
    "PluginConfig",
    "PluginConfigBlock",
    "PluginIdentity",
    "PluginInstance",
    "PluginRegistry",
    "PluginState",
    "SamplerConfig",
    "load_plugins",
    "now",
]
