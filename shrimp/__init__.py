"""
collectd-shrimp - periodic telemetry sampler for collectd's Exec plugin.

Runs measurement plugins on a schedule and writes every value as a
PUTVAL line of the collectd plain text protocol.
"""
from .config import SamplerSettings, get_settings
from .main import Sampler

__version__ = "0.3.0"

__all__ = [
    "Sampler",
    "SamplerSettings",
    "get_settings",
]
