"""
Polling module.

Handles the periodic execution of plugin instances.
"""
from .scheduler import PollingScheduler

__all__ = [
    "PollingScheduler",
]
