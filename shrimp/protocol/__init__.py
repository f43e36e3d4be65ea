"""
Output protocol module.

Renders measurements in the collectd plain text protocol.
"""
from .putval import PutvalEmitter, build_prefix, format_number, format_scaled

__all__ = [
    "PutvalEmitter",
    "build_prefix",
    "format_number",
    "format_scaled",
]
