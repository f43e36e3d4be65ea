"""
Measurement source adapters.

Each adapter reads one raw value from one kind of source.
"""
from .files import read_file_int
from .http import FetchOutcome, build_client, timed_get
from .sysctl import (
    Temperature,
    parse_temperature,
    read_sysctl,
    read_sysctl_int,
    read_sysctl_temperature,
)
from .tcp import ReadMode, parse_target, query_tcp

__all__ = [
    "FetchOutcome",
    "ReadMode",
    "Temperature",
    "build_client",
    "parse_target",
    "parse_temperature",
    "query_tcp",
    "read_file_int",
    "read_sysctl",
    "read_sysctl_int",
    "read_sysctl_temperature",
    "timed_get",
]
