"""
Built-in plugin kinds.
"""
from .file_factor import FileFactorPlugin
from .http_latency import HttpLatencyPlugin
from .null import NullPlugin
from .sysctl import SysctlPlugin
from .sysctl_factor import SysctlFactorPlugin
from .sysctl_temp import SysctlTempPlugin
from .telnet_latency import TelnetLatencyPlugin

BUILTIN_PLUGINS = (
    NullPlugin,
    SysctlPlugin,
    SysctlFactorPlugin,
    SysctlTempPlugin,
    FileFactorPlugin,
    HttpLatencyPlugin,
    TelnetLatencyPlugin,
)

__all__ = [
    "BUILTIN_PLUGINS",
    "FileFactorPlugin",
    "HttpLatencyPlugin",
    "NullPlugin",
    "SysctlFactorPlugin",
    "SysctlPlugin",
    "SysctlTempPlugin",
    "TelnetLatencyPlugin",
]
