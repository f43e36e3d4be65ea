"""
sysctl source adapter.

Reads kernel state values by key. Linux exposes them as files under
/proc/sys (``kernel.hostname`` is ``/proc/sys/kernel/hostname``), the
BSDs only through the sysctl tool.
"""
import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import SourceError

logger = logging.getLogger(__name__)

PROC_SYS = Path("/proc/sys")
SYSCTL_COMMAND = "sysctl"

_TEMPERATURE_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([CFK])\s*$")


@dataclass(frozen=True)
class Temperature:
    """
    A temperature in the unit it was read in.

    ``unit`` is one of ``C``, ``F`` or ``K``. Conversions only happen
    when another scale is asked for.
    """
    value: float
    unit: str = "C"

    @property
    def kelvin(self) -> float:
        if self.unit == "K":
            return self.value
        return self.celsius + 273.15

    @property
    def celsius(self) -> float:
        if self.unit == "C":
            return self.value
        if self.unit == "K":
            return self.value - 273.15
        return (self.value - 32.0) * 5.0 / 9.0

    @property
    def fahrenheit(self) -> float:
        if self.unit == "F":
            return self.value
        return self.celsius * 9.0 / 5.0 + 32.0


def parse_temperature(raw: str) -> Temperature:
    """
    Parse a sysctl temperature such as ``45.0C``.

    Args:
        raw: Value as printed by the sysctl tool.

    Returns:
        The parsed temperature.

    Raises:
        ValueError: If the value does not carry a temperature unit.
    """
    match = _TEMPERATURE_RE.match(raw)
    if not match:
        raise ValueError(f"not a temperature: {raw!r}")

    return Temperature(value=float(match.group(1)), unit=match.group(2))


def _proc_path(key: str) -> Path:
    return PROC_SYS.joinpath(*key.split("."))


def read_sysctl(key: str) -> str:
    """
    Read the value of a sysctl key as text.

    Args:
        key: Dotted sysctl key.

    Returns:
        The value with surrounding whitespace removed.

    Raises:
        SourceError: If the key cannot be read.
    """
    if PROC_SYS.is_dir():
        path = _proc_path(key)
        logger.debug(f"Reading sysctl {key} from {path}")
        try:
            return path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"cannot read sysctl key '{key}'", source=key) from e

    logger.debug(f"Reading sysctl {key} with {SYSCTL_COMMAND}")
    try:
        completed = subprocess.run(
            [SYSCTL_COMMAND, "-n", key],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise SourceError(f"cannot read sysctl key '{key}'", source=key) from e

    return completed.stdout.strip()


def read_sysctl_int(key: str) -> int:
    """Read a sysctl key and parse it as an integer."""
    raw = read_sysctl(key)
    try:
        return int(raw)
    except ValueError as e:
        raise SourceError(
            f"cannot parse sysctl key '{key}' with value '{raw}' as integer",
            source=key,
            raw_value=raw,
        ) from e


def read_sysctl_temperature(key: str) -> Temperature:
    """Read a sysctl key and parse it as a temperature."""
    raw = read_sysctl(key)
    try:
        return parse_temperature(raw)
    except ValueError as e:
        raise SourceError(
            f"cannot parse key '{key}' with value '{raw}' as a temperature",
            source=key,
            raw_value=raw,
        ) from e
