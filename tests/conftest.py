"""
Shared pytest fixtures for sampler tests.

Provides fixtures for:
- Output capture (emitter writing to a buffer)
- Fake sysctl tree (/proc/sys replacement)
- Configuration blocks
- Controllable monotonic clock
"""
import io
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from shrimp.plugins.definitions import PluginConfigBlock
from shrimp.protocol.putval import PutvalEmitter
from shrimp.sources import sysctl as sysctl_source


# ============================================================================
# Output Fixtures
# ============================================================================

@pytest.fixture
def output() -> io.StringIO:
    """Buffer receiving protocol lines."""
    return io.StringIO()


@pytest.fixture
def emitter(output) -> PutvalEmitter:
    """Emitter writing into the output buffer."""
    return PutvalEmitter(output)


# ============================================================================
# Source Fixtures
# ============================================================================

class FakeSysctl:
    """Writes sysctl keys into a temporary /proc/sys tree."""

    def __init__(self, root: Path):
        self.root = root

    def set(self, key: str, value: str) -> Path:
        path = self.root.joinpath(*key.split("."))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(value + "\n", encoding="utf-8")
        return path


@pytest.fixture
def fake_sysctl(tmp_path, monkeypatch) -> FakeSysctl:
    """Replace /proc/sys with an empty temporary tree."""
    root = tmp_path / "proc_sys"
    root.mkdir()
    monkeypatch.setattr(sysctl_source, "PROC_SYS", root)
    return FakeSysctl(root)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def make_block() -> Callable[..., PluginConfigBlock]:
    """Factory for plugin configuration blocks."""

    def _make(type_name: str = "gauge", **kwargs: Any) -> PluginConfigBlock:
        data: Dict[str, Any] = {"type": type_name}
        data.update(kwargs)
        return PluginConfigBlock.model_validate(data)

    return _make


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
