"""
sysctl plugin.

Reports the raw value of sysctl keys, one value per key.
"""
from typing import List, Sequence

from ...sources.sysctl import read_sysctl
from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now


class SysctlPlugin(Plugin):
    """Raw sysctl values."""

    name = "sysctl"
    description = "Read sysctl keys and report their value as is."

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        config.check_no_settings_required(instance)
        config.check_targets_required(instance, targets)

    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: PluginState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        results: List[MeasurementResult] = []

        for target in targets:
            value = read_sysctl(target)
            results.append(MeasurementResult(time=now(), value=value, target=target))

        return results
