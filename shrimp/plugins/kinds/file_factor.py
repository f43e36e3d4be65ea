"""
file_factor plugin.

Reads an integer from a file and multiplies it by a factor. Works for
the many /sys files that hold a single number, such as
/sys/class/thermal/thermal_zone0/temp (m°C, factor 0.001).
"""
from typing import List, Sequence

from ...protocol.putval import format_scaled
from ...sources.files import read_file_int
from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now
from .sysctl_factor import FactorSettings


class FileFactorPlugin(Plugin):
    """Factor-scaled integer files."""

    name = "file_factor"
    description = "Read an integer value from a file and apply a factor to it."

    settings_model = FactorSettings

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        config.check_settings_required(instance)
        config.check_targets_required(instance, targets)

    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: PluginState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        results: List[MeasurementResult] = []
        factor = config.settings.factor

        for target in targets:
            raw = read_file_int(target)
            results.append(
                MeasurementResult(
                    time=now(),
                    value=format_scaled(raw, factor),
                    target=target,
                )
            )

        return results
