"""
sysctl_factor plugin.

Reads an integer sysctl value and multiplies it by a factor.

For instance, a sysctl reporting a temperature in m°C where 32128 means
32.128°C takes a factor of 0.001, and a sysctl counting memory pages
takes the page size (4096) as factor to report bytes.
"""
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ...protocol.putval import format_scaled
from ...sources.sysctl import read_sysctl_int
from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now


class FactorSettings(BaseModel):
    """Settings of the factor-scaled plugins."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    factor: float = Field(allow_inf_nan=False, description="Multiplier applied to the raw value")


class SysctlFactorPlugin(Plugin):
    """Factor-scaled sysctl values."""

    name = "sysctl_factor"
    description = "Read an integer value from sysctl and apply a factor to it."

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
            raw = read_sysctl_int(target)
            results.append(
                MeasurementResult(
                    time=now(),
                    value=format_scaled(raw, factor),
                    target=target,
                )
            )

        return results
