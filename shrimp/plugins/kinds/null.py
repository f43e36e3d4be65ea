"""
null plugin.

Takes neither settings nor targets and always reports 0. Useful to
check that collectd picks up the sampler's output at all.
"""
from typing import List, Sequence

from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now


class NullPlugin(Plugin):
    """Always reports 0."""

    name = "null"
    description = "Reports 0 on every execution, to check that values reach collectd."

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        config.check_no_settings_required(instance)
        config.check_no_targets_required(instance, targets)

    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: PluginState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        return [MeasurementResult(time=now(), value="0")]
