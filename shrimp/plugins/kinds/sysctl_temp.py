"""
sysctl_temp plugin.

Reads a temperature from sysctl and reports it in the Kelvin, Celsius
or Fahrenheit scale. A value that is not a temperature is fatal.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ...protocol.putval import format_number
from ...sources.sysctl import Temperature, read_sysctl_temperature
from ..base import MeasurementResult, Plugin, PluginConfig, PluginState, now

# Larger precisions are capped one digit above this.
MAX_FIXED_PRECISION = 7


class TemperatureScale(str, Enum):
    """Temperature scales."""
    KELVIN = "Kelvin"
    CELSIUS = "Celsius"
    FAHRENHEIT = "Fahrenheit"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for scale in cls:
                if scale.value.lower() == value.lower():
                    return scale
        return None

    def convert(self, temperature: Temperature) -> float:
        if self == TemperatureScale.KELVIN:
            return temperature.kelvin
        if self == TemperatureScale.FAHRENHEIT:
            return temperature.fahrenheit
        return temperature.celsius


@dataclass(frozen=True)
class NumberFormat:
    """
    How a temperature is rendered.

    ``precision`` is the number of fixed fractional digits, or None for
    the shortest text that represents the value.
    """
    precision: Optional[int] = None

    @classmethod
    def resolve(cls, precision: Optional[int]) -> "NumberFormat":
        if precision is None:
            return cls()
        return cls(min(precision, MAX_FIXED_PRECISION + 1))

    def render(self, value: float) -> str:
        if self.precision is None:
            # conversions leave float noise past the sixth digit
            return format_number(round(value, 6))
        return f"{value:.{self.precision}f}"


class TemperatureSettings(BaseModel):
    """Settings of the sysctl_temp plugin."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scale: Optional[TemperatureScale] = None
    precision: Optional[int] = Field(default=None, ge=0)


class TemperatureState(PluginState):
    """Scale and format resolved once per instance."""

    def __init__(self, scale: TemperatureScale, number_format: NumberFormat):
        self.scale = scale
        self.number_format = number_format

    @classmethod
    def new(
        cls,
        instance: str,
        config: PluginConfig,
        targets: Sequence[str],
    ) -> "TemperatureState":
        settings: Optional[TemperatureSettings] = config.settings

        # Celsius unless told otherwise
        scale = TemperatureScale.CELSIUS
        precision = None
        if settings is not None:
            scale = settings.scale or TemperatureScale.CELSIUS
            precision = settings.precision

        return cls(scale, NumberFormat.resolve(precision))

    def render(self, temperature: Temperature) -> str:
        return self.number_format.render(self.scale.convert(temperature))


class SysctlTempPlugin(Plugin):
    """Temperatures read from sysctl."""

    name = "sysctl_temp"
    description = (
        "Read a temperature value from sysctl and report it in the Kelvin, "
        "Celsius or Fahrenheit scale. Fails if the value is not a temperature."
    )

    settings_model = TemperatureSettings
    state_class = TemperatureState

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        config.check_targets_required(instance, targets)

    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: TemperatureState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        results: List[MeasurementResult] = []

        for target in targets:
            temperature = read_sysctl_temperature(target)
            results.append(
                MeasurementResult(time=now(), value=state.render(temperature), target=target)
            )

        return results
