"""
Configuration file schema.

Defines the pydantic models a configuration file is validated into:
the file itself and one block per configured plugin instance.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class PluginConfigBlock(BaseModel):
    """
    One configured plugin instance.

    The effective target list is ``targets`` followed by ``target``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    type_name: str = Field(alias="type", min_length=1, description="collectd type")
    name: Optional[str] = Field(default=None, description="Plugin display name override")
    interval: Optional[float] = Field(default=None, description="Per-instance interval (seconds)")
    target: Optional[str] = None
    targets: Optional[List[str]] = None
    settings: Optional[Dict[str, Any]] = None

    @field_validator("interval", mode="before")
    @classmethod
    def _lenient_interval(cls, value: Any) -> Optional[float]:
        """Drop an interval that is not a positive number."""
        if value is None:
            return None
        try:
            interval = float(value)
        except (TypeError, ValueError):
            interval = 0.0
        if not interval > 0 or interval == float("inf"):
            logger.warning(
                f"Ignoring invalid instance interval {value!r}, "
                f"using the global interval"
            )
            return None
        return interval

    def effective_targets(self) -> List[str]:
        """Get the configured targets in order."""
        targets = list(self.targets or [])
        if self.target is not None:
            targets.append(self.target)
        return targets


class SamplerConfig(BaseModel):
    """
    Content of the configuration file.

    ``plugins`` maps a plugin kind to its instances, both in file order.
    """

    model_config = ConfigDict(extra="forbid")

    hostname: Optional[str] = None
    interval: Optional[float] = Field(default=None, gt=0)
    plugins: Dict[str, Dict[str, PluginConfigBlock]] = Field(default_factory=dict)

    def instance_count(self) -> int:
        return sum(len(instances) for instances in self.plugins.values())
