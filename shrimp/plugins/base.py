"""
Plugin contract.

Every plugin kind implements the same contract: a pre-flight check of
its configuration, a measurement pass returning one result per target,
and a static name and description. Kind-specific runtime state is built
once per instance and threaded through every measurement pass.
"""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from ..exceptions import ClockError, ConfigurationError
from .definitions import PluginConfigBlock


def now() -> int:
    """
    Current unix time in whole seconds.

    Raises:
        ClockError: If the system clock is set before the epoch.
    """
    current = time.time()
    if current < 0:
        raise ClockError()
    return int(current)


@dataclass
class MeasurementResult:
    """
    Result for one target of a plugin execution.

    ``type_instance`` takes precedence over ``target`` as the
    sub-identifier of the emitted value; with neither, the value has
    no sub-identifier.
    """
    time: int
    value: str
    target: Optional[str] = None
    type_instance: Optional[str] = None

    @property
    def sub_identifier(self) -> Optional[str]:
        if self.type_instance is not None:
            return self.type_instance
        return self.target


@dataclass(frozen=True)
class PluginConfig:
    """
    A plugin configuration block with its settings validated.

    ``settings`` is an instance of the kind's settings model, or the raw
    mapping for kinds that take no settings, or None when absent.
    """
    type_name: str
    name: Optional[str] = None
    interval: Optional[float] = None
    settings: Optional[object] = None

    @classmethod
    def from_block(
        cls,
        instance: str,
        block: PluginConfigBlock,
        settings_model: Optional[Type[BaseModel]] = None,
    ) -> "PluginConfig":
        """
        Validate a configuration block's settings into a typed model.

        Args:
            instance: Instance name, for error messages.
            block: Block read from the configuration file.
            settings_model: The plugin kind's settings model.

        Returns:
            The typed configuration.

        Raises:
            ConfigurationError: If the settings do not fit the model.
        """
        settings: Optional[object] = block.settings or None
        if settings_model is not None and block.settings is not None:
            try:
                settings = settings_model.model_validate(block.settings)
            except ValidationError as e:
                errors = [
                    f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ]
                raise ConfigurationError(
                    f"invalid settings for instance '{instance}': {'; '.join(errors)}",
                    instance=instance,
                    errors=errors,
                ) from e

        return cls(
            type_name=block.type_name,
            name=block.name,
            interval=block.interval,
            settings=settings,
        )

    def check_settings_required(self, instance: str) -> None:
        """Fail if the instance has no settings."""
        if self.settings is None:
            raise ConfigurationError(
                f"settings are required for instance '{instance}'",
                instance=instance,
            )

    def check_no_settings_required(self, instance: str) -> None:
        """Fail if the instance carries settings."""
        if self.settings:
            raise ConfigurationError(
                f"no settings are accepted for instance '{instance}'",
                instance=instance,
            )

    def check_targets_required(self, instance: str, targets: Sequence[str]) -> None:
        """Fail if the instance has no target."""
        if not targets:
            raise ConfigurationError(
                f"at least one target is required for instance '{instance}'",
                instance=instance,
            )

    def check_no_targets_required(self, instance: str, targets: Sequence[str]) -> None:
        """Fail if the instance has targets."""
        if targets:
            raise ConfigurationError(
                f"no target is accepted for instance '{instance}'",
                instance=instance,
            )


class PluginState:
    """
    Runtime state of one plugin instance.

    Subclasses override ``new`` to precompute whatever they can once
    instead of on every execution.
    """

    @classmethod
    def new(
        cls,
        instance: str,
        config: PluginConfig,
        targets: Sequence[str],
    ) -> "PluginState":
        return cls()

    async def close(self) -> None:
        """Release resources held by the state."""


class EmptyState(PluginState):
    """State of plugins that need none."""


class Plugin(ABC):
    """
    Base class of all plugin kinds.

    A plugin kind is stateless: everything that belongs to one
    configured instance is passed in on each call.
    """

    name: ClassVar[str]
    description: ClassVar[str] = ""

    settings_model: ClassVar[Optional[Type[BaseModel]]] = None
    state_class: ClassVar[Type[PluginState]] = EmptyState

    def pre(self, instance: str, config: PluginConfig, targets: Sequence[str]) -> None:
        """
        Check the configuration before any execution.

        Args:
            instance: Instance name.
            config: Instance configuration.
            targets: Effective targets.

        Raises:
            ConfigurationError: If the configuration does not suit the kind.
        """

    def new_state(
        self,
        instance: str,
        config: PluginConfig,
        targets: Sequence[str],
    ) -> PluginState:
        """Build the runtime state of one instance."""
        return self.state_class.new(instance, config, targets)

    @abstractmethod
    async def exec(
        self,
        instance: str,
        config: PluginConfig,
        state: PluginState,
        targets: Sequence[str],
    ) -> List[MeasurementResult]:
        """
        Run one measurement pass.

        Args:
            instance: Instance name.
            config: Instance configuration.
            state: Instance runtime state.
            targets: Effective targets, measured in order.

        Returns:
            One result per target, or one result for target-less kinds.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
