"""
Configuration for the sampler process.

Provides settings read from the environment. The plugin configuration
itself lives in a YAML file whose location is one of these settings.
"""
import platform
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_config_file() -> Path:
    """Platform default location of the configuration file."""
    if platform.system() == "FreeBSD":
        return Path("/usr/local/etc/collectd-shrimp.yaml")
    return Path("/etc/collectd-shrimp.yaml")


class SamplerSettings(BaseSettings):
    """Main configuration for the sampler."""

    model_config = SettingsConfigDict(
        env_prefix="SHRIMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    config_file: Path = Field(
        default_factory=default_config_file,
        description="Path to the plugin configuration file",
    )

    # collectd's Exec plugin exports COLLECTD_HOSTNAME and COLLECTD_INTERVAL
    hostname: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SHRIMP_HOSTNAME", "COLLECTD_HOSTNAME"),
        description="Host name used in every value identifier",
    )
    interval: float = Field(
        default=10.0,
        gt=0,
        validation_alias=AliasChoices("SHRIMP_INTERVAL", "COLLECTD_INTERVAL"),
        description="Global sampling interval (seconds)",
    )

    log_level: str = Field(default="WARNING")


@lru_cache()
def get_settings() -> SamplerSettings:
    """
    Get cached sampler settings.

    Uses LRU cache to avoid re-reading environment variables on every access.
    """
    return SamplerSettings()
