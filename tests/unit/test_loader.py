"""
Unit tests for configuration loading, settings and the plugin registry.
"""
import textwrap

import pytest

from shrimp.config import SamplerSettings
from shrimp.exceptions import ConfigurationError
from shrimp.plugins.kinds import BUILTIN_PLUGINS, NullPlugin
from shrimp.plugins.loader import ConfigLoader, load_plugins
from shrimp.plugins.registry import PluginRegistry

SAMPLE_CONFIG = """
hostname: edge-1
interval: 30

plugins:
  sysctl:
    threads:
      type: gauge
      targets:
        - kernel.threads-max
        - kernel.pid_max
  "null":
    alive:
      type: gauge
      interval: 60
"""


@pytest.fixture
def config_file(tmp_path):
    def _write(content: str):
        path = tmp_path / "collectd-shrimp.yaml"
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


class TestConfigLoader:
    """Test YAML configuration loading."""

    def test_load_file(self, config_file):
        config = ConfigLoader().load_from_file(config_file(SAMPLE_CONFIG))

        assert config.hostname == "edge-1"
        assert config.interval == 30
        assert list(config.plugins) == ["sysctl", "null"]
        assert config.plugins["sysctl"]["threads"].effective_targets() == [
            "kernel.threads-max",
            "kernel.pid_max",
        ]
        assert config.plugins["null"]["alive"].interval == 60

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot load configuration file"):
            ConfigLoader().load_from_file(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, config_file):
        with pytest.raises(ConfigurationError, match="cannot load configuration file"):
            ConfigLoader().load_from_file(config_file("plugins: [unclosed"))

    def test_empty_file(self, config_file):
        config = ConfigLoader().load_from_file(config_file(""))
        assert config.plugins == {}

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError, match="expected a mapping"):
            ConfigLoader().load_from_dict(["sysctl"])

    def test_schema_errors_listed(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader().load_from_dict(
                {"plugins": {"sysctl": {"a": {"target": "x"}}}},
                source="test.yaml",
            )

        assert "test.yaml" in exc_info.value.message
        assert exc_info.value.errors

    def test_invalid_instance_interval_dropped(self):
        config = ConfigLoader().load_from_dict(
            {"plugins": {"null": {"a": {"type": "gauge", "interval": "often"}}}}
        )
        assert config.plugins["null"]["a"].interval is None


class TestLoadPlugins:
    """Test instance construction from a configuration."""

    def test_builds_instances_in_order(self, config_file, emitter):
        config = ConfigLoader().load_from_file(config_file(SAMPLE_CONFIG))

        instances = load_plugins(config, hostname="edge-1", interval="30", emitter=emitter)

        assert [instance.prefix for instance in instances] == [
            'PUTVAL "edge-1/sysctl-threads/gauge"',
            'PUTVAL "edge-1/null-alive/gauge"',
        ]
        assert instances[0].interval_str == "30"
        assert instances[1].interval_str == "60"
        assert all(instance.emitter is emitter for instance in instances)

    def test_unknown_plugin(self):
        config = ConfigLoader().load_from_dict(
            {"plugins": {"smart": {"a": {"type": "gauge"}}}}
        )

        with pytest.raises(ConfigurationError) as exc_info:
            load_plugins(config, hostname="h", interval="10")

        assert "unknown plugin 'smart'" in exc_info.value.message
        assert "sysctl_temp" in exc_info.value.message

    def test_misconfigured_instance(self):
        config = ConfigLoader().load_from_dict(
            {"plugins": {"sysctl": {"a": {"type": "gauge"}}}}
        )

        with pytest.raises(ConfigurationError, match="at least one target"):
            load_plugins(config, hostname="h", interval="10")


class TestPluginRegistry:
    """Test plugin kind registration."""

    def test_builtins(self):
        registry = PluginRegistry.with_builtins()

        assert len(registry) == len(BUILTIN_PLUGINS)
        assert registry.names() == [plugin.name for plugin in BUILTIN_PLUGINS]
        assert "http_latency" in registry

    def test_register_duplicate(self):
        registry = PluginRegistry()
        registry.register(NullPlugin)

        with pytest.raises(ValueError):
            registry.register(NullPlugin)

    def test_create(self):
        registry = PluginRegistry.with_builtins()

        assert isinstance(registry.create("null"), NullPlugin)
        assert registry.create("missing") is None

    def test_unregister(self):
        registry = PluginRegistry.with_builtins()

        assert registry.unregister("null") is NullPlugin
        assert "null" not in registry
        assert registry.unregister("null") is None

    def test_describe(self):
        descriptions = PluginRegistry.with_builtins().describe()
        assert all(descriptions.values())


class TestSamplerSettings:
    """Test environment settings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch, tmp_path):
        for name in ("SHRIMP_HOSTNAME", "SHRIMP_INTERVAL", "COLLECTD_HOSTNAME", "COLLECTD_INTERVAL"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.chdir(tmp_path)

    def test_defaults(self):
        settings = SamplerSettings()

        assert settings.hostname is None
        assert settings.interval == 10.0
        assert settings.config_file.name == "collectd-shrimp.yaml"

    def test_collectd_environment(self, monkeypatch):
        monkeypatch.setenv("COLLECTD_HOSTNAME", "box")
        monkeypatch.setenv("COLLECTD_INTERVAL", "20.000")

        settings = SamplerSettings()

        assert settings.hostname == "box"
        assert settings.interval == 20.0

    def test_own_prefix(self, monkeypatch):
        monkeypatch.setenv("SHRIMP_CONFIG_FILE", "/tmp/other.yaml")
        monkeypatch.setenv("SHRIMP_LOG_LEVEL", "DEBUG")

        settings = SamplerSettings()

        assert str(settings.config_file) == "/tmp/other.yaml"
        assert settings.log_level == "DEBUG"
