"""
Unit tests for the sampler bootstrap.
"""
from unittest.mock import patch

import pytest

from shrimp import main as main_module
from shrimp.config import SamplerSettings
from shrimp.exceptions import ConfigurationError
from shrimp.main import Sampler, main

CONFIG = """
interval: 5
plugins:
  "null":
    alive:
      type: gauge
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "collectd-shrimp.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path):
    return SamplerSettings(hostname=None, interval=10.0, config_file=tmp_path / "default.yaml")


class TestSampler:
    """Test sampler start-up."""

    def test_start(self, settings, config_path, emitter):
        sampler = Sampler(settings=settings, config_file=config_path, emitter=emitter)

        with patch.object(main_module.socket, "gethostname", return_value="node7"):
            sampler.start()

        assert sampler.hostname == "node7"
        assert sampler.interval == 5
        assert sampler.instances[0].prefix == 'PUTVAL "node7/null-alive/gauge"'
        assert sampler.get_stats()["polling"]["instances"] == 1

    def test_settings_hostname_wins(self, tmp_path, config_path, emitter):
        settings = SamplerSettings(hostname="from-env", config_file=config_path)
        sampler = Sampler(settings=settings, emitter=emitter)

        sampler.start()

        assert sampler.hostname == "from-env"

    def test_missing_config(self, settings, emitter):
        sampler = Sampler(settings=settings, emitter=emitter)

        with pytest.raises(ConfigurationError):
            sampler.start()

    @pytest.mark.asyncio
    async def test_one_tick(self, settings, config_path, emitter, output):
        sampler = Sampler(settings=settings, config_file=config_path, emitter=emitter)
        sampler.start()

        await sampler.scheduler.tick()
        await sampler.close()

        assert output.getvalue().startswith(f'PUTVAL "{sampler.hostname}/null-alive/gauge" interval=5 ')


class TestMain:
    """Test the command line entry point."""

    def test_missing_config_exits_with_error(self, tmp_path, capsys):
        with patch.object(main_module, "configure_logging"):
            status = main([str(tmp_path / "absent.yaml")])

        captured = capsys.readouterr()
        assert status == 1
        assert captured.err.startswith("error: cannot load configuration file")
        assert captured.out == ""

    def test_unknown_plugin_exits_with_error(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("plugins:\n  smart:\n    a:\n      type: gauge\n", encoding="utf-8")

        with patch.object(main_module, "configure_logging"):
            status = main([str(path)])

        assert status == 1
        assert "unknown plugin 'smart'" in capsys.readouterr().err
