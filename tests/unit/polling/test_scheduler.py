"""
Unit tests for PollingScheduler.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from shrimp.exceptions import SourceError
from shrimp.plugins.instance import PluginInstance
from shrimp.plugins.kinds import NullPlugin, SysctlPlugin
from shrimp.polling.scheduler import PollingScheduler


@pytest.fixture
def null_instance(make_block, emitter, clock):
    def _make(name, **kwargs):
        return PluginInstance(
            plugin=NullPlugin(),
            block=make_block(**kwargs),
            hostname="h",
            instance=name,
            interval="10",
            emitter=emitter,
            clock=clock,
        )

    return _make


class TestTick:
    """Test one scheduler tick."""

    @pytest.mark.asyncio
    async def test_runs_instances_in_order(self, null_instance, emitter, output):
        scheduler = PollingScheduler(
            [null_instance("first"), null_instance("second")],
            interval=10,
            emitter=emitter,
        )

        assert await scheduler.tick() == 2

        lines = output.getvalue().splitlines()
        assert lines[0].startswith('PUTVAL "h/null-first/gauge"')
        assert lines[1].startswith('PUTVAL "h/null-second/gauge"')
        assert scheduler.ticks == 1

    @pytest.mark.asyncio
    async def test_flushes_once_per_tick(self, null_instance):
        emitter = MagicMock()
        instance = null_instance("a")
        instance.emitter = emitter
        scheduler = PollingScheduler([instance], interval=10, emitter=emitter)

        await scheduler.tick()
        await scheduler.tick()

        assert emitter.emit.call_count == 2
        assert emitter.flush.call_count == 2

    @pytest.mark.asyncio
    async def test_skipped_instances_not_counted(self, null_instance, clock, emitter):
        slow = null_instance("slow", interval=30)
        scheduler = PollingScheduler([null_instance("fast"), slow], interval=10, emitter=emitter)

        assert await scheduler.tick() == 2
        clock.advance(10)
        assert await scheduler.tick() == 1

    @pytest.mark.asyncio
    async def test_fatal_error_propagates(self, make_block, emitter, clock, fake_sysctl):
        instance = PluginInstance(
            plugin=SysctlPlugin(),
            block=make_block(target="kernel.nope"),
            hostname="h",
            instance="i",
            interval="10",
            emitter=emitter,
            clock=clock,
        )
        scheduler = PollingScheduler([instance], interval=10, emitter=emitter)

        with pytest.raises(SourceError):
            await scheduler.tick()


class TestRun:
    """Test the scheduler loop."""

    @pytest.mark.asyncio
    async def test_ticks_until_stopped(self, null_instance, emitter):
        scheduler = PollingScheduler([null_instance("a")], interval=0.01, emitter=emitter)

        task = asyncio.create_task(scheduler.run())
        while scheduler.ticks < 3:
            await asyncio.sleep(0.01)
        scheduler.stop()
        await asyncio.wait_for(task, timeout=1)

        assert not scheduler.is_running
        assert scheduler.get_polling_stats()["ticks"] >= 3

    @pytest.mark.asyncio
    async def test_stop_before_first_tick(self, null_instance, emitter, output):
        scheduler = PollingScheduler([null_instance("a")], interval=60, emitter=emitter)

        task = asyncio.create_task(scheduler.run())
        await asyncio.sleep(0)
        scheduler.stop()
        await asyncio.wait_for(task, timeout=1)

        assert scheduler.ticks == 0
        assert output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_close_releases_instances(self, null_instance, emitter):
        instance = null_instance("a")
        instance.state.close = AsyncMock()
        scheduler = PollingScheduler([instance], interval=10, emitter=emitter)

        await scheduler.close()

        instance.state.close.assert_awaited_once()


class TestStats:
    """Test polling statistics."""

    @pytest.mark.asyncio
    async def test_stats(self, null_instance, emitter):
        scheduler = PollingScheduler([null_instance("a"), null_instance("b")], interval=10, emitter=emitter)
        await scheduler.tick()

        assert scheduler.get_polling_stats() == {
            "running": False,
            "ticks": 1,
            "instances": 2,
            "executions": 2,
            "lines_written": 2,
        }
