"""
Scheduler: child process runs, cycle ordering and cron handling.
"""

from __future__ import annotations

import asyncio
import sys
from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from apscheduler.triggers.cron import CronTrigger

from republisher.scheduler import CYCLE_JOB_ID, build_trigger, run_child, run_cycle, run_scheduler


def _process(returncode: int, stdout: bytes = b"", stderr: bytes = b"") -> MagicMock:
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    return process


def test_build_trigger_accepts_crontab():
    assert isinstance(build_trigger("*/15 * * * *"), CronTrigger)


def test_build_trigger_rejects_invalid_expression():
    with pytest.raises(ValueError):
        build_trigger("every quarter hour")


@pytest.mark.asyncio
async def test_run_child_invokes_module_and_returns_exit_code():
    process = _process(2, stdout=b"# | name\n", stderr=b"warning\n")
    with patch(
        "republisher.scheduler.asyncio.create_subprocess_exec",
        new_callable=AsyncMock,
        return_value=process,
    ) as spawn:
        code = await run_child("scan", ["scan", "OS"])

    assert code == 2
    assert spawn.await_args.args == (sys.executable, "-m", "republisher", "scan", "OS")
    process.communicate.assert_awaited_once()


@pytest.mark.asyncio
async def test_cycle_runs_publish_after_failed_scan():
    with patch("republisher.scheduler.run_child", new_callable=AsyncMock, side_effect=[2, 0]) as child:
        codes = await run_cycle("OS")

    assert codes == (2, 0)
    assert child.await_args_list == [
        call("scan", ["scan", "OS"]),
        call("publish", ["publish", "OS"]),
    ]


@pytest.mark.asyncio
async def test_cycle_without_layers():
    with patch("republisher.scheduler.run_child", new_callable=AsyncMock, return_value=0) as child:
        await run_cycle()
    assert child.await_args_list == [call("scan", ["scan"]), call("publish", ["publish"])]


@pytest.mark.asyncio
async def test_scheduler_runs_first_cycle_and_registers_job(make_config):
    stop = asyncio.Event()
    stop.set()
    with (
        patch("republisher.scheduler.run_cycle", new_callable=AsyncMock) as cycle,
        patch("republisher.scheduler.AsyncIOScheduler") as scheduler_cls,
    ):
        await run_scheduler(make_config(), "OS", stop_event=stop)

    cycle.assert_awaited_once_with("OS")
    scheduler = scheduler_cls.return_value
    kwargs = scheduler.add_job.call_args.kwargs
    assert kwargs["id"] == CYCLE_JOB_ID
    assert kwargs["max_instances"] == 1
    scheduler.start.assert_called_once()
    scheduler.shutdown.assert_called_once_with(wait=False)


@pytest.mark.asyncio
async def test_scheduler_first_cycle_failure_does_not_stop_schedule(make_config):
    stop = asyncio.Event()
    stop.set()
    with (
        patch("republisher.scheduler.run_cycle", new_callable=AsyncMock, side_effect=OSError("spawn failed")),
        patch("republisher.scheduler.AsyncIOScheduler") as scheduler_cls,
    ):
        await run_scheduler(make_config(), stop_event=stop)

    scheduler_cls.return_value.start.assert_called_once()


@pytest.mark.asyncio
async def test_scheduler_invalid_cron_raises_before_running(make_config):
    with patch("republisher.scheduler.run_cycle", new_callable=AsyncMock) as cycle:
        with pytest.raises(ValueError):
            await run_scheduler(make_config(schedule_cron="not a cron"))
    cycle.assert_not_awaited()
