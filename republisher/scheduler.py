"""
Recurring scan-then-publish runner.

Each cycle runs `republisher scan` and then `republisher publish` as child
processes, back to back, logging their timestamps, exit codes and captured
output. The first cycle runs at startup; later cycles follow a cron schedule.
"""

from __future__ import annotations

import asyncio
import sys
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from shared.config import AppConfig
from shared.logging import get_logger

logger = get_logger(__name__)

CYCLE_JOB_ID = "scan_then_publish"


def build_trigger(cron_expression: str) -> CronTrigger:
    """Parse a five-field crontab expression; raises ValueError when invalid."""
    return CronTrigger.from_crontab(cron_expression, timezone="UTC")


async def run_child(name: str, args: Sequence[str]) -> int:
    """Run `python -m republisher <args>` and log its captured stdout/stderr."""
    started_at = datetime.now(timezone.utc)
    start = time.monotonic()
    logger.info("schedule.child.started", child=name, started_at=started_at.isoformat())

    process = await asyncio.create_subprocess_exec(
        sys.executable,
        "-m",
        "republisher",
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    if stdout:
        logger.info("schedule.child.stdout", child=name, output=stdout.decode("utf-8", "replace"))
    if stderr:
        logger.warning("schedule.child.stderr", child=name, output=stderr.decode("utf-8", "replace"))
    if process.returncode:
        logger.error("schedule.child.error", child=name, exit_code=process.returncode)

    logger.info(
        "schedule.child.finished",
        child=name,
        exit_code=process.returncode,
        finished_at=datetime.now(timezone.utc).isoformat(),
        duration_s=round(time.monotonic() - start, 1),
    )
    return process.returncode


async def run_cycle(layers: Optional[str] = None) -> tuple[int, int]:
    """Scan, then publish; publish runs even if the scan reported errors."""
    extra = [layers] if layers else []
    scan_code = await run_child("scan", ["scan", *extra])
    publish_code = await run_child("publish", ["publish", *extra])
    return scan_code, publish_code


async def run_scheduler(
    config: AppConfig,
    layers: Optional[str] = None,
    *,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Run one cycle now, then on `config.schedule_cron` until `stop_event` is set."""
    trigger = build_trigger(config.schedule_cron)

    async def scheduled_cycle() -> None:
        try:
            await run_cycle(layers)
        except Exception:
            logger.exception("schedule.cycle.failed")

    await scheduled_cycle()

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        scheduled_cycle,
        trigger,
        id=CYCLE_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info("schedule.started", cron=config.schedule_cron)

    try:
        await (stop_event or asyncio.Event()).wait()
    finally:
        scheduler.shutdown(wait=False)
        logger.info("schedule.stopped")
