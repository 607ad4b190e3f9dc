"""
Publish pipeline: republish every snapshot module on every target group.

Groups run concurrently, each with its own browser, login and WorkQueue
over the same snapshot. Inside a group, `tabs_per_group` tabs claim
modules from the group's queue until it is drained. Item failures are
logged and counted; a group that cannot log in is aborted on its own.
"""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager
from typing import Iterable, Optional, Sequence

from playwright.async_api import BrowserContext, Page

from republisher.categories import normalize_categories
from republisher.console import (
    BrowserFactory,
    accept_next_dialog,
    browser_launcher,
    create_console_context,
    find_publish_button,
    goto,
    is_module_in_warning,
    login,
    navigate_with_retry,
    new_console_page,
    wait_for_publish_progress,
)
from republisher.console.navigation import TRANSIENT_ERRORS
from republisher.groups import TargetGroup, derive_groups
from republisher.outcomes import GroupResult, ItemOutcome, ItemResult, summarize_run
from republisher.retry import RetryPolicy
from republisher.snapshot import ModuleRecord, filter_by_categories, load_snapshot
from republisher.work_queue import WorkQueue
from shared.config import AppConfig
from shared.logging import bind_request_context, get_logger

logger = get_logger(__name__)


def _item(record: ModuleRecord, outcome: ItemOutcome, reason: Optional[str] = None) -> ItemResult:
    return ItemResult(url=record.url, name=record.name, outcome=outcome, reason=reason)


async def trigger_publish(
    page: Page,
    url: str,
    record: ModuleRecord,
    config: AppConfig,
    policy: RetryPolicy,
) -> ItemResult:
    """
    Click Publish on the published version and wait for the publish to start.

    Locating and clicking is retried as a unit. The progress wait is retried
    separately and never clicks again; if progress never shows up the result
    is `triggered-unconfirmed`.
    """
    timeout_ms = config.navigation_timeout_ms

    async def _open_and_click() -> bool:
        await goto(page, url, timeout_ms)
        button = await find_publish_button(page, timeout_ms)
        if button is None:
            return False
        logger.info("publish.item.clicking", url=url)
        async with accept_next_dialog(page):
            await button.click()
        return True

    clicked = await policy.run(
        _open_and_click,
        operation="publish.click",
        retry_on=TRANSIENT_ERRORS,
        url=url,
    )
    if not clicked.success:
        return _item(record, ItemOutcome.FAILED, clicked.error_summary)
    if not clicked.value:
        logger.info("publish.item.skipped", url=url, reason="no_publish_button")
        return _item(record, ItemOutcome.SKIPPED, "no_publish_button")

    progress = await policy.run(
        lambda: wait_for_publish_progress(page, timeout_ms),
        operation="publish.progress",
        retry_on=TRANSIENT_ERRORS,
        url=url,
    )
    if not progress.success:
        logger.warning("publish.item.unconfirmed", url=url, waits=progress.attempts)
        return _item(record, ItemOutcome.TRIGGERED_UNCONFIRMED, "progress_not_observed")

    logger.info("publish.item.progress_detected", url=url, settle_s=config.publish_settle_seconds)
    # Fixed settle delay; the publish is not awaited to completion.
    await asyncio.sleep(config.publish_settle_seconds)
    logger.info("publish.item.triggered", url=url)
    return _item(record, ItemOutcome.TRIGGERED_COMPLETED)


async def publish_module(
    page: Page,
    record: ModuleRecord,
    group: TargetGroup,
    config: AppConfig,
    policy: RetryPolicy,
) -> ItemResult:
    """Per-item procedure: load, check warning status, then conditionally publish."""
    url = group.module_url(record.url)
    logger.info("publish.item.started", url=url, category=record.category)

    loaded = await navigate_with_retry(page, url, policy, timeout_ms=config.navigation_timeout_ms)
    if not loaded.success:
        return _item(record, ItemOutcome.FAILED, loaded.error_summary)

    if not await is_module_in_warning(page, config.warning_check_timeout_ms):
        logger.info("publish.item.skipped", url=url, reason="not_in_warning")
        return _item(record, ItemOutcome.SKIPPED, "not_in_warning")

    return await trigger_publish(page, url, record, config, policy)


async def run_tab(
    context: BrowserContext,
    tab: int,
    queue: WorkQueue[ModuleRecord],
    group: TargetGroup,
    config: AppConfig,
    policy: RetryPolicy,
    results: list[ItemResult],
) -> None:
    """Claim and process modules one at a time until the queue is drained."""
    bind_request_context(tab=tab)
    page = await new_console_page(context, config.navigation_timeout_ms)
    processed = 0
    try:
        while True:
            record = queue.claim_next()
            if record is None:
                break
            bind_request_context(module=record.name)
            try:
                result = await publish_module(page, record, group, config, policy)
            except Exception as e:
                logger.error(
                    "publish.item.error",
                    url=record.url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                result = _item(record, ItemOutcome.FAILED, f"{type(e).__name__}: {e}")
            results.append(result)
            processed += 1
            logger.info("publish.item.finished", outcome=result.outcome.value, reason=result.reason)
    finally:
        logger.info("publish.tab.finished", processed=processed)
        await page.close()


async def run_group(
    launch_browser: BrowserFactory,
    group: TargetGroup,
    records: Sequence[ModuleRecord],
    config: AppConfig,
) -> GroupResult:
    """
    Log into one group and drain its own queue with `tabs_per_group` tabs.

    Any failure outside the per-item boundary (browser launch, login, tab
    creation) aborts this group only and is recorded on the result.
    """
    bind_request_context(group=group.subdomain)
    result = GroupResult(group=group.subdomain)
    policy = RetryPolicy(config.retry_limit, config.retry_backoff_seconds)
    browser = None

    logger.info("publish.group.started", host=group.host, modules=len(records))
    try:
        browser = await launch_browser()
        context = await create_console_context(browser)
        login_page = await new_console_page(context, config.navigation_timeout_ms)
        await login(
            login_page,
            group.service_center_url,
            config.username,
            config.password,
            timeout_ms=config.navigation_timeout_ms,
        )
        await login_page.close()

        queue: WorkQueue[ModuleRecord] = WorkQueue(records)
        tabs = [
            asyncio.create_task(
                run_tab(context, tab, queue, group, config, policy, result.items)
            )
            for tab in range(1, config.tabs_per_group + 1)
        ]
        try:
            await asyncio.gather(*tabs)
        finally:
            # A failed tab stops its siblings before the browser closes.
            for task in tabs:
                task.cancel()
            await asyncio.gather(*tabs, return_exceptions=True)
    except Exception as e:
        result.error = f"{type(e).__name__}: {e}"
        logger.error(
            "publish.group.aborted",
            host=group.host,
            error=str(e),
            error_type=type(e).__name__,
        )
    finally:
        if browser is not None:
            await browser.close()

    logger.info("publish.group.finished", aborted=result.aborted, **result.counts())
    return result


async def run_publish(
    config: AppConfig,
    categories: Optional[Iterable[str]] = None,
    *,
    launcher: Optional[AbstractAsyncContextManager[BrowserFactory]] = None,
) -> list[GroupResult]:
    """
    Load the snapshot, filter it, and run every group concurrently.

    Raises SnapshotError if the snapshot cannot be read; otherwise returns
    one GroupResult per group whatever the item outcomes.
    """
    bind_request_context(phase="publish")
    categories = normalize_categories(categories)
    records = load_snapshot(config.snapshot_path)
    records = filter_by_categories(records, categories)
    groups = derive_groups(config.environment, config.base_domain)

    logger.info(
        "publish.started",
        modules=len(records),
        groups=[g.subdomain for g in groups],
        tabs_per_group=config.tabs_per_group,
        categories=list(categories) if categories is not None else "all",
    )

    async with (launcher or browser_launcher(config.headless)) as launch_browser:
        results = await asyncio.gather(
            *(run_group(launch_browser, group, records, config) for group in groups)
        )

    logger.info("publish.completed", **summarize_run(results))
    return list(results)
