"""
Scan pipeline: collect modules flagged with warnings into the snapshot.

Pagination is strictly sequential: each page is fully read before Next is
clicked, and the next page is read only once the table has changed. If
anything fails mid-scan, the modules collected so far are still persisted.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from playwright.async_api import Page

from republisher.categories import category_from_name, normalize_categories
from republisher.console import (
    BrowserFactory,
    NavigationError,
    apply_warning_filter,
    browser_launcher,
    create_console_context,
    go_to_next_page,
    has_next_page,
    login,
    module_list_url,
    navigate_with_retry,
    new_console_page,
    no_modules_shown,
    read_warning_rows,
)
from republisher.console.constants import EXCLUDED_NAME_MARKER
from republisher.retry import RetryPolicy
from republisher.snapshot import (
    ModuleCollector,
    ModuleRecord,
    filter_by_categories,
    save_snapshot,
    sort_records,
)
from shared.config import AppConfig
from shared.logging import bind_request_context, get_logger

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """Outcome of run_scan; `records` is exactly what was persisted (if anything)."""

    completed: bool
    records: list[ModuleRecord] = field(default_factory=list)
    snapshot_path: Optional[Path] = None
    error: Optional[str] = None


async def scrape_modules(page: Page, collector: ModuleCollector, config: AppConfig) -> None:
    """Walk every page of the filtered list, adding warning rows to `collector`."""
    page_number = 1
    while True:
        logger.info("scan.page.started", page_number=page_number)
        if await no_modules_shown(page):
            logger.info("scan.page.empty", page_number=page_number)
            break

        for url, name in await read_warning_rows(page):
            if EXCLUDED_NAME_MARKER in name.lower():
                logger.info("scan.module.excluded", module_name=name)
                continue
            record = ModuleRecord(url=url, name=name, category=category_from_name(name))
            if collector.add(record):
                logger.info(
                    "scan.module.found",
                    module_name=name,
                    category=record.category,
                    url=url,
                )

        if not await has_next_page(page):
            logger.info("scan.pages.exhausted", pages=page_number)
            break
        await go_to_next_page(page, config.navigation_timeout_ms, config.refresh_delay_ms)
        page_number += 1

    logger.info("scan.scrape.finished", modules=len(collector))


async def _scan(launch_browser: BrowserFactory, config: AppConfig, collector: ModuleCollector) -> None:
    browser = await launch_browser()
    try:
        context = await create_console_context(browser)
        page = await new_console_page(context, config.navigation_timeout_ms)
        await login(
            page,
            config.service_center_url,
            config.username,
            config.password,
            timeout_ms=config.navigation_timeout_ms,
        )

        list_url = module_list_url(config.service_center_url)
        policy = RetryPolicy(config.retry_limit, config.retry_backoff_seconds)
        loaded = await navigate_with_retry(
            page, list_url, policy, timeout_ms=config.navigation_timeout_ms
        )
        if not loaded.success:
            raise NavigationError(f"Cannot open module list: {loaded.error_summary}")

        await apply_warning_filter(page, config.navigation_timeout_ms)
        await scrape_modules(page, collector, config)
    finally:
        await browser.close()


def _finalize(
    collector: ModuleCollector,
    categories: Optional[tuple[str, ...]],
) -> list[ModuleRecord]:
    return filter_by_categories(sort_records(collector.records()), categories)


async def run_scan(
    config: AppConfig,
    categories: Optional[Iterable[str]] = None,
    *,
    launcher: Optional[AbstractAsyncContextManager[BrowserFactory]] = None,
) -> ScanResult:
    """
    Scan the module list and write the sorted (optionally filtered) snapshot.

    Never raises for scan failures: the result reports `completed=False`
    and whatever was collected is persisted when non-empty.
    """
    bind_request_context(phase="scan")
    wanted = normalize_categories(categories)
    collector = ModuleCollector()
    logger.info("scan.started", url=config.service_center_url)

    try:
        async with (launcher or browser_launcher(config.headless)) as launch_browser:
            await _scan(launch_browser, config, collector)
    except Exception as e:
        logger.error(
            "scan.error",
            error=str(e),
            error_type=type(e).__name__,
            collected=len(collector),
        )
        records = _finalize(collector, wanted)
        path = None
        if records:
            path = save_snapshot(records, config.snapshot_path)
            logger.warning("scan.partial_saved", count=len(records), path=str(path))
        return ScanResult(
            completed=False,
            records=records,
            snapshot_path=path,
            error=f"{type(e).__name__}: {e}",
        )

    records = _finalize(collector, wanted)
    path = save_snapshot(records, config.snapshot_path)
    logger.info("scan.completed", count=len(records), path=str(path))
    return ScanResult(completed=True, records=records, snapshot_path=path)
