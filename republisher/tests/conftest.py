"""
Shared fixtures: an AppConfig factory and fake Playwright browsers.

No Playwright browser, network or Service Center access is needed.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from shared.config import AppConfig


@pytest.fixture
def make_config(tmp_path):
    """Build an AppConfig with fast test defaults; keyword overrides win."""

    def _make(**overrides) -> AppConfig:
        values = dict(
            username="operator",
            password="secret",
            environment="dev",
            log_level="INFO",
            log_file=None,
            log_stdout=True,
            base_domain="wodify.com",
            snapshot_path=str(tmp_path / "sorted-modules.json"),
            headless=True,
            navigation_timeout_ms=1000,
            retry_limit=3,
            retry_backoff_seconds=0.0,
            tabs_per_group=2,
            warning_check_timeout_ms=100,
            refresh_delay_ms=0,
            publish_settle_seconds=0.0,
            schedule_cron="*/15 * * * *",
        )
        values.update(overrides)
        return AppConfig(**values)

    return _make


def fake_page() -> MagicMock:
    page = MagicMock()
    page.close = AsyncMock()
    return page


def fake_browser() -> MagicMock:
    """Browser whose context hands out a fresh fake page per new_page()."""
    browser = MagicMock()
    browser.close = AsyncMock()
    context = MagicMock()
    context.new_page = AsyncMock(side_effect=lambda: fake_page())
    browser.new_context = AsyncMock(return_value=context)
    return browser


@pytest.fixture
def fake_launcher():
    """
    Launcher context manager yielding a factory of fake browsers.

    The launched browsers are collected on `launcher.browsers`.
    """

    class _Launcher:
        def __init__(self) -> None:
            self.browsers: list[MagicMock] = []

        @asynccontextmanager
        async def __call__(self):
            async def _launch():
                browser = fake_browser()
                self.browsers.append(browser)
                return browser

            yield _launch

    return _Launcher()
