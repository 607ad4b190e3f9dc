"""
Browser launch and page creation for Service Center sessions.

All tabs of one endpoint share a browser context, so the session cookie
set by the login page is visible to every worker tab.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from republisher.console.constants import USER_AGENT, VIEWPORT

BrowserFactory = Callable[[], Awaitable[Browser]]


@asynccontextmanager
async def browser_launcher(headless: bool = True) -> AsyncIterator[BrowserFactory]:
    """
    Start Playwright and yield a factory that launches a fresh Chromium.

    Each call of the factory returns an independent browser; callers close
    the browsers they launch. Playwright stops when the block exits.
    """
    async with async_playwright() as playwright:

        async def _launch() -> Browser:
            return await playwright.chromium.launch(headless=headless)

        yield _launch


async def create_console_context(browser: Browser) -> BrowserContext:
    """Create a browser context with a stable desktop viewport and UA."""
    return await browser.new_context(
        viewport=VIEWPORT,
        user_agent=USER_AGENT,
        locale="en-US",
    )


async def new_console_page(context: BrowserContext, timeout_ms: int) -> Page:
    """Open a tab whose default navigation and action timeouts are `timeout_ms`."""
    page = await context.new_page()
    page.set_default_navigation_timeout(timeout_ms)
    page.set_default_timeout(timeout_ms)
    return page
