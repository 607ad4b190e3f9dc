"""
Module page: warning status check, Publish button lookup, progress wait.
"""

from __future__ import annotations

from typing import Optional

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from republisher.console.constants import (
    MODULE_STATUS_LABEL,
    MODULE_VERSIONS_TABLE,
    PUBLISH_BUTTON,
    PUBLISH_PROGRESS_BAR,
    PUBLISH_PROGRESS_STEP,
    PUBLISHED_VERSION_TICK,
    TABLE_ROWS,
    WARNING_ICON,
)

_PROGRESS_SHOWN_JS = f"""
() => !!(document.querySelector("{PUBLISH_PROGRESS_BAR}")
    || document.querySelector("{PUBLISH_PROGRESS_STEP}"))
"""


async def is_module_in_warning(page: Page, timeout_ms: int) -> bool:
    """
    True when the loaded module page shows its status label and a warning
    icon appears within `timeout_ms`. Any lookup failure counts as not in warning.
    """
    try:
        if await page.query_selector(MODULE_STATUS_LABEL) is None:
            return False
        await page.wait_for_selector(WARNING_ICON, timeout=timeout_ms)
    except PlaywrightError:
        return False
    return True


async def find_publish_button(page: Page, timeout_ms: int) -> Optional[ElementHandle]:
    """
    Publish button of the currently published version, or None.

    Waits for the versions table; a timeout propagates to the caller's retry.
    """
    await page.wait_for_selector(MODULE_VERSIONS_TABLE, timeout=timeout_ms)
    for row in await page.query_selector_all(TABLE_ROWS):
        if await row.query_selector(PUBLISHED_VERSION_TICK) is None:
            continue
        button = await row.query_selector(PUBLISH_BUTTON)
        if button is not None:
            return button
    return None


async def wait_for_publish_progress(page: Page, timeout_ms: int) -> None:
    """Wait for the publish progress bar or current step row to appear."""
    await page.wait_for_function(_PROGRESS_SHOWN_JS, timeout=timeout_ms)
