"""
Module list page: status filter, warning rows and in-place pagination.

The list refreshes over AJAX without page tokens, so moving to the next
page is confirmed by waiting for the first row's text to change.
"""

from __future__ import annotations

import asyncio

from playwright.async_api import Page

from republisher.console.constants import (
    MODULE_LINK,
    MODULE_LIST_PATH,
    MODULE_LIST_TABLE,
    MODULE_NAME,
    NEXT_PAGE_LINK,
    NO_MODULES_TEXT,
    NO_MODULES_TITLE,
    STATUS_FILTER_APPLY_BUTTON,
    STATUS_FILTER_DROPDOWN,
    STATUS_FILTER_SELECT,
    STATUS_FILTER_SETTLE_MS,
    STATUS_FILTER_WARNINGS_OPTION,
    STATUS_FILTER_WARNINGS_TEXT,
    STATUS_FILTER_WARNINGS_VALUE,
    TABLE_ROWS,
    WARNING_ICON,
)
from republisher.console.errors import ScanError
from shared.logging import get_logger

logger = get_logger(__name__)

_FIRST_ROW_TEXT_JS = """
(selector) => {
    const table = document.querySelector(selector);
    return table?.querySelector("tbody tr")?.innerText || "";
}
"""

_FIRST_ROW_CHANGED_JS = """
([selector, previous]) => {
    const table = document.querySelector(selector);
    const first = table?.querySelector("tbody tr")?.innerText || "";
    return !!table && first !== previous;
}
"""

_SELECTED_OPTION_JS = """
(select) => ({
    value: select.value,
    text: select.selectedIndex >= 0 ? select.options[select.selectedIndex].text : ""
})
"""


def module_list_url(service_center_url: str) -> str:
    return service_center_url.rstrip("/") + "/" + MODULE_LIST_PATH


async def apply_warning_filter(page: Page, timeout_ms: int) -> None:
    """
    Narrow the list to modules "with errors and warnings".

    Raises ScanError when the status select does not show the expected
    option after the filter is applied.
    """
    logger.info("scan.filter.applying")
    await page.wait_for_selector(STATUS_FILTER_DROPDOWN, state="visible", timeout=timeout_ms)
    await page.click(STATUS_FILTER_DROPDOWN)
    await page.wait_for_selector(
        STATUS_FILTER_WARNINGS_OPTION, state="visible", timeout=timeout_ms
    )
    await page.click(STATUS_FILTER_WARNINGS_OPTION)
    await asyncio.sleep(STATUS_FILTER_SETTLE_MS / 1000)

    async with page.expect_response(
        lambda response: MODULE_LIST_PATH in response.url, timeout=timeout_ms
    ):
        await page.click(STATUS_FILTER_APPLY_BUTTON)
    await page.wait_for_selector(MODULE_LIST_TABLE, timeout=timeout_ms)

    selected = await page.eval_on_selector(STATUS_FILTER_SELECT, _SELECTED_OPTION_JS)
    value = selected.get("value")
    text = selected.get("text") or ""
    logger.info("scan.filter.selected", value=value, text=text)
    if value != STATUS_FILTER_WARNINGS_VALUE or STATUS_FILTER_WARNINGS_TEXT not in text:
        raise ScanError(f"Warning filter not applied; current selection: {text!r}")


async def no_modules_shown(page: Page) -> bool:
    title = await page.query_selector(NO_MODULES_TITLE)
    if title is None:
        return False
    return NO_MODULES_TEXT in (await title.inner_text())


async def read_warning_rows(page: Page) -> list[tuple[str, str]]:
    """
    Return (absolute url, name) for each row of the current page that
    carries the warning icon. A row that cannot be read is logged and skipped.
    """
    found: list[tuple[str, str]] = []
    rows = await page.query_selector_all(TABLE_ROWS)
    for index, row in enumerate(rows):
        try:
            if await row.query_selector(WARNING_ICON) is None:
                continue
            link = await row.query_selector(MODULE_LINK)
            name_el = await row.query_selector(MODULE_NAME)
            if link is None or name_el is None:
                raise ValueError("warning row without module link")
            # The DOM property resolves relative hrefs.
            url = await link.evaluate("(a) => a.href")
            name = (await name_el.inner_text()).strip()
        except Exception as e:
            logger.warning(
                "scan.row_error",
                row_index=index,
                error=str(e),
                error_type=type(e).__name__,
            )
            continue
        found.append((url, name))
    return found


async def has_next_page(page: Page) -> bool:
    """True when the Next link exists and is not disabled."""
    link = await page.query_selector(NEXT_PAGE_LINK)
    if link is None:
        return False
    return await link.get_attribute("disabled") is None


async def first_row_text(page: Page) -> str:
    return await page.evaluate(_FIRST_ROW_TEXT_JS, MODULE_LIST_TABLE)


async def go_to_next_page(page: Page, timeout_ms: int, refresh_delay_ms: int) -> None:
    """Click Next and wait until the table shows a different first row."""
    previous = await first_row_text(page)
    await page.click(NEXT_PAGE_LINK)
    await page.wait_for_function(
        _FIRST_ROW_CHANGED_JS,
        arg=[MODULE_LIST_TABLE, previous],
        timeout=timeout_ms,
    )
    if refresh_delay_ms:
        await asyncio.sleep(refresh_delay_ms / 1000)
