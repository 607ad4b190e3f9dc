"""
Service Center login.
"""

from __future__ import annotations

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from republisher.console.constants import (
    LOGIN_PASSWORD_INPUT,
    LOGIN_SUBMIT_BUTTON,
    LOGIN_USERNAME_INPUT,
    WAIT_UNTIL,
)
from republisher.console.errors import LoginError
from shared.logging import get_logger

logger = get_logger(__name__)


async def login(
    page: Page,
    service_center_url: str,
    username: str,
    password: str,
    *,
    timeout_ms: int,
) -> None:
    """
    Log into a Service Center endpoint in `page`.

    Raises LoginError if the form cannot be submitted or is still shown after
    submitting (credentials rejected). The session cookie then applies to
    every page of the same browser context.
    """
    logger.info("login.started", url=service_center_url)
    try:
        await page.goto(service_center_url, wait_until=WAIT_UNTIL, timeout=timeout_ms)
        await page.fill(LOGIN_USERNAME_INPUT, username)
        await page.fill(LOGIN_PASSWORD_INPUT, password)
        async with page.expect_navigation(wait_until=WAIT_UNTIL, timeout=timeout_ms):
            await page.click(LOGIN_SUBMIT_BUTTON)
        still_on_form = await page.query_selector(LOGIN_PASSWORD_INPUT)
    except PlaywrightError as e:
        raise LoginError(f"Login to {service_center_url} failed: {e}") from e

    if still_on_form is not None:
        raise LoginError(f"Login to {service_center_url} rejected; check credentials")

    logger.info("login.success", url=service_center_url)
