"""
Navigation with bounded retries and failure classification.

Every module page load goes through navigate_with_retry. Playwright
timeouts, net::ERR_* failures and 5xx responses are transient and retried
under the caller's RetryPolicy; anything else propagates.
"""

from __future__ import annotations

from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from republisher.console.constants import WAIT_UNTIL
from republisher.console.errors import NavigationError
from republisher.retry import RetryPolicy, RetryResult
from shared.logging import get_logger

logger = get_logger(__name__)

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (PlaywrightError, NavigationError)


def classify_failure(exc: BaseException) -> str:
    """
    Name the failure class for logging.

    One of: navigation_timeout, net_err, server_error, playwright_error, other.
    """
    if isinstance(exc, PlaywrightTimeoutError):
        return "navigation_timeout"
    if isinstance(exc, NavigationError):
        return "server_error"
    msg = (getattr(exc, "message", None) or str(exc)).lower()
    if "net::err_" in msg:
        return "net_err"
    if isinstance(exc, PlaywrightError):
        return "playwright_error"
    return "other"


def _is_server_error(status: Optional[int]) -> bool:
    return status is not None and status >= 500


async def goto(page: Page, url: str, timeout_ms: int) -> Optional[Response]:
    """Single navigation attempt; raises NavigationError on a 5xx response."""
    response = await page.goto(url, wait_until=WAIT_UNTIL, timeout=timeout_ms)
    if response is not None and _is_server_error(response.status):
        raise NavigationError(f"HTTP {response.status} loading {url}")
    return response


async def navigate_with_retry(
    page: Page,
    url: str,
    policy: RetryPolicy,
    *,
    timeout_ms: int,
) -> RetryResult[Optional[Response]]:
    """Load `url` in `page`, retrying transient failures up to policy.max_attempts."""

    async def _attempt() -> Optional[Response]:
        try:
            return await goto(page, url, timeout_ms)
        except TRANSIENT_ERRORS as e:
            logger.info(
                "navigation.attempt_failed",
                url=url,
                failure_classification=classify_failure(e),
            )
            raise

    result = await policy.run(
        _attempt,
        operation="navigation",
        retry_on=TRANSIENT_ERRORS,
        url=url,
    )
    if result.success:
        logger.info("navigation.success", url=url, attempts=result.attempts)
    return result
