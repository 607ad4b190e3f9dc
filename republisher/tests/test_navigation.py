"""
Navigation retry and failure classification.

Uses AsyncMock pages; no real Playwright browser.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from republisher.console.errors import NavigationError
from republisher.console.navigation import classify_failure, goto, navigate_with_retry
from republisher.retry import RetryPolicy

URL = "https://devsc.wodify.com/ServiceCenter/eSpace_Edit.aspx?ESpaceId=1"


def _response(status: int) -> MagicMock:
    response = MagicMock()
    response.status = status
    return response


# --- classify_failure ---


def test_classify_failure():
    assert classify_failure(PlaywrightTimeoutError("Timeout 30000ms exceeded")) == "navigation_timeout"
    assert classify_failure(PlaywrightError("net::ERR_CONNECTION_RESET at url")) == "net_err"
    assert classify_failure(NavigationError("HTTP 502")) == "server_error"
    assert classify_failure(PlaywrightError("Target closed")) == "playwright_error"
    assert classify_failure(ValueError("x")) == "other"


# --- goto ---


@pytest.mark.asyncio
async def test_goto_returns_response_for_success():
    page = AsyncMock()
    page.goto = AsyncMock(return_value=_response(200))

    response = await goto(page, URL, 1000)

    assert response.status == 200
    page.goto.assert_awaited_once_with(URL, wait_until="networkidle", timeout=1000)


@pytest.mark.asyncio
async def test_goto_accepts_missing_response():
    page = AsyncMock()
    page.goto = AsyncMock(return_value=None)
    assert await goto(page, URL, 1000) is None


@pytest.mark.asyncio
async def test_goto_raises_on_server_error():
    page = AsyncMock()
    page.goto = AsyncMock(return_value=_response(503))
    with pytest.raises(NavigationError, match="503"):
        await goto(page, URL, 1000)


# --- navigate_with_retry ---


@pytest.mark.asyncio
async def test_timeout_then_success():
    page = AsyncMock()
    page.goto = AsyncMock(side_effect=[PlaywrightTimeoutError("timeout"), _response(200)])

    result = await navigate_with_retry(page, URL, RetryPolicy(3), timeout_ms=1000)

    assert result.success is True
    assert result.attempts == 2
    assert page.goto.await_count == 2


@pytest.mark.asyncio
async def test_server_error_is_retried():
    page = AsyncMock()
    page.goto = AsyncMock(side_effect=[_response(500), _response(200)])

    result = await navigate_with_retry(page, URL, RetryPolicy(3), timeout_ms=1000)

    assert result.success is True
    assert result.attempts == 2


@pytest.mark.asyncio
async def test_all_attempts_fail():
    page = AsyncMock()
    page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("timeout"))

    result = await navigate_with_retry(page, URL, RetryPolicy(3), timeout_ms=1000)

    assert result.success is False
    assert result.attempts == 3
    assert page.goto.await_count == 3
    assert isinstance(result.error, PlaywrightTimeoutError)


@pytest.mark.asyncio
async def test_non_transient_error_propagates():
    page = AsyncMock()
    page.goto = AsyncMock(side_effect=ValueError("bad url"))

    with pytest.raises(ValueError):
        await navigate_with_retry(page, URL, RetryPolicy(3), timeout_ms=1000)
    assert page.goto.await_count == 1
