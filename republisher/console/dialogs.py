"""
Scoped acceptance of the confirmation dialog raised by the Publish button.
"""

from __future__ import annotations

from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

from playwright.async_api import Dialog, Page
from playwright.async_api import Error as PlaywrightError

from shared.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def accept_next_dialog(page: Page) -> AsyncIterator[None]:
    """
    Accept the first dialog `page` raises inside the block.

    The listener is one-shot and is detached on every exit path, so a later
    dialog on the same tab is never accepted by a stale handler.
    """

    async def _accept(dialog: Dialog) -> None:
        logger.info("dialog.opened", dialog_type=dialog.type, dialog_message=dialog.message)
        try:
            await dialog.accept()
            logger.info("dialog.accepted")
        except PlaywrightError as e:
            logger.warning("dialog.accept_failed", error=str(e))

    page.once("dialog", _accept)
    try:
        yield
    finally:
        # Already detached if the dialog fired.
        with suppress(KeyError):
            page.remove_listener("dialog", _accept)
