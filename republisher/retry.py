"""
Bounded-attempt retry for fallible async actions.

Defaults reproduce immediate retries (no delay). A non-zero
`backoff_seconds` enables exponential backoff: base, 2x base, 4x base, ...
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


@dataclass
class RetryResult(Generic[T]):
    """Result of RetryPolicy.run."""

    success: bool
    value: Optional[T]
    attempts: int
    error: Optional[BaseException] = None

    @property
    def error_summary(self) -> Optional[str]:
        if self.error is None:
            return None
        return f"{type(self.error).__name__}: {self.error}"


class RetryPolicy:
    """Run an action up to `max_attempts` times; exhaustion is returned, not raised."""

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS, backoff_seconds: float = 0.0):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if backoff_seconds < 0:
            raise ValueError("backoff_seconds must be >= 0")
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds

    def delay_for(self, attempt: int) -> float:
        """Delay after failed 1-based `attempt`."""
        if not self.backoff_seconds:
            return 0.0
        return self.backoff_seconds * (2 ** (attempt - 1))

    async def run(
        self,
        action: Callable[[], Awaitable[T]],
        *,
        operation: str,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
        **log_context: Any,
    ) -> RetryResult[T]:
        """
        Await `action()` until it succeeds or attempts run out.

        Exceptions outside `retry_on` propagate unchanged. Every failed
        attempt is logged with its reason; exhaustion is logged once as
        `<operation>.failed`.
        """
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            logger.debug(f"{operation}.attempt", attempt=attempt, **log_context)
            try:
                value = await action()
            except retry_on as e:
                last_error = e
                if attempt < self.max_attempts:
                    delay = self.delay_for(attempt)
                    logger.warning(
                        f"{operation}.retry",
                        attempt=attempt,
                        max_attempts=self.max_attempts,
                        delay_s=round(delay, 2),
                        error=str(e),
                        error_type=type(e).__name__,
                        **log_context,
                    )
                    if delay:
                        await asyncio.sleep(delay)
                    continue
                break
            return RetryResult(success=True, value=value, attempts=attempt)

        logger.error(
            f"{operation}.failed",
            attempts=self.max_attempts,
            error=str(last_error),
            error_type=type(last_error).__name__,
            **log_context,
        )
        return RetryResult(
            success=False,
            value=None,
            attempts=self.max_attempts,
            error=last_error,
        )
