"""Retry helper with exponential backoff."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from recency_check.errors import FetchError

log = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    func: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 1.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    description: Optional[str] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``func`` up to ``max_retries`` times, doubling the delay each time.

    The delay before attempt ``n + 1`` is ``base_delay * 2 ** (n - 1)``. When
    every attempt fails a ``FetchError`` is raised, chained from the last
    exception.
    """
    what = description or getattr(func, "__name__", "operation")
    attempts = max(1, max_retries)
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except exceptions as e:
            log.warning("%s failed (attempt %d/%d): %s", what, attempt, attempts, e)
            if attempt >= attempts:
                log.error("Max retries exceeded for %s", what)
                raise FetchError(f"{what} failed after {attempts} attempts: {e}") from e
            sleep(base_delay * 2 ** (attempt - 1))
