"""Retrying a call with growing pauses between attempts."""

from __future__ import annotations

import time
from typing import Callable, TypeVar

T = TypeVar("T")


class RetryError(Exception):
    """Raised when every attempt of a retried call has failed."""

    def __init__(self, retries: int, last_error: BaseException | None) -> None:
        reason = str(last_error) if last_error is not None else "no attempt was made"
        super().__init__(f"after {retries} retries: {reason}")
        self.retries = retries
        self.last_error = last_error


def retry(fn: Callable[[], T], retries: int, timeout: int) -> T:
    """Call fn up to `retries` times, pausing i*i seconds (capped at `timeout`) after each failure."""
    last_error: Exception | None = None
    for attempt in range(retries):
        try:
            return fn()
        except Exception as exc:
            last_error = exc
        time.sleep(min(attempt * attempt, timeout))
    raise RetryError(retries, last_error) from last_error