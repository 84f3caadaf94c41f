"""Minimum-spacing limiter shared by every request one client makes."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

LOGGER = logging.getLogger(__name__)


class RateLimiter:
    """Keep at least ``delay_seconds`` between the end of one request and the start of the next.

    The lock is held for the whole request, so requests made through one
    limiter never overlap even when issued from several threads.
    """

    def __init__(
        self,
        delay_seconds: float,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._lock = threading.Lock()
        self._last_request_at: float | None = None

    @property
    def last_request_at(self) -> float | None:
        return self._last_request_at

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Wait out the remaining delay, run the request, then stamp its completion."""
        with self._lock:
            self._wait()
            try:
                yield
            finally:
                self._last_request_at = self._clock()

    def _wait(self) -> None:
        if self._last_request_at is None:
            return
        elapsed = self._clock() - self._last_request_at
        remaining = self.delay_seconds - elapsed
        if remaining > 0:
            LOGGER.debug("Rate limit: sleeping %.3fs before next request", remaining)
            self._sleep(remaining)
