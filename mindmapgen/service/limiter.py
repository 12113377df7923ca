"""
Admission control for renders: a fixed pool of permits, since every render
allocates a scaled canvas whose size grows with the tree.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterator

from ..errors import RenderCancelledError

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class RenderLimiter:
    """Bounded permit pool. acquire() waits until a permit frees up or the caller cancels."""

    def __init__(self, max_concurrent: int):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self.max_concurrent = max_concurrent
        self._sem = threading.BoundedSemaphore(max_concurrent)
        self._lock = threading.Lock()
        self._active = 0

    @property
    def active(self) -> int:
        return self._active

    @contextmanager
    def acquire(
        self,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Iterator[None]:
        """
        Hold one permit for the duration of the block.

        Raises RenderCancelledError if `cancel` is set, or `timeout` seconds pass,
        before a permit is obtained.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if cancel is not None and cancel.is_set():
                raise RenderCancelledError("render cancelled while waiting for a permit")
            wait = POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise RenderCancelledError(f"no render permit within {timeout:.2f}s")
                wait = min(wait, remaining)
            if self._sem.acquire(timeout=wait):
                break
        with self._lock:
            self._active += 1
        try:
            yield
        finally:
            with self._lock:
                self._active -= 1
            self._sem.release()
