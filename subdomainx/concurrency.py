"""Thread-based worker pool, semaphore and rate limiter."""

from __future__ import annotations

import logging
import math
import queue
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05
_CLOSE = object()


class RateLimiter:
    """Lets callers through at most `rate` times per second, on a fixed tick."""

    def __init__(self, rate: int) -> None:
        self._interval = 1.0 / rate if rate > 0 else None
        self._lock = threading.Lock()
        self._stopped = False
        self._start = time.monotonic()
        self._next_tick = self._start + (self._interval or 0.0)

    def wait(self) -> None:
        """Block until the next tick; returns at once when there is no limit."""
        if self._interval is None:
            return
        with self._lock:
            if self._stopped:
                raise RuntimeError("rate limiter stopped")
            now = time.monotonic()
            target = self._next_tick
            if target <= now:
                # A tick already passed and is waiting to be taken.
                elapsed_ticks = math.floor((now - self._start) / self._interval)
                self._next_tick = self._start + (elapsed_ticks + 1) * self._interval
                return
            self._next_tick = target + self._interval
        time.sleep(target - now)

    def stop(self) -> None:
        """Stop issuing ticks."""
        with self._lock:
            self._stopped = True


class Semaphore:
    """A counting semaphore with a fixed number of permits."""

    def __init__(self, capacity: int) -> None:
        self._sem = threading.BoundedSemaphore(capacity)

    def acquire(self) -> None:
        """Take a permit, blocking until one is free."""
        self._sem.acquire()

    def release(self) -> None:
        """Return a permit; raises ValueError if none is held."""
        self._sem.release()

    def try_acquire(self) -> bool:
        """Take a permit if one is free, without blocking."""
        return self._sem.acquire(blocking=False)

    def __enter__(self) -> Semaphore:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class WorkerPool:
    """A fixed set of worker threads running submitted jobs, optionally rate limited."""

    def __init__(self, workers: int, rate_limit: int = 0) -> None:
        if workers < 0:
            raise ValueError("workers cannot be negative")
        self._jobs: queue.Queue[object] = queue.Queue(maxsize=max(workers * 2, 1))
        self._cancelled = threading.Event()
        self._closed = False
        self._limiter = RateLimiter(rate_limit) if rate_limit > 0 else None
        self._threads = [threading.Thread(target=self._run, daemon=True) for _ in range(workers)]
        for thread in self._threads:
            thread.start()

    def _run(self) -> None:
        while not self._cancelled.is_set():
            try:
                job = self._jobs.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            if job is _CLOSE:
                return
            if self._limiter is not None:
                try:
                    self._limiter.wait()
                except RuntimeError:
                    return
            try:
                job()  # type: ignore[operator]
            except Exception:
                logger.exception("worker job failed")

    def _put(self, item: object) -> bool:
        while not self._cancelled.is_set():
            try:
                self._jobs.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    def submit(self, job: Callable[[], object]) -> None:
        """Queue a job, blocking while the queue is full; dropped if the pool is stopped."""
        if self._closed:
            raise RuntimeError("worker pool no longer accepts jobs")
        self._put(job)

    def wait(self) -> None:
        """Stop accepting jobs and wait for the workers to finish the queued ones."""
        if not self._closed:
            self._closed = True
            for _ in self._threads:
                if not self._put(_CLOSE):
                    break
        for thread in self._threads:
            thread.join()

    def stop(self) -> None:
        """Cancel the pool; workers exit without taking further jobs."""
        self._cancelled.set()
        if self._limiter is not None:
            self._limiter.stop()

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            self.wait()
        finally:
            self.stop()