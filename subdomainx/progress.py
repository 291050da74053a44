"""Progress tracking with a text progress bar and ETA."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

_BAR_LENGTH = 30


@dataclass(frozen=True)
class ProgressSnapshot:
    """Progress at one moment."""

    completed: int
    total: int
    percentage: float
    eta: timedelta


def _format_eta(eta: timedelta) -> str:
    seconds = eta.total_seconds()
    if seconds <= 0:
        return "N/A"
    hours = seconds / 3600
    minutes = seconds / 60
    if hours >= 1:
        return f"{hours:.0f}h {int(minutes) % 60}m"
    if minutes >= 1:
        return f"{minutes:.0f}m {int(seconds) % 60}s"
    return f"{seconds:.0f}s"


class ProgressTracker:
    """Thread-safe counter of completed tasks out of a total."""

    def __init__(
        self, total: int, description: str, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.total = total
        self.description = description
        self._completed = 0
        self._clock = clock
        self._start = clock()
        self._lock = threading.Lock()

    def increment(self) -> None:
        with self._lock:
            self._completed += 1

    def update(self, completed: int) -> None:
        with self._lock:
            self._completed = completed

    def get_progress(self) -> ProgressSnapshot:
        """Return the counts, the percentage done and the estimated time left."""
        with self._lock:
            completed, total = self._completed, self.total
            percentage = completed / total * 100 if total > 0 else 0.0
            eta = timedelta(0)
            if completed > 0:
                elapsed = self._clock() - self._start
                if elapsed > 0:
                    rate = completed / elapsed
                    if rate > 0:
                        eta = timedelta(seconds=int((total - completed) / rate))
        return ProgressSnapshot(completed, total, percentage, eta)

    def format_progress(self) -> str:
        """Return the progress line: description, bar, counts, percentage and ETA."""
        snap = self.get_progress()
        filled = int(_BAR_LENGTH * snap.percentage / 100)
        filled = max(0, min(filled, _BAR_LENGTH))
        bar = "[" + "█" * filled + "░" * (_BAR_LENGTH - filled) + "]"
        return (
            f"{self.description} {bar} {snap.completed}/{snap.total} "
            f"({snap.percentage:.1f}%) ETA: {_format_eta(snap.eta)}"
        )

    def print_progress(self) -> str:
        """Redraw the progress line on standard output and return what was written."""
        line = "\r" + self.format_progress()
        sys.stdout.write(line)
        sys.stdout.flush()
        return line

    def finish(self) -> None:
        with self._lock:
            self._completed = self.total
        sys.stdout.write("\n")
        sys.stdout.flush()


_enum_lock = threading.Lock()
_enum_progress: ProgressTracker | None = None


def start_enumeration_progress(total: int) -> None:
    """Begin tracking enumeration progress for `total` tasks."""
    global _enum_progress
    with _enum_lock:
        _enum_progress = ProgressTracker(total, "🔍 Enumerating")


def update_enumeration_progress(completed: int) -> None:
    with _enum_lock:
        if _enum_progress is not None:
            _enum_progress.update(completed)
            _enum_progress.print_progress()


def increment_enumeration_progress() -> None:
    with _enum_lock:
        if _enum_progress is not None:
            _enum_progress.increment()
            _enum_progress.print_progress()


def finish_enumeration_progress() -> None:
    global _enum_progress
    with _enum_lock:
        if _enum_progress is not None:
            _enum_progress.finish()
            _enum_progress = None