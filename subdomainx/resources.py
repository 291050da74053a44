"""Reporting memory, thread and garbage-collection figures during a scan."""

from __future__ import annotations

import gc
import os
import threading
import time
import tracemalloc
from datetime import timedelta
from typing import Any, Callable

_MB = 1024 * 1024


def _gc_count() -> int:
    return sum(stats.get("collections", 0) for stats in gc.get_stats())


def _cpu_count() -> int:
    return os.cpu_count() or 1


class ResourceMonitor:
    """Tracks memory use from creation onwards; traces allocations while it lives."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start = clock()
        self._owns_tracing = not tracemalloc.is_tracing()
        if self._owns_tracing:
            tracemalloc.start()
        self.peak_memory = tracemalloc.get_traced_memory()[0]
        self.check_interval = 5.0

    def _current_memory(self) -> int:
        current, peak = tracemalloc.get_traced_memory() if tracemalloc.is_tracing() else (0, 0)
        self.peak_memory = max(self.peak_memory, current, peak)
        return current

    def _release(self) -> None:
        if self._owns_tracing and tracemalloc.is_tracing():
            tracemalloc.stop()
        self._owns_tracing = False

    def __enter__(self) -> ResourceMonitor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._release()

    def start(self) -> None:
        print("🔧 Resource monitoring started...")

    def check(self) -> None:
        """Print current memory, CPU and thread figures with any warnings."""
        usage_mb = self._current_memory() / _MB
        peak_mb = self.peak_memory / _MB
        cpus = _cpu_count()
        threads = threading.active_count()
        print(
            f"📊 Memory: {usage_mb:.1f}MB (Peak: {peak_mb:.1f}MB) | "
            f"CPU: {cpus} cores | Threads: {threads}"
        )
        if usage_mb > 500:
            print("⚠️  High memory usage detected. Consider reducing thread count.")
        if threads > cpus * 10:
            print("⚠️  High thread count detected. Consider reducing concurrency.")

    def optimize(self) -> None:
        """Run a full garbage collection and report memory afterwards."""
        gc.collect()
        print(f"🧹 Memory optimization completed. Current usage: {self._current_memory() / _MB:.1f}MB")

    def get_stats(self) -> dict[str, Any]:
        current = self._current_memory()
        elapsed = timedelta(seconds=self._clock() - self._start)
        return {
            "elapsed_time": str(elapsed),
            "current_memory": current / _MB,
            "peak_memory": self.peak_memory / _MB,
            "num_cpu": _cpu_count(),
            "num_threads": threading.active_count(),
            "gc_count": _gc_count(),
        }

    def print_final_stats(self) -> None:
        stats = self.get_stats()
        print("\n📈 Resource Usage Summary:")
        print(f"⏱️  Total time: {stats['elapsed_time']}")
        print(f"💾 Peak memory: {stats['peak_memory']:.1f}MB")
        print(f"🧹 Garbage collections: {stats['gc_count']}")
        print(f"⚡ Final threads: {stats['num_threads']}")


_monitor: ResourceMonitor | None = None


def start_resource_monitoring() -> None:
    global _monitor
    if _monitor is not None:
        _monitor._release()
    _monitor = ResourceMonitor()
    _monitor.start()


def check_resources() -> None:
    if _monitor is not None:
        _monitor.check()


def optimize_resources() -> None:
    if _monitor is not None:
        _monitor.optimize()


def stop_resource_monitoring() -> None:
    """Print the summary and drop the global monitor."""
    global _monitor
    if _monitor is not None:
        try:
            _monitor.print_final_stats()
        finally:
            _monitor._release()
            _monitor = None