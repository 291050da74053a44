import threading
import tracemalloc

from subdomainx.resources import (
    ResourceMonitor,
    check_resources,
    optimize_resources,
    start_resource_monitoring,
    stop_resource_monitoring,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_get_stats_reports_elapsed_time_and_counts():
    clock = FakeClock()
    with ResourceMonitor(clock=clock) as monitor:
        clock.now = 90.0
        stats = monitor.get_stats()
    assert stats["elapsed_time"] == "0:01:30"
    assert stats["num_cpu"] >= 1
    assert stats["num_threads"] >= 1
    assert stats["gc_count"] >= 0
    assert stats["peak_memory"] >= stats["current_memory"]


def test_peak_memory_never_decreases():
    with ResourceMonitor() as monitor:
        first = monitor.get_stats()["peak_memory"]
        data = [bytes(1024) for _ in range(200)]
        second = monitor.get_stats()["peak_memory"]
        del data
        third = monitor.get_stats()["peak_memory"]
    assert first <= second <= third


def test_monitor_stops_tracing_it_started():
    was_tracing = tracemalloc.is_tracing()
    with ResourceMonitor() as monitor:
        tracing_inside = tracemalloc.is_tracing()
        stats = monitor.get_stats()
    assert tracing_inside is True
    assert stats["peak_memory"] >= stats["current_memory"] >= 0
    assert tracemalloc.is_tracing() == was_tracing


def test_check_prints_status_line(capsys):
    with ResourceMonitor() as monitor:
        monitor.check()
    out = capsys.readouterr().out
    assert out.startswith("📊 Memory: ")
    assert f"Threads: {threading.active_count()}" in out


def test_optimize_prints_usage(capsys):
    with ResourceMonitor() as monitor:
        monitor.optimize()
    assert "🧹 Memory optimization completed. Current usage:" in capsys.readouterr().out


def test_global_monitoring_lifecycle(capsys):
    start_resource_monitoring()
    check_resources()
    optimize_resources()
    stop_resource_monitoring()
    out = capsys.readouterr().out
    assert "🔧 Resource monitoring started..." in out
    assert "📊 Memory:" in out
    assert "📈 Resource Usage Summary:" in out
    assert "💾 Peak memory:" in out


def test_global_functions_are_silent_without_monitor(capsys):
    stop_resource_monitoring()
    capsys.readouterr()
    check_resources()
    optimize_resources()
    stop_resource_monitoring()
    assert capsys.readouterr().out == ""