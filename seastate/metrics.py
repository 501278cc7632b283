"""
Service counters, gauges and tick timing.

Each SeaStateService owns one ServiceMetrics. The push callbacks, the
poll thread and the worker all write to it, so every access takes the lock.

Usage:
    service_metrics = ServiceMetrics()

    with service_metrics.timer(TICK_TIMER):
        result = engine.process(sample)
    service_metrics.increment(TICKS_PROCESSED)

    service_metrics.counter(TICKS_PROCESSED)
"""

import logging
import time
from contextlib import contextmanager
from threading import Lock
from typing import Dict

logger = logging.getLogger(__name__)

DELTAS_RECEIVED = "seastate_deltas_received"
TICKS_PROCESSED = "seastate_ticks_processed"
TICKS_SKIPPED = "seastate_ticks_skipped"
PARSE_ERRORS = "seastate_parse_errors"
SINK_ERRORS = "seastate_sink_errors"
DROPPED = "seastate_dropped"

TICK_TIMER = "seastate_tick"
DIRECTION_CONFIDENCE = "seastate_direction_confidence"


class ServiceMetrics:
    """Thread-safe counters, gauges and per-name timing totals."""

    # Ticks slower than this are logged as warnings (ms)
    SLOW_THRESHOLD_MS = 50.0

    def __init__(self):
        self._lock = Lock()
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, float] = {}
        # name -> (count, total ms, max ms)
        self._timings: Dict[str, tuple] = {}

    @contextmanager
    def timer(self, name: str):
        """Time the enclosed block under ``name``, also when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            with self._lock:
                count, total, peak = self._timings.get(name, (0, 0.0, 0.0))
                self._timings[name] = (count + 1, total + elapsed_ms, max(peak, elapsed_ms))
            if elapsed_ms > self.SLOW_THRESHOLD_MS:
                logger.warning(
                    f"Slow operation: {name} took {elapsed_ms:.1f}ms "
                    f"(threshold: {self.SLOW_THRESHOLD_MS}ms)"
                )

    def increment(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + amount

    def set_gauge(self, name: str, value: float):
        with self._lock:
            self._gauges[name] = value

    def counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def gauge(self, name: str) -> float:
        with self._lock:
            return self._gauges.get(name, 0.0)

    def timing(self, name: str) -> dict:
        """Count, mean and max (ms) of a timer; zeros if it never ran."""
        with self._lock:
            count, total, peak = self._timings.get(name, (0, 0.0, 0.0))
        return {
            "count": count,
            "avg_ms": round(total / count, 3) if count else 0.0,
            "max_ms": round(peak, 3),
        }
