"""
Sea State Service.

Owns a SeaStateEngine and feeds it from a SignalK server:

    push deltas ──────┐
                      ├──> Queue ──> worker thread ──> engine ──> sink(delta)
    poll fallback ────┘

Every source goes through the one queue, so the worker thread is the only
writer of the engine's state.

Usage:
    service = SeaStateService(config, sink=app.handle_message, vessel_name="Zennora")
    service.start()
    subscription.on_delta(service.submit_delta)
    ...
    service.stop()
"""

import logging
import threading
from datetime import datetime, timezone
from queue import Empty, Full, Queue
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import EngineConfig
from .estimation.engine import SeaStateEngine, SeaStateResult
from .metrics import (
    DELTAS_RECEIVED,
    DIRECTION_CONFIDENCE,
    DROPPED,
    PARSE_ERRORS,
    SINK_ERRORS,
    TICK_TIMER,
    TICKS_PROCESSED,
    TICKS_SKIPPED,
    ServiceMetrics,
)
from .sensors.attitude import AttitudeSample
from .sensors.signalk import (
    DEFAULT_HEADING_PATH,
    AttitudeUpdate,
    HeadingUpdate,
    build_delta,
    iter_delta_values,
    parse_attitude_value,
    parse_heading_value,
    vessel_source,
)

logger = logging.getLogger(__name__)

Sink = Callable[[dict], None]
Poller = Callable[[], Tuple[Any, Any]]

_DELTA = "delta"
_ATTITUDE = "attitude"
_HEADING = "heading"

# get_stats() key -> counter
_STAT_COUNTERS = {
    "deltas_received": DELTAS_RECEIVED,
    "ticks_processed": TICKS_PROCESSED,
    "ticks_skipped": TICKS_SKIPPED,
    "parse_errors": PARSE_ERRORS,
    "sink_errors": SINK_ERRORS,
    "dropped": DROPPED,
}


class SeaStateService:
    """Lifecycle, input serialization and output for one engine."""

    QUEUE_SIZE = 1000

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        sink: Optional[Sink] = None,
        poller: Optional[Poller] = None,
        vessel_name: Optional[str] = None,
        heading_path: str = DEFAULT_HEADING_PATH,
        poll_interval_s: float = 2.0,
    ):
        """
        Args:
            config: Engine configuration snapshot
            sink: Receives one SignalK delta per produced result
            poller: Returns (attitude value, heading value) from the server;
                polled every ``poll_interval_s`` while running
            vessel_name: Used for the ``$source`` of emitted deltas
            heading_path: SignalK path carrying the heading
            poll_interval_s: Poll fallback interval
        """
        self.engine = SeaStateEngine(config)
        self.heading_path = heading_path
        self.poll_interval_s = poll_interval_s
        self.source = vessel_source(vessel_name, "derived")

        self._poller = poller
        self._sinks: List[Sink] = [sink] if sink else []
        self._queue: Queue = Queue(maxsize=self.QUEUE_SIZE)
        self._attitude = AttitudeSample.empty()
        self._latest_result: Optional[SeaStateResult] = None

        self._running = False
        self._stop_event = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._poll_thread: Optional[threading.Thread] = None

        self.metrics = ServiceMetrics()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start the worker (and poll) threads."""
        if self._running:
            return False

        self._running = True
        self._stop_event.clear()
        self._worker = threading.Thread(target=self._worker_loop, name="seastate-worker", daemon=True)
        self._worker.start()

        if self._poller is not None:
            self._poll_thread = threading.Thread(target=self._poll_loop, name="seastate-poll", daemon=True)
            self._poll_thread.start()

        logger.info(
            f"Sea state service started (source={self.source}, heading={self.heading_path}, "
            f"buffer={self.engine.buffer.capacity} samples)"
        )
        return True

    def stop(self):
        """Stop threads; queued but unprocessed input is discarded."""
        self._running = False
        self._stop_event.set()
        for thread in (self._poll_thread, self._worker):
            if thread:
                thread.join(timeout=2.0)
        self._poll_thread = None
        self._worker = None

        with self._queue.mutex:
            self._queue.queue.clear()
        logger.info("Sea state service stopped")

    @property
    def running(self) -> bool:
        return self._running

    def add_sink(self, sink: Sink):
        self._sinks.append(sink)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def submit_delta(self, delta: dict):
        """Queue a SignalK delta from the push subscription."""
        self._enqueue((_DELTA, delta))

    def submit_attitude(self, value: Any, timestamp: Optional[datetime] = None):
        """Queue a raw ``navigation.attitude`` value."""
        self._enqueue((_ATTITUDE, value, timestamp or datetime.now(timezone.utc)))

    def submit_heading(self, value: Any):
        """Queue a raw heading value (rad)."""
        self._enqueue((_HEADING, value))

    def _enqueue(self, item: tuple):
        try:
            self._queue.put_nowait(item)
        except Full:
            self.metrics.increment(DROPPED)
            logger.warning("Sea state input queue full, dropping update")

    def drain(self) -> int:
        """Process everything queued so far on the calling thread.

        Only for use while the service is not running.
        """
        if self._running:
            raise RuntimeError("drain() cannot be used while the service is running")

        handled = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except Empty:
                return handled
            self._handle(item)
            handled += 1

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def _worker_loop(self):
        while self._running:
            try:
                item = self._queue.get(timeout=0.2)
            except Empty:
                continue
            self._handle(item)

    def _poll_loop(self):
        while not self._stop_event.wait(self.poll_interval_s):
            try:
                attitude, heading = self._poller()
            except Exception as e:
                logger.error(f"Attitude poll failed: {e}")
                continue

            if heading is not None:
                self.submit_heading(heading)
            if attitude is not None:
                self.submit_attitude(attitude)
            else:
                logger.debug("No attitude data available via direct access")

    def _handle(self, item: tuple):
        kind = item[0]
        if kind == _DELTA:
            self._handle_delta(item[1])
        elif kind == _ATTITUDE:
            attitude = parse_attitude_value(item[1])
            if attitude is None:
                self.metrics.increment(PARSE_ERRORS)
                logger.debug(f"Ignoring attitude value {item[1]!r}")
                return
            self._apply_attitude(attitude, item[2])
        elif kind == _HEADING:
            heading = parse_heading_value(item[1])
            if heading is None:
                self.metrics.increment(PARSE_ERRORS)
                logger.debug(f"Ignoring heading value {item[1]!r}")
                return
            self.engine.update_heading(heading)

    def _handle_delta(self, delta: Any):
        self.metrics.increment(DELTAS_RECEIVED)
        try:
            updates = list(iter_delta_values(delta, self.heading_path))
        except ValueError as e:
            self.metrics.increment(PARSE_ERRORS)
            logger.debug(f"Malformed delta: {e}")
            return

        for update in updates:
            if isinstance(update, HeadingUpdate):
                self.engine.update_heading(update.heading)
            elif isinstance(update, AttitudeUpdate):
                self._apply_attitude(update.value, update.timestamp)

    def _apply_attitude(self, value, timestamp: datetime):
        self._attitude = self._attitude.merged(
            timestamp=timestamp, pitch=value.pitch, roll=value.roll, yaw=value.yaw
        )
        self._tick()

    def _tick(self):
        with self.metrics.timer(TICK_TIMER):
            result = self.engine.process(self._attitude)

        if result is None:
            self.metrics.increment(TICKS_SKIPPED)
            return

        self.metrics.increment(TICKS_PROCESSED)
        self.metrics.set_gauge(DIRECTION_CONFIDENCE, result.direction_confidence)
        self._latest_result = result
        logger.debug(result.summary())

        delta = build_delta(result, self.source)
        for sink in self._sinks:
            try:
                sink(delta)
            except Exception as e:
                self.metrics.increment(SINK_ERRORS)
                logger.error(f"Sink error: {e}")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def latest_result(self) -> Optional[SeaStateResult]:
        return self._latest_result

    def get_stats(self) -> Dict:
        stats = {key: self.metrics.counter(name) for key, name in _STAT_COUNTERS.items()}
        stats["buffer_samples"] = self.engine.sample_count
        stats["queued"] = self._queue.qsize()
        stats["tick_avg_ms"] = self.metrics.timing(TICK_TIMER)["avg_ms"]
        return stats
