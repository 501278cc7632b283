"""
Wave period from roll zero crossings.

Consecutive zero crossings of the roll angle are half a wave cycle apart.
Each scan over the buffer yields the mean full period of its accepted
crossing intervals; the reported period is the mean of the last
``HISTORY_SIZE`` scans, which trades some lag for robustness against a
single noisy cycle.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .buffer import SampleBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZeroCrossing:
    """A roll sign change, located at the entry where the new sign appears."""
    timestamp: datetime
    index: int


def find_zero_crossings(values: List[float], timestamps: List[datetime]) -> List[ZeroCrossing]:
    """
    Indices where ``values`` changes sign.

    A step that starts exactly at zero is not a crossing: the step that
    arrived at zero was already counted.
    """
    crossings = []
    for i in range(1, len(values)):
        prev = values[i - 1]
        curr = values[i]
        if (prev < 0 and curr >= 0) or (prev > 0 and curr <= 0):
            crossings.append(ZeroCrossing(timestamp=timestamps[i], index=i))
    return crossings


class PeriodDetector:
    """
    Smoothed wave period estimate from the roll series of a SampleBuffer.

    Usage:
        detector = PeriodDetector(minimum_period=2.0, maximum_period=20.0)
        period = detector.update(buffer)  # seconds or None
    """

    MIN_SAMPLES = 10
    HISTORY_SIZE = 10

    def __init__(self, minimum_period: float = 2.0, maximum_period: float = 20.0):
        self.minimum_period = minimum_period
        self.maximum_period = maximum_period
        self._history: deque = deque(maxlen=self.HISTORY_SIZE)

    def update(self, buffer: SampleBuffer) -> Optional[float]:
        """Scan the buffer, record this scan's period and return the smoothed period."""
        if len(buffer) < self.MIN_SAMPLES:
            return None

        crossings = find_zero_crossings(buffer.rolls(), [e.timestamp for e in buffer])
        if len(crossings) < 2:
            logger.debug(f"Only {len(crossings)} roll zero crossings in {len(buffer)} samples")
            return None

        periods = []
        for first, second in zip(crossings, crossings[1:]):
            half_period = (second.timestamp - first.timestamp).total_seconds()
            if self.minimum_period <= half_period <= self.maximum_period:
                periods.append(half_period * 2)

        if not periods:
            logger.debug("No crossing interval inside the period window")
            return None

        self._history.append(sum(periods) / len(periods))
        return self.period

    @property
    def period(self) -> Optional[float]:
        """Mean of the period history, held inside the configured window."""
        if not self._history:
            return None
        mean = sum(self._history) / len(self._history)
        return min(max(mean, self.minimum_period), self.maximum_period)

    @property
    def history(self) -> List[float]:
        return list(self._history)

    def reset(self):
        self._history.clear()
