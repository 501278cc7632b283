"""
Wave direction from motion statistics.

The vessel-frame bearing (0 = bow, pi/2 = starboard, pi = stern,
3*pi/2 = port) comes from the dominant motion axis and the sign of the
pitch/roll correlation; when neither axis dominates, the recent pitch/roll
motion vectors are summed instead. Adding the heading gives the geographic
bearing, which is smoothed along the shortest arc. Confidence is derived
from the circular variance of the last reported bearings.
"""

import logging
import math
from collections import deque
from typing import List, Optional

from .buffer import SampleBuffer
from .statistics import COMBINED_AXIS, PITCH_AXIS, ROLL_AXIS, MotionStatistics

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi

# Circular variance at which confidence reaches zero
MAX_CIRCULAR_VARIANCE = math.pi ** 2 / 4


def normalize_angle(angle: float) -> float:
    """Map an angle into [0, 2*pi)."""
    result = angle % TWO_PI
    # a tiny negative input rounds up to exactly 2*pi
    if result >= TWO_PI:
        result = 0.0
    return result


def wrap_angle(angle: float) -> float:
    """Map an angle difference into [-pi, pi]."""
    return (angle + math.pi) % TWO_PI - math.pi


def circular_mean(angles: List[float]) -> float:
    n = len(angles)
    return math.atan2(
        sum(math.sin(a) for a in angles) / n,
        sum(math.cos(a) for a in angles) / n,
    )


def circular_variance(angles: List[float]) -> float:
    """Mean squared shortest-arc deviation from the circular mean (rad^2)."""
    mean = circular_mean(angles)
    return sum(wrap_angle(a - mean) ** 2 for a in angles) / len(angles)


class DirectionEstimator:
    """
    Absolute wave direction with smoothing and confidence.

    State (the last direction and the direction history) only changes
    when a direction is actually produced.

    Usage:
        estimator = DirectionEstimator(smoothing=0.3)
        direction = estimator.update(buffer, stats, heading)
        confidence = estimator.confidence
    """

    MIN_SAMPLES = 10
    VECTOR_WINDOW = 10
    HISTORY_SIZE = 10
    MIN_CONFIDENCE_HISTORY = 6

    def __init__(self, smoothing: float = 0.3):
        self.smoothing = smoothing
        self._history: deque = deque(maxlen=self.HISTORY_SIZE)
        self._last_direction: Optional[float] = None
        self._confidence = 0.0

    def relative_direction(self, buffer: SampleBuffer, stats: MotionStatistics) -> Optional[float]:
        """Wave bearing in the vessel frame, in [0, 2*pi)."""
        if len(buffer) < self.MIN_SAMPLES:
            return None

        if stats.dominant_axis == PITCH_AXIS:
            # bow vs stern
            relative = 0.0 if stats.cross_correlation > 0 else math.pi
        elif stats.dominant_axis == ROLL_AXIS:
            # starboard vs port
            relative = math.pi / 2 if stats.cross_correlation > 0 else 3 * math.pi / 2
        else:
            sum_x = 0.0
            sum_y = 0.0
            for entry in buffer.recent(self.VECTOR_WINDOW):
                motion_angle = math.atan2(entry.roll, entry.pitch)
                sum_x += math.cos(motion_angle) * entry.motion_magnitude
                sum_y += math.sin(motion_angle) * entry.motion_magnitude
            relative = math.atan2(sum_y, sum_x)

        return normalize_angle(relative)

    def update(
        self,
        buffer: SampleBuffer,
        stats: Optional[MotionStatistics],
        heading: Optional[float],
    ) -> Optional[float]:
        """Produce the next smoothed absolute direction (rad), or None."""
        if heading is None:
            logger.debug("No vessel heading available - cannot calculate absolute wave direction")
            return None
        if stats is None:
            return None

        relative = self.relative_direction(buffer, stats)
        if relative is None:
            return None

        raw = normalize_angle(relative + heading)
        if not math.isfinite(raw):
            return None

        direction = raw
        if self._last_direction is not None:
            delta = wrap_angle(raw - self._last_direction)
            direction = normalize_angle(self._last_direction + self.smoothing * delta)

        self._history.append(direction)
        if len(self._history) >= self.MIN_CONFIDENCE_HISTORY:
            variance = circular_variance(list(self._history))
            self._confidence = min(1.0, max(0.0, 1 - variance / MAX_CIRCULAR_VARIANCE))

        self._last_direction = direction

        logger.debug(
            f"Wave direction: relative={math.degrees(relative):.0f}° + "
            f"heading={math.degrees(heading):.0f}° = absolute={math.degrees(direction):.0f}° "
            f"(conf: {self._confidence:.0%})"
        )
        return direction

    @property
    def confidence(self) -> float:
        return self._confidence

    @property
    def last_direction(self) -> Optional[float]:
        return self._last_direction

    @property
    def history(self) -> List[float]:
        return list(self._history)

    def reset(self):
        self._history.clear()
        self._last_direction = None
        self._confidence = 0.0
