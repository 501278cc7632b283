"""
Sea State Engine.

Runs one estimation pass per attitude sample:

    AttitudeSample ──> SampleBuffer ──┬──> wave height (K x motion magnitude)
                                      ├──> heave (pitch, vessel length)
                                      ├──> PeriodDetector
                                      └──> MotionStatistics ──> DirectionEstimator
                                                                    ^
    heading (last known) ───────────────────────────────────────────┘

The engine owns all of its state and has no locking: a single consumer
must feed it, with non-decreasing timestamps.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..config import EngineConfig
from ..sensors.attitude import AttitudeSample
from .buffer import SampleBuffer
from .direction import DirectionEstimator
from .heave import calculate_heave
from .period import PeriodDetector
from .statistics import MotionStatistics, compute_motion_statistics

logger = logging.getLogger(__name__)

# Buffer depth needed before period and direction are attempted
MIN_ANALYSIS_SAMPLES = 10


@dataclass
class SeaStateResult:
    """Sea state estimate for one tick."""
    timestamp: datetime
    wave_height: float                   # m
    motion_magnitude: float              # deg
    heave: Optional[float] = None        # m
    period: Optional[float] = None       # s
    direction: Optional[float] = None    # rad, [0, 2*pi), 0 = north
    direction_degrees: Optional[float] = None
    direction_confidence: float = 0.0    # 0-1

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'timestamp': self.timestamp.isoformat(),
            'waveHeight': self.wave_height,
            'heave': self.heave,
            'period': self.period,
            'direction': self.direction,
            'directionDegrees': self.direction_degrees,
            'directionConfidence': self.direction_confidence,
            'motionMagnitude': self.motion_magnitude,
        }

    def summary(self) -> str:
        parts = [f"Wave height: {self.wave_height:.3f}m"]
        if self.heave is not None:
            parts.append(f"heave: {self.heave:.3f}m")
        if self.period is not None:
            parts.append(f"period: {self.period:.1f}s")
        if self.direction_degrees is not None:
            parts.append(
                f"direction: {self.direction_degrees:.0f}° "
                f"(conf: {self.direction_confidence:.0%})"
            )
        parts.append(f"(motion: {self.motion_magnitude:.2f}°)")
        return ", ".join(parts)


class SeaStateEngine:
    """
    Estimates sea state from a stream of attitude samples.

    Usage:
        engine = SeaStateEngine(EngineConfig(vessel_length=14))
        engine.update_heading(math.radians(270))

        for sample in samples:
            result = engine.process(sample)
            if result:
                print(result.summary())
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

        self.buffer = SampleBuffer(self.config.buffer_capacity)
        self.period_detector = PeriodDetector(
            minimum_period=self.config.minimum_period,
            maximum_period=self.config.maximum_period,
        )
        self.direction_estimator = DirectionEstimator(smoothing=self.config.direction_smoothing)

        self._heading: Optional[float] = None
        self._last_statistics: Optional[MotionStatistics] = None

        logger.debug(
            f"Sea state engine initialized: buffer={self.buffer.capacity} samples, "
            f"period window=[{self.config.minimum_period}, {self.config.maximum_period}]s"
        )

    def update_heading(self, heading: Optional[float]):
        """Set the last known magnetic heading (rad); None or a non-finite value clears it."""
        if heading is not None and not math.isfinite(heading):
            logger.debug(f"Ignoring non-finite heading {heading}")
            heading = None
        self._heading = heading

    @property
    def heading(self) -> Optional[float]:
        return self._heading

    @property
    def last_statistics(self) -> Optional[MotionStatistics]:
        return self._last_statistics

    def process(self, sample: AttitudeSample) -> Optional[SeaStateResult]:
        """
        Run one tick.

        Returns None, leaving all state untouched, when pitch or roll
        is missing.
        """
        if not sample.is_complete:
            logger.debug(
                f"Insufficient attitude data - pitch: {sample.pitch}, roll: {sample.roll}"
            )
            return None

        config = self.config
        entry = self.buffer.push(sample)

        wave_height = config.wave_multiplier * entry.motion_magnitude

        heave = None
        if config.enable_heave:
            heave = calculate_heave(sample.pitch, config.vessel_length)

        enough_samples = len(self.buffer) >= MIN_ANALYSIS_SAMPLES

        period = None
        if config.enable_period and enough_samples:
            period = self.period_detector.update(self.buffer)

        direction = None
        direction_degrees = None
        if config.enable_direction and enough_samples:
            self._last_statistics = compute_motion_statistics(self.buffer, config.update_rate_ms)
            direction = self.direction_estimator.update(
                self.buffer, self._last_statistics, self._heading
            )
            if direction is not None:
                direction_degrees = math.degrees(direction)

        return SeaStateResult(
            timestamp=sample.timestamp,
            wave_height=wave_height,
            motion_magnitude=entry.motion_magnitude,
            heave=heave,
            period=period,
            direction=direction,
            direction_degrees=direction_degrees,
            direction_confidence=self.direction_estimator.confidence,
        )

    def reset(self):
        """Drop all accumulated state, as after construction."""
        self.buffer.clear()
        self.period_detector.reset()
        self.direction_estimator.reset()
        self._heading = None
        self._last_statistics = None

    @property
    def sample_count(self) -> int:
        return len(self.buffer)
