"""Motion-analysis estimators for sea state."""

from .buffer import SampleBuffer, BufferEntry
from .direction import DirectionEstimator
from .engine import SeaStateEngine, SeaStateResult
from .heave import calculate_heave
from .period import PeriodDetector
from .statistics import MotionStatistics, compute_motion_statistics

__all__ = [
    "SampleBuffer",
    "BufferEntry",
    "DirectionEstimator",
    "SeaStateEngine",
    "SeaStateResult",
    "calculate_heave",
    "PeriodDetector",
    "MotionStatistics",
    "compute_motion_statistics",
]
