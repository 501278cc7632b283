"""
Pitch/roll motion statistics.

Computed over the whole SampleBuffer on radian angles:
- population variance of pitch and roll
- normalised pitch/roll cross-correlation
- dominant motion axis from the variance ratio
- phase shift between pitch and roll peaks (ms)
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .buffer import SampleBuffer

# Guards divisions by (near) zero variance
EPSILON = 1e-10

MIN_SAMPLES = 5
MIN_PHASE_SAMPLES = 11

PITCH_AXIS = "pitch"
ROLL_AXIS = "roll"
COMBINED_AXIS = "combined"


@dataclass(frozen=True)
class MotionStatistics:
    pitch_variance: float = 0.0
    roll_variance: float = 0.0
    cross_correlation: float = 0.0
    dominant_axis: str = COMBINED_AXIS
    phase_shift_ms: float = 0.0


def find_peaks(values) -> List[int]:
    """Interior indices that are strictly greater than both neighbours."""
    return [
        i for i in range(1, len(values) - 1)
        if values[i] > values[i - 1] and values[i] > values[i + 1]
    ]


def dominant_axis(pitch_variance: float, roll_variance: float) -> str:
    ratio = pitch_variance / (roll_variance + EPSILON)
    if ratio > 2:
        return PITCH_AXIS
    if ratio < 0.5:
        return ROLL_AXIS
    return COMBINED_AXIS


def phase_shift(pitch, roll, update_rate_ms: float) -> float:
    """
    Mean lag (ms) from each pitch peak to its nearest roll peak.

    Roll peaks may be paired with several pitch peaks; on equal distance
    the earlier roll peak wins.
    """
    pitch_peaks = find_peaks(pitch)
    roll_peaks = find_peaks(roll)
    if not pitch_peaks or not roll_peaks:
        return 0.0

    lags = []
    for pitch_peak in pitch_peaks:
        nearest = min(roll_peaks, key=lambda roll_peak: abs(roll_peak - pitch_peak))
        lags.append((nearest - pitch_peak) * update_rate_ms)
    return sum(lags) / len(lags)


def compute_motion_statistics(buffer: SampleBuffer, update_rate_ms: float) -> MotionStatistics:
    """Statistics of the buffered motion; neutral values below MIN_SAMPLES."""
    if len(buffer) < MIN_SAMPLES:
        return MotionStatistics()

    pitch = np.asarray(buffer.pitches(), dtype=float)
    roll = np.asarray(buffer.rolls(), dtype=float)
    n = len(pitch)

    pitch_dev = pitch - pitch.mean()
    roll_dev = roll - roll.mean()
    pitch_var = float(np.mean(pitch_dev ** 2))
    roll_var = float(np.mean(roll_dev ** 2))

    with np.errstate(invalid="ignore", divide="ignore"):
        cross = float(np.sum(pitch_dev * roll_dev) / (n * np.sqrt(pitch_var * roll_var + EPSILON)))
    if np.isnan(cross):
        cross = 0.0

    shift = 0.0
    if n >= MIN_PHASE_SAMPLES:
        shift = phase_shift(pitch, roll, update_rate_ms)

    return MotionStatistics(
        pitch_variance=pitch_var,
        roll_variance=roll_var,
        cross_correlation=cross,
        dominant_axis=dominant_axis(pitch_var, roll_var),
        phase_shift_ms=shift,
    )
