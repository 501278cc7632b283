"""
Unit tests for wave direction estimation.
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from seastate.estimation.buffer import SampleBuffer
from seastate.estimation.direction import (
    TWO_PI,
    DirectionEstimator,
    circular_variance,
    normalize_angle,
    wrap_angle,
)
from seastate.estimation.statistics import (
    COMBINED_AXIS,
    PITCH_AXIS,
    ROLL_AXIS,
    MotionStatistics,
    compute_motion_statistics,
)

from conftest import fill_buffer, make_sample

PITCH_POS = MotionStatistics(dominant_axis=PITCH_AXIS, cross_correlation=0.5)
PITCH_NEG = MotionStatistics(dominant_axis=PITCH_AXIS, cross_correlation=-0.5)
ROLL_POS = MotionStatistics(dominant_axis=ROLL_AXIS, cross_correlation=0.5)
ROLL_NEG = MotionStatistics(dominant_axis=ROLL_AXIS, cross_correlation=-0.5)
COMBINED = MotionStatistics(dominant_axis=COMBINED_AXIS)


def circular_distance(a, b):
    return abs(wrap_angle(a - b))


@pytest.fixture
def full_buffer():
    """Ten samples of equal positive pitch and roll."""
    return fill_buffer(SampleBuffer(30), [0.1] * 10, [0.1] * 10)


class TestAngleHelpers:
    """Tests for angle normalisation."""

    def test_normalize_range(self):
        """Angles map into [0, 2*pi)."""
        assert normalize_angle(-0.1) == pytest.approx(TWO_PI - 0.1)
        assert normalize_angle(TWO_PI) == 0.0
        assert normalize_angle(3 * TWO_PI + 1.0) == pytest.approx(1.0)

    def test_normalize_tiny_negative(self):
        """A tiny negative angle never becomes 2*pi."""
        result = normalize_angle(-1e-20)
        assert 0.0 <= result < TWO_PI

    def test_wrap(self):
        """Differences map onto the shortest arc."""
        assert wrap_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert wrap_angle(-3 * math.pi / 2) == pytest.approx(math.pi / 2)
        assert wrap_angle(0.3) == pytest.approx(0.3)

    def test_circular_variance_across_north(self):
        """Angles either side of north are close together."""
        assert circular_variance([0.05, TWO_PI - 0.05]) == pytest.approx(0.0025, abs=1e-6)


class TestRelativeDirection:
    """Tests for the vessel-frame bearing."""

    def test_pitch_axis(self, full_buffer):
        """Pitch-dominant motion: bow on positive correlation, stern otherwise."""
        estimator = DirectionEstimator()
        assert estimator.relative_direction(full_buffer, PITCH_POS) == 0.0
        assert estimator.relative_direction(full_buffer, PITCH_NEG) == pytest.approx(math.pi)

    def test_roll_axis(self, full_buffer):
        """Roll-dominant motion: starboard on positive correlation, port otherwise."""
        estimator = DirectionEstimator()
        assert estimator.relative_direction(full_buffer, ROLL_POS) == pytest.approx(math.pi / 2)
        assert estimator.relative_direction(full_buffer, ROLL_NEG) == pytest.approx(3 * math.pi / 2)

    def test_combined_vector_sum(self, full_buffer):
        """Equal pitch and roll point to 45 degrees."""
        relative = DirectionEstimator().relative_direction(full_buffer, COMBINED)
        assert relative == pytest.approx(math.pi / 4)

    def test_combined_negative_angle_normalized(self):
        """A vector sum pointing to port-aft is normalized into range."""
        buffer = fill_buffer(SampleBuffer(30), [-0.1] * 10, [-0.1] * 10)
        relative = DirectionEstimator().relative_direction(buffer, COMBINED)
        assert relative == pytest.approx(5 * math.pi / 4)

    def test_combined_uses_last_ten_entries(self):
        """Only the ten most recent entries contribute."""
        buffer = fill_buffer(SampleBuffer(30), [-0.1] * 5 + [0.1] * 10, [-0.1] * 5 + [0.0] * 10)
        relative = DirectionEstimator().relative_direction(buffer, COMBINED)
        assert relative == pytest.approx(0.0, abs=1e-12)

    def test_short_buffer(self):
        """Fewer than 10 entries gives no direction."""
        buffer = fill_buffer(SampleBuffer(30), [0.1] * 9, [0.1] * 9)
        assert DirectionEstimator().relative_direction(buffer, PITCH_POS) is None


class TestDirectionEstimator:
    """Tests for absolute direction, smoothing and confidence."""

    def test_missing_heading(self, full_buffer):
        """No heading, no direction, no state change."""
        estimator = DirectionEstimator()
        assert estimator.update(full_buffer, PITCH_POS, None) is None
        assert estimator.last_direction is None
        assert estimator.history == []

    def test_missing_statistics(self, full_buffer):
        """No statistics, no direction."""
        assert DirectionEstimator().update(full_buffer, None, 1.0) is None

    def test_non_finite_direction_not_stored(self, full_buffer):
        """A NaN bearing is dropped and earlier state kept."""
        estimator = DirectionEstimator(smoothing=0.5)
        estimator.update(full_buffer, PITCH_POS, 1.0)

        assert estimator.update(full_buffer, PITCH_POS, float("nan")) is None
        assert estimator.last_direction == 1.0
        assert estimator.history == [1.0]

        nan_buffer = fill_buffer(SampleBuffer(30), [float("nan")] * 10, [0.1] * 10)
        assert estimator.update(nan_buffer, COMBINED, 1.0) is None
        assert estimator.history == [1.0]

    def test_heading_added(self, full_buffer):
        """Absolute direction is relative plus heading."""
        estimator = DirectionEstimator()
        assert estimator.update(full_buffer, ROLL_POS, 0.5) == pytest.approx(math.pi / 2 + 0.5)

    def test_absolute_wraps(self, full_buffer):
        """Starboard waves on a westerly heading come from north."""
        direction = DirectionEstimator().update(full_buffer, ROLL_POS, 3 * math.pi / 2)
        assert 0.0 <= direction < TWO_PI
        assert circular_distance(direction, 0.0) < 1e-9

    def test_smoothing(self, full_buffer):
        """Smoothing moves part way towards the raw direction."""
        estimator = DirectionEstimator(smoothing=0.5)
        assert estimator.update(full_buffer, PITCH_POS, 0.0) == 0.0
        assert estimator.update(full_buffer, PITCH_POS, math.pi / 2) == pytest.approx(math.pi / 4)

    def test_smoothing_across_north(self, full_buffer):
        """Smoothing takes the short way round through north."""
        estimator = DirectionEstimator(smoothing=0.5)
        estimator.update(full_buffer, PITCH_POS, 0.3)
        direction = estimator.update(full_buffer, PITCH_POS, -0.1)

        assert direction == pytest.approx(0.1)

    def test_full_smoothing_factor_tracks_raw(self, full_buffer):
        """With factor 1 the output is the raw direction."""
        estimator = DirectionEstimator(smoothing=1.0)
        for heading in (0.2, 3.0, 5.9, 0.1, 4.4):
            direction = estimator.update(full_buffer, ROLL_NEG, heading)
            expected = normalize_angle(3 * math.pi / 2 + heading)
            assert circular_distance(direction, expected) < 1e-9

    def test_confidence_needs_six_directions(self, full_buffer):
        """Confidence stays at 0 until six directions exist."""
        estimator = DirectionEstimator()
        for _ in range(5):
            estimator.update(full_buffer, PITCH_POS, 1.0)
        assert estimator.confidence == 0.0

        estimator.update(full_buffer, PITCH_POS, 1.0)
        assert estimator.confidence == pytest.approx(1.0)

    def test_inconsistent_directions_lower_confidence(self, full_buffer):
        """Scattered directions give lower confidence."""
        estimator = DirectionEstimator(smoothing=1.0)
        for heading in (0.0, 2.0, 4.0, 1.0, 3.0, 5.0, 0.5, 2.5):
            estimator.update(full_buffer, PITCH_POS, heading)

        assert 0.0 <= estimator.confidence < 0.5

    def test_history_bounded(self, full_buffer):
        """Direction history keeps 10 values."""
        estimator = DirectionEstimator()
        for _ in range(25):
            estimator.update(full_buffer, PITCH_POS, 1.0)
        assert len(estimator.history) == DirectionEstimator.HISTORY_SIZE

    def test_ranges_hold_for_random_motion(self):
        """Direction and confidence stay in range for arbitrary input."""
        rng = np.random.default_rng(42)
        estimator = DirectionEstimator(smoothing=0.3)
        buffer = SampleBuffer(30)

        for i in range(300):
            buffer.push(make_sample(rng.normal(0, 0.1), rng.normal(0, 0.1), float(i)))
            if len(buffer) < 10:
                continue
            stats = compute_motion_statistics(buffer, 1000)
            direction = estimator.update(buffer, stats, rng.uniform(-10, 10))

            assert direction is not None
            assert 0.0 <= direction < TWO_PI
            assert 0.0 <= estimator.confidence <= 1.0

    def test_reset(self, full_buffer):
        """Reset clears smoothing and confidence state."""
        estimator = DirectionEstimator()
        for _ in range(8):
            estimator.update(full_buffer, PITCH_POS, 1.0)
        estimator.reset()

        assert estimator.last_direction is None
        assert estimator.history == []
        assert estimator.confidence == 0.0
