"""
Shared pytest fixtures for sea state tests.

Samples are built on a fixed UTC start time so zero-crossing intervals
are exact multiples of the update rate.
"""

import math
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from seastate.config import EngineConfig  # noqa: E402
from seastate.estimation.buffer import SampleBuffer  # noqa: E402
from seastate.estimation.engine import SeaStateEngine  # noqa: E402
from seastate.sensors.attitude import AttitudeSample  # noqa: E402

START = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_sample(pitch, roll, t=0.0, yaw=None):
    """AttitudeSample at ``t`` seconds after START."""
    return AttitudeSample(timestamp=START + timedelta(seconds=t), pitch=pitch, roll=roll, yaw=yaw)


def sine_roll_samples(count, period_s=5.0, update_rate_ms=1000.0, pitch_amplitude=0.0, roll_amplitude=1.0):
    """Roll (and optionally pitch) sinusoid sampled at the update rate."""
    samples = []
    for i in range(count):
        t = i * update_rate_ms / 1000.0
        phase = 2 * math.pi * t / period_s
        samples.append(make_sample(pitch_amplitude * math.sin(phase), roll_amplitude * math.sin(phase), t))
    return samples


def fill_buffer(buffer, pitches, rolls):
    for i, (pitch, roll) in enumerate(zip(pitches, rolls)):
        buffer.push(make_sample(pitch, roll, float(i)))
    return buffer


@pytest.fixture
def config():
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def engine(config):
    """Fresh engine with default configuration."""
    return SeaStateEngine(config)


@pytest.fixture
def buffer():
    """Empty 30-sample buffer."""
    return SampleBuffer(capacity=30)

