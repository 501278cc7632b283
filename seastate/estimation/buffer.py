"""Rolling window of attitude samples used by the period and direction estimators."""

import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional

from ..sensors.attitude import AttitudeSample


@dataclass(frozen=True)
class BufferEntry:
    """One buffered sample. Angles in radians, motion magnitude in degrees."""
    pitch: float
    roll: float
    timestamp: datetime
    motion_magnitude: float
    yaw: Optional[float] = None


def motion_magnitude(pitch: float, roll: float) -> float:
    """Euclidean norm of pitch and roll, in degrees."""
    return math.hypot(math.degrees(pitch), math.degrees(roll))


class SampleBuffer:
    """
    Fixed-capacity FIFO of BufferEntry, oldest first.

    Usage:
        buffer = SampleBuffer(capacity=config.buffer_capacity)
        entry = buffer.push(sample)
        rolls = buffer.rolls()
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Buffer capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: deque = deque(maxlen=capacity)

    def push(self, sample: AttitudeSample) -> BufferEntry:
        """Append a complete sample, evicting the oldest entry at capacity."""
        entry = BufferEntry(
            pitch=sample.pitch,
            roll=sample.roll,
            yaw=sample.yaw,
            timestamp=sample.timestamp,
            motion_magnitude=motion_magnitude(sample.pitch, sample.roll),
        )
        self._entries.append(entry)
        return entry

    def clear(self):
        self._entries.clear()

    def pitches(self) -> List[float]:
        return [e.pitch for e in self._entries]

    def rolls(self) -> List[float]:
        return [e.roll for e in self._entries]

    def recent(self, n: int) -> List[BufferEntry]:
        """The ``n`` most recent entries, oldest first."""
        if n <= 0:
            return []
        return list(self._entries)[-n:]

    @property
    def latest(self) -> Optional[BufferEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BufferEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> BufferEntry:
        return self._entries[index]
