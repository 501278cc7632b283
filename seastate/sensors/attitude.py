"""Typed attitude samples handed from feed adapters to the estimation engine."""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional


def _usable(angle: Optional[float]) -> bool:
    return angle is not None and math.isfinite(angle)


@dataclass(frozen=True)
class AttitudeSample:
    """Vessel attitude at one instant.

    Angles are radians: pitch positive bow up, roll positive starboard down.
    Pitch or roll may be missing while a feed is warming up, or arrive
    as NaN from a faulty sensor; such samples are never buffered.
    """
    timestamp: datetime
    pitch: Optional[float] = None
    roll: Optional[float] = None
    yaw: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        """Pitch and roll both present and finite; NaN or inf count as absent."""
        return _usable(self.pitch) and _usable(self.roll)

    @property
    def pitch_deg(self) -> Optional[float]:
        return math.degrees(self.pitch) if self.pitch is not None else None

    @property
    def roll_deg(self) -> Optional[float]:
        return math.degrees(self.roll) if self.roll is not None else None

    def merged(
        self,
        timestamp: datetime,
        pitch: Optional[float] = None,
        roll: Optional[float] = None,
        yaw: Optional[float] = None,
    ) -> "AttitudeSample":
        """Return a new sample with the given values, keeping the last known ones for the rest."""
        return replace(
            self,
            timestamp=timestamp,
            pitch=self.pitch if pitch is None else pitch,
            roll=self.roll if roll is None else roll,
            yaw=self.yaw if yaw is None else yaw,
        )

    @classmethod
    def empty(cls) -> "AttitudeSample":
        return cls(timestamp=datetime.now(timezone.utc))

