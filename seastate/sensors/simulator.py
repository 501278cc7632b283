"""
Simulated vessel attitude for testing without a SignalK server.

Pitch and roll are sinusoids at the wave period, with optional phase
offset and Gaussian noise.

Usage:
    sim = AttitudeSimulator(wave_period_s=8.0, roll_amplitude_deg=6.0)
    for sample in sim.samples(120, update_rate_ms=1000):
        engine.process(sample)
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional

import numpy as np

from .attitude import AttitudeSample


class AttitudeSimulator:
    """Generates timestamped AttitudeSamples."""

    def __init__(
        self,
        wave_period_s: float = 8.0,
        pitch_amplitude_deg: float = 2.0,
        roll_amplitude_deg: float = 5.0,
        roll_phase_rad: float = 0.0,
        heading_deg: float = 270.0,
        noise_deg: float = 0.0,
        seed: Optional[int] = None,
    ):
        """
        Args:
            wave_period_s: Encounter period of the simulated waves
            pitch_amplitude_deg: Pitch amplitude
            roll_amplitude_deg: Roll amplitude
            roll_phase_rad: Phase of roll relative to pitch
            heading_deg: Constant vessel heading
            noise_deg: Standard deviation of noise added to both angles
            seed: Random seed for reproducible noise
        """
        self.wave_period_s = wave_period_s
        self.pitch_amplitude_deg = pitch_amplitude_deg
        self.roll_amplitude_deg = roll_amplitude_deg
        self.roll_phase_rad = roll_phase_rad
        self.heading_deg = heading_deg
        self.noise_deg = noise_deg
        self._rng = np.random.default_rng(seed)

    @property
    def heading(self) -> float:
        """Heading in radians."""
        return math.radians(self.heading_deg)

    def attitude_at(self, t: float) -> tuple:
        """(pitch, roll) in radians at ``t`` seconds."""
        omega = 2 * math.pi / self.wave_period_s
        pitch_deg = self.pitch_amplitude_deg * math.sin(omega * t)
        roll_deg = self.roll_amplitude_deg * math.sin(omega * t + self.roll_phase_rad)
        if self.noise_deg > 0:
            pitch_deg += self._rng.normal(0, self.noise_deg)
            roll_deg += self._rng.normal(0, self.noise_deg)
        return math.radians(pitch_deg), math.radians(roll_deg)

    def samples(
        self,
        count: int,
        update_rate_ms: float = 1000.0,
        start: Optional[datetime] = None,
    ) -> Iterator[AttitudeSample]:
        start = start or datetime.now(timezone.utc)
        for i in range(count):
            t = i * update_rate_ms / 1000.0
            pitch, roll = self.attitude_at(t)
            yield AttitudeSample(
                timestamp=start + timedelta(seconds=t),
                pitch=pitch,
                roll=roll,
                yaw=self.heading,
            )

    def deltas(
        self,
        count: int,
        update_rate_ms: float = 1000.0,
        start: Optional[datetime] = None,
    ) -> List[dict]:
        """The same motion as SignalK deltas, heading included in every update."""
        deltas = []
        for sample in self.samples(count, update_rate_ms, start):
            deltas.append({
                "context": "vessels.self",
                "updates": [{
                    "timestamp": sample.timestamp.isoformat(),
                    "values": [
                        {
                            "path": "navigation.attitude",
                            "value": {"pitch": sample.pitch, "roll": sample.roll, "yaw": sample.yaw},
                        },
                        {"path": "navigation.headingMagnetic", "value": self.heading},
                    ],
                }],
            })
        return deltas
