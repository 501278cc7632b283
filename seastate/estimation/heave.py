"""Heave from pitch."""

import math
from typing import Optional


def calculate_heave(pitch: Optional[float], vessel_length: float) -> Optional[float]:
    """
    Vertical heave (m) from pitch (rad): vessel_length * sin(pitch).

    Assumes the attitude sensor sits at the vessel's centre of motion;
    off-centre mounting is not corrected.
    """
    if pitch is None:
        return None
    return vessel_length * math.sin(pitch)
