"""Sea state (wave height, period, direction, heave) from vessel attitude."""

__version__ = "0.5.0"
