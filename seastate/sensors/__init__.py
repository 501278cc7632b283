"""Attitude feeds for sea state estimation."""

from .attitude import AttitudeSample

__all__ = ["AttitudeSample"]
