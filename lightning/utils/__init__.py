"""Utility functions for the lightning library."""

from .rotation import DOWN, Rotator, planar_rotator

__all__ = [
    "DOWN",
    "Rotator",
    "planar_rotator",
]
