"""Core data structures for lightning strikes."""

from .segment import Segment, BranchPoint
from .strike import LightningStrike
from .report import GenerationReport

__all__ = [
    "Segment",
    "BranchPoint",
    "LightningStrike",
    "GenerationReport",
]
