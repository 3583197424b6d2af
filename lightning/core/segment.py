"""
Segment data structures.
"""

from dataclasses import dataclass, field
from typing import Optional
import numpy as np


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3).copy()


def _vec_or_none(value) -> Optional[np.ndarray]:
    return None if value is None else _vec(value)


@dataclass(eq=False)
class Segment:
    """
    One straight element of a lightning strike.

    Segments live in a ``LightningStrike`` arena and reference their parent
    by index, so parents stay valid however the arena grows.

    Attributes
    ----------
    index : int
        Position of this segment in its strike
    parent_index : int or None
        Index of the segment this one extends from (None for the root)
    branch_index : int
        Ordinal of the branch walk that produced this segment
    start, end : np.ndarray
        Endpoints, shape (3,)
    direction : np.ndarray
        Unit heading before scaling by length, shape (3,). Zero for a branch
        started from a branch point without a recorded heading
    length : float
        Sampled length (may be negative for extreme normal samples)
    diameter : float
        Channel diameter
    pressure : float
        Ambient pressure at the start position (bar, multiplier applied)
    temperature : float
        Ambient temperature at the start position (K)
    min_diameter : float
        Diameter below which the channel cannot propagate
    branch_angle : float
        Sampled branching angle in degrees (0 for the root)
    has_ended : bool
        True if the walk terminated at this segment
    branch_direction : np.ndarray or None
        Heading recorded for a side branch starting at this segment
    """

    index: int
    parent_index: Optional[int]
    branch_index: int
    start: np.ndarray
    end: np.ndarray
    direction: np.ndarray
    length: float
    diameter: float
    pressure: float
    temperature: float
    min_diameter: float
    branch_angle: float = 0.0
    has_ended: bool = False
    branch_direction: Optional[np.ndarray] = None

    @property
    def is_root(self) -> bool:
        return self.parent_index is None

    @property
    def is_viable(self) -> bool:
        """Whether the channel can still propagate past this segment."""
        return self.diameter > self.min_diameter

    @property
    def is_branch_point(self) -> bool:
        return self.branch_direction is not None

    def copy(self) -> "Segment":
        """Deep copy (vectors are copied too)."""
        return Segment(
            index=self.index,
            parent_index=self.parent_index,
            branch_index=self.branch_index,
            start=self.start.copy(),
            end=self.end.copy(),
            direction=self.direction.copy(),
            length=self.length,
            diameter=self.diameter,
            pressure=self.pressure,
            temperature=self.temperature,
            min_diameter=self.min_diameter,
            branch_angle=self.branch_angle,
            has_ended=self.has_ended,
            branch_direction=_vec_or_none(self.branch_direction),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "parent_index": self.parent_index,
            "branch_index": self.branch_index,
            "start": self.start.tolist(),
            "end": self.end.tolist(),
            "direction": self.direction.tolist(),
            "length": self.length,
            "diameter": self.diameter,
            "pressure": self.pressure,
            "temperature": self.temperature,
            "min_diameter": self.min_diameter,
            "branch_angle": self.branch_angle,
            "has_ended": self.has_ended,
            "branch_direction": (
                None if self.branch_direction is None else self.branch_direction.tolist()
            ),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Segment":
        """Create from dictionary."""
        return cls(
            index=d["index"],
            parent_index=d.get("parent_index"),
            branch_index=d.get("branch_index", 0),
            start=_vec(d["start"]),
            end=_vec(d["end"]),
            direction=_vec(d["direction"]),
            length=d["length"],
            diameter=d["diameter"],
            pressure=d["pressure"],
            temperature=d["temperature"],
            min_diameter=d["min_diameter"],
            branch_angle=d.get("branch_angle", 0.0),
            has_ended=d.get("has_ended", False),
            branch_direction=_vec_or_none(d.get("branch_direction")),
        )


@dataclass
class BranchPoint:
    """
    Pending branch: the segment it grows from and its starting heading.
    The heading defaults to zero when none was recorded.

    Origin and heading are kept in one record so they are always pushed and
    popped together.
    """

    origin_index: int
    heading: np.ndarray = field(default_factory=lambda: np.zeros(3))
