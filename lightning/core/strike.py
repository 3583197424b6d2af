"""
Segment arena for one generated lightning strike.
"""

from typing import Dict, Iterator, List, Optional, Any
import numpy as np

from .segment import Segment


class LightningStrike:
    """
    Ordered, append-only collection of the segments of one discharge.

    The arena order is the result order: branches are appended one at a
    time in the order they were walked to termination. Parents are referred
    to by index, and a parent always precedes its children, so trimming from
    the tail never leaves a dangling parent reference.
    """

    def __init__(self, metadata: Optional[Dict[str, Any]] = None):
        """
        Initialize an empty strike.

        Parameters
        ----------
        metadata : dict, optional
            Generation metadata (seed, mode, sampled constants, ...)
        """
        self.segments: List[Segment] = []
        self.metadata = metadata or {}
        self._children: Dict[int, List[int]] = {}

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    @property
    def next_index(self) -> int:
        return len(self.segments)

    @property
    def root(self) -> Optional[Segment]:
        return self.segments[0] if self.segments else None

    def add_segment(self, segment: Segment) -> int:
        """
        Append a segment and return its index.

        The segment's ``index`` is overwritten with its arena position.
        """
        index = len(self.segments)
        if segment.parent_index is not None and not 0 <= segment.parent_index < index:
            raise ValueError(
                f"Parent {segment.parent_index} must precede segment {index}"
            )
        segment.index = index
        self.segments.append(segment)
        if segment.parent_index is not None:
            self._children.setdefault(segment.parent_index, []).append(index)
        return index

    def get_segment(self, index: int) -> Optional[Segment]:
        """Get segment by index (None if out of range)."""
        if 0 <= index < len(self.segments):
            return self.segments[index]
        return None

    def parent_of(self, segment: Segment) -> Optional[Segment]:
        if segment.is_root:
            return None
        return self.get_segment(segment.parent_index)

    def children_of(self, index: int) -> List[int]:
        """Indices of segments that extend directly from ``index``."""
        return list(self._children.get(index, []))

    def truncate(self, max_count: int) -> int:
        """
        Discard segments from the tail until at most ``max_count`` remain.

        Returns
        -------
        int
            Number of segments removed
        """
        keep = max(int(max_count), 0)
        removed = max(len(self.segments) - keep, 0)
        if removed:
            del self.segments[keep:]
            self._rebuild_children()
        return removed

    def _rebuild_children(self) -> None:
        self._children.clear()
        for seg in self.segments:
            if seg.parent_index is not None:
                self._children.setdefault(seg.parent_index, []).append(seg.index)

    @property
    def branch_count(self) -> int:
        return len({seg.branch_index for seg in self.segments})

    def branch(self, branch_index: int) -> List[Segment]:
        """Segments of one branch walk, in walk order."""
        return [seg for seg in self.segments if seg.branch_index == branch_index]

    def terminal_segments(self) -> List[Segment]:
        return [seg for seg in self.segments if seg.has_ended]

    def copy_segments(self) -> List[Segment]:
        """Copies of all segments, in result order."""
        return [seg.copy() for seg in self.segments]

    def positions(self) -> np.ndarray:
        """Array of shape (N, 2, 3) with start/end of every segment."""
        if not self.segments:
            return np.zeros((0, 2, 3))
        return np.array([[seg.start, seg.end] for seg in self.segments])

    def validate(self) -> List[str]:
        """
        Check structural invariants.

        Returns
        -------
        List[str]
            Problems found (empty if the strike is consistent)
        """
        problems = []
        for i, seg in enumerate(self.segments):
            if seg.index != i:
                problems.append(f"Segment at position {i} has index {seg.index}")
            if seg.is_root:
                if i != 0:
                    problems.append(f"Segment {i} has no parent but is not the root")
                continue
            if not 0 <= seg.parent_index < i:
                problems.append(f"Segment {i} has invalid parent {seg.parent_index}")
                continue
            parent = self.segments[seg.parent_index]
            if not np.array_equal(seg.start, parent.end):
                problems.append(
                    f"Segment {i} starts at {seg.start.tolist()} but parent "
                    f"{seg.parent_index} ends at {parent.end.tolist()}"
                )
        return problems

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "schema_version": "1.0",
            "segments": [seg.to_dict() for seg in self.segments],
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "LightningStrike":
        """Create from dictionary."""
        strike = cls(metadata=d.get("metadata", {}))
        for seg_dict in d["segments"]:
            strike.add_segment(Segment.from_dict(seg_dict))
        return strike
