"""
Strike metrics computation.

This module provides functions for computing statistics about generated
lightning strikes.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, TYPE_CHECKING
import logging

import numpy as np

if TYPE_CHECKING:
    from ..core.strike import LightningStrike

logger = logging.getLogger(__name__)


@dataclass
class StrikeMetrics:
    """
    Computed metrics for a lightning strike.

    Lengths are absolute segment lengths in generator units.
    """
    segment_count: int = 0
    branch_count: int = 0
    terminal_count: int = 0
    branch_point_count: int = 0

    total_length: float = 0.0
    mean_segment_length: float = 0.0
    min_segment_length: float = 0.0
    max_segment_length: float = 0.0

    mean_diameter: float = 0.0
    min_diameter: float = 0.0
    max_diameter: float = 0.0

    max_depth: int = 0
    lowest_point: float = 0.0

    bounding_box: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_strike_metrics(strike: "LightningStrike") -> StrikeMetrics:
    """
    Compute metrics for a lightning strike.

    Parameters
    ----------
    strike : LightningStrike
        Strike to analyze

    Returns
    -------
    StrikeMetrics
        Computed metrics (all zero for an empty strike)
    """
    metrics = StrikeMetrics()
    if len(strike) == 0:
        return metrics

    segments = strike.segments
    metrics.segment_count = len(segments)
    metrics.branch_count = strike.branch_count
    metrics.terminal_count = sum(1 for seg in segments if seg.has_ended)
    metrics.branch_point_count = sum(1 for seg in segments if seg.is_branch_point)

    lengths = np.array([np.linalg.norm(seg.end - seg.start) for seg in segments])
    metrics.total_length = float(lengths.sum())
    metrics.mean_segment_length = float(lengths.mean())
    metrics.min_segment_length = float(lengths.min())
    metrics.max_segment_length = float(lengths.max())

    diameters = np.array([seg.diameter for seg in segments])
    metrics.mean_diameter = float(diameters.mean())
    metrics.min_diameter = float(diameters.min())
    metrics.max_diameter = float(diameters.max())

    # Parents precede children, so one forward pass resolves every depth.
    depths = np.zeros(len(segments), dtype=int)
    for seg in segments:
        if seg.parent_index is not None:
            depths[seg.index] = depths[seg.parent_index] + 1
    metrics.max_depth = int(depths.max())

    points = strike.positions().reshape(-1, 3)
    metrics.lowest_point = float(points[:, 2].min())
    metrics.bounding_box = {
        "min_x": float(points[:, 0].min()),
        "max_x": float(points[:, 0].max()),
        "min_y": float(points[:, 1].min()),
        "max_y": float(points[:, 1].max()),
        "min_z": float(points[:, 2].min()),
        "max_z": float(points[:, 2].max()),
    }

    logger.debug(
        f"Strike metrics: {metrics.segment_count} segments, "
        f"{metrics.branch_count} branches, depth {metrics.max_depth}"
    )
    return metrics


__all__ = [
    "StrikeMetrics",
    "compute_strike_metrics",
]
