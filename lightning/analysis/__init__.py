"""Analysis of generated strikes."""

from .metrics import StrikeMetrics, compute_strike_metrics

__all__ = [
    "StrikeMetrics",
    "compute_strike_metrics",
]
