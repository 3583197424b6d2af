"""
Procedural Lightning - Generation Library

This package generates lightning strikes as branching walks of straight
segments driven by a semi-physical discharge model (barometric pressure,
lapse-rate temperature, breakdown diameter equations), and rewrites strings
with a probability-weighted L-system.

Main Entry Points:
    - PhysicsModelBackend.generate_segments(): Generate one strike
    - create_backend(): Build a configured backend from a GenerationPolicy
    - LSystem.build(): Iterate a stochastic grammar
    - compute_strike_metrics(): Summary statistics of a strike

Example:
    >>> from lightning import PhysicsModelBackend, PhysicsModelConfig
    >>>
    >>> backend = PhysicsModelBackend(PhysicsModelConfig(max_segments=200), seed=42)
    >>> strike = backend.generate_segments(is_3d=True)
    >>> print(len(strike), backend.last_report.metrics["branch_count"])
    >>>
    >>> from lightning import LSystem
    >>> LSystem(seed=1).build("F", ["F => F[+F] (1.0)"], iterations=2)
    'F[+F][+F[+F]]'
"""

from .core import Segment, BranchPoint, LightningStrike, GenerationReport
from .backends import (
    GenerationBackend,
    BackendConfig,
    PhysicsModelBackend,
    PhysicsModelConfig,
    get_available_backends,
    get_backend,
    create_backend,
)
from .lsystem import Rule, parse_rule, StochasticGrammar, LSystem
from .policies import GenerationPolicy, LSystemPolicy, validate_policy
from .analysis import StrikeMetrics, compute_strike_metrics
from .adapters import to_networkx_graph

__version__ = "0.1.0"

__all__ = [
    # Data structures
    "Segment",
    "BranchPoint",
    "LightningStrike",
    "GenerationReport",
    # Segment generation
    "GenerationBackend",
    "BackendConfig",
    "PhysicsModelBackend",
    "PhysicsModelConfig",
    "get_available_backends",
    "get_backend",
    "create_backend",
    # Grammar
    "Rule",
    "parse_rule",
    "StochasticGrammar",
    "LSystem",
    # Policies
    "GenerationPolicy",
    "LSystemPolicy",
    "validate_policy",
    # Analysis
    "StrikeMetrics",
    "compute_strike_metrics",
    "to_networkx_graph",
]
