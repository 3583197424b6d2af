"""
L-system driver: builds a grammar, iterates it and keeps the result.
"""

from typing import Optional, Sequence, TYPE_CHECKING
import logging

from .grammar import StochasticGrammar

if TYPE_CHECKING:
    from ..policies import LSystemPolicy

logger = logging.getLogger(__name__)


class LSystem:
    """Runs a stochastic grammar for a fixed number of iterations."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.result = ""

    @classmethod
    def from_policy(cls, policy: "LSystemPolicy") -> "LSystem":
        """Build and run an L-system described by a policy."""
        system = cls(seed=policy.seed)
        system.build(policy.axiom, policy.rules, policy.iterations)
        return system

    def build(
        self,
        axiom: str,
        rules: Sequence[str],
        iterations: int,
        seed: Optional[int] = None,
    ) -> str:
        """
        Construct the grammar from ``axiom`` and ``rules`` and iterate it.

        Parameters
        ----------
        axiom : str
            Initial string
        rules : sequence of str
            Rule descriptions
        iterations : int
            Number of rewriting passes (0 leaves the axiom unchanged)
        seed : int, optional
            Overrides the seed given at construction

        Returns
        -------
        str
            Final string (also available from ``get_result``)
        """
        grammar = StochasticGrammar(
            axiom,
            rules,
            seed=seed if seed is not None else self.seed,
        )
        grammar.iterate(iterations)
        self.result = grammar.get_result()
        logger.info(
            f"L-system built: {len(grammar.rules)} rules, {iterations} iterations, "
            f"result length {len(self.result)}"
        )
        return self.result

    def get_result(self) -> str:
        return self.result
