"""
Stochastic grammar (probability-weighted L-system).

On every iteration each symbol of the current string draws a uniform value
in [0, total_weight] and walks the rules in insertion order, subtracting
each rule's weight until the value fits under one. The drawn rule is applied
only if its pattern equals the symbol; otherwise the symbol is copied. An
applied rule always writes ``REPLACEMENT_TOKEN``, not its own template.
"""

from typing import Iterable, List, Optional
import logging

import numpy as np

from .rules import Rule, parse_rule

logger = logging.getLogger(__name__)

REPLACEMENT_TOKEN = "F[+F]"


class StochasticGrammar:
    """
    Grammar state: the current string, the rules and their total weight.

    Parameters
    ----------
    axiom : str
        Initial string
    rules : iterable of str
        Rule descriptions ``"<symbol> => <template> (<weight>)"``;
        malformed descriptions are skipped
    rng : np.random.Generator, optional
        Random source for rule selection
    seed : int, optional
        Seed used when ``rng`` is not given
    """

    def __init__(
        self,
        axiom: str,
        rules: Iterable[str] = (),
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        self.condition = axiom
        self.rules: List[Rule] = []
        self.total_weight = 0.0
        self.replacement_count = 0
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        for description in rules:
            self.add_rule(description)

    def add_rule(self, description: str) -> Optional[Rule]:
        """Parse and add a rule; returns None (and adds nothing) if malformed."""
        rule = parse_rule(description)
        if rule is None:
            logger.warning(f"Skipping malformed grammar rule: {description!r}")
            return None
        self.rules.append(rule)
        self.total_weight += rule.weight
        return rule

    def select_rule(self) -> Optional[Rule]:
        """Draw a rule by weight, or None if the draw falls past every rule."""
        # Scaled draw accepts negative and infinite totals.
        value = float(self.rng.random()) * self.total_weight
        for rule in self.rules:
            if value <= rule.weight:
                return rule
            value -= rule.weight
        return None

    def rewrite(self, text: str) -> str:
        """One rewriting pass over ``text``."""
        parts = []
        for symbol in text:
            rule = self.select_rule()
            if rule is not None and rule.matches(symbol):
                parts.append(REPLACEMENT_TOKEN)
                self.replacement_count += 1
            else:
                parts.append(symbol)
        return "".join(parts)

    def iterate(self, count: int) -> str:
        """
        Rewrite the current string ``count`` times.

        Returns
        -------
        str
            The new current string
        """
        visited = 0
        replaced_before = self.replacement_count
        for i in range(count):
            visited += len(self.condition)
            self.condition = self.rewrite(self.condition)
            logger.debug(f"Iteration {i + 1}/{count}: length {len(self.condition)}")
        if count > 0:
            logger.debug(
                f"Visited {visited} positions over {count} iterations, "
                f"{self.replacement_count - replaced_before} replacements"
            )
        return self.condition

    def get_result(self) -> str:
        return self.condition


__all__ = [
    "REPLACEMENT_TOKEN",
    "StochasticGrammar",
]
