"""Stochastic L-system: rule parsing, grammar rewriting and driver."""

from .rules import RULE_SEPARATOR, Rule, parse_rule, parse_weight
from .grammar import REPLACEMENT_TOKEN, StochasticGrammar
from .system import LSystem

__all__ = [
    "RULE_SEPARATOR",
    "Rule",
    "parse_rule",
    "parse_weight",
    "REPLACEMENT_TOKEN",
    "StochasticGrammar",
    "LSystem",
]
