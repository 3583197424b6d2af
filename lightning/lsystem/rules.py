"""
Weighted rewriting rules for the stochastic grammar.

Rules are written as ``"<symbol> => <template> (<weight>)"``, e.g.
``"F => F[+F] (0.5)"``.
"""

from dataclasses import dataclass, asdict
from typing import Optional
import re

RULE_SEPARATOR = " => "
WEIGHT_OPEN = " ("
WEIGHT_CLOSE = ")"

# Leading float prefix, as read by C atof: decimal, hexadecimal, inf or nan.
_LEADING_FLOAT = re.compile(
    r"\s*[+-]?(?:"
    r"inf(?:inity)?|nan"
    r"|0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?\d+)?"
    r"|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?"
    r")",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Rule:
    """
    One grammar rule.

    Attributes
    ----------
    pattern : str
        Symbol the rule rewrites
    template : str
        Replacement text as written in the rule description
    weight : float
        Unnormalized lottery weight
    """

    pattern: str
    template: str
    weight: float

    def matches(self, symbol: str) -> bool:
        return self.pattern == symbol

    def to_description(self) -> str:
        return f"{self.pattern}{RULE_SEPARATOR}{self.template}{WEIGHT_OPEN}{self.weight}{WEIGHT_CLOSE}"

    def to_dict(self) -> dict:
        return asdict(self)


def parse_weight(text: str) -> float:
    """
    Read the leading numeric characters of ``text`` as a float.

    Decimal, hexadecimal (``0x1.8p1``), ``inf`` and ``nan`` prefixes are
    recognised. Trailing characters are ignored and text without a numeric
    prefix reads as 0.0.
    """
    match = _LEADING_FLOAT.match(text)
    if match is None:
        return 0.0
    number = match.group(0).strip()
    if "x" in number.lower():
        return float.fromhex(number)
    return float(number)


def parse_rule(description: str) -> Optional[Rule]:
    """
    Parse a rule description.

    The symbol is everything before the first ``" => "``; the template runs
    from there to the first ``" ("`` after the arrow; the weight runs to the
    first ``")"`` after that (or to the end of the string).

    Returns
    -------
    Rule or None
        None if either separator is missing
    """
    arrow = description.find(RULE_SEPARATOR)
    if arrow == -1:
        return None
    # The arrow's trailing space may open the weight, giving an empty template.
    weight_open = description.find(WEIGHT_OPEN, arrow + len(RULE_SEPARATOR) - 1)
    if weight_open == -1:
        return None

    weight_start = weight_open + len(WEIGHT_OPEN)
    weight_close = description.find(WEIGHT_CLOSE, weight_start)
    weight_end = weight_close if weight_close != -1 else len(description)

    pattern = description[:arrow]
    template = description[arrow + len(RULE_SEPARATOR):weight_open]
    weight = parse_weight(description[weight_start:weight_end])
    return Rule(pattern=pattern, template=template, weight=weight)


__all__ = [
    "RULE_SEPARATOR",
    "Rule",
    "parse_weight",
    "parse_rule",
]
