"""
Generation report.

Every generation run produces a report with the requested vs effective
configuration, warnings, result metrics and per-stage timings.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List
import json
import math


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@dataclass
class GenerationReport:
    """
    Standard report structure for generation runs.

    ``requested_config`` is the configuration as given; ``effective_config``
    records the values actually used (e.g. the resolved mode and seed).
    """

    operation: str = "unknown"
    success: bool = True
    requested_config: Dict[str, Any] = field(default_factory=dict)
    effective_config: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return _json_safe(asdict(self))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)
