"""
Policy dataclasses for parameterizing generation runs.

Policies are JSON-serializable descriptions of a run. Each policy includes:
- Default values defined here
- JSON schema docstring
- to_dict() / from_dict() (unknown keys are ignored)
- validate_policy() helper
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List
import json


def validate_policy(policy: Any, required_fields: Optional[List[str]] = None) -> List[str]:
    """
    Validate a policy object.

    Parameters
    ----------
    policy : Any
        Policy dataclass instance to validate
    required_fields : List[str], optional
        List of field names that must be non-None

    Returns
    -------
    List[str]
        List of validation error messages (empty if valid)
    """
    errors = []

    if required_fields:
        for field_name in required_fields:
            if not hasattr(policy, field_name):
                errors.append(f"Missing required field: {field_name}")
            elif getattr(policy, field_name) is None:
                errors.append(f"Required field is None: {field_name}")

    if hasattr(policy, "validate"):
        errors.extend(policy.validate())

    return errors


@dataclass
class GenerationPolicy:
    """
    Policy for segment generation.

    JSON Schema:
    {
        "backend": "physics_model",
        "is_3d": bool,
        "seed": int | null,
        "backend_params": {
            "pressure_multiplier": float,
            "length_scale": float,
            "voltage": float,
            "nv_constant": float,
            "constant_a": float,
            "constant_a_deviation": float,
            "length_mean": float,
            "length_deviation": float,
            "angle_mean": float (degrees),
            "angle_deviation": float (degrees),
            "start_height": float,
            "sea_level_height": float,
            "sea_level_temperature": float (kelvin),
            "branch_chance": float (0-1),
            "initial_angle_range": float (degrees),
            "max_segments": int,
            "use_segment_limit": bool,
            "packaged_build_fix": bool
        }
    }
    """
    backend: str = "physics_model"
    is_3d: bool = False
    seed: Optional[int] = None
    backend_params: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> List[str]:
        from .backends import get_backend_config, get_available_backends

        config_cls = get_backend_config(self.backend)
        if config_cls is None:
            return [
                f"Unknown backend '{self.backend}' "
                f"(available: {', '.join(get_available_backends())})"
            ]
        unknown = sorted(set(self.backend_params) - set(config_cls.__dataclass_fields__))
        errors = [f"Unknown backend parameter: {name}" for name in unknown]
        errors.extend(config_cls.from_dict(self.backend_params).validate())
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GenerationPolicy":
        return GenerationPolicy(**{k: v for k, v in d.items() if k in GenerationPolicy.__dataclass_fields__})

    @staticmethod
    def from_json(text: str) -> "GenerationPolicy":
        return GenerationPolicy.from_dict(json.loads(text))


@dataclass
class LSystemPolicy:
    """
    Policy for the stochastic L-system.

    JSON Schema:
    {
        "axiom": str,
        "rules": ["<symbol> => <template> (<weight>)", ...],
        "iterations": int,
        "seed": int | null
    }
    """
    axiom: str = "F"
    rules: List[str] = field(default_factory=lambda: ["F => F[+F] (1.0)"])
    iterations: int = 3
    seed: Optional[int] = None

    def validate(self) -> List[str]:
        from .lsystem.rules import parse_rule

        errors = []
        if self.iterations < 0:
            errors.append(f"iterations must be >= 0, got {self.iterations}")
        for description in self.rules:
            if parse_rule(description) is None:
                errors.append(f"Malformed rule (will be skipped): {description!r}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LSystemPolicy":
        return LSystemPolicy(**{k: v for k, v in d.items() if k in LSystemPolicy.__dataclass_fields__})

    @staticmethod
    def from_json(text: str) -> "LSystemPolicy":
        return LSystemPolicy.from_dict(json.loads(text))


__all__ = [
    "validate_policy",
    "GenerationPolicy",
    "LSystemPolicy",
]
