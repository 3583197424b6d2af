"""
Backend interfaces for lightning generation.

Backend Registration Pattern:
- Backends are registered by name together with their config class
- Use get_available_backends() to discover available backends at runtime
- create_backend() builds a configured backend from a GenerationPolicy
"""

from typing import Dict, List, Optional, Type, TYPE_CHECKING

from .base import GenerationBackend, BackendConfig
from .physics_model_backend import PhysicsModelBackend, PhysicsModelConfig

if TYPE_CHECKING:
    from ..policies import GenerationPolicy

_BACKEND_REGISTRY: Dict[str, Type[GenerationBackend]] = {
    "physics_model": PhysicsModelBackend,
}

_CONFIG_REGISTRY: Dict[str, Type[BackendConfig]] = {
    "physics_model": PhysicsModelConfig,
}


def get_available_backends() -> List[str]:
    """
    Get list of available backend names.

    Returns
    -------
    List[str]
        Names of backends that are available for use
    """
    return list(_BACKEND_REGISTRY.keys())


def get_backend(name: str) -> Optional[Type[GenerationBackend]]:
    """
    Get a backend class by name.

    Parameters
    ----------
    name : str
        Backend name (e.g., "physics_model")

    Returns
    -------
    Type[GenerationBackend] or None
        Backend class if available, None otherwise
    """
    return _BACKEND_REGISTRY.get(name)


def get_backend_config(name: str) -> Optional[Type[BackendConfig]]:
    """Get the config class for a backend name, or None if unknown."""
    return _CONFIG_REGISTRY.get(name)


def create_backend(policy: "GenerationPolicy") -> GenerationBackend:
    """
    Build a configured backend from a generation policy.

    Raises
    ------
    ValueError
        If the policy names an unknown backend
    """
    backend_cls = get_backend(policy.backend)
    config_cls = get_backend_config(policy.backend)
    if backend_cls is None or config_cls is None:
        raise ValueError(
            f"Unknown backend '{policy.backend}'. "
            f"Available: {', '.join(get_available_backends())}"
        )
    config = config_cls.from_dict(policy.backend_params)
    if policy.seed is not None:
        config.seed = policy.seed
    backend = backend_cls(config=config)
    backend.set_mode(policy.is_3d)
    return backend


__all__ = [
    "GenerationBackend",
    "BackendConfig",
    "PhysicsModelBackend",
    "PhysicsModelConfig",
    "get_available_backends",
    "get_backend",
    "get_backend_config",
    "create_backend",
]
