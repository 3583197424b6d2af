"""
Base interface for lightning generation backends.

This module defines the abstract interface that all generation backends must
implement, so that different segment generation methods share one API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, List

from ..core.segment import Segment
from ..core.strike import LightningStrike
from ..core.report import GenerationReport


@dataclass
class BackendConfig:
    """Base configuration for generation backends."""

    seed: Optional[int] = None
    use_segment_limit: bool = True
    max_segments: int = 500

    def validate(self) -> List[str]:
        """Return configuration errors (empty if valid)."""
        errors = []
        if self.use_segment_limit and self.max_segments < 0:
            errors.append(f"max_segments must be >= 0, got {self.max_segments}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BackendConfig":
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


class GenerationBackend(ABC):
    """
    Abstract base class for lightning generation backends.

    A backend owns its configuration and random source, recomputes a full
    strike on every ``generate()`` call and keeps the latest result.
    Output must always be a LightningStrike instance.
    """

    def __init__(self) -> None:
        self._is_3d = False
        self._strike = LightningStrike()
        self.last_report: Optional[GenerationReport] = None

    @property
    def is_3d(self) -> bool:
        return self._is_3d

    def set_mode(self, is_3d: bool) -> None:
        """Set the default 2D/3D mode used when ``generate`` gets no override."""
        self._is_3d = bool(is_3d)

    @abstractmethod
    def generate(self, is_3d: Optional[bool] = None) -> LightningStrike:
        """
        Generate a lightning strike, replacing any previous result.

        Parameters
        ----------
        is_3d : bool, optional
            Perturb headings on two axes instead of one. Defaults to the mode
            set with ``set_mode``.

        Returns
        -------
        LightningStrike
            Generated strike
        """
        pass

    @property
    def strike(self) -> LightningStrike:
        """Latest generated strike."""
        return self._strike

    def get_segments(self) -> List[Segment]:
        """Copies of the latest generated segments, in result order."""
        return self._strike.copy_segments()
