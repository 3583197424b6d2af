"""
Physics model generation backend.

Generates a lightning strike as a branching walk of straight segments. Each
segment's diameter, minimum sustainable diameter and length come from the
discharge equations in ``lightning.physics``; branching and heading changes
are stochastic.

The walk explores one branch at a time. Whenever a viable segment wins the
branch lottery it is pushed, together with the heading of the future side
branch, onto a pending stack. When a branch terminates (diameter no longer
exceeds the minimum diameter) the most recently pushed branch point is
walked next, so branches are explored depth first.

All random draws come from the backend's own ``np.random.Generator``;
passing the same seed reproduces the same strike.
"""

from dataclasses import dataclass, field
from typing import Optional, List
import logging
import math
import time

import numpy as np

from .base import GenerationBackend, BackendConfig
from ..core.segment import Segment, BranchPoint
from ..core.strike import LightningStrike
from ..core.report import GenerationReport
from ..physics.atmosphere import calculate_pressure, TemperatureMapping
from ..physics.discharge import (
    calculate_initial_diameter,
    calculate_min_diameter,
    calculate_diameter,
    calculate_length,
    sample_ionization_constant,
    sample_split_angles,
)
from ..utils.rotation import DOWN, planar_rotator

logger = logging.getLogger(__name__)


@dataclass
class PhysicsModelConfig(BackendConfig):
    """
    Configuration for the physics model backend.

    Defaults are the tuned values of the discharge model.

    Parameters
    ----------
    pressure_multiplier : float
        Multiplier applied to the barometric pressure
    length_scale : float
        Scale applied to every segment length
    voltage : float
        Discharge voltage; sets the initial diameter
    nv_constant : float
        nV constant of the initial diameter equation d0 = nV * V
    constant_a, constant_a_deviation : float
        Normal distribution of the A constant of the minimum diameter equation
    length_mean, length_deviation : float
        Normal distribution of length / diameter
    angle_mean, angle_deviation : float
        Normal distribution of the branching angle (degrees)
    start_height : float
        Height of the first segment's start
    sea_level_height, sea_level_temperature : float
        Calibration point of the height -> temperature mapping
    branch_chance : float
        Probability (0-1) that a viable segment becomes a branch point
    initial_angle_range : float
        Maximum deviation (degrees) of the first heading from straight down
    packaged_build_fix : bool
        Push the branch point of the strike's second segment twice when it
        branches (packaged-build behaviour). Only one heading is recorded, so
        the extra branch starts with a zero heading and degenerates to
        zero-length segments
    """

    pressure_multiplier: float = 1.0
    length_scale: float = 9.5
    voltage: float = 300000000.0
    nv_constant: float = 0.00000001
    constant_a: float = 0.21
    constant_a_deviation: float = 0.02
    length_mean: float = 11.0
    length_deviation: float = 4.0
    angle_mean: float = 43.0
    angle_deviation: float = 12.3
    start_height: float = 2000.0
    sea_level_height: float = 0.0
    sea_level_temperature: float = 310.0
    branch_chance: float = 0.8
    initial_angle_range: float = 20.0
    packaged_build_fix: bool = True

    def sampling_errors(self) -> List[str]:
        """Errors that make the normal distributions impossible to sample."""
        errors = []
        for name in ("constant_a_deviation", "length_deviation", "angle_deviation"):
            value = getattr(self, name)
            if not value >= 0.0:
                errors.append(f"{name} must be >= 0, got {value}")
        return errors

    def validate(self) -> List[str]:
        errors = super().validate()
        errors.extend(self.sampling_errors())
        if not 0.0 <= self.branch_chance <= 1.0:
            errors.append(f"branch_chance must be in [0, 1], got {self.branch_chance}")
        if self.initial_angle_range < 0.0:
            errors.append(
                f"initial_angle_range must be >= 0, got {self.initial_angle_range}"
            )
        return errors


@dataclass
class _WalkSession:
    """State that only lives for one generate call."""

    is_3d: bool
    constant_a: float
    temperature: TemperatureMapping
    pending: List[BranchPoint] = field(default_factory=list)
    second_segment: bool = False
    branch_points: int = 0
    duplicate_branch_points: int = 0
    non_finite_segments: int = 0

    def push(self, point: BranchPoint) -> None:
        self.pending.append(point)

    def pop(self) -> Optional[BranchPoint]:
        return self.pending.pop() if self.pending else None


class PhysicsModelBackend(GenerationBackend):
    """
    Generation backend driven by the semi-physical discharge model.

    Examples
    --------
    >>> backend = PhysicsModelBackend(seed=7)
    >>> strike = backend.generate_segments(is_3d=True)
    >>> segments = backend.get_segments()
    """

    def __init__(
        self,
        config: Optional[PhysicsModelConfig] = None,
        seed: Optional[int] = None,
    ):
        super().__init__()
        if config is None:
            config = PhysicsModelConfig()
        elif not isinstance(config, PhysicsModelConfig):
            config = PhysicsModelConfig.from_dict(config.to_dict())
        self.config = config
        self.reseed(seed if seed is not None else config.seed)

    def reseed(self, seed: Optional[int] = None) -> None:
        """Replace the random source. ``None`` seeds from OS entropy."""
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def calculate_pressure(self, height: float) -> float:
        """Barometric pressure in bar at ``height`` (multiplier not applied)."""
        return calculate_pressure(height)

    def generate(self, is_3d: Optional[bool] = None) -> LightningStrike:
        return self.generate_segments(is_3d=is_3d)

    def generate_segments(self, is_3d: Optional[bool] = None) -> LightningStrike:
        """
        Generate a full strike, replacing the previous result.

        Parameters
        ----------
        is_3d : bool, optional
            Override of the mode set with ``set_mode``

        Returns
        -------
        LightningStrike
            Segments in the order their branches were walked, trimmed to
            ``max_segments`` when the segment limit is enabled

        Raises
        ------
        ValueError
            If a distribution deviation is negative
        """
        config = self.config
        sampling_errors = config.sampling_errors()
        if sampling_errors:
            raise ValueError(
                "Invalid physics model configuration: " + "; ".join(sampling_errors)
            )
        for message in config.validate():
            logger.warning(f"Physics model configuration: {message}")

        t_start = time.perf_counter()
        mode = self._is_3d if is_3d is None else bool(is_3d)

        temperature = TemperatureMapping.from_lapse_rate(
            config.sea_level_height,
            config.start_height,
            config.sea_level_temperature,
        )
        constant_a = sample_ionization_constant(
            self.rng, config.constant_a, config.constant_a_deviation
        )
        session = _WalkSession(
            is_3d=mode,
            constant_a=constant_a,
            temperature=temperature,
        )

        strike = LightningStrike(
            metadata={
                "backend": "physics_model",
                "seed": self.seed,
                "is_3d": mode,
                "constant_a": constant_a,
                "temperature_mapping": temperature.to_dict(),
            }
        )
        self._strike = strike
        t_setup = time.perf_counter()

        limit = config.max_segments if config.use_segment_limit else None
        branch_index = 0
        heading: Optional[np.ndarray] = None
        parent: Optional[Segment] = self._generate_first_segment(session, strike)
        session.second_segment = True

        while True:
            while parent is not None and not _limit_reached(strike, limit):
                segment = self._generate_segment(
                    session, strike, parent, branch_index, heading
                )
                heading = None
                parent = segment if segment.is_viable else None

            if _limit_reached(strike, limit):
                break

            point = session.pop()
            if point is None:
                break
            parent = strike[point.origin_index]
            heading = point.heading
            branch_index += 1

        discarded = 0
        if limit is not None:
            discarded = strike.truncate(limit)
            if discarded or len(strike) >= limit:
                logger.debug(
                    f"Segment limit {limit} reached, discarded {discarded} segments"
                )
        t_end = time.perf_counter()

        report = GenerationReport(
            operation="generate_segments",
            requested_config=config.to_dict(),
            effective_config={
                "is_3d": mode,
                "seed": self.seed,
                "constant_a": constant_a,
            },
            metrics={
                "segment_count": len(strike),
                "branch_count": strike.branch_count,
                "branch_points": session.branch_points,
                "duplicate_branch_points": session.duplicate_branch_points,
                "pending_branches": len(session.pending),
                "discarded_segments": discarded,
                "limit_reached": _limit_reached(strike, limit),
            },
            timings={
                "setup": t_setup - t_start,
                "walk": t_end - t_setup,
                "total": t_end - t_start,
            },
        )
        if session.non_finite_segments:
            report.add_warning(
                f"{session.non_finite_segments} segments have non-finite "
                f"pressure or minimum diameter"
            )
            logger.warning(report.warnings[-1])
        self.last_report = report

        logger.info(
            f"Generated {len(strike)} segments in {strike.branch_count} branches "
            f"(3D={mode}, A={constant_a:.4f}, {report.timings['total']*1000:.1f}ms)"
        )
        return strike

    def _ambient(self, session: _WalkSession, position: np.ndarray):
        """Pressure, temperature and minimum diameter at a position."""
        height = float(position[2])
        pressure = calculate_pressure(height) * self.config.pressure_multiplier
        temperature = session.temperature(height)
        min_diameter = calculate_min_diameter(temperature, pressure, session.constant_a)
        if not (math.isfinite(pressure) and math.isfinite(min_diameter)):
            session.non_finite_segments += 1
        return pressure, temperature, min_diameter

    def _generate_first_segment(
        self,
        session: _WalkSession,
        strike: LightningStrike,
    ) -> Segment:
        """Generate the root segment, heading roughly straight down."""
        config = self.config
        start = np.array([0.0, 0.0, float(config.start_height)])
        pressure, temperature, min_diameter = self._ambient(session, start)

        spread = config.initial_angle_range
        angle = -spread + 2.0 * spread * float(self.rng.random())
        direction = planar_rotator(angle, session.is_3d).rotate_vector(DOWN)

        diameter = calculate_initial_diameter(config.voltage, config.nv_constant)
        length = calculate_length(
            self.rng,
            config.length_mean,
            config.length_deviation,
            diameter,
            config.length_scale,
        )

        segment = Segment(
            index=strike.next_index,
            parent_index=None,
            branch_index=0,
            start=start,
            end=start + direction * length,
            direction=direction,
            length=length,
            diameter=diameter,
            pressure=pressure,
            temperature=temperature,
            min_diameter=min_diameter,
        )
        strike.add_segment(segment)
        return segment

    def _generate_segment(
        self,
        session: _WalkSession,
        strike: LightningStrike,
        parent: Segment,
        branch_index: int,
        inherited_heading: Optional[np.ndarray],
    ) -> Segment:
        """
        Generate one segment extending ``parent``.

        ``inherited_heading`` is set for the first segment of a new branch
        and replaces the rotated parent heading.
        """
        config = self.config
        start = parent.end.copy()
        pressure, temperature, min_diameter = self._ambient(session, start)
        diameter = calculate_diameter(min_diameter, parent.diameter, parent.min_diameter)

        angles = sample_split_angles(self.rng, config.angle_mean, config.angle_deviation)
        if inherited_heading is not None:
            direction = np.array(inherited_heading, dtype=float)
        else:
            direction = angles.rotation(session.is_3d).rotate_vector(parent.direction)

        viable = diameter > min_diameter
        branch_direction = None
        duplicate = False
        if viable:
            if self.rng.random() < config.branch_chance:
                branch_direction = angles.branch_rotation(session.is_3d).rotate_vector(
                    parent.direction
                )
                if session.second_segment and config.packaged_build_fix:
                    session.second_segment = False
                    duplicate = True
            elif session.second_segment:
                session.second_segment = False

        length = calculate_length(
            self.rng,
            config.length_mean,
            config.length_deviation,
            diameter,
            config.length_scale,
        )

        segment = Segment(
            index=strike.next_index,
            parent_index=parent.index,
            branch_index=branch_index,
            start=start,
            end=start + direction * length,
            direction=direction,
            length=length,
            diameter=diameter,
            pressure=pressure,
            temperature=temperature,
            min_diameter=min_diameter,
            branch_angle=angles.branch_angle,
            has_ended=not viable,
            branch_direction=branch_direction,
        )
        index = strike.add_segment(segment)

        if branch_direction is not None:
            if duplicate:
                # Extra point without a recorded heading; popped after the real one.
                session.push(BranchPoint(origin_index=index))
                session.duplicate_branch_points += 1
            session.push(BranchPoint(origin_index=index, heading=branch_direction.copy()))
            session.branch_points += 1
        return segment


def _limit_reached(strike: LightningStrike, limit: Optional[int]) -> bool:
    return limit is not None and len(strike) >= limit
