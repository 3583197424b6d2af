"""
Discharge channel equations.

The diameter and length relations follow the large-scale discharge model of
Bailey et al., "Ionization in atmospheres of brown dwarfs and extrasolar
planets VI: properties of large-scale discharge events":

- initial diameter        d0 = nV * V
- minimum diameter        p * d_min / T = A  [mm bar / 293 K]
- channel thinning        d_new = sqrt(1/2) * (d_old / d_min,old) * d_min,new
- segment length          L / d = N(length_mean, length_deviation)

Randomness is always drawn from the ``np.random.Generator`` passed in.
"""

from dataclasses import dataclass
import math

import numpy as np

from ..utils.rotation import Rotator, planar_rotator

# Reference temperature of the A constant.
REFERENCE_TEMPERATURE = 293.0

# Lower bound on the sampled A constant.
MIN_IONIZATION_CONSTANT = 0.01

THINNING_FACTOR = math.sqrt(0.5)


def calculate_initial_diameter(voltage: float, nv_constant: float) -> float:
    """Diameter of the first segment, d0 = nV * V."""
    return voltage * nv_constant


def calculate_min_diameter(temperature: float, pressure: float, constant_a: float) -> float:
    """
    Minimum diameter that can sustain propagation.

    d_min = A * (T / 293) / p

    Zero or non-finite pressure yields a non-finite result rather than an error.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        value = np.float64(constant_a) * (temperature / REFERENCE_TEMPERATURE) / np.float64(pressure)
    return float(value)


def calculate_diameter(
    min_diameter: float,
    parent_diameter: float,
    parent_min_diameter: float,
) -> float:
    """Child diameter from the parent's diameter ratio and the child's minimum."""
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.float64(parent_diameter) / np.float64(parent_min_diameter)
        value = THINNING_FACTOR * ratio * np.float64(min_diameter)
    return float(value)


def calculate_length(
    rng: np.random.Generator,
    mean: float,
    deviation: float,
    diameter: float,
    scale: float,
) -> float:
    """Segment length L = N(mean, deviation) * d * scale."""
    return float(rng.normal(mean, deviation)) * diameter * scale


def sample_ionization_constant(
    rng: np.random.Generator,
    mean: float,
    deviation: float,
    floor: float = MIN_IONIZATION_CONSTANT,
) -> float:
    """Sample the A constant, clamped so downstream diameters stay positive."""
    value = float(rng.normal(mean, deviation))
    return max(value, floor)


@dataclass(frozen=True)
class SplitAngles:
    """
    Angles describing one split of the channel.

    The sampled branch angle is shared between the continuing channel and a
    potential side branch: the channel turns by ``split + offset`` and the
    side branch by ``-split + offset``.
    """

    branch_angle: float
    split_angle: float
    split_offset: float

    def rotation(self, is_3d: bool) -> Rotator:
        """Rotation applied to the parent heading for the continuing channel."""
        return planar_rotator(self.split_angle + self.split_offset, is_3d)

    def branch_rotation(self, is_3d: bool) -> Rotator:
        """Rotation for the side branch; only the pitch split is negated."""
        pitch = -self.split_angle + self.split_offset
        if is_3d:
            return Rotator(pitch=pitch, yaw=self.split_angle + self.split_offset)
        return Rotator(pitch=pitch)


def sample_split_angles(
    rng: np.random.Generator,
    angle_mean: float,
    angle_deviation: float,
) -> SplitAngles:
    """
    Sample a branching angle and split it.

    The split is half the sampled angle with a random sign, and the offset is
    uniform between -angle/2 and angle/2 so the split is not always centred.
    A negative sampled angle reverses that range rather than failing.
    """
    branch_angle = float(rng.normal(angle_mean, angle_deviation))
    split_angle = branch_angle / 2.0
    split_offset = -branch_angle / 2.0 + branch_angle * float(rng.random())
    if rng.random() < 0.5:
        split_angle = -split_angle
    return SplitAngles(
        branch_angle=branch_angle,
        split_angle=split_angle,
        split_offset=split_offset,
    )


__all__ = [
    "REFERENCE_TEMPERATURE",
    "MIN_IONIZATION_CONSTANT",
    "THINNING_FACTOR",
    "calculate_initial_diameter",
    "calculate_min_diameter",
    "calculate_diameter",
    "calculate_length",
    "sample_ionization_constant",
    "SplitAngles",
    "sample_split_angles",
]
