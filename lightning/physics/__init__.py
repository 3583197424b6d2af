"""Atmosphere and discharge-channel equations."""

from .atmosphere import (
    calculate_pressure,
    lapse_rate_temperature,
    TemperatureMapping,
)
from .discharge import (
    REFERENCE_TEMPERATURE,
    MIN_IONIZATION_CONSTANT,
    calculate_initial_diameter,
    calculate_min_diameter,
    calculate_diameter,
    calculate_length,
    sample_ionization_constant,
    SplitAngles,
    sample_split_angles,
)

__all__ = [
    "calculate_pressure",
    "lapse_rate_temperature",
    "TemperatureMapping",
    "REFERENCE_TEMPERATURE",
    "MIN_IONIZATION_CONSTANT",
    "calculate_initial_diameter",
    "calculate_min_diameter",
    "calculate_diameter",
    "calculate_length",
    "sample_ionization_constant",
    "SplitAngles",
    "sample_split_angles",
]
