"""
Atmosphere model used by the lightning generator.

Pressure follows the general barometric formula
(https://www.engineeringtoolbox.com/air-altitude-pressure-d_462.html) and
temperature is a linear height mapping calibrated from a constant lapse rate.

UNIT CONVENTIONS
----------------
Heights are in generator units (treated as metres by the formulas).
Pressure is returned in bar (Pa / 100000), temperature in kelvin.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

SEA_LEVEL_PRESSURE_PA = 101325.0
PASCALS_PER_BAR = 100000.0
BAROMETRIC_COEFFICIENT = 2.25577e-5
BAROMETRIC_EXPONENT = 5.25588

# Temperature drop per 1000 units of altitude.
LAPSE_RATE_PER_KM = 6.5


def calculate_pressure(height: float) -> float:
    """
    Pressure at a height from the general barometric formula.

    p(h) = 101325 * (1 - 2.25577e-5 * h) ** 5.25588 / 100000

    Parameters
    ----------
    height : float
        Height above sea level

    Returns
    -------
    float
        Pressure in bar. Heights above ~44330 give a negative base and the
        result is NaN; this is left to propagate.
    """
    base = np.float64(1.0 - BAROMETRIC_COEFFICIENT * height)
    with np.errstate(invalid="ignore"):
        pressure = SEA_LEVEL_PRESSURE_PA * np.power(base, BAROMETRIC_EXPONENT)
    return float(pressure / PASCALS_PER_BAR)


def lapse_rate_temperature(sea_level_temperature: float, altitude: float) -> float:
    """Temperature at ``altitude`` assuming a drop of 6.5 K per 1000 units."""
    return sea_level_temperature - altitude / 1000.0 * LAPSE_RATE_PER_KM


@dataclass(frozen=True)
class TemperatureMapping:
    """
    Unclamped linear mapping from height to temperature.

    Heights outside ``height_range`` are extrapolated along the same trend,
    so segments below sea level still get a temperature.
    """

    height_range: Tuple[float, float]
    temperature_range: Tuple[float, float]

    @classmethod
    def from_lapse_rate(
        cls,
        sea_level_height: float,
        start_height: float,
        sea_level_temperature: float,
    ) -> "TemperatureMapping":
        start_temperature = lapse_rate_temperature(sea_level_temperature, start_height)
        return cls(
            height_range=(sea_level_height, start_height),
            temperature_range=(sea_level_temperature, start_temperature),
        )

    def fraction(self, height: float) -> float:
        low, high = self.height_range
        span = high - low
        if span == 0.0:
            # Degenerate range: step at the upper bound.
            return 1.0 if height >= high else 0.0
        return (height - low) / span

    def __call__(self, height: float) -> float:
        t_low, t_high = self.temperature_range
        return t_low + self.fraction(height) * (t_high - t_low)

    def to_dict(self) -> dict:
        return {
            "height_range": list(self.height_range),
            "temperature_range": list(self.temperature_range),
        }


__all__ = [
    "SEA_LEVEL_PRESSURE_PA",
    "LAPSE_RATE_PER_KM",
    "calculate_pressure",
    "lapse_rate_temperature",
    "TemperatureMapping",
]
