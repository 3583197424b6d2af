"""
Heading rotation utilities.

Headings are rotated with a pitch/yaw/roll rotator expressed in degrees, using
the same axis convention as the engine the lightning model was tuned in:

- positive pitch raises the X axis toward +Z
- positive yaw turns the X axis toward +Y
- positive roll turns the Y axis toward -Z

so a straight-down heading (0, 0, -1) pitched by ``p`` degrees becomes
``(sin p, 0, -cos p)``. In 2D mode only pitch is used, which keeps every
heading in the XZ plane.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation


DOWN = np.array([0.0, 0.0, -1.0])


@dataclass(frozen=True)
class Rotator:
    """
    Euler rotation in degrees.

    Parameters
    ----------
    pitch : float
        Rotation about the lateral axis (degrees)
    yaw : float
        Rotation about the vertical axis (degrees)
    roll : float
        Rotation about the forward axis (degrees)
    """

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0

    def is_zero(self) -> bool:
        return self.pitch == 0.0 and self.yaw == 0.0 and self.roll == 0.0

    def to_scipy(self) -> Rotation:
        """Equivalent intrinsic Z-Y-X rotation (yaw, then pitch, then roll)."""
        return Rotation.from_euler(
            "ZYX",
            [self.yaw, -self.pitch, -self.roll],
            degrees=True,
        )

    def as_matrix(self) -> np.ndarray:
        """3x3 matrix M such that ``M @ v`` rotates column vector v."""
        return self.to_scipy().as_matrix()

    def rotate_vector(self, vector: Sequence[float]) -> np.ndarray:
        """
        Rotate a 3D vector by this rotator.

        Parameters
        ----------
        vector : array-like
            Vector of shape (3,)

        Returns
        -------
        np.ndarray
            Rotated vector of shape (3,)
        """
        v = np.asarray(vector, dtype=float)
        if self.is_zero():
            return v.copy()
        return self.to_scipy().apply(v)

    def to_dict(self) -> dict:
        return {"pitch": self.pitch, "yaw": self.yaw, "roll": self.roll}


def planar_rotator(angle: float, is_3d: bool) -> Rotator:
    """Rotator applying ``angle`` on pitch, and on yaw too in 3D mode."""
    if is_3d:
        return Rotator(pitch=angle, yaw=angle, roll=0.0)
    return Rotator(pitch=angle, yaw=0.0, roll=0.0)


__all__ = [
    "DOWN",
    "Rotator",
    "planar_rotator",
]
