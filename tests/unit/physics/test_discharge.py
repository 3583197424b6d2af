"""
Tests for the discharge channel equations.
"""

import math

import pytest
import numpy as np

from lightning.physics.discharge import (
    MIN_IONIZATION_CONSTANT,
    calculate_initial_diameter,
    calculate_min_diameter,
    calculate_diameter,
    calculate_length,
    sample_ionization_constant,
    SplitAngles,
    sample_split_angles,
)
from lightning.utils.rotation import Rotator


class TestDiameterEquations:
    """Tests for the diameter relations."""

    def test_initial_diameter(self):
        assert calculate_initial_diameter(3e8, 1e-8) == pytest.approx(3.0)

    def test_min_diameter_at_reference(self):
        """At 293 K and 1 bar the minimum diameter equals A."""
        assert calculate_min_diameter(293.0, 1.0, 0.21) == pytest.approx(0.21)

    def test_min_diameter_scales_with_temperature_and_pressure(self):
        expected = 0.21 * (310.0 / 293.0) / 1.01325
        assert calculate_min_diameter(310.0, 1.01325, 0.21) == pytest.approx(expected)

    def test_min_diameter_zero_pressure_is_not_finite(self):
        assert not math.isfinite(calculate_min_diameter(300.0, 0.0, 0.21))

    def test_min_diameter_nan_pressure_is_nan(self):
        assert math.isnan(calculate_min_diameter(300.0, float("nan"), 0.21))

    def test_child_diameter(self):
        """Ratio d/dmin shrinks by sqrt(0.5) from parent to child."""
        d = calculate_diameter(0.5, 4.0, 2.0)

        assert d == pytest.approx(math.sqrt(0.5) * 2.0 * 0.5)
        assert d / 0.5 == pytest.approx(math.sqrt(0.5) * 4.0 / 2.0)


class TestSampling:
    """Tests for the sampled quantities."""

    def test_length_with_zero_deviation(self):
        rng = np.random.default_rng(0)
        assert calculate_length(rng, 11.0, 0.0, 2.0, 9.5) == pytest.approx(11.0 * 2.0 * 9.5)

    def test_length_is_reproducible(self):
        a = calculate_length(np.random.default_rng(5), 11.0, 4.0, 3.0, 9.5)
        b = calculate_length(np.random.default_rng(5), 11.0, 4.0, 3.0, 9.5)
        assert a == b

    def test_ionization_constant_without_deviation(self):
        rng = np.random.default_rng(0)
        assert sample_ionization_constant(rng, 0.21, 0.0) == pytest.approx(0.21)

    def test_ionization_constant_is_floored(self):
        rng = np.random.default_rng(0)
        assert sample_ionization_constant(rng, -5.0, 0.0) == MIN_IONIZATION_CONSTANT

    def test_split_angles_bounds(self):
        rng = np.random.default_rng(3)
        for _ in range(50):
            angles = sample_split_angles(rng, 40.0, 0.0)
            assert angles.branch_angle == pytest.approx(40.0)
            assert abs(angles.split_angle) == pytest.approx(20.0)
            assert -20.0 <= angles.split_offset <= 20.0

    def test_negative_branch_angle_reverses_offset_range(self):
        rng = np.random.default_rng(0)
        for _ in range(50):
            angles = sample_split_angles(rng, -10.0, 0.0)
            assert angles.branch_angle == pytest.approx(-10.0)
            assert abs(angles.split_angle) == pytest.approx(5.0)
            assert -5.0 <= angles.split_offset <= 5.0

    def test_split_sign_varies(self):
        rng = np.random.default_rng(3)
        signs = {math.copysign(1.0, sample_split_angles(rng, 40.0, 0.0).split_angle) for _ in range(50)}
        assert signs == {-1.0, 1.0}

    def test_split_angles_reproducible(self):
        a = sample_split_angles(np.random.default_rng(9), 43.0, 12.3)
        b = sample_split_angles(np.random.default_rng(9), 43.0, 12.3)
        assert a == b


class TestSplitAngles:
    """Tests for the rotations derived from a split."""

    def test_channel_rotation_2d(self):
        angles = SplitAngles(branch_angle=40.0, split_angle=20.0, split_offset=5.0)
        assert angles.rotation(is_3d=False) == Rotator(pitch=25.0, yaw=0.0, roll=0.0)

    def test_channel_rotation_3d(self):
        angles = SplitAngles(branch_angle=40.0, split_angle=20.0, split_offset=5.0)
        assert angles.rotation(is_3d=True) == Rotator(pitch=25.0, yaw=25.0, roll=0.0)

    def test_branch_rotation_negates_pitch_split(self):
        angles = SplitAngles(branch_angle=40.0, split_angle=20.0, split_offset=5.0)

        assert angles.branch_rotation(is_3d=False) == Rotator(pitch=-15.0, yaw=0.0, roll=0.0)
        assert angles.branch_rotation(is_3d=True) == Rotator(pitch=-15.0, yaw=25.0, roll=0.0)
