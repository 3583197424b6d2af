"""
Tests for the physics model generation backend.

These tests cover:
- Connectivity and viability of generated segments
- The segment ceiling and tail trimming
- 2D / 3D modes and per-call overrides
- Branch headings and the duplicated second-segment branch point
- Seeded reproducibility and configuration errors
"""

import logging
import math

import pytest
import numpy as np

from lightning.backends.physics_model_backend import PhysicsModelBackend, PhysicsModelConfig
from lightning.utils.rotation import DOWN


def unlimited(**kwargs):
    return PhysicsModelConfig(use_segment_limit=False, **kwargs)


class TestPhysicsModelConfig:
    """Tests for PhysicsModelConfig dataclass."""

    def test_default_config(self):
        config = PhysicsModelConfig()

        assert config.pressure_multiplier == 1.0
        assert config.length_scale == 9.5
        assert config.voltage == pytest.approx(3e8)
        assert config.nv_constant == pytest.approx(1e-8)
        assert config.constant_a == pytest.approx(0.21)
        assert config.constant_a_deviation == pytest.approx(0.02)
        assert config.length_mean == 11.0
        assert config.length_deviation == 4.0
        assert config.angle_mean == 43.0
        assert config.angle_deviation == pytest.approx(12.3)
        assert config.start_height == 2000.0
        assert config.sea_level_height == 0.0
        assert config.sea_level_temperature == 310.0
        assert config.branch_chance == pytest.approx(0.8)
        assert config.initial_angle_range == 20.0
        assert config.max_segments == 500
        assert config.use_segment_limit is True
        assert config.packaged_build_fix is True
        assert config.validate() == []

    def test_from_dict_ignores_unknown_keys(self):
        config = PhysicsModelConfig.from_dict({"voltage": 1e8, "color": "blue"})

        assert config.voltage == pytest.approx(1e8)
        assert not hasattr(config, "color")

    def test_to_dict_roundtrip(self):
        original = PhysicsModelConfig(branch_chance=0.3, max_segments=42, seed=9)
        restored = PhysicsModelConfig.from_dict(original.to_dict())

        assert restored == original

    def test_validate_reports_errors(self):
        config = PhysicsModelConfig(branch_chance=1.5, angle_deviation=-1.0, max_segments=-2)
        errors = config.validate()

        assert any("branch_chance" in e for e in errors)
        assert any("angle_deviation" in e for e in errors)
        assert any("max_segments" in e for e in errors)


class TestGenerateSegments:
    """Tests for generate_segments structure."""

    def test_segments_are_connected(self):
        backend = PhysicsModelBackend(seed=42)
        strike = backend.generate_segments()

        assert len(strike) > 1
        assert strike.validate() == []
        for seg in strike:
            if seg.parent_index is not None:
                np.testing.assert_array_equal(seg.start, strike[seg.parent_index].end)

    def test_non_terminal_segments_are_viable(self):
        strike = PhysicsModelBackend(seed=3).generate_segments()

        for seg in strike:
            if not seg.has_ended:
                assert seg.diameter > seg.min_diameter
            else:
                assert not seg.diameter > seg.min_diameter

    def test_root_segment(self):
        config = PhysicsModelConfig(initial_angle_range=0.0)
        strike = PhysicsModelBackend(config, seed=1).generate_segments(is_3d=False)
        root = strike.root

        assert root.parent_index is None
        np.testing.assert_array_equal(root.start, [0.0, 0.0, 2000.0])
        np.testing.assert_array_equal(root.direction, DOWN)
        assert root.diameter == pytest.approx(3.0)
        assert root.pressure == pytest.approx(PhysicsModelBackend().calculate_pressure(2000.0))

    def test_pressure_at_sea_level(self):
        assert PhysicsModelBackend(seed=0).calculate_pressure(0.0) == pytest.approx(1.01325)

    def test_branches_are_contiguous(self):
        """Segments of one branch walk are appended together."""
        strike = PhysicsModelBackend(seed=8).generate_segments()
        branch_ids = [seg.branch_index for seg in strike]

        assert branch_ids == sorted(branch_ids)
        assert branch_ids[0] == 0

    def test_every_walk_ends_on_terminal_segment(self):
        strike = PhysicsModelBackend(unlimited(), seed=12).generate_segments()

        for branch_index in range(strike.branch_count):
            assert strike.branch(branch_index)[-1].has_ended


class TestSegmentLimit:
    """Tests for the segment ceiling."""

    def test_limit_trims_to_prefix(self):
        natural = PhysicsModelBackend(unlimited(), seed=7).generate_segments()
        limited = PhysicsModelBackend(PhysicsModelConfig(max_segments=25), seed=7).generate_segments()

        assert len(limited) == min(25, len(natural))
        np.testing.assert_array_equal(
            limited.positions(), natural.positions()[: len(limited)]
        )

    def test_limit_above_natural_count_keeps_all(self):
        natural = PhysicsModelBackend(unlimited(), seed=7).generate_segments()
        config = PhysicsModelConfig(max_segments=len(natural) + 100)
        limited = PhysicsModelBackend(config, seed=7).generate_segments()

        assert len(limited) == len(natural)

    def test_limit_of_one_keeps_root_only(self):
        strike = PhysicsModelBackend(PhysicsModelConfig(max_segments=1), seed=5).generate_segments()

        assert len(strike) == 1
        assert strike[0].parent_index is None

    def test_limit_reported(self):
        backend = PhysicsModelBackend(PhysicsModelConfig(max_segments=3), seed=5)
        backend.generate_segments()

        assert backend.last_report.metrics["segment_count"] == 3
        assert backend.last_report.metrics["limit_reached"] is True

    def test_disabled_limit_ignores_max_segments(self):
        natural = PhysicsModelBackend(unlimited(), seed=2).generate_segments()
        config = PhysicsModelConfig(use_segment_limit=False, max_segments=1)

        assert len(PhysicsModelBackend(config, seed=2).generate_segments()) == len(natural)


class TestRegeneration:
    """Tests for repeated generation."""

    def test_results_do_not_accumulate(self):
        backend = PhysicsModelBackend(seed=21)
        first = backend.generate_segments()
        first_count = len(first)
        backend.reseed(21)
        second = backend.generate_segments()

        assert len(second) == first_count
        assert len(backend.strike) == first_count
        assert second is not first

    def test_same_seed_reproduces_strike(self):
        a = PhysicsModelBackend(seed=11).generate_segments(is_3d=True)
        b = PhysicsModelBackend(seed=11).generate_segments(is_3d=True)

        assert len(a) == len(b)
        np.testing.assert_array_equal(a.positions(), b.positions())

    def test_different_seeds_differ(self):
        a = PhysicsModelBackend(seed=1).generate_segments()
        b = PhysicsModelBackend(seed=2).generate_segments()

        assert a.positions().shape != b.positions().shape or not np.array_equal(
            a.positions(), b.positions()
        )

    def test_get_segments_returns_copies(self):
        backend = PhysicsModelBackend(seed=4)
        backend.generate_segments()
        segments = backend.get_segments()
        segments[0].start[2] = -1.0

        assert backend.strike[0].start[2] == 2000.0
        assert len(segments) == len(backend.strike)


class TestModes:
    """Tests for 2D and 3D generation."""

    def test_2d_stays_in_xz_plane(self):
        strike = PhysicsModelBackend(seed=6).generate_segments(is_3d=False)
        points = strike.positions().reshape(-1, 3)

        np.testing.assert_allclose(points[:, 1], 0.0, atol=1e-9)

    def test_3d_leaves_xz_plane(self):
        strike = PhysicsModelBackend(seed=6).generate_segments(is_3d=True)
        points = strike.positions().reshape(-1, 3)

        assert np.any(np.abs(points[:, 1]) > 1e-6)

    def test_set_mode_is_default(self):
        backend = PhysicsModelBackend(seed=6)
        backend.set_mode(True)

        assert backend.is_3d is True
        assert backend.generate().metadata["is_3d"] is True

    def test_call_override_beats_mode(self):
        backend = PhysicsModelBackend(seed=6)
        backend.set_mode(True)
        strike = backend.generate_segments(is_3d=False)

        assert strike.metadata["is_3d"] is False
        np.testing.assert_allclose(strike.positions()[:, :, 1], 0.0, atol=1e-9)


class TestBranching:
    """Tests for branch points and branch headings."""

    def test_branch_starts_with_recorded_heading(self):
        config = unlimited(branch_chance=1.0, packaged_build_fix=False)
        strike = PhysicsModelBackend(config, seed=13).generate_segments(is_3d=True)

        firsts = [
            seg for seg in strike
            if seg.parent_index is not None
            and seg.branch_index != strike[seg.parent_index].branch_index
        ]
        assert firsts
        for seg in firsts:
            parent = strike[seg.parent_index]
            assert parent.branch_direction is not None
            np.testing.assert_allclose(seg.direction, parent.branch_direction)

    def test_zero_branch_chance_gives_single_walk(self):
        strike = PhysicsModelBackend(unlimited(branch_chance=0.0), seed=13).generate_segments()

        assert strike.branch_count == 1
        assert all(seg.branch_direction is None for seg in strike)

    def test_branch_count_matches_pushed_points(self):
        backend = PhysicsModelBackend(unlimited(), seed=19)
        strike = backend.generate_segments()
        metrics = backend.last_report.metrics

        assert metrics["pending_branches"] == 0
        assert strike.branch_count == 1 + metrics["branch_points"] + metrics["duplicate_branch_points"]

    def test_second_segment_pushed_twice_with_fix(self):
        backend = PhysicsModelBackend(unlimited(branch_chance=1.0, packaged_build_fix=True), seed=23)
        strike = backend.generate_segments()

        assert backend.last_report.metrics["duplicate_branch_points"] == 1
        # Continuation plus two branches from the same branch point.
        assert len(strike.children_of(1)) == 3
        assert strike.branch_count == 2 + backend.last_report.metrics["branch_points"]

    @pytest.mark.parametrize("seed", [0, 23])
    def test_duplicate_branch_has_no_recorded_heading(self, seed):
        """Only one heading is recorded for the duplicated branch point."""
        backend = PhysicsModelBackend(unlimited(branch_chance=1.0, packaged_build_fix=True), seed=seed)
        strike = backend.generate_segments(is_3d=True)
        continuation, real_branch, extra_branch = strike.children_of(1)

        assert continuation == 2
        np.testing.assert_allclose(strike[real_branch].direction, strike[1].branch_direction)
        np.testing.assert_array_equal(strike[extra_branch].direction, np.zeros(3))
        np.testing.assert_array_equal(strike[extra_branch].start, strike[extra_branch].end)
        assert strike[real_branch].branch_index < strike[extra_branch].branch_index
        assert strike.validate() == []

    def test_branches_from_other_points_keep_headings_with_fix(self):
        """Only the duplicated point of the second segment lacks a heading."""
        backend = PhysicsModelBackend(unlimited(branch_chance=1.0, packaged_build_fix=True), seed=13)
        strike = backend.generate_segments()
        extra_branch = strike.children_of(1)[2]

        for seg in strike:
            if seg.parent_index is None or seg.index == extra_branch:
                continue
            parent = strike[seg.parent_index]
            if seg.branch_index != parent.branch_index and np.any(parent.direction):
                np.testing.assert_allclose(seg.direction, parent.branch_direction)

    def test_second_segment_pushed_once_without_fix(self):
        backend = PhysicsModelBackend(unlimited(branch_chance=1.0, packaged_build_fix=False), seed=23)
        strike = backend.generate_segments()

        assert backend.last_report.metrics["duplicate_branch_points"] == 0
        assert len(strike.children_of(1)) == 2
        assert strike.branch_count == 1 + backend.last_report.metrics["branch_points"]


class TestConfigurationErrors:
    """Tests for invalid configurations."""

    @pytest.mark.parametrize(
        "field_name", ["constant_a_deviation", "length_deviation", "angle_deviation"]
    )
    def test_negative_deviation_raises(self, field_name):
        config = PhysicsModelConfig(**{field_name: -1.0})

        with pytest.raises(ValueError, match=field_name):
            PhysicsModelBackend(config, seed=0).generate_segments()

    def test_out_of_range_branch_chance_warns(self, caplog):
        backend = PhysicsModelBackend(PhysicsModelConfig(branch_chance=2.0), seed=0)

        with caplog.at_level(logging.WARNING, logger="lightning.backends.physics_model_backend"):
            strike = backend.generate_segments()

        assert len(strike) > 0
        assert "branch_chance" in caplog.text

    def test_negative_initial_angle_range_warns_and_generates(self, caplog):
        backend = PhysicsModelBackend(PhysicsModelConfig(initial_angle_range=-5.0), seed=1)

        with caplog.at_level(logging.WARNING, logger="lightning.backends.physics_model_backend"):
            strike = backend.generate_segments()

        assert len(strike) > 1
        assert "initial_angle_range" in caplog.text
        # The root heading stays within 5 degrees of straight down.
        assert strike.root.direction[2] <= -np.cos(np.radians(5.0)) + 1e-12

    @pytest.mark.parametrize("angle_mean", [2.0, -10.0, -43.0])
    def test_small_or_negative_branch_angles_generate(self, angle_mean):
        """Negative sampled branch angles reverse the split offset range."""
        config = PhysicsModelConfig(angle_mean=angle_mean)
        strike = PhysicsModelBackend(config, seed=1).generate_segments(is_3d=True)

        assert len(strike) > 1
        assert strike.validate() == []
        if angle_mean < 0.0:
            assert any(seg.branch_angle < 0.0 for seg in strike)

    def test_extreme_height_propagates_nan(self):
        """Above the barometric formula's range the walk ends after one step."""
        config = PhysicsModelConfig(start_height=50000.0, initial_angle_range=0.0)
        backend = PhysicsModelBackend(config, seed=0)
        strike = backend.generate_segments()

        assert len(strike) == 2
        assert math.isnan(strike[0].pressure)
        assert strike[1].has_ended
        assert backend.last_report.warnings


class TestGenerationReport:
    """Tests for the report attached to each run."""

    def test_report_contents(self):
        backend = PhysicsModelBackend(seed=31)
        strike = backend.generate_segments(is_3d=True)
        report = backend.last_report

        assert report.operation == "generate_segments"
        assert report.success is True
        assert report.metrics["segment_count"] == len(strike)
        assert report.metrics["branch_count"] == strike.branch_count
        assert report.effective_config["is_3d"] is True
        assert report.effective_config["seed"] == 31
        assert set(report.timings) == {"setup", "walk", "total"}
        assert report.requested_config["max_segments"] == 500

    def test_sampled_constant_in_metadata(self):
        strike = PhysicsModelBackend(seed=31).generate_segments()

        assert strike.metadata["constant_a"] >= 0.01
        assert strike.metadata["backend"] == "physics_model"
