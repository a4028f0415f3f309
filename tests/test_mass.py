"""Unit tests for mass properties and the reference mass tables."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from polarflight.vehicle.mass import (
    InertiaComponents,
    MassSegment,
    compute_center_of_mass,
    compute_inertia,
    physical_mass_positions,
    rotate_segments_about_pivot,
)
from polarflight.vehicle.reference import (
    CANOPY_AIR_SEGMENTS,
    CANOPY_INERTIA_SEGMENTS,
    CANOPY_PILOT_SEGMENTS,
    CANOPY_WEIGHT_SEGMENTS,
    PILOT_PIVOT_X,
    PILOT_PIVOT_Z,
    WINGSUIT_MASS_SEGMENTS,
    canopy_mass_segments,
)


def _random_segments(seed: int, n: int = 6) -> list[MassSegment]:
    rng = np.random.default_rng(seed)
    return [
        MassSegment(f"seg_{i}", float(rng.uniform(0.01, 0.3)), rng.uniform(-1.0, 1.0, 3))
        for i in range(n)
    ]


# =============================================================================
# Segment Tests
# =============================================================================

class TestMassSegment:
    """Test the point-mass segment type."""

    def test_position_is_read_only(self):
        seg = MassSegment.at("head", 0.14, 0.3, 0.0, -0.02)
        with pytest.raises(ValueError):
            seg.normalized_position[0] = 1.0

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError):
            MassSegment("bad", 0.1, np.array([1.0, 2.0]))

    def test_with_position_keeps_name_and_ratio(self):
        seg = MassSegment.at("torso", 0.435, 0.08, 0.0, 0.0)
        moved = seg.with_position(np.array([0.1, 0.2, 0.3]))
        assert moved.name == "torso"
        assert moved.mass_ratio == 0.435
        assert_allclose(moved.normalized_position, [0.1, 0.2, 0.3])
        assert_allclose(seg.normalized_position, [0.08, 0.0, 0.0])

    def test_physical_positions(self):
        seg = MassSegment.at("hand", 0.5, 0.2, -0.4, 0.0)
        [(name, mass, pos)] = physical_mass_positions([seg], 2.0, 80.0)
        assert name == "hand"
        assert_allclose(mass, 40.0)
        assert_allclose(pos, [0.4, -0.8, 0.0])


# =============================================================================
# CG Tests
# =============================================================================

class TestCenterOfMass:
    """Test CG integration."""

    def test_empty_table(self):
        assert_allclose(compute_center_of_mass([], 1.875, 77.5), np.zeros(3))

    def test_zero_mass_table(self):
        segs = [MassSegment.at("ghost", 0.0, 1.0, 1.0, 1.0)]
        assert_allclose(compute_center_of_mass(segs, 1.875, 77.5), np.zeros(3))

    def test_single_segment(self):
        segs = [MassSegment.at("only", 1.0, 0.2, -0.1, 0.4)]
        assert_allclose(compute_center_of_mass(segs, 2.0, 50.0), [0.4, -0.2, 0.8])

    def test_independent_of_total_mass(self):
        segs = _random_segments(seed=3)
        assert_allclose(
            compute_center_of_mass(segs, 1.875, 60.0),
            compute_center_of_mass(segs, 1.875, 95.0),
            atol=1e-12,
        )

    def test_wingsuit_symmetric(self):
        """Left/right symmetric table has its CG on the centerline."""
        cg = compute_center_of_mass(WINGSUIT_MASS_SEGMENTS, 1.875, 77.5)
        assert abs(cg[1]) < 1e-12
        assert abs(cg[0]) < 0.3


# =============================================================================
# Inertia Tests
# =============================================================================

class TestInertia:
    """Test inertia tensor integration."""

    def test_empty_table(self):
        assert compute_inertia([], 1.875, 77.5) == InertiaComponents.zero()

    def test_single_point_mass(self):
        """m = 2 kg at (1, 2, 3) m about the origin."""
        segs = [MassSegment.at("p", 1.0, 1.0, 2.0, 3.0)]
        inertia = compute_inertia(segs, 1.0, 2.0)
        assert_allclose(inertia.Ixx, 2.0 * (4 + 9))
        assert_allclose(inertia.Iyy, 2.0 * (1 + 9))
        assert_allclose(inertia.Izz, 2.0 * (1 + 4))
        assert_allclose(inertia.Ixy, -2.0 * 2)
        assert_allclose(inertia.Ixz, -2.0 * 3)
        assert_allclose(inertia.Iyz, -2.0 * 6)

    def test_about_own_position_is_zero(self):
        segs = [MassSegment.at("p", 1.0, 0.3, 0.1, -0.2)]
        inertia = compute_inertia(segs, 1.875, 77.5, origin=np.array([0.3, 0.1, -0.2]) * 1.875)
        assert_allclose(inertia.matrix(), np.zeros((3, 3)), atol=1e-12)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_parallel_axis(self, seed):
        """I_origin = I_cg + m (|d|^2 E - d d^T) with d = -cg."""
        segs = _random_segments(seed)
        mass = sum(s.mass_ratio for s in segs) * 77.5
        cg = compute_center_of_mass(segs, 1.875, 77.5)
        about_cg = compute_inertia(segs, 1.875, 77.5, origin=cg).matrix()
        about_origin = compute_inertia(segs, 1.875, 77.5).matrix()
        shift = mass * (np.dot(cg, cg) * np.eye(3) - np.outer(cg, cg))
        assert_allclose(about_cg + shift, about_origin, atol=1e-9)

    @pytest.mark.parametrize("seed", [4, 5])
    def test_tensor_properties(self, seed):
        """Symmetric, positive semi-definite, triangle inequality on principal moments."""
        segs = _random_segments(seed)
        cg = compute_center_of_mass(segs, 1.875, 77.5)
        tensor = compute_inertia(segs, 1.875, 77.5, origin=cg).matrix()
        assert_allclose(tensor, tensor.T)
        eig = np.linalg.eigvalsh(tensor)
        assert np.all(eig >= -1e-9)
        assert eig[0] + eig[1] >= eig[2] - 1e-9

    def test_wingsuit_products_vanish_with_symmetry(self):
        inertia = compute_inertia(WINGSUIT_MASS_SEGMENTS, 1.875, 77.5)
        assert abs(inertia.Ixy) < 1e-10
        assert abs(inertia.Iyz) < 1e-10
        assert inertia.Ixx > 0 and inertia.Iyy > 0 and inertia.Izz > 0


class TestInertiaComponents:
    """Test the six-component tensor container."""

    def test_matrix_layout(self):
        comps = InertiaComponents(1.0, 2.0, 3.0, Ixy=-0.1, Ixz=0.2, Iyz=-0.3)
        assert_allclose(comps.matrix(), [
            [1.0, -0.1, 0.2],
            [-0.1, 2.0, -0.3],
            [0.2, -0.3, 3.0],
        ])

    def test_add(self):
        total = InertiaComponents(1.0, 2.0, 3.0, Ixz=0.5) + InertiaComponents.principal(10.0, 20.0, 30.0)
        assert total == InertiaComponents(11.0, 22.0, 33.0, Ixz=0.5)


# =============================================================================
# Pivot Rotation Tests
# =============================================================================

class TestPivotRotation:
    """Test rigid rotation of segments about a riser pivot."""

    def test_zero_pitch_is_identity(self):
        rotated = rotate_segments_about_pivot(CANOPY_PILOT_SEGMENTS, 0.0, PILOT_PIVOT_X, PILOT_PIVOT_Z)
        for before, after in zip(CANOPY_PILOT_SEGMENTS, rotated):
            assert_allclose(after.normalized_position, before.normalized_position, atol=1e-15)

    def test_quarter_turn(self):
        seg = MassSegment.at("p", 1.0, 1.5, 0.2, 0.5)
        [rotated] = rotate_segments_about_pivot([seg], np.pi / 2, 0.5, 0.5)
        assert_allclose(rotated.normalized_position, [0.5, 0.2, 1.5], atol=1e-12)

    def test_preserves_distance_to_pivot(self):
        pivot = np.array([PILOT_PIVOT_X, PILOT_PIVOT_Z])
        rotated = rotate_segments_about_pivot(CANOPY_PILOT_SEGMENTS, 0.4, PILOT_PIVOT_X, PILOT_PIVOT_Z)
        for before, after in zip(CANOPY_PILOT_SEGMENTS, rotated):
            d0 = np.linalg.norm(before.normalized_position[[0, 2]] - pivot)
            d1 = np.linalg.norm(after.normalized_position[[0, 2]] - pivot)
            assert_allclose(d1, d0, atol=1e-12)
            assert after.normalized_position[1] == before.normalized_position[1]


# =============================================================================
# Reference Table Tests
# =============================================================================

class TestReferenceTables:
    """Test the bundled wingsuit and canopy mass tables."""

    def test_wingsuit_ratios_sum_to_one(self):
        assert_allclose(sum(s.mass_ratio for s in WINGSUIT_MASS_SEGMENTS), 1.0, atol=1e-12)

    def test_pivot_includes_trim(self):
        assert_allclose(PILOT_PIVOT_X, 0.2955, atol=1e-4)
        assert_allclose(PILOT_PIVOT_Z, 0.1328, atol=1e-4)

    def test_canopy_table_sizes(self):
        assert len(CANOPY_PILOT_SEGMENTS) == 14
        assert len(CANOPY_WEIGHT_SEGMENTS) == 21
        assert len(CANOPY_INERTIA_SEGMENTS) == 28

    def test_air_adds_inertia_not_weight(self):
        weight_names = {s.name for s in CANOPY_WEIGHT_SEGMENTS}
        assert not any(s.name in weight_names for s in CANOPY_AIR_SEGMENTS)
        Iyy_weight = compute_inertia(CANOPY_WEIGHT_SEGMENTS, 1.875, 77.5).Iyy
        Iyy_all = compute_inertia(CANOPY_INERTIA_SEGMENTS, 1.875, 77.5).Iyy
        assert Iyy_all > Iyy_weight

    def test_canopy_above_pilot(self):
        """Canopy cells sit above (negative z) the riser pivot, the pilot below."""
        cg = compute_center_of_mass(CANOPY_PILOT_SEGMENTS, 1.875, 77.5)
        assert cg[2] > PILOT_PIVOT_Z * 1.875
        assert all(s.normalized_position[2] < 0 for s in CANOPY_AIR_SEGMENTS)

    def test_default_returns_precomputed_tables(self):
        weight, inertia = canopy_mass_segments()
        assert [s.name for s in weight] == [s.name for s in CANOPY_WEIGHT_SEGMENTS]
        assert [s.name for s in inertia] == [s.name for s in CANOPY_INERTIA_SEGMENTS]

    def test_pitch_moves_pilot_only(self):
        weight, inertia = canopy_mass_segments(pilot_pitch_deg=15.0)
        assert len(inertia) == 28
        for before, after in zip(CANOPY_WEIGHT_SEGMENTS[14:], weight[14:]):
            assert_allclose(after.normalized_position, before.normalized_position)
        assert not np.allclose(weight[0].normalized_position, CANOPY_PILOT_SEGMENTS[0].normalized_position)

    def test_partial_deploy_narrows_span(self):
        _, inertia = canopy_mass_segments(deploy=0.5)
        full = {s.name: s.normalized_position for s in CANOPY_INERTIA_SEGMENTS}
        for seg in inertia[14:]:
            expected = full[seg.name] * np.array([1.0, 0.55, 1.0]) + np.array([0.075, 0.0, 0.0])
            assert_allclose(seg.normalized_position, expected, atol=1e-12)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
