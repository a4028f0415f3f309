"""Unit tests for frame math - DCMs, quaternions, Euler rates, wind axes.

These tests pin down the NED conventions every other module relies on.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from polarflight.dynamics.frames import (
    axis_angle_quaternion,
    body_quat_from_wind_attitude,
    body_to_inertial_quat,
    body_to_inertial_velocity,
    compute_wind_frame_ned,
    dcm_body_to_inertial,
    dcm_inertial_to_body,
    dcm_to_quaternion,
    dcm_wind_to_body,
    euler_rates,
    euler_rates_to_body_rates,
    ned_to_render,
    normalize_quaternion,
    quaternion_multiply,
    quaternion_to_dcm,
    render_to_ned,
    rotate_vector,
    wind_direction_body,
)


def _random_attitudes(seed: int, n: int = 5) -> list[tuple[float, float, float]]:
    rng = np.random.default_rng(seed)
    return [
        (float(rng.uniform(-np.pi, np.pi)),
         float(rng.uniform(-1.4, 1.4)),
         float(rng.uniform(-np.pi, np.pi)))
        for _ in range(n)
    ]


def _same_rotation(q1, q2):
    """Quaternions q and -q describe the same rotation."""
    return np.allclose(q1, q2, atol=1e-9) or np.allclose(q1, -q2, atol=1e-9)


# =============================================================================
# Quaternion Tests
# =============================================================================

class TestQuaternionOperations:
    """Test quaternion math operations."""

    def test_normalize_unit_length(self):
        """Normalized quaternion should have unit length."""
        q = normalize_quaternion(np.array([1.0, 2.0, 3.0, 4.0]))
        assert_allclose(np.linalg.norm(q), 1.0, atol=1e-12)

    def test_normalize_zero_gives_identity(self):
        """A zero quaternion normalizes to identity rather than NaN."""
        q = normalize_quaternion(np.zeros(4))
        assert_allclose(q, [1.0, 0.0, 0.0, 0.0])

    def test_opposite_rotations_compose_to_identity(self):
        axis = np.array([0.3, -0.2, 0.9])
        result = quaternion_multiply(axis_angle_quaternion(axis, 0.8), axis_angle_quaternion(axis, -0.8))
        assert_allclose(result, [1.0, 0.0, 0.0, 0.0], atol=1e-12)

    def test_dcm_round_trip(self):
        """DCM -> quaternion -> DCM should be identity."""
        for phi, theta, psi in _random_attitudes(seed=1):
            dcm = dcm_body_to_inertial(phi, theta, psi)
            assert_allclose(quaternion_to_dcm(dcm_to_quaternion(dcm)), dcm, atol=1e-10)

    def test_axis_angle_rotates_vector(self):
        """90 deg about z takes x to y."""
        q = axis_angle_quaternion(np.array([0.0, 0.0, 2.0]), np.pi / 2)
        assert_allclose(rotate_vector(q, np.array([1.0, 0.0, 0.0])), [0.0, 1.0, 0.0], atol=1e-12)


# =============================================================================
# DCM Tests
# =============================================================================

class TestDirectionCosines:
    """Test 3-2-1 and wind-axis direction cosine matrices."""

    def test_identity_at_zero_attitude(self):
        assert_allclose(dcm_body_to_inertial(0.0, 0.0, 0.0), np.eye(3), atol=1e-15)
        assert_allclose(dcm_wind_to_body(0.0, 0.0), np.eye(3), atol=1e-15)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_orthonormal(self, seed):
        """R R^T = I and det R = +1 for any attitude."""
        for phi, theta, psi in _random_attitudes(seed):
            R = dcm_body_to_inertial(phi, theta, psi)
            assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
            assert_allclose(np.linalg.det(R), 1.0, atol=1e-12)

            W = dcm_wind_to_body(phi, theta)
            assert_allclose(W @ W.T, np.eye(3), atol=1e-12)
            assert_allclose(np.linalg.det(W), 1.0, atol=1e-12)

    def test_explicit_matrix(self):
        """Matches the closed-form 3-2-1 body-to-inertial matrix."""
        phi, theta, psi = 0.3, -0.4, 1.2
        sp, cp = np.sin(phi), np.cos(phi)
        st, ct = np.sin(theta), np.cos(theta)
        sy, cy = np.sin(psi), np.cos(psi)
        expected = np.array([
            [ct * cy, sp * st * cy - cp * sy, cp * st * cy + sp * sy],
            [ct * sy, sp * st * sy + cp * cy, cp * st * sy - sp * cy],
            [-st, sp * ct, cp * ct],
        ])
        assert_allclose(dcm_body_to_inertial(phi, theta, psi), expected, atol=1e-12)

    def test_wind_to_body_explicit_matrix(self):
        alpha, beta = 0.3, 0.2
        ca, sa = np.cos(alpha), np.sin(alpha)
        cb, sb = np.cos(beta), np.sin(beta)
        expected = np.array([
            [ca * cb, sa, -ca * sb],
            [-sa * cb, ca, sa * sb],
            [sb, 0.0, cb],
        ])
        assert_allclose(dcm_wind_to_body(alpha, beta), expected, atol=1e-12)

    def test_wind_to_body_pure_alpha(self):
        """Wind x-axis at alpha resolves to (cos a, -sin a, 0) in body axes."""
        alpha = np.radians(15)
        W = dcm_wind_to_body(alpha, 0.0)
        assert_allclose(W @ np.array([1.0, 0.0, 0.0]), [np.cos(alpha), -np.sin(alpha), 0.0], atol=1e-12)
        assert_allclose(W @ np.array([0.0, 0.0, 1.0]), [0.0, 0.0, 1.0], atol=1e-12)

    def test_inertial_to_body_is_transpose(self):
        R = dcm_body_to_inertial(0.2, 0.5, -1.0)
        assert_allclose(dcm_inertial_to_body(0.2, 0.5, -1.0), R.T, atol=1e-15)

    def test_pitch_up_raises_nose(self):
        """Positive theta tilts body x above the horizon (negative NED z)."""
        theta = np.radians(30)
        nose = dcm_body_to_inertial(0.0, theta, 0.0) @ np.array([1.0, 0.0, 0.0])
        assert_allclose(nose, [np.cos(theta), 0.0, -np.sin(theta)], atol=1e-12)


class TestBodyToInertialVelocity:
    """Test body velocity resolved into NED."""

    def test_level(self):
        v = body_to_inertial_velocity(np.array([10.0, 0.0, 2.0]), 0.0, 0.0, 0.0)
        assert_allclose(v, [10.0, 0.0, 2.0], atol=1e-12)

    def test_yaw_east(self):
        v = body_to_inertial_velocity(np.array([10.0, 0.0, 0.0]), 0.0, 0.0, np.pi / 2)
        assert_allclose(v, [0.0, 10.0, 0.0], atol=1e-12)

    def test_vertical_dive(self):
        v = body_to_inertial_velocity(np.array([10.0, 0.0, 0.0]), 0.0, -np.pi / 2, 0.0)
        assert_allclose(v, [0.0, 0.0, 10.0], atol=1e-12)

    def test_roll_right_maps_side_velocity_down(self):
        v = body_to_inertial_velocity(np.array([0.0, 10.0, 0.0]), np.pi / 2, 0.0, 0.0)
        assert_allclose(v, [0.0, 0.0, 10.0], atol=1e-12)


# =============================================================================
# Orientation Quaternion Tests
# =============================================================================

class TestOrientationQuaternion:
    """Test attitude -> orientation quaternion derivation."""

    def test_identity_at_zero(self):
        assert _same_rotation(body_to_inertial_quat(0.0, 0.0, 0.0), np.array([1.0, 0.0, 0.0, 0.0]))
        assert _same_rotation(
            body_to_inertial_quat(0.0, 0.0, 0.0, frame="render"), np.array([1.0, 0.0, 0.0, 0.0])
        )

    @pytest.mark.parametrize("seed", [4, 5, 6])
    def test_matches_dcm(self, seed):
        """The quaternion reproduces the body-to-inertial DCM."""
        for phi, theta, psi in _random_attitudes(seed):
            q = body_to_inertial_quat(phi, theta, psi)
            assert_allclose(np.linalg.norm(q), 1.0, atol=1e-12)
            assert_allclose(quaternion_to_dcm(q), dcm_body_to_inertial(phi, theta, psi), atol=1e-10)

    def test_matches_composed_axis_rotations(self):
        """Same rotation as yaw about z, then pitch about y, then roll about x."""
        for phi, theta, psi in _random_attitudes(seed=7):
            q_yaw = axis_angle_quaternion(np.array([0.0, 0.0, 1.0]), psi)
            q_pitch = axis_angle_quaternion(np.array([0.0, 1.0, 0.0]), theta)
            q_roll = axis_angle_quaternion(np.array([1.0, 0.0, 0.0]), phi)
            composed = quaternion_multiply(quaternion_multiply(q_yaw, q_pitch), q_roll)
            assert _same_rotation(body_to_inertial_quat(phi, theta, psi), composed)

    def test_equivalent_attitudes_give_same_rotation(self):
        """(phi, theta, psi) and (phi + pi, pi - theta, psi + pi) are the same attitude."""
        phi, theta, psi = 0.4, 0.7, -0.9
        q1 = body_to_inertial_quat(phi, theta, psi)
        q2 = body_to_inertial_quat(phi + np.pi, np.pi - theta, psi + np.pi)
        assert _same_rotation(q1, q2)

    def test_render_frame_consistent_with_ned(self):
        """Rotating a render-frame vector equals rotating in NED then converting."""
        phi, theta, psi = 0.2, -0.3, 2.0
        q_render = body_to_inertial_quat(phi, theta, psi, frame="render")
        R = dcm_body_to_inertial(phi, theta, psi)
        for v_body in (np.array([1.0, 0.0, 0.0]), np.array([0.3, -0.5, 0.8])):
            assert_allclose(
                rotate_vector(q_render, ned_to_render(v_body)),
                ned_to_render(R @ v_body),
                atol=1e-12,
            )

    def test_wind_attitude_reduces_to_wind_quaternion(self):
        q_wind = body_to_inertial_quat(0.1, 0.2, 0.3, frame="render")
        q_body = body_quat_from_wind_attitude(0.1, 0.2, 0.3, 0.0, 0.0)
        assert _same_rotation(q_body, q_wind)

    def test_positive_alpha_pitches_nose_up(self):
        """With a level wind frame, alpha raises the render-frame nose (+Z) toward +Y."""
        alpha = np.radians(10)
        q = body_quat_from_wind_attitude(0.0, 0.0, 0.0, alpha, 0.0)
        nose = rotate_vector(q, np.array([0.0, 0.0, 1.0]))
        assert_allclose(nose, [0.0, np.sin(alpha), np.cos(alpha)], atol=1e-12)


# =============================================================================
# Render Frame Tests
# =============================================================================

class TestRenderFrame:
    """Test NED <-> Y-up render frame conversion."""

    def test_axis_mapping(self):
        assert_allclose(ned_to_render(np.array([1.0, 0.0, 0.0])), [0.0, 0.0, 1.0])
        assert_allclose(ned_to_render(np.array([0.0, 1.0, 0.0])), [-1.0, 0.0, 0.0])
        assert_allclose(ned_to_render(np.array([0.0, 0.0, 1.0])), [0.0, -1.0, 0.0])

    def test_round_trip(self):
        v = np.array([1.5, -2.0, 0.25])
        assert_allclose(render_to_ned(ned_to_render(v)), v, atol=1e-15)


# =============================================================================
# Wind Geometry Tests
# =============================================================================

class TestWindGeometry:
    """Test wind direction and wind-frame unit vectors."""

    def test_wind_direction_ahead_at_zero(self):
        assert_allclose(wind_direction_body(0.0, 0.0), [0.0, 0.0, 1.0], atol=1e-15)

    def test_wind_direction_unit_and_alpha_sign(self):
        v = wind_direction_body(np.radians(12), np.radians(-5))
        assert_allclose(np.linalg.norm(v), 1.0, atol=1e-12)
        assert v[1] < 0

    def test_wind_frame_at_zero(self):
        frame = compute_wind_frame_ned(0.0, 0.0)
        assert_allclose(frame.wind_dir, [1.0, 0.0, 0.0], atol=1e-15)
        assert_allclose(frame.lift_dir, [0.0, 0.0, -1.0], atol=1e-15)
        assert_allclose(frame.side_dir, [0.0, 1.0, 0.0], atol=1e-15)

    @pytest.mark.parametrize("alpha_deg,beta_deg", [(10, 0), (-5, 8), (35, -20), (80, 3)])
    def test_wind_frame_orthonormal(self, alpha_deg, beta_deg):
        frame = compute_wind_frame_ned(np.radians(alpha_deg), np.radians(beta_deg))
        basis = np.vstack([frame.wind_dir, frame.lift_dir, frame.side_dir])
        assert_allclose(basis @ basis.T, np.eye(3), atol=1e-12)
        assert_allclose(frame.side_dir, np.cross(frame.wind_dir, frame.lift_dir), atol=1e-12)

    def test_lift_falls_back_when_wind_vertical(self):
        frame = compute_wind_frame_ned(np.pi / 2, 0.0)
        assert_allclose(frame.lift_dir, [-1.0, 0.0, 0.0])


# =============================================================================
# Euler Rate Tests
# =============================================================================

class TestEulerRates:
    """Test body-rate <-> Euler-rate conversion."""

    def test_zero_attitude_passthrough(self):
        assert_allclose(euler_rates(0.1, 0.2, 0.3, 0.0, 0.0), [0.1, 0.2, 0.3], atol=1e-15)

    @pytest.mark.parametrize("phi_deg,theta_deg", [(0, 0), (30, 15), (-60, 45), (120, -70)])
    def test_round_trip(self, phi_deg, theta_deg):
        phi, theta = np.radians(phi_deg), np.radians(theta_deg)
        rates = euler_rates(1.0, 2.0, 3.0, phi, theta)
        body = euler_rates_to_body_rates(rates[0], rates[1], rates[2], phi, theta)
        assert_allclose(body, [1.0, 2.0, 3.0], atol=1e-10)

    def test_yaw_rate_projection(self):
        """A pure heading change at pitch theta appears as p = -sin(theta)."""
        theta = np.radians(20)
        body = euler_rates_to_body_rates(0.0, 0.0, 1.0, 0.0, theta)
        assert_allclose(body, [-np.sin(theta), 0.0, np.cos(theta)], atol=1e-12)
