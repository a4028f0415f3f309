"""Unit tests for the flight state vector."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from polarflight.dynamics.frames import dcm_body_to_inertial
from polarflight.dynamics.state import SimDerivatives, SimState


def _state(**overrides):
    values = dict(
        position=np.array([10.0, -5.0, -1500.0]),
        velocity_body=np.array([11.0, 0.5, 4.0]),
        attitude=np.array([0.05, 0.1, 1.2]),
        body_rates=np.array([0.01, -0.02, 0.03]),
    )
    values.update(overrides)
    return SimState(**values)


class TestSimState:
    """Test state construction, properties and flattening."""

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            _state(velocity_body=np.zeros(4))

    def test_swing_states_come_in_pairs(self):
        with pytest.raises(ValueError):
            _state(swing_angle=0.1)
        with pytest.raises(ValueError):
            _state(swing_rate=0.1)

    def test_level_flight(self):
        state = SimState.level_flight(airspeed=12.0, alpha_deg=8.0, altitude=1000.0, heading_deg=90.0)
        alpha = np.radians(8.0)
        assert_allclose(state.position, [0.0, 0.0, -1000.0])
        assert_allclose(state.velocity_body, [12.0 * np.cos(alpha), 0.0, 12.0 * np.sin(alpha)])
        assert_allclose(state.attitude, [0.0, alpha, np.pi / 2])
        assert_allclose(state.airspeed, 12.0)
        assert not state.has_pendulum

    def test_level_flight_path_is_horizontal(self):
        state = SimState.level_flight(airspeed=40.0, alpha_deg=12.0)
        v_ned = state.dcm_body_to_inertial @ state.velocity_body
        assert_allclose(v_ned, [40.0, 0.0, 0.0], atol=1e-12)

    def test_with_pendulum(self):
        state = SimState.level_flight(airspeed=10.0, with_pendulum=True)
        assert state.has_pendulum
        assert state.swing_angle == 0.0
        assert state.to_array().shape == (14,)

    def test_array_layout(self):
        state = _state()
        arr = state.to_array()
        assert arr.shape == (12,)
        assert_allclose(arr[:3], state.position)
        assert_allclose(arr[3:6], state.velocity_body)
        assert_allclose(arr[6:9], state.attitude)
        assert_allclose(arr[9:12], state.body_rates)

    @pytest.mark.parametrize("pendulum", [False, True])
    def test_from_array_restores(self, pendulum):
        state = _state(swing_angle=0.2, swing_rate=-0.1) if pendulum else _state()
        restored = SimState.from_array(state.to_array())
        assert_allclose(restored.to_array(), state.to_array())
        assert restored.has_pendulum == pendulum

    @pytest.mark.parametrize("n", [0, 11, 13, 15])
    def test_from_array_bad_length(self, n):
        with pytest.raises(ValueError):
            SimState.from_array(np.zeros(n))

    def test_copy_is_independent(self):
        state = _state()
        clone = state.copy()
        clone.position[0] = 999.0
        assert state.position[0] == 10.0

    def test_dcm_property(self):
        state = _state()
        assert_allclose(state.dcm_body_to_inertial, dcm_body_to_inertial(0.05, 0.1, 1.2))

    def test_orientation_frames(self):
        state = _state()
        for frame in ("ned", "render"):
            q = state.orientation(frame)
            assert q.shape == (4,)
            assert_allclose(np.linalg.norm(q), 1.0, atol=1e-12)


class TestSimDerivatives:
    """Test derivative flattening."""

    def test_to_array_matches_state_order(self):
        derivs = SimDerivatives(
            position_dot=np.array([1.0, 2.0, 3.0]),
            velocity_dot=np.array([4.0, 5.0, 6.0]),
            attitude_dot=np.array([7.0, 8.0, 9.0]),
            rates_dot=np.array([10.0, 11.0, 12.0]),
        )
        assert_allclose(derivs.to_array(), np.arange(1.0, 13.0))

    def test_with_swing(self):
        derivs = SimDerivatives(
            position_dot=np.zeros(3),
            velocity_dot=np.zeros(3),
            attitude_dot=np.zeros(3),
            rates_dot=np.zeros(3),
            swing_angle_dot=0.5,
            swing_rate_dot=-2.0,
        )
        assert_allclose(derivs.to_array()[12:], [0.5, -2.0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
