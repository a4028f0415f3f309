"""Flight state vector and its time derivative.

The state vector contains:
- Position (3): [x, y, z] in the NED Earth frame [m]
- Body velocity (3): [u, v, w] in NED body axes [m/s]
- Attitude (3): [phi, theta, psi] 3-2-1 Euler angles [rad]
- Body rates (3): [p, q, r] [rad/s]

Total: 12 state variables, plus two optional pilot-pendulum states
(swing angle and swing rate) for a canopy with a suspended pilot.

The core evaluates derivatives only; a host integrator advances the state
through to_array()/from_array().
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from polarflight.dynamics.frames import Frame, body_to_inertial_quat, dcm_body_to_inertial
from polarflight.typecheck import beartype

RIGID_BODY_STATES = 12
PENDULUM_STATES = 2


def _vec3(value: NDArray[np.float64], label: str) -> NDArray[np.float64]:
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"{label} must be shape (3,), got {arr.shape}")
    return arr


# =============================================================================
# State Classes
# =============================================================================


@beartype
@dataclass
class SimState:
    """Rigid-body flight state.

    Attributes:
        position: [x, y, z] NED Earth frame [m] (z positive down)
        velocity_body: [u, v, w] relative to the air, body axes [m/s]
        attitude: [phi, theta, psi] 3-2-1 Euler angles [rad]
        body_rates: [p, q, r] [rad/s]
        swing_angle: Pilot pitch minus canopy pitch [rad], None without a pendulum
        swing_rate: Pilot swing rate [rad/s], None without a pendulum
    """
    position: NDArray[np.float64]
    velocity_body: NDArray[np.float64]
    attitude: NDArray[np.float64]
    body_rates: NDArray[np.float64]
    swing_angle: float | None = None
    swing_rate: float | None = None

    def __post_init__(self) -> None:
        self.position = _vec3(self.position, "Position")
        self.velocity_body = _vec3(self.velocity_body, "Body velocity")
        self.attitude = _vec3(self.attitude, "Attitude")
        self.body_rates = _vec3(self.body_rates, "Body rates")

        if (self.swing_angle is None) != (self.swing_rate is None):
            raise ValueError("swing_angle and swing_rate must be given together")

    @classmethod
    def level_flight(
        cls,
        airspeed: float,
        alpha_deg: float = 0.0,
        altitude: float = 0.0,
        heading_deg: float = 0.0,
        with_pendulum: bool = False,
    ) -> "SimState":
        """Wings-level trimmed-looking initial state.

        Args:
            airspeed: True airspeed [m/s]
            alpha_deg: Angle of attack; also used as the pitch attitude so the
                flight path is horizontal [deg]
            altitude: Height above the origin [m] (stored as z = -altitude)
            heading_deg: Yaw [deg]
            with_pendulum: Add zeroed pilot swing states
        """
        alpha = np.radians(alpha_deg)
        return cls(
            position=np.array([0.0, 0.0, -altitude]),
            velocity_body=np.array([airspeed * np.cos(alpha), 0.0, airspeed * np.sin(alpha)]),
            attitude=np.array([0.0, alpha, np.radians(heading_deg)]),
            body_rates=np.zeros(3),
            swing_angle=0.0 if with_pendulum else None,
            swing_rate=0.0 if with_pendulum else None,
        )

    @property
    def has_pendulum(self) -> bool:
        return self.swing_angle is not None

    @property
    def airspeed(self) -> float:
        return float(np.linalg.norm(self.velocity_body))

    @property
    def dcm_body_to_inertial(self) -> NDArray[np.float64]:
        phi, theta, psi = self.attitude
        return dcm_body_to_inertial(phi, theta, psi)

    def orientation(self, frame: Frame = "render") -> NDArray[np.float64]:
        """Orientation quaternion for display ("render") or NED use."""
        phi, theta, psi = self.attitude
        return body_to_inertial_quat(phi, theta, psi, frame=frame)

    def to_array(self) -> NDArray[np.float64]:
        """Flatten to [x y z u v w phi theta psi p q r (swing, swing_rate)]."""
        parts = [self.position, self.velocity_body, self.attitude, self.body_rates]
        if self.has_pendulum:
            parts.append(np.array([self.swing_angle, self.swing_rate]))
        return np.concatenate(parts)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> "SimState":
        """Rebuild from a 12- or 14-element array."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape not in ((RIGID_BODY_STATES,), (RIGID_BODY_STATES + PENDULUM_STATES,)):
            raise ValueError(f"State array must have 12 or 14 elements, got shape {arr.shape}")

        pendulum = arr.shape[0] > RIGID_BODY_STATES
        return cls(
            position=arr[0:3],
            velocity_body=arr[3:6],
            attitude=arr[6:9],
            body_rates=arr[9:12],
            swing_angle=float(arr[12]) if pendulum else None,
            swing_rate=float(arr[13]) if pendulum else None,
        )

    def copy(self) -> "SimState":
        return SimState.from_array(self.to_array())


@beartype
@dataclass
class SimDerivatives:
    """Time derivatives of SimState.

    Attributes:
        position_dot: NED inertial velocity [m/s]
        velocity_dot: Body-axis acceleration [u_dot, v_dot, w_dot] [m/s^2]
        attitude_dot: Euler angle rates [rad/s]
        rates_dot: Body angular acceleration [p_dot, q_dot, r_dot] [rad/s^2]
        swing_angle_dot: Pilot swing rate [rad/s], None without a pendulum
        swing_rate_dot: Pilot swing acceleration [rad/s^2], None without a pendulum
    """
    position_dot: NDArray[np.float64]
    velocity_dot: NDArray[np.float64]
    attitude_dot: NDArray[np.float64]
    rates_dot: NDArray[np.float64]
    swing_angle_dot: float | None = None
    swing_rate_dot: float | None = None

    def __post_init__(self) -> None:
        self.position_dot = _vec3(self.position_dot, "Position derivative")
        self.velocity_dot = _vec3(self.velocity_dot, "Velocity derivative")
        self.attitude_dot = _vec3(self.attitude_dot, "Attitude derivative")
        self.rates_dot = _vec3(self.rates_dot, "Rates derivative")

    def to_array(self) -> NDArray[np.float64]:
        """Flatten in the same order as SimState.to_array()."""
        parts = [self.position_dot, self.velocity_dot, self.attitude_dot, self.rates_dot]
        if self.swing_angle_dot is not None:
            parts.append(np.array([self.swing_angle_dot, self.swing_rate_dot]))
        return np.concatenate(parts)
