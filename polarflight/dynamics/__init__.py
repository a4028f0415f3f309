"""Dynamics module: frame algebra, equations of motion and the pilot pendulum.

Example:
    >>> from polarflight.dynamics import dcm_body_to_inertial, rotational_eom
    >>> import numpy as np
    >>>
    >>> R = dcm_body_to_inertial(0.0, np.radians(-20), 0.0)
    >>> omega_dot = rotational_eom(
    ...     np.array([0.0, 10.0, 0.0]), np.diag([10.0, 20.0, 25.0]), np.zeros(3),
    ... )
"""

from polarflight.dynamics.frames import (
    NED_TO_RENDER,
    WindFrame,
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
from polarflight.dynamics.pendulum import (
    PilotPendulumParams,
    compute_pilot_pendulum_params,
    pendulum_derivatives,
    pilot_pendulum_eom,
    pilot_swing_damping_torque,
)
from polarflight.dynamics.rigid_body import (
    rotational_eom,
    translational_eom,
    translational_eom_anisotropic,
)
from polarflight.dynamics.state import (
    SimDerivatives,
    SimState,
)

__all__ = [
    # Frames
    "NED_TO_RENDER",
    "WindFrame",
    "dcm_body_to_inertial",
    "dcm_inertial_to_body",
    "dcm_wind_to_body",
    "body_to_inertial_quat",
    "body_quat_from_wind_attitude",
    "body_to_inertial_velocity",
    "wind_direction_body",
    "compute_wind_frame_ned",
    "euler_rates",
    "euler_rates_to_body_rates",
    "ned_to_render",
    "render_to_ned",
    # Quaternion utilities
    "quaternion_to_dcm",
    "dcm_to_quaternion",
    "quaternion_multiply",
    "normalize_quaternion",
    "axis_angle_quaternion",
    "rotate_vector",
    # State
    "SimState",
    "SimDerivatives",
    # Rigid body dynamics
    "translational_eom",
    "translational_eom_anisotropic",
    "rotational_eom",
    # Pilot pendulum
    "PilotPendulumParams",
    "compute_pilot_pendulum_params",
    "pilot_pendulum_eom",
    "pilot_swing_damping_torque",
    "pendulum_derivatives",
]
