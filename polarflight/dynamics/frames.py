"""Aerospace frame transformations for NED body/inertial frames.

Conventions:
- Euler angles: psi (yaw) -> theta (pitch) -> phi (roll), 3-2-1 / ZYX intrinsic
- Inertial frame: NED (North-East-Down)
- Body axes: x forward, y right, z down
- Wind axes: x along airspeed, z in the symmetry plane (down), y right
- Render frame: right-handed Y-up display frame. A NED vector (x, y, z)
  maps to render (-y, -z, x), so the body nose is render +Z.

Quaternion convention:
- Scalar-first: q = [w, x, y, z]
- quaternion_to_dcm(q) returns R(q) such that v_out = R(q) @ v_in

All functions are total: angles are never wrapped or normalized and no
input raises for numerical reasons. Euler-rate conversion is singular at
theta = +-pi/2 and is deliberately left uncorrected there.

Example:
    >>> from polarflight.dynamics.frames import dcm_body_to_inertial
    >>> import numpy as np
    >>>
    >>> R = dcm_body_to_inertial(0.0, np.radians(10), np.radians(90))
    >>> v_ned = R @ np.array([50.0, 0.0, 5.0])  # body velocity -> NED
"""

from dataclasses import dataclass
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from polarflight.typecheck import beartype

Frame = Literal["ned", "render"]

# NED -> render axis mapping (proper rotation, det = +1)
NED_TO_RENDER: NDArray[np.float64] = np.array([
    [0.0, -1.0, 0.0],
    [0.0, 0.0, -1.0],
    [1.0, 0.0, 0.0],
])


# =============================================================================
# Quaternion Utilities
# =============================================================================


@beartype
def normalize_quaternion(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Normalize a quaternion to unit length."""
    norm = np.linalg.norm(q)
    if norm < 1e-10:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return q / norm


@beartype
def quaternion_multiply(q1: NDArray[np.float64], q2: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hamilton product q1 * q2 (apply q2 first, then q1)."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    return np.array([
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2,
    ])


@beartype
def axis_angle_quaternion(axis: NDArray[np.float64], angle: float) -> NDArray[np.float64]:
    """Quaternion for a rotation of `angle` radians about `axis`.

    A zero axis yields the identity quaternion.
    """
    norm = np.linalg.norm(axis)
    if norm < 1e-12:
        return np.array([1.0, 0.0, 0.0, 0.0])
    half = 0.5 * angle
    v = (axis / norm) * np.sin(half)
    return np.array([np.cos(half), v[0], v[1], v[2]])


@beartype
def quaternion_to_dcm(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rotation matrix R(q) of a (re-normalized) quaternion.

    Args:
        q: Quaternion [w, x, y, z]

    Returns:
        3x3 matrix such that v_out = R @ v_in
    """
    q = normalize_quaternion(q)
    q0, q1, q2, q3 = q

    return np.array([
        [1 - 2*(q2**2 + q3**2), 2*(q1*q2 - q0*q3), 2*(q1*q3 + q0*q2)],
        [2*(q1*q2 + q0*q3), 1 - 2*(q1**2 + q3**2), 2*(q2*q3 - q0*q1)],
        [2*(q1*q3 - q0*q2), 2*(q2*q3 + q0*q1), 1 - 2*(q1**2 + q2**2)],
    ])


@beartype
def dcm_to_quaternion(dcm: NDArray[np.float64]) -> NDArray[np.float64]:
    """Extract the quaternion of a rotation matrix.

    Uses Shepperd's method, branching on the largest diagonal term, so the
    result is well conditioned for every attitude including gimbal-adjacent
    ones. The inverse of quaternion_to_dcm up to sign.
    """
    trace = np.trace(dcm)

    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1.0)
        q0 = 0.25 / s
        q1 = (dcm[2, 1] - dcm[1, 2]) * s
        q2 = (dcm[0, 2] - dcm[2, 0]) * s
        q3 = (dcm[1, 0] - dcm[0, 1]) * s
    elif dcm[0, 0] > dcm[1, 1] and dcm[0, 0] > dcm[2, 2]:
        s = 2.0 * np.sqrt(1.0 + dcm[0, 0] - dcm[1, 1] - dcm[2, 2])
        q0 = (dcm[2, 1] - dcm[1, 2]) / s
        q1 = 0.25 * s
        q2 = (dcm[0, 1] + dcm[1, 0]) / s
        q3 = (dcm[0, 2] + dcm[2, 0]) / s
    elif dcm[1, 1] > dcm[2, 2]:
        s = 2.0 * np.sqrt(1.0 + dcm[1, 1] - dcm[0, 0] - dcm[2, 2])
        q0 = (dcm[0, 2] - dcm[2, 0]) / s
        q1 = (dcm[0, 1] + dcm[1, 0]) / s
        q2 = 0.25 * s
        q3 = (dcm[1, 2] + dcm[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + dcm[2, 2] - dcm[0, 0] - dcm[1, 1])
        q0 = (dcm[1, 0] - dcm[0, 1]) / s
        q1 = (dcm[0, 2] + dcm[2, 0]) / s
        q2 = (dcm[1, 2] + dcm[2, 1]) / s
        q3 = 0.25 * s

    q = np.array([q0, q1, q2, q3])
    return normalize_quaternion(q)


@beartype
def rotate_vector(q: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rotate vector v by quaternion q."""
    return quaternion_to_dcm(q) @ np.asarray(v, dtype=np.float64)


# =============================================================================
# Direction Cosine Matrices
# =============================================================================


def _frame_rot_x(a: float) -> NDArray[np.float64]:
    c, s = np.cos(a), np.sin(a)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, s], [0.0, -s, c]])


def _frame_rot_y(a: float) -> NDArray[np.float64]:
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, 0.0, -s], [0.0, 1.0, 0.0], [s, 0.0, c]])


def _frame_rot_z(a: float) -> NDArray[np.float64]:
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, s, 0.0], [-s, c, 0.0], [0.0, 0.0, 1.0]])


@beartype
def dcm_body_to_inertial(phi: float, theta: float, psi: float) -> NDArray[np.float64]:
    """DCM that rotates a vector FROM body axes TO inertial NED axes.

        v_ned = dcm_body_to_inertial(phi, theta, psi) @ v_body

    Inertial-to-body is Rx(phi) @ Ry(theta) @ Rz(psi); this is its transpose.

    Args:
        phi: Roll angle [rad]
        theta: Pitch angle [rad]
        psi: Yaw angle [rad]

    Returns:
        3x3 rotation matrix (identity at zero attitude)
    """
    return (_frame_rot_x(phi) @ _frame_rot_y(theta) @ _frame_rot_z(psi)).T


@beartype
def dcm_inertial_to_body(phi: float, theta: float, psi: float) -> NDArray[np.float64]:
    """DCM that rotates a vector FROM inertial NED axes TO body axes."""
    return _frame_rot_x(phi) @ _frame_rot_y(theta) @ _frame_rot_z(psi)


@beartype
def dcm_wind_to_body(alpha: float, beta: float) -> NDArray[np.float64]:
    """DCM that rotates a vector FROM wind axes TO body axes.

        [[ ca cb,  sa, -ca sb],
         [-sa cb,  ca,  sa sb],
         [ sb,     0,   cb   ]]

    Composed as Rz(alpha) @ Ry(beta) from the same elementary frame
    rotations used by the 3-2-1 sequence.

    Args:
        alpha: Angle of attack [rad]
        beta: Sideslip angle [rad]
    """
    return _frame_rot_z(alpha) @ _frame_rot_y(beta)


@beartype
def body_to_inertial_velocity(
    velocity_body: NDArray[np.float64],
    phi: float,
    theta: float,
    psi: float,
) -> NDArray[np.float64]:
    """Rotate body-frame velocity [u, v, w] into the NED inertial frame."""
    return dcm_body_to_inertial(phi, theta, psi) @ np.asarray(velocity_body, dtype=np.float64)


# =============================================================================
# NED <-> Render Frame
# =============================================================================


@beartype
def ned_to_render(v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert a vector from NED to the Y-up render frame."""
    return NED_TO_RENDER @ np.asarray(v, dtype=np.float64)


@beartype
def render_to_ned(v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert a render-frame vector back to NED."""
    return NED_TO_RENDER.T @ np.asarray(v, dtype=np.float64)


# =============================================================================
# Orientation Quaternions
# =============================================================================


@beartype
def body_to_inertial_quat(
    phi: float,
    theta: float,
    psi: float,
    frame: Frame = "ned",
) -> NDArray[np.float64]:
    """Orientation quaternion for a 3-2-1 attitude, extracted from the DCM.

    The quaternion is never built from Euler half-angles: the body-to-inertial
    DCM is formed first and the quaternion extracted from it, so any two
    attitudes with the same DCM give the same quaternion up to sign.

    Args:
        phi: Roll angle [rad]
        theta: Pitch angle [rad]
        psi: Yaw angle [rad]
        frame: "ned" for the NED rotation, "render" for the same rotation
            expressed in the Y-up render frame (M R M^T)

    Returns:
        Unit quaternion [w, x, y, z]
    """
    dcm = dcm_body_to_inertial(phi, theta, psi)
    if frame == "render":
        dcm = NED_TO_RENDER @ dcm @ NED_TO_RENDER.T
    return dcm_to_quaternion(dcm)


@beartype
def body_quat_from_wind_attitude(
    wind_phi: float,
    wind_theta: float,
    wind_psi: float,
    alpha: float,
    beta: float,
) -> NDArray[np.float64]:
    """Render-frame body quaternion from a wind-frame attitude plus alpha/beta.

        q_body = q_wind * R(-alpha about x) * R(beta about y)

    q_wind places the airspeed vector in the world; -alpha about render x
    (body left) pitches the nose up, +beta about render y (up) yaws the nose
    left so the wind arrives from the right. Reduces to q_wind at
    alpha = beta = 0.

    Args:
        wind_phi: Wind-frame roll [rad]
        wind_theta: Wind-frame pitch [rad]
        wind_psi: Wind-frame yaw [rad]
        alpha: Angle of attack [rad]
        beta: Sideslip [rad]
    """
    q_wind = body_to_inertial_quat(wind_phi, wind_theta, wind_psi, frame="render")
    q_alpha = axis_angle_quaternion(np.array([1.0, 0.0, 0.0]), -alpha)
    q_beta = axis_angle_quaternion(np.array([0.0, 1.0, 0.0]), beta)
    return normalize_quaternion(
        quaternion_multiply(quaternion_multiply(q_wind, q_alpha), q_beta)
    )


# =============================================================================
# Wind Geometry
# =============================================================================


@beartype
def wind_direction_body(alpha: float, beta: float) -> NDArray[np.float64]:
    """Direction the relative wind comes FROM, in render-frame body axes.

    (sin(beta)cos(alpha), -sin(alpha), cos(beta)cos(alpha)); at
    alpha = beta = 0 this is +Z, the body nose: the wind arrives from
    directly ahead.

    Args:
        alpha: Angle of attack [rad]
        beta: Sideslip [rad]
    """
    v = np.array([
        np.sin(beta) * np.cos(alpha),
        -np.sin(alpha),
        np.cos(beta) * np.cos(alpha),
    ])
    return v / np.linalg.norm(v)


@beartype
@dataclass(frozen=True)
class WindFrame:
    """Aerodynamic unit directions in NED body axes.

    Attributes:
        wind_dir: Direction the air comes FROM (drag acts along -wind_dir)
        lift_dir: Perpendicular to wind in the vertical plane, pointing up
        side_dir: wind_dir x lift_dir
    """
    wind_dir: NDArray[np.float64]
    lift_dir: NDArray[np.float64]
    side_dir: NDArray[np.float64]


@beartype
def compute_wind_frame_ned(alpha: float, beta: float) -> WindFrame:
    """Wind, lift and side unit vectors from alpha and beta.

    At alpha = beta = 0 the wind comes from +x, lift is -z (up) and side is
    +y. Lift is the double cross product of the wind with NED up; when the
    wind is vertical (alpha = +-90 deg) lift falls back to -x.

    Args:
        alpha: Angle of attack [rad]
        beta: Sideslip [rad]
    """
    ca, sa = np.cos(alpha), np.sin(alpha)
    cb, sb = np.cos(beta), np.sin(beta)

    wind = np.array([cb * ca, sb * ca, sa])

    # wind x up, with up = (0, 0, -1)
    temp = np.array([-sb * ca, cb * ca, 0.0])
    lift = np.cross(temp, wind)
    norm = np.linalg.norm(lift)
    lift = lift / norm if norm > 1e-10 else np.array([-1.0, 0.0, 0.0])

    side = np.cross(wind, lift)

    return WindFrame(wind_dir=wind, lift_dir=lift, side_dir=side)


# =============================================================================
# Rotational Kinematics
# =============================================================================


@beartype
def euler_rates(p: float, q: float, r: float, phi: float, theta: float) -> NDArray[np.float64]:
    """Convert body rates (p, q, r) to Euler angle rates.

        phi_dot   = p + sin(phi) tan(theta) q + cos(phi) tan(theta) r
        theta_dot =     cos(phi) q            - sin(phi) r
        psi_dot   =     sin(phi) sec(theta) q + cos(phi) sec(theta) r

    Singular at theta = +-pi/2.

    Returns:
        [phi_dot, theta_dot, psi_dot] [rad/s]
    """
    sin_phi, cos_phi = np.sin(phi), np.cos(phi)
    tan_theta = np.tan(theta)
    sec_theta = 1.0 / np.cos(theta)

    return np.array([
        p + sin_phi * tan_theta * q + cos_phi * tan_theta * r,
        cos_phi * q - sin_phi * r,
        sin_phi * sec_theta * q + cos_phi * sec_theta * r,
    ])


@beartype
def euler_rates_to_body_rates(
    phi_dot: float,
    theta_dot: float,
    psi_dot: float,
    phi: float,
    theta: float,
) -> NDArray[np.float64]:
    """Convert Euler angle rates to body rates (inverse of euler_rates).

        p =  phi_dot               - psi_dot sin(theta)
        q =  theta_dot cos(phi)    + psi_dot sin(phi) cos(theta)
        r = -theta_dot sin(phi)    + psi_dot cos(phi) cos(theta)

    Returns:
        [p, q, r] [rad/s]
    """
    sin_phi, cos_phi = np.sin(phi), np.cos(phi)
    sin_theta, cos_theta = np.sin(theta), np.cos(theta)

    return np.array([
        phi_dot - psi_dot * sin_theta,
        theta_dot * cos_phi + psi_dot * sin_phi * cos_theta,
        -theta_dot * sin_phi + psi_dot * cos_phi * cos_theta,
    ])
