"""Rigid-body equations of motion in NED body axes.

Implements the Newton-Euler equations for a rigid body, computing
accelerations from forces, moments and the current motion state.

The equations use:
- Newton's second law in a rotating frame: m (V_dot + omega x V) = F
- Euler's equations with the full inertia tensor: I omega_dot = M - omega x (I omega)
- A Kirchhoff form with per-axis mass for bodies carrying apparent mass

All functions are stateless; a host integrator advances the state.

Example:
    >>> from polarflight.dynamics import rotational_eom, translational_eom
    >>> import numpy as np
    >>>
    >>> accel = translational_eom(
    ...     force=np.array([0.0, 0.0, -760.0]), mass=77.5,
    ...     velocity=np.array([12.0, 0.0, 5.0]), rates=np.zeros(3),
    ... )
    >>> alpha = rotational_eom(
    ...     moment=np.array([0.0, 15.0, 0.0]),
    ...     inertia=np.diag([10.0, 20.0, 25.0]), rates=np.zeros(3),
    ... )
"""

import logging

import numpy as np
from numpy.typing import NDArray

from polarflight.typecheck import beartype
from polarflight.vehicle.mass import InertiaComponents

logger = logging.getLogger(__name__)

# Principal moments below this fraction of the largest carry no inertia
SINGULAR_INERTIA_RTOL: float = 1e-12


# =============================================================================
# Translational Dynamics
# =============================================================================


@beartype
def translational_eom(
    force: NDArray[np.float64],
    mass: float,
    velocity: NDArray[np.float64],
    rates: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Body-axis acceleration from total force.

        u_dot = Fx/m - (q w - r v)
        v_dot = Fy/m - (r u - p w)
        w_dot = Fz/m - (p v - q u)

    Args:
        force: Total force [Fx, Fy, Fz] in body axes [N]
        mass: Vehicle mass [kg]
        velocity: Body velocity [u, v, w] [m/s]
        rates: Body rates [p, q, r] [rad/s]

    Returns:
        [u_dot, v_dot, w_dot] [m/s^2]. With mass <= 0 only the transport
        terms remain.
    """
    transport = -np.cross(rates, velocity)
    if mass <= 0:
        logger.debug("Non-positive mass %.3g, dropping F/m term", mass)
        return transport
    return force / mass + transport


@beartype
def translational_eom_anisotropic(
    force: NDArray[np.float64],
    mass_per_axis: NDArray[np.float64],
    velocity: NDArray[np.float64],
    rates: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Body-axis acceleration with a different effective mass per axis.

    Kirchhoff form for a body carrying apparent mass:

        u_dot = (Fx + m_y r v - m_z q w) / m_x
        v_dot = (Fy + m_z p w - m_x r u) / m_y
        w_dot = (Fz + m_x q u - m_y p v) / m_z

    Reduces to translational_eom when all three masses are equal.

    Args:
        force: Total force in body axes [N]
        mass_per_axis: Effective mass [m_x, m_y, m_z] [kg]
        velocity: Body velocity [u, v, w] [m/s]
        rates: Body rates [p, q, r] [rad/s]
    """
    mx, my, mz = mass_per_axis
    u, v, w = velocity
    p, q, r = rates

    if min(mx, my, mz) <= 0:
        logger.debug("Non-positive axis mass %s, dropping force terms", mass_per_axis)
        return -np.cross(rates, velocity)

    return np.array([
        (force[0] + my * r * v - mz * q * w) / mx,
        (force[1] + mz * p * w - mx * r * u) / my,
        (force[2] + mx * q * u - my * p * v) / mz,
    ])


# =============================================================================
# Rotational Dynamics
# =============================================================================


@beartype
def rotational_eom(
    moment: NDArray[np.float64],
    inertia: InertiaComponents | NDArray[np.float64],
    rates: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Angular acceleration from Euler's equations.

        I * omega_dot = M - omega x (I * omega)

    Solved with the full tensor, so products of inertia couple the axes.
    When the tensor is singular (a massless axis, collinear point masses)
    the equation is resolved in principal axes and the acceleration about
    each principal axis without inertia is zero; the other axes keep
    their exact values.

    Args:
        moment: Moment about the CG [L, M, N] [N*m]
        inertia: Inertia about the CG, as InertiaComponents or a 3x3
            tensor [kg*m^2]
        rates: Body rates [p, q, r] [rad/s]

    Returns:
        [p_dot, q_dot, r_dot] [rad/s^2]; zeros for an all-zero tensor
    """
    if isinstance(inertia, InertiaComponents):
        inertia = inertia.matrix()

    principal, axes = np.linalg.eigh(inertia)
    scale = float(np.max(np.abs(principal)))
    if scale == 0.0:
        logger.debug("Zero inertia tensor, angular acceleration set to zero")
        return np.zeros(3)

    torque = moment - np.cross(rates, inertia @ rates)
    resolved = principal > SINGULAR_INERTIA_RTOL * scale
    if resolved.all():
        return np.linalg.solve(inertia, torque)

    logger.debug("Singular inertia tensor, %d principal axes without inertia", int(np.sum(~resolved)))
    torque_principal = axes.T @ torque
    accel_principal = np.zeros(3)
    accel_principal[resolved] = torque_principal[resolved] / principal[resolved]
    return axes @ accel_principal
