"""Pilot pitch pendulum under a canopy.

The pilot hangs from the risers and swings fore/aft about the riser
attachment. That swing is a single rotational degree of freedom driven by:

- Gravity restoring torque: -m g l sin(swing_angle)
- Coupling from the canopy's own pitch acceleration: -I_y q_dot
- Aerodynamic torque on the pilot body (including swing damping)

The swing angle is pilot pitch minus canopy pitch, so a pilot hanging
straight below the risers carries zero gravity torque.

Example:
    >>> from polarflight.dynamics.pendulum import (
    ...     compute_pilot_pendulum_params, pilot_pendulum_eom,
    ... )
    >>> from polarflight.vehicle.reference import (
    ...     CANOPY_PILOT_SEGMENTS, PILOT_PIVOT_X, PILOT_PIVOT_Z,
    ... )
    >>>
    >>> params = compute_pilot_pendulum_params(CANOPY_PILOT_SEGMENTS, PILOT_PIVOT_X, PILOT_PIVOT_Z)
    >>> accel = pilot_pendulum_eom(params, swing_angle=0.1, swing_rate=0.0,
    ...                            aero_torque=0.0, parent_pitch_accel=0.0)
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from polarflight.environment.gravity import G0
from polarflight.typecheck import beartype
from polarflight.vehicle.mass import DEFAULT_REFERENCE_LENGTH, DEFAULT_TOTAL_MASS, MassSegment

logger = logging.getLogger(__name__)

# Pilot frontal area presented to the swing and its flat-plate drag coefficient
DEFAULT_PILOT_AREA: float = 0.55  # [m^2]
DEFAULT_PILOT_CD: float = 1.0


@beartype
@dataclass(frozen=True, eq=False)
class PilotPendulumParams:
    """Pendulum parameters derived from the pilot mass table.

    Attributes:
        pilot_mass: Suspended mass [kg]
        iy_riser: Pitch inertia about the riser pivot [kg*m^2]
        riser_to_cg: Pivot-to-CG distance [m]
        cg_offset: (dx, dz) of the pilot CG from the pivot [m]
    """
    pilot_mass: float
    iy_riser: float
    riser_to_cg: float
    cg_offset: NDArray[np.float64]


@beartype
def compute_pilot_pendulum_params(
    segments: Sequence[MassSegment],
    pivot_x: float,
    pivot_z: float,
    reference_height: float = DEFAULT_REFERENCE_LENGTH,
    total_weight: float = DEFAULT_TOTAL_MASS,
) -> PilotPendulumParams:
    """Point-mass pendulum parameters about a normalized riser pivot.

    Per segment, dx = (x - pivot_x) h and dz = (z - pivot_z) h, then

        m     = sum ratio * W
        I_y   = sum m_i (dx_i^2 + dz_i^2)
        cg    = sum m_i (dx_i, dz_i) / m
        l     = |cg|

    Only the pitch axis is considered; y positions are ignored.

    Args:
        segments: Pilot body segments (normalized positions)
        pivot_x: Pivot x (normalized)
        pivot_z: Pivot z (normalized)
        reference_height: Length that de-normalizes positions [m]
        total_weight: System mass that scales the ratios [kg]
    """
    pilot_mass = 0.0
    iy = 0.0
    moment_x = 0.0
    moment_z = 0.0

    for seg in segments:
        m = seg.mass_ratio * total_weight
        dx = (seg.normalized_position[0] - pivot_x) * reference_height
        dz = (seg.normalized_position[2] - pivot_z) * reference_height
        pilot_mass += m
        iy += m * (dx * dx + dz * dz)
        moment_x += m * dx
        moment_z += m * dz

    if pilot_mass > 0:
        cg_offset = np.array([moment_x / pilot_mass, moment_z / pilot_mass])
    else:
        cg_offset = np.zeros(2)

    return PilotPendulumParams(
        pilot_mass=float(pilot_mass),
        iy_riser=float(iy),
        riser_to_cg=float(np.hypot(cg_offset[0], cg_offset[1])),
        cg_offset=cg_offset,
    )


@beartype
def pilot_pendulum_eom(
    params: PilotPendulumParams,
    swing_angle: float,
    swing_rate: float,
    aero_torque: float,
    parent_pitch_accel: float,
    g: float = G0,
) -> float:
    """Angular acceleration of the pilot swing [rad/s^2].

        theta_ddot = (-m g l sin(swing_angle) - I_y q_dot_parent + M_aero) / I_y

    Args:
        params: Pendulum parameters
        swing_angle: Pilot pitch minus canopy pitch [rad]
        swing_rate: Swing rate [rad/s]. The EOM itself has no rate term;
            rate effects enter through aero_torque.
        aero_torque: Aerodynamic torque about the pivot [N*m]
        parent_pitch_accel: Canopy pitch acceleration q_dot [rad/s^2]
        g: Gravitational acceleration [m/s^2]

    Returns:
        Swing acceleration, exactly 0.0 for a massless or inertia-free pilot
    """
    if params.iy_riser < 1e-10 or params.pilot_mass == 0:
        return 0.0

    gravity_torque = -params.pilot_mass * g * params.riser_to_cg * np.sin(swing_angle)
    coupling_torque = -params.iy_riser * parent_pitch_accel

    return float((gravity_torque + coupling_torque + aero_torque) / params.iy_riser)


@beartype
def pilot_swing_damping_torque(
    segments: Sequence[MassSegment],
    pivot_x: float,
    pivot_z: float,
    swing_rate: float,
    rho: float = 1.225,
    reference_height: float = DEFAULT_REFERENCE_LENGTH,
    total_weight: float = DEFAULT_TOTAL_MASS,
    pilot_area: float = DEFAULT_PILOT_AREA,
    cd: float = DEFAULT_PILOT_CD,
) -> float:
    """Quadratic aerodynamic damping of the pilot swing [N*m].

    Each segment presents a share of the pilot frontal area proportional to
    its mass fraction and moves at v = swing_rate * r about the pivot:

        F_i = -0.5 rho cd A_i v |v|,    torque = sum F_i r_i

    The torque opposes the swing, grows with swing_rate^2 and scales
    linearly with rho. total_weight does not enter the result.

    Returns:
        Damping torque, 0.0 at zero swing rate
    """
    if abs(swing_rate) < 1e-10:
        return 0.0

    ratio_sum = sum(seg.mass_ratio for seg in segments)
    if ratio_sum <= 0:
        return 0.0

    torque = 0.0
    for seg in segments:
        dx = (seg.normalized_position[0] - pivot_x) * reference_height
        dz = (seg.normalized_position[2] - pivot_z) * reference_height
        r = np.hypot(dx, dz)

        v_tan = swing_rate * r
        area = pilot_area * seg.mass_ratio / ratio_sum
        torque += -0.5 * rho * cd * area * v_tan * abs(v_tan) * r

    return float(torque)


@beartype
def pendulum_derivatives(
    params: PilotPendulumParams,
    segments: Sequence[MassSegment],
    pivot_x: float,
    pivot_z: float,
    swing_angle: float,
    swing_rate: float,
    parent_pitch_accel: float,
    rho: float = 1.225,
    reference_height: float = DEFAULT_REFERENCE_LENGTH,
    total_weight: float = DEFAULT_TOTAL_MASS,
    pilot_area: float = DEFAULT_PILOT_AREA,
    cd: float = DEFAULT_PILOT_CD,
    g: float = G0,
) -> tuple[float, float]:
    """Time derivatives of (swing_angle, swing_rate) with swing damping.

    Returns:
        (swing_angle_dot, swing_rate_dot)
    """
    damping = pilot_swing_damping_torque(
        segments, pivot_x, pivot_z, swing_rate,
        rho=rho,
        reference_height=reference_height,
        total_weight=total_weight,
        pilot_area=pilot_area,
        cd=cd,
    )
    accel = pilot_pendulum_eom(params, swing_angle, swing_rate, damping, parent_pitch_accel, g)
    return swing_rate, accel
