"""Gravity projected into NED body axes.

The flying bodies modelled here stay within a few kilometres of the
ground, so gravity is the flat-Earth constant G0 along NED +z, resolved
into body axes through the 3-2-1 attitude. Core function is
numba-compiled for use inside derivative evaluations.

Example:
    >>> from polarflight.environment import gravity_body
    >>> import numpy as np
    >>>
    >>> g_b = gravity_body(0.0, np.radians(-30))  # 30 deg nose-down dive
    >>> forward_accel = g_b[0]  # positive: gravity pulls the nose along
"""

import numpy as np
from numba import njit
from numpy.typing import NDArray

from polarflight.typecheck import beartype

# =============================================================================
# Constants
# =============================================================================

# Standard gravity at sea level
G0: float = 9.80665  # [m/s^2]


# =============================================================================
# Numba-Optimized Core Functions
# =============================================================================


@njit(cache=True, fastmath=True)
def _gravity_body(phi: float, theta: float, g: float) -> tuple[float, float, float]:
    """Third column of the inertial-to-body DCM scaled by g."""
    ct = np.cos(theta)
    return (-g * np.sin(theta), g * np.sin(phi) * ct, g * np.cos(phi) * ct)


# =============================================================================
# Public API
# =============================================================================


@beartype
def gravity_body(phi: float, theta: float, g: float = G0) -> NDArray[np.float64]:
    """Gravitational acceleration in body axes.

        g_B = (-g sin(theta), g sin(phi) cos(theta), g cos(phi) cos(theta))

    Independent of yaw.

    Args:
        phi: Roll angle [rad]
        theta: Pitch angle [rad]
        g: Gravitational acceleration magnitude [m/s^2]

    Returns:
        [gx, gy, gz] in body axes [m/s^2]
    """
    gx, gy, gz = _gravity_body(float(phi), float(theta), float(g))
    return np.array([gx, gy, gz])


@beartype
def weight_body(mass: float, phi: float, theta: float, g: float = G0) -> NDArray[np.float64]:
    """Weight force m * g_B in body axes [N]."""
    return mass * gravity_body(phi, theta, g)
