"""Environment models for flight-dynamics evaluation.

Provides gravity in body axes and an ISA density model.

Example:
    >>> from polarflight.environment import Atmosphere, gravity_body
    >>>
    >>> rho = Atmosphere().density(2000.0)  # kg/m^3
    >>> g_b = gravity_body(phi, theta)  # m/s^2, body axes
"""

from polarflight.environment.atmosphere import (
    Atmosphere,
    AtmosphereResult,
    density_at_altitude,
)
from polarflight.environment.gravity import (
    G0,
    gravity_body,
    weight_body,
)

__all__ = [
    # Atmosphere
    "Atmosphere",
    "AtmosphereResult",
    "density_at_altitude",
    # Gravity
    "G0",
    "gravity_body",
    "weight_body",
]
