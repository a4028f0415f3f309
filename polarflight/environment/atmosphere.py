"""International Standard Atmosphere for the lower atmosphere.

Temperature, pressure and density from sea level to 32 km, which covers
every altitude a wingsuit, canopy or light aircraft reaches. Used to
derive air density for dynamic pressure and apparent mass.

Layers:
- Troposphere (0-11 km): -6.5 K/km lapse rate
- Tropopause (11-20 km): isothermal at 216.65 K
- Stratosphere (20-32 km): +1.0 K/km

Altitudes above 32 km are clamped to the top of the table.

Example:
    >>> from polarflight.environment import Atmosphere
    >>>
    >>> atm = Atmosphere()
    >>> result = atm.at_altitude(4000.0)  # typical exit altitude
    >>> print(f"Density: {result.density:.4f} kg/m^3")
"""

import logging
from dataclasses import dataclass

import numpy as np

from polarflight.environment.gravity import G0
from polarflight.typecheck import beartype

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# Sea level conditions
T0 = 288.15  # Temperature [K]
P0 = 101325.0  # Pressure [Pa]
RHO0 = 1.225  # Density [kg/m^3]

R_AIR = 287.05287  # Specific gas constant for dry air [J/(kg*K)]
GAMMA_AIR = 1.4  # Ratio of specific heats

# Earth radius for geopotential altitude [m]
R_EARTH = 6356766.0

# Top of the modelled atmosphere (geometric) [m]
MAX_ALTITUDE = 32000.0

# Layer definitions: (base_altitude_km, base_temp_K, lapse_rate_K_per_km)
LAYERS = [
    (0.0, 288.15, -6.5),    # Troposphere
    (11.0, 216.65, 0.0),    # Tropopause
    (20.0, 216.65, 1.0),    # Stratosphere
]


# =============================================================================
# Result Classes
# =============================================================================


@beartype
@dataclass(frozen=True)
class AtmosphereResult:
    """Atmospheric conditions at a given altitude.

    Attributes:
        altitude: Geometric altitude [m]
        temperature: Static temperature [K]
        pressure: Static pressure [Pa]
        density: Air density [kg/m^3]
        speed_of_sound: Speed of sound [m/s]
    """
    altitude: float
    temperature: float
    pressure: float
    density: float
    speed_of_sound: float

    @property
    def density_ratio(self) -> float:
        """Density relative to sea level (sigma)."""
        return self.density / RHO0


# =============================================================================
# Atmosphere Model
# =============================================================================


@beartype
class Atmosphere:
    """ISA model from sea level to 32 km.

    Example:
        >>> atm = Atmosphere()
        >>> rho = atm.density(3000.0)
        >>> T = atm.temperature(11000.0)
    """

    def __init__(self) -> None:
        self._base_pressures = self._compute_base_pressures()

    def _compute_base_pressures(self) -> list[float]:
        """Pressure at the base of each layer."""
        pressures = [P0]

        for i in range(len(LAYERS) - 1):
            h0, t_base, lapse = LAYERS[i]
            h1, _, _ = LAYERS[i + 1]
            pressures.append(_layer_pressure(pressures[-1], t_base, lapse, (h1 - h0) * 1000))

        return pressures

    @staticmethod
    def _geometric_to_geopotential(h_geometric: float) -> float:
        return R_EARTH * h_geometric / (R_EARTH + h_geometric)

    def _find_layer(self, h_km: float) -> int:
        for i in range(len(LAYERS) - 1, -1, -1):
            if h_km >= LAYERS[i][0]:
                return i
        return 0

    def _clamp(self, altitude: float) -> float:
        if altitude > MAX_ALTITUDE:
            logger.debug("Altitude %.0f m above ISA table, clamped to %.0f m", altitude, MAX_ALTITUDE)
            return MAX_ALTITUDE
        return max(altitude, 0.0)

    @beartype
    def temperature(self, altitude: float) -> float:
        """Static temperature [K] at geometric altitude [m]."""
        h_km = self._geometric_to_geopotential(self._clamp(altitude)) / 1000

        h0, t_base, lapse = LAYERS[self._find_layer(h_km)]
        return t_base + lapse * (h_km - h0)

    @beartype
    def pressure(self, altitude: float) -> float:
        """Static pressure [Pa] at geometric altitude [m]."""
        h_km = self._geometric_to_geopotential(self._clamp(altitude)) / 1000

        layer_idx = self._find_layer(h_km)
        h0, t_base, lapse = LAYERS[layer_idx]
        return _layer_pressure(self._base_pressures[layer_idx], t_base, lapse, (h_km - h0) * 1000)

    @beartype
    def density(self, altitude: float) -> float:
        """Air density [kg/m^3] at geometric altitude [m]."""
        return self.pressure(altitude) / (R_AIR * self.temperature(altitude))

    @beartype
    def speed_of_sound(self, altitude: float) -> float:
        """Speed of sound [m/s] at geometric altitude [m]."""
        return float(np.sqrt(GAMMA_AIR * R_AIR * self.temperature(altitude)))

    @beartype
    def at_altitude(self, altitude: float) -> AtmosphereResult:
        """All atmospheric properties at geometric altitude [m]."""
        return AtmosphereResult(
            altitude=altitude,
            temperature=self.temperature(altitude),
            pressure=self.pressure(altitude),
            density=self.density(altitude),
            speed_of_sound=self.speed_of_sound(altitude),
        )

    @beartype
    def dynamic_pressure(self, altitude: float, airspeed: float) -> float:
        """Dynamic pressure q = 0.5 * rho * V^2 [Pa]."""
        return 0.5 * self.density(altitude) * airspeed ** 2


def _layer_pressure(p_base: float, t_base: float, lapse_km: float, dh: float) -> float:
    """Hydrostatic pressure dh metres above a layer base."""
    if abs(lapse_km) < 1e-10:
        return float(p_base * np.exp(-G0 * dh / (R_AIR * t_base)))
    lapse = lapse_km / 1000
    t = t_base + lapse * dh
    return float(p_base * (t / t_base) ** (-G0 / (R_AIR * lapse)))


# =============================================================================
# Convenience Functions
# =============================================================================


@beartype
def density_at_altitude(altitude: float) -> float:
    """Quick ISA density lookup at geometric altitude [m]."""
    return Atmosphere().density(altitude)
