"""Flight configuration shared by frame assembly and derivative evaluation.

Reference dimensions, air density and pendulum drag parameters are passed
explicitly through a FlightConfig rather than held in module state, so two
vehicles can be evaluated side by side with different settings.

Example:
    >>> from polarflight.config import FlightConfig
    >>>
    >>> config = FlightConfig(total_mass=85.0).at_altitude(1500.0)
    >>> config.save("flight.json")
    >>> same = FlightConfig.load("flight.json")
"""

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path


from polarflight.environment.atmosphere import Atmosphere
from polarflight.environment.gravity import G0
from polarflight.typecheck import beartype
from polarflight.vehicle.reference import PILOT_PIVOT_X, PILOT_PIVOT_Z

logger = logging.getLogger(__name__)

CONFIG_VERSION = "1.0"


@beartype
@dataclass(frozen=True)
class FlightConfig:
    """Configuration for assembling and evaluating a flying body.

    Attributes:
        reference_height: Length that de-normalizes segment positions [m]
        total_mass: System mass that scales mass ratios [kg]
        rho: Air density [kg/m^3]
        gravity: Gravitational acceleration [m/s^2]
        pivot_x: Riser pivot x (normalized)
        pivot_z: Riser pivot z (normalized)
        use_apparent_mass: Use per-axis effective mass and inertia in the EOM
        pilot_area: Pilot frontal area for swing damping [m^2]
        pilot_cd: Pilot flat-plate drag coefficient for swing damping
    """
    reference_height: float = 1.875
    total_mass: float = 77.5
    rho: float = 1.225
    gravity: float = G0
    pivot_x: float = PILOT_PIVOT_X
    pivot_z: float = PILOT_PIVOT_Z
    use_apparent_mass: bool = True
    pilot_area: float = 0.55
    pilot_cd: float = 1.0

    def __post_init__(self) -> None:
        if self.reference_height <= 0:
            raise ValueError(f"Reference height must be positive, got {self.reference_height}")
        if self.total_mass <= 0:
            raise ValueError(f"Total mass must be positive, got {self.total_mass}")
        if self.rho < 0:
            raise ValueError(f"Air density must be non-negative, got {self.rho}")
        if self.gravity < 0:
            raise ValueError(f"Gravity must be non-negative, got {self.gravity}")
        if self.pilot_area < 0 or self.pilot_cd < 0:
            raise ValueError("Pilot area and drag coefficient must be non-negative")

    @property
    def pivot(self) -> tuple[float, float]:
        return (self.pivot_x, self.pivot_z)

    def at_altitude(self, altitude: float) -> "FlightConfig":
        """Copy with rho set to the ISA density at altitude [m]."""
        return replace(self, rho=Atmosphere().density(altitude))

    def to_json(self) -> str:
        """Serialize to JSON."""
        return json.dumps({"version": CONFIG_VERSION, **asdict(self)}, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "FlightConfig":
        """Deserialize from JSON. Missing fields take their defaults."""
        data = json.loads(json_str)
        version = data.pop("version", CONFIG_VERSION)
        if version != CONFIG_VERSION:
            logger.debug("Reading config version %s as %s", version, CONFIG_VERSION)

        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown config fields: {sorted(unknown)}")

        return cls(**{
            key: (bool(value) if key == "use_apparent_mass" else float(value))
            for key, value in data.items()
        })

    def save(self, path: str | Path) -> Path:
        """Write the configuration as JSON; returns the path written."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(self.to_json())
        logger.debug("Saved flight config to %s", path)
        return path

    @classmethod
    def load(cls, path: str | Path) -> "FlightConfig":
        """Read a configuration written by save()."""
        with open(Path(path)) as f:
            config = cls.from_json(f.read())
        logger.debug("Loaded flight config from %s", path)
        return config
