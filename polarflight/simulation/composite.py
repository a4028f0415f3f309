"""Composite frame: one assembled snapshot of a flying body.

Frame assembly gathers everything that depends only on configuration
(aero segments, mass tables, CG, inertia, apparent mass, pendulum
parameters) into a CompositeFrame. It is rebuilt when the deploy fraction,
pilot pitch or a component changes, and reused across every derivative
evaluation in between.

Example:
    >>> from polarflight.simulation import build_canopy_frame, frame_needs_rebuild
    >>>
    >>> frame = build_canopy_frame(aero_segments, canopy_area=20.4, canopy_chord=2.5)
    >>> if frame_needs_rebuild(frame, deploy=0.8, pilot_pitch_deg=0.0):
    ...     frame = build_canopy_frame(aero_segments, canopy_area=20.4,
    ...                                canopy_chord=2.5, deploy=0.8)
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from polarflight.aero.segments import AeroSegment
from polarflight.config import FlightConfig
from polarflight.dynamics.pendulum import PilotPendulumParams, compute_pilot_pendulum_params
from polarflight.typecheck import beartype
from polarflight.vehicle.apparent_mass import (
    ApparentMassResult,
    CanopyGeometry,
    apparent_mass_at_deploy,
    canopy_geometry_from_area,
    compute_apparent_mass_result,
    effective_inertia,
    effective_mass,
)
from polarflight.vehicle.mass import (
    InertiaComponents,
    MassSegment,
    compute_center_of_mass,
    compute_inertia,
)
from polarflight.vehicle.reference import CANOPY_PILOT_SEGMENTS, canopy_mass_segments

logger = logging.getLogger(__name__)


# =============================================================================
# Frame Type
# =============================================================================


@beartype
@dataclass(eq=False)
class CompositeFrame:
    """Assembled vehicle at one configuration.

    Attributes:
        aero_segments: Aerodynamic segments
        weight_segments: Mass segments that carry weight (CG)
        inertia_segments: Mass segments that resist rotation (includes
            buoyant trapped air)
        cg: System CG in body axes [m]
        inertia: Physical inertia tensor about the CG
        total_mass: System mass [kg]
        reference_height: Length that de-normalizes positions [m]
        rho: Air density used for apparent mass [kg/m^3]
        deploy: Deploy fraction this frame was built at
        pilot_pitch_deg: Pilot pitch this frame was built at [deg]
        canopy_geometry: Full-deploy planform, None for bodies without a canopy
        apparent_mass: Apparent mass at this deploy state, None without a canopy
        effective_mass: Per-axis mass including apparent mass [kg]
        effective_inertia: Inertia with apparent inertia on the diagonal
        pendulum: Pilot swing parameters, None without a suspended pilot
        pilot_segments: Pilot body segments used for swing damping
        pivot: (x, z) normalized riser pivot
    """
    aero_segments: list[AeroSegment]
    weight_segments: list[MassSegment]
    inertia_segments: list[MassSegment]
    cg: NDArray[np.float64]
    inertia: InertiaComponents
    total_mass: float
    reference_height: float
    rho: float
    deploy: float = 1.0
    pilot_pitch_deg: float = 0.0
    canopy_geometry: CanopyGeometry | None = None
    apparent_mass: ApparentMassResult | None = None
    effective_mass: NDArray[np.float64] | None = None
    effective_inertia: InertiaComponents | None = None
    pendulum: PilotPendulumParams | None = None
    pilot_segments: list[MassSegment] = field(default_factory=list)
    pivot: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        self.cg = np.asarray(self.cg, dtype=np.float64)
        if self.cg.shape != (3,):
            raise ValueError(f"CG must be shape (3,), got {self.cg.shape}")
        if self.effective_mass is None:
            self.effective_mass = np.full(3, self.total_mass)
        if self.effective_inertia is None:
            self.effective_inertia = self.inertia

    def mass_per_axis(self, use_apparent_mass: bool = True) -> NDArray[np.float64] | None:
        """Per-axis mass for the Kirchhoff EOM, None for isotropic mass."""
        if use_apparent_mass and self.apparent_mass is not None:
            return self.effective_mass
        return None

    def inertia_tensor(self, use_apparent_mass: bool = True) -> NDArray[np.float64]:
        """3x3 tensor for the rotational EOM."""
        if use_apparent_mass:
            return self.effective_inertia.matrix()
        return self.inertia.matrix()


# =============================================================================
# Assembly
# =============================================================================


@beartype
def build_composite_frame(
    aero_segments: Sequence[AeroSegment],
    weight_segments: Sequence[MassSegment],
    inertia_segments: Sequence[MassSegment],
    total_mass: float,
    reference_height: float = 1.875,
    rho: float = 1.225,
    canopy_area: float | None = None,
    canopy_chord: float | None = None,
    deploy: float = 1.0,
    pilot_pitch_deg: float = 0.0,
    pilot_segments: Sequence[MassSegment] | None = None,
    pivot: tuple[float, float] | None = None,
) -> CompositeFrame:
    """Assemble a CompositeFrame from explicit segment tables.

    CG comes from the weight segments. Inertia comes from the inertia
    segments, taken about that CG so the rotational EOM and the aero
    moments share one reference point.

    Args:
        aero_segments: Aerodynamic segments
        weight_segments: Segments that carry weight
        inertia_segments: Segments that resist rotation
        total_mass: System mass [kg]
        reference_height: Length that de-normalizes positions [m]
        rho: Air density [kg/m^3]
        canopy_area: Canopy planform area [m^2]; enables apparent mass
        canopy_chord: Canopy chord [m]; required with canopy_area
        deploy: Deploy fraction 0-1
        pilot_pitch_deg: Pilot pitch the mass tables were built at [deg]
        pilot_segments: Suspended pilot segments; enables the pendulum
        pivot: (x, z) normalized riser pivot; required with pilot_segments
    """
    cg = compute_center_of_mass(weight_segments, reference_height, total_mass)
    inertia = compute_inertia(inertia_segments, reference_height, total_mass, origin=cg)

    geometry = None
    apparent = None
    eff_mass = None
    eff_inertia = None
    if canopy_area is not None:
        if canopy_chord is None:
            raise ValueError("canopy_chord is required when canopy_area is given")
        geometry = canopy_geometry_from_area(canopy_area, canopy_chord)
        if deploy < 0.999:
            apparent = apparent_mass_at_deploy(geometry, deploy, rho)
        else:
            apparent = compute_apparent_mass_result(geometry, rho)
        eff_mass = effective_mass(total_mass, apparent.mass)
        eff_inertia = effective_inertia(inertia, apparent.inertia)

    pendulum = None
    if pilot_segments is not None:
        if pivot is None:
            raise ValueError("pivot is required when pilot_segments are given")
        pendulum = compute_pilot_pendulum_params(
            pilot_segments, pivot[0], pivot[1], reference_height, total_mass
        )

    logger.debug(
        "Built composite frame: %d aero segments, mass %.1f kg, deploy %.3f, pilot pitch %.2f deg",
        len(aero_segments), total_mass, deploy, pilot_pitch_deg,
    )

    return CompositeFrame(
        aero_segments=list(aero_segments),
        weight_segments=list(weight_segments),
        inertia_segments=list(inertia_segments),
        cg=cg,
        inertia=inertia,
        total_mass=total_mass,
        reference_height=reference_height,
        rho=rho,
        deploy=deploy,
        pilot_pitch_deg=pilot_pitch_deg,
        canopy_geometry=geometry,
        apparent_mass=apparent,
        effective_mass=eff_mass,
        effective_inertia=eff_inertia,
        pendulum=pendulum,
        pilot_segments=list(pilot_segments) if pilot_segments is not None else [],
        pivot=pivot,
    )


@beartype
def build_canopy_frame(
    aero_segments: Sequence[AeroSegment],
    canopy_area: float,
    canopy_chord: float,
    config: FlightConfig | None = None,
    deploy: float = 1.0,
    pilot_pitch_deg: float = 0.0,
) -> CompositeFrame:
    """Canopy + suspended pilot frame from the reference mass tables."""
    config = config or FlightConfig()
    weight, inertia = canopy_mass_segments(pilot_pitch_deg, config.pivot, deploy)
    return build_composite_frame(
        aero_segments,
        weight,
        inertia,
        total_mass=config.total_mass,
        reference_height=config.reference_height,
        rho=config.rho,
        canopy_area=canopy_area,
        canopy_chord=canopy_chord,
        deploy=deploy,
        pilot_pitch_deg=pilot_pitch_deg,
        pilot_segments=CANOPY_PILOT_SEGMENTS,
        pivot=config.pivot,
    )


@beartype
def frame_needs_rebuild(
    frame: CompositeFrame,
    deploy: float,
    pilot_pitch_deg: float,
    deploy_tol: float = 1e-3,
    pitch_tol: float = 0.01,
) -> bool:
    """True when deploy or pilot pitch moved past their tolerances."""
    return (
        abs(frame.deploy - deploy) > deploy_tol
        or abs(frame.pilot_pitch_deg - pilot_pitch_deg) > pitch_tol
    )
