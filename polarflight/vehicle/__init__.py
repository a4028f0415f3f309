"""Vehicle mass modeling.

Provides point-mass segment integration (CG and inertia tensor), canopy
apparent mass, and reference mass tables.

Example:
    >>> from polarflight.vehicle import compute_center_of_mass, compute_inertia
    >>> from polarflight.vehicle.reference import WINGSUIT_MASS_SEGMENTS
    >>>
    >>> cg = compute_center_of_mass(WINGSUIT_MASS_SEGMENTS)
    >>> inertia = compute_inertia(WINGSUIT_MASS_SEGMENTS, origin=cg)
"""

from polarflight.vehicle.apparent_mass import (
    ApparentMassResult,
    CanopyGeometry,
    apparent_mass_at_deploy,
    canopy_geometry_from_area,
    compute_apparent_inertia,
    compute_apparent_mass,
    compute_apparent_mass_result,
    effective_inertia,
    effective_mass,
)
from polarflight.vehicle.mass import (
    InertiaComponents,
    MassSegment,
    calculate_inertia_components,
    compute_center_of_mass,
    compute_inertia,
    physical_mass_positions,
    rotate_segments_about_pivot,
)

__all__ = [
    # Mass properties
    "MassSegment",
    "InertiaComponents",
    "calculate_inertia_components",
    "compute_center_of_mass",
    "compute_inertia",
    "physical_mass_positions",
    "rotate_segments_about_pivot",
    # Apparent mass
    "CanopyGeometry",
    "ApparentMassResult",
    "compute_apparent_mass",
    "compute_apparent_inertia",
    "compute_apparent_mass_result",
    "canopy_geometry_from_area",
    "apparent_mass_at_deploy",
    "effective_mass",
    "effective_inertia",
]
