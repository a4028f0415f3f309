"""Simulation support: vehicle frame assembly and derivative evaluation.

The host owns the time loop and the integrator; this module assembles the
vehicle once per configuration change and evaluates state derivatives.

Example:
    >>> from polarflight.simulation import RigidBodyDynamics, build_canopy_frame
    >>>
    >>> frame = build_canopy_frame(aero_segments, canopy_area=20.4, canopy_chord=2.5)
    >>> derivs = RigidBodyDynamics(frame).derivatives(state)
"""

from polarflight.simulation.composite import (
    CompositeFrame,
    build_canopy_frame,
    build_composite_frame,
    frame_needs_rebuild,
)
from polarflight.simulation.simulator import (
    RigidBodyDynamics,
    compute_derivatives,
)

__all__ = [
    # Frame assembly
    "CompositeFrame",
    "build_composite_frame",
    "build_canopy_frame",
    "frame_needs_rebuild",
    # Derivatives
    "RigidBodyDynamics",
    "compute_derivatives",
]
