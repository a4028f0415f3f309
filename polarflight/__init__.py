"""polarflight - Rigid-body flight dynamics for wingsuits, canopies and light aircraft.

This package turns aerodynamic coefficients, point-mass tables and attitude
state into forces, moments, accelerations and orientations in NED body
axes, including a pendulum model for a pilot suspended under a canopy.

Example:
    >>> from polarflight import (
    ...     FlightConfig, RigidBodyDynamics, SimState, build_canopy_frame,
    ... )
    >>>
    >>> config = FlightConfig().at_altitude(1500.0)
    >>> frame = build_canopy_frame(aero_segments, canopy_area=20.4,
    ...                            canopy_chord=2.5, config=config)
    >>> state = SimState.level_flight(airspeed=11.0, alpha_deg=7.0, with_pendulum=True)
    >>> derivs = RigidBodyDynamics(frame, config).derivatives(state)
    >>> print(f"Pitch acceleration: {derivs.rates_dot[1]:.3f} rad/s^2")
"""

__version__ = "0.1.0"

# Vehicle mass model
from polarflight.vehicle import (
    ApparentMassResult,
    CanopyGeometry,
    InertiaComponents,
    MassSegment,
    apparent_mass_at_deploy,
    canopy_geometry_from_area,
    compute_center_of_mass,
    compute_inertia,
    effective_inertia,
    effective_mass,
    physical_mass_positions,
    rotate_segments_about_pivot,
)

# Dynamics
from polarflight.dynamics import (
    PilotPendulumParams,
    SimDerivatives,
    SimState,
    WindFrame,
    body_quat_from_wind_attitude,
    body_to_inertial_quat,
    body_to_inertial_velocity,
    compute_pilot_pendulum_params,
    compute_wind_frame_ned,
    dcm_body_to_inertial,
    dcm_wind_to_body,
    euler_rates,
    euler_rates_to_body_rates,
    pendulum_derivatives,
    pilot_pendulum_eom,
    pilot_swing_damping_torque,
    rotational_eom,
    translational_eom,
    translational_eom_anisotropic,
    wind_direction_body,
)

# Aerodynamics
from polarflight.aero import (
    AeroCoefficients,
    AeroSegment,
    CoefficientModel,
    SegmentForceResult,
    SimpleCoefficients,
    SystemForceMoment,
    compute_segment_force,
    default_controls,
    evaluate_aero_forces,
    evaluate_aero_forces_detailed,
    segment_table,
    sum_all_segments,
)

# Configuration and environment
from polarflight.config import FlightConfig
from polarflight.environment import G0, Atmosphere, gravity_body

# Simulation support
from polarflight.simulation import (
    CompositeFrame,
    RigidBodyDynamics,
    build_canopy_frame,
    build_composite_frame,
    compute_derivatives,
    frame_needs_rebuild,
)

__all__ = [
    "__version__",
    # Frames
    "WindFrame",
    "dcm_body_to_inertial",
    "dcm_wind_to_body",
    "body_to_inertial_quat",
    "body_quat_from_wind_attitude",
    "body_to_inertial_velocity",
    "wind_direction_body",
    "compute_wind_frame_ned",
    "euler_rates",
    "euler_rates_to_body_rates",
    # Mass properties
    "MassSegment",
    "InertiaComponents",
    "compute_center_of_mass",
    "compute_inertia",
    "physical_mass_positions",
    "rotate_segments_about_pivot",
    # Apparent mass
    "CanopyGeometry",
    "ApparentMassResult",
    "canopy_geometry_from_area",
    "apparent_mass_at_deploy",
    "effective_mass",
    "effective_inertia",
    # Equations of motion
    "translational_eom",
    "translational_eom_anisotropic",
    "rotational_eom",
    "SimState",
    "SimDerivatives",
    # Pilot pendulum
    "PilotPendulumParams",
    "compute_pilot_pendulum_params",
    "pilot_pendulum_eom",
    "pilot_swing_damping_torque",
    "pendulum_derivatives",
    # Aerodynamics
    "AeroCoefficients",
    "CoefficientModel",
    "SimpleCoefficients",
    "AeroSegment",
    "SegmentForceResult",
    "SystemForceMoment",
    "default_controls",
    "compute_segment_force",
    "sum_all_segments",
    "evaluate_aero_forces",
    "evaluate_aero_forces_detailed",
    "segment_table",
    # Configuration and environment
    "FlightConfig",
    "Atmosphere",
    "G0",
    "gravity_body",
    # Simulation support
    "CompositeFrame",
    "build_composite_frame",
    "build_canopy_frame",
    "frame_needs_rebuild",
    "RigidBodyDynamics",
    "compute_derivatives",
]
