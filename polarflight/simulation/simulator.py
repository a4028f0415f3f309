"""Derivative evaluation for a flying body.

Evaluates the instantaneous time derivative of the flight state for a
given CompositeFrame. The host owns the loop and the integrator; this
module only answers "how is the state changing right now".

One evaluation:
    1. Aero loads with per-segment omega x r flow  -> F_aero, M_aero
    2. Gravity in body axes                         -> m g_B
    3. Translational dynamics (Kirchhoff form with apparent mass)
    4. Rotational dynamics with the full inertia tensor
    5. Euler-angle rates and NED velocity
    6. Pilot swing, driven by the canopy pitch acceleration from step 4

Example:
    >>> from polarflight.simulation import RigidBodyDynamics, build_canopy_frame
    >>> from polarflight.dynamics import SimState
    >>>
    >>> frame = build_canopy_frame(aero_segments, canopy_area=20.4, canopy_chord=2.5)
    >>> dynamics = RigidBodyDynamics(frame)
    >>> state = SimState.level_flight(airspeed=12.0, alpha_deg=8.0, with_pendulum=True)
    >>> derivs = dynamics.derivatives(state)
    >>>
    >>> # Any fixed-step or adaptive integrator can drive rhs(t, y)
    >>> y_dot = dynamics.rhs(0.0, state.to_array())
"""

import logging

import numpy as np
import polars as pl
from numpy.typing import NDArray

from polarflight.aero.segments import (
    Controls,
    SystemForceMoment,
    evaluate_aero_forces,
    evaluate_aero_forces_detailed,
    segment_table,
)
from polarflight.config import FlightConfig
from polarflight.dynamics.frames import body_to_inertial_velocity, euler_rates
from polarflight.dynamics.pendulum import pendulum_derivatives
from polarflight.dynamics.rigid_body import (
    rotational_eom,
    translational_eom,
    translational_eom_anisotropic,
)
from polarflight.dynamics.state import SimDerivatives, SimState
from polarflight.environment.gravity import gravity_body
from polarflight.simulation.composite import CompositeFrame
from polarflight.typecheck import beartype

logger = logging.getLogger(__name__)


# =============================================================================
# Derivative Evaluation
# =============================================================================


@beartype
def compute_derivatives(
    state: SimState,
    frame: CompositeFrame,
    controls: Controls | None = None,
    config: FlightConfig | None = None,
) -> SimDerivatives:
    """Time derivative of the flight state.

    Args:
        state: Current state (12 rigid-body states, optional pilot swing)
        frame: Assembled vehicle
        controls: Control inputs (neutral when omitted)
        config: Gravity, apparent-mass switch and swing damping parameters

    Returns:
        SimDerivatives; swing derivatives are set when the state carries a
        pilot swing
    """
    config = config or FlightConfig()
    phi, theta, psi = state.attitude
    rates = state.body_rates

    aero = evaluate_aero_forces(
        frame.aero_segments, frame.cg, frame.reference_height,
        state.velocity_body, rates, controls, frame.rho,
    )

    total_force = aero.force + frame.total_mass * gravity_body(phi, theta, config.gravity)

    mass_per_axis = frame.mass_per_axis(config.use_apparent_mass)
    if mass_per_axis is not None:
        velocity_dot = translational_eom_anisotropic(total_force, mass_per_axis, state.velocity_body, rates)
    else:
        velocity_dot = translational_eom(total_force, frame.total_mass, state.velocity_body, rates)

    # Gravity acts at the CG and adds no moment
    rates_dot = rotational_eom(aero.moment, frame.inertia_tensor(config.use_apparent_mass), rates)

    swing_angle_dot = None
    swing_rate_dot = None
    if state.has_pendulum:
        swing_angle_dot, swing_rate_dot = _swing_derivatives(state, frame, config, float(rates_dot[1]))

    return SimDerivatives(
        position_dot=body_to_inertial_velocity(state.velocity_body, phi, theta, psi),
        velocity_dot=velocity_dot,
        attitude_dot=euler_rates(rates[0], rates[1], rates[2], phi, theta),
        rates_dot=rates_dot,
        swing_angle_dot=swing_angle_dot,
        swing_rate_dot=swing_rate_dot,
    )


def _swing_derivatives(
    state: SimState,
    frame: CompositeFrame,
    config: FlightConfig,
    parent_pitch_accel: float,
) -> tuple[float, float]:
    if frame.pendulum is None:
        logger.debug("State carries a pilot swing but the frame has no pendulum; swing is unforced")
        return state.swing_rate, 0.0

    pivot_x, pivot_z = frame.pivot
    return pendulum_derivatives(
        frame.pendulum,
        frame.pilot_segments,
        pivot_x,
        pivot_z,
        state.swing_angle,
        state.swing_rate,
        parent_pitch_accel,
        rho=frame.rho,
        reference_height=frame.reference_height,
        total_weight=frame.total_mass,
        pilot_area=config.pilot_area,
        cd=config.pilot_cd,
        g=config.gravity,
    )


# =============================================================================
# Dynamics Object
# =============================================================================


@beartype
class RigidBodyDynamics:
    """Derivative evaluator bound to one frame and configuration.

    Example:
        >>> dynamics = RigidBodyDynamics(frame, FlightConfig(use_apparent_mass=False))
        >>> derivs = dynamics.derivatives(state, controls)
    """

    def __init__(
        self,
        frame: CompositeFrame,
        config: FlightConfig | None = None,
    ) -> None:
        """Initialize dynamics model.

        Args:
            frame: Assembled vehicle
            config: Evaluation settings (defaults when omitted)
        """
        self.frame = frame
        self.config = config or FlightConfig()

    def rebuild(self, frame: CompositeFrame) -> None:
        """Swap in a frame rebuilt after a configuration change."""
        self.frame = frame

    def derivatives(self, state: SimState, controls: Controls | None = None) -> SimDerivatives:
        return compute_derivatives(state, self.frame, controls, self.config)

    def rhs(self, t: float, y: NDArray[np.float64], controls: Controls | None = None) -> NDArray[np.float64]:
        """Flat-array derivative for array-based integrators, f(t, y)."""
        return self.derivatives(SimState.from_array(y), controls).to_array()

    def aero_loads(self, state: SimState, controls: Controls | None = None) -> SystemForceMoment:
        """Aerodynamic force and moment about the CG at this state."""
        return evaluate_aero_forces(
            self.frame.aero_segments, self.frame.cg, self.frame.reference_height,
            state.velocity_body, state.body_rates, controls, self.frame.rho,
        )

    def segment_loads(self, state: SimState, controls: Controls | None = None) -> pl.DataFrame:
        """Per-segment flow conditions and forces as a DataFrame."""
        _, per_segment = evaluate_aero_forces_detailed(
            self.frame.aero_segments, self.frame.cg, self.frame.reference_height,
            state.velocity_body, state.body_rates, controls, self.frame.rho,
        )
        return segment_table(per_segment)
