"""Aerodynamic segment aggregation about the system CG.

A flying body is split into aerodynamic segments (canopy cells, pilot body
parts, wings), each with its own coefficient model. This module evaluates
each segment's lift/drag/side forces and intrinsic pitching moment and
sums them into one force and one moment about the system CG in NED body
axes.

Per segment:

    F_i = L_i lift_dir - D_i wind_dir + Y_i side_dir
    M   = sum (r_cp,i - r_cg) x F_i + sum M_0,i e_y

Drag acts along -wind_dir, wind_dir being the direction the air comes
FROM. The center of pressure sits on the chord line, offset from the
quarter chord by (cp - 0.25) chords and rotated with the segment's pitch.

Coefficient lookup is supplied by the caller through the CoefficientModel
protocol; SimpleCoefficients covers the linear case.

Example:
    >>> from polarflight.aero import AeroSegment, SimpleCoefficients, evaluate_aero_forces
    >>> import numpy as np
    >>>
    >>> wing = AeroSegment(
    ...     name="wing", position=np.array([0.0, 0.0, 0.0]),
    ...     area=2.0, chord=1.8, coefficients=SimpleCoefficients(),
    ... )
    >>> loads = evaluate_aero_forces(
    ...     [wing], cg=np.zeros(3), reference_height=1.875,
    ...     velocity_body=np.array([40.0, 0.0, 10.0]), rates=np.zeros(3),
    ... )
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
import polars as pl
from numba import njit
from numpy.typing import NDArray

from polarflight.dynamics.frames import compute_wind_frame_ned
from polarflight.typecheck import beartype

logger = logging.getLogger(__name__)

Controls = dict[str, float]

# Quarter chord: where a segment's aerodynamic center sits
AERODYNAMIC_CENTER: float = 0.25

# Below this airspeed alpha and beta are undefined and reported as zero
MIN_AIRSPEED: float = 1e-6


# =============================================================================
# Coefficient Interface
# =============================================================================


@beartype
@dataclass(frozen=True)
class AeroCoefficients:
    """Nondimensional coefficients of one segment.

    Attributes:
        cl: Lift coefficient
        cd: Drag coefficient
        cy: Side-force coefficient
        cm: Pitching-moment coefficient about the aerodynamic center
        cp: Center of pressure as a chord fraction from the leading edge
    """
    cl: float
    cd: float
    cy: float = 0.0
    cm: float = 0.0
    cp: float = AERODYNAMIC_CENTER


@runtime_checkable
class CoefficientModel(Protocol):
    """Protocol for per-segment coefficient lookup."""

    def __call__(self, alpha_deg: float, beta_deg: float, controls: Controls) -> AeroCoefficients:
        """Coefficients at local angle of attack and sideslip [deg]."""
        ...


@beartype
@dataclass(frozen=True)
class SimpleCoefficients:
    """Linear lift, parabolic drag coefficient model.

        cl = cl_alpha * alpha
        cd = cd0 + k * cl^2
        cy = cy_beta * beta
        cm = cm0 + cm_alpha * alpha

    Attributes:
        cl_alpha: Lift curve slope [1/rad]
        cd0: Zero-lift drag coefficient
        k: Induced drag factor
        cy_beta: Side-force slope [1/rad]
        cm0: Pitching moment at zero alpha
        cm_alpha: Pitching moment slope [1/rad]
        cp: Fixed center of pressure (chord fraction)
    """
    cl_alpha: float = 2.0
    cd0: float = 0.1
    k: float = 0.2
    cy_beta: float = 0.0
    cm0: float = 0.0
    cm_alpha: float = 0.0
    cp: float = AERODYNAMIC_CENTER

    def __call__(self, alpha_deg: float, beta_deg: float, controls: Controls) -> AeroCoefficients:
        alpha = np.radians(alpha_deg)
        beta = np.radians(beta_deg)
        cl = self.cl_alpha * alpha
        return AeroCoefficients(
            cl=float(cl),
            cd=float(self.cd0 + self.k * cl * cl),
            cy=float(self.cy_beta * beta),
            cm=float(self.cm0 + self.cm_alpha * alpha),
            cp=self.cp,
        )


@beartype
def default_controls() -> Controls:
    """All-neutral control inputs (canopy fully deployed)."""
    return {
        "brake_left": 0.0,
        "brake_right": 0.0,
        "front_riser_left": 0.0,
        "front_riser_right": 0.0,
        "rear_riser_left": 0.0,
        "rear_riser_right": 0.0,
        "weight_shift_lr": 0.0,
        "elevator": 0.0,
        "rudder": 0.0,
        "aileron_left": 0.0,
        "aileron_right": 0.0,
        "flap": 0.0,
        "pitch_throttle": 0.0,
        "yaw_throttle": 0.0,
        "roll_throttle": 0.0,
        "dihedral": 0.5,
        "wingsuit_deploy": 0.0,
        "delta": 0.0,
        "dirty": 0.0,
        "unzip": 0.0,
        "pilot_pitch": 0.0,
        "deploy": 1.0,
    }


# =============================================================================
# Segment Types
# =============================================================================


@beartype
@dataclass(eq=False)
class AeroSegment:
    """One aerodynamic element of the body.

    Attributes:
        name: Segment identifier
        position: Aerodynamic center [x, y, z], normalized by reference height
        area: Reference area S [m^2]
        chord: Reference chord c [m]
        coefficients: Coefficient lookup for this segment
        pitch_offset_deg: Static pitch of the chord line [deg]
            (0 = chord along +x, 90 = chord along -z for an upright pilot)
        chord_rotation_rad: Additional rigid rotation of the chord line in
            the x-z plane, e.g. from pilot swing [rad]
    """
    name: str
    position: NDArray[np.float64]
    area: float
    chord: float
    coefficients: CoefficientModel
    pitch_offset_deg: float = 0.0
    chord_rotation_rad: float = 0.0

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64)
        if self.position.shape != (3,):
            raise ValueError(f"Position must be shape (3,), got {self.position.shape}")


@beartype
@dataclass(frozen=True)
class SegmentForceResult:
    """Forces of one segment, as magnitudes along the wind-frame axes.

    Attributes:
        lift: Along lift_dir [N] (may be negative)
        drag: Against wind_dir [N]
        side: Along side_dir [N] (may be negative)
        moment: Intrinsic pitching moment about the aerodynamic center [N*m]
        cp: Center of pressure (chord fraction)
    """
    lift: float
    drag: float
    side: float
    moment: float = 0.0
    cp: float = AERODYNAMIC_CENTER


@beartype
@dataclass(frozen=True, eq=False)
class SystemForceMoment:
    """Resultant load about the system CG in NED body axes.

    Attributes:
        force: [Fx, Fy, Fz] [N]
        moment: [Mx, My, Mz] [N*m]
    """
    force: NDArray[np.float64]
    moment: NDArray[np.float64]


@beartype
@dataclass(frozen=True, eq=False)
class SegmentAeroResult:
    """Per-segment detail from evaluate_aero_forces_detailed.

    Attributes:
        name: Segment identifier
        forces: Force magnitudes at local flow conditions
        local_velocity: Segment velocity including omega x r [m/s]
        local_airspeed: |local_velocity| [m/s]
        local_alpha_deg: Local angle of attack [deg]
        local_beta_deg: Local sideslip [deg]
        position_m: Segment position [m]
    """
    name: str
    forces: SegmentForceResult
    local_velocity: NDArray[np.float64]
    local_airspeed: float
    local_alpha_deg: float
    local_beta_deg: float
    position_m: NDArray[np.float64]


# =============================================================================
# Numba-Optimized Accumulation
# =============================================================================


@njit(cache=True)
def _accumulate_loads(
    forces: NDArray[np.float64],
    arms: NDArray[np.float64],
    pitch_moments: NDArray[np.float64],
) -> tuple[float, float, float, float, float, float]:
    """Sum F_i and r_i x F_i + M_0,i e_y over all segments."""
    fx = 0.0
    fy = 0.0
    fz = 0.0
    mx = 0.0
    my = 0.0
    mz = 0.0

    for i in range(forces.shape[0]):
        f0, f1, f2 = forces[i, 0], forces[i, 1], forces[i, 2]
        r0, r1, r2 = arms[i, 0], arms[i, 1], arms[i, 2]

        fx += f0
        fy += f1
        fz += f2

        mx += r1 * f2 - r2 * f1
        my += r2 * f0 - r0 * f2 + pitch_moments[i]
        mz += r0 * f1 - r1 * f0

    return (fx, fy, fz, mx, my, mz)


# =============================================================================
# Segment Evaluation
# =============================================================================


@beartype
def compute_segment_force(
    segment: AeroSegment,
    alpha_deg: float,
    beta_deg: float,
    controls: Controls,
    rho: float,
    airspeed: float,
) -> SegmentForceResult:
    """Force magnitudes of one segment at given flow conditions.

        q = 0.5 rho V^2
        L = q S cl,  D = q S cd,  Y = q S cy,  M_0 = q S c cm
    """
    q = 0.5 * rho * airspeed * airspeed
    coeffs = segment.coefficients(alpha_deg, beta_deg, controls)
    qs = q * segment.area
    return SegmentForceResult(
        lift=qs * coeffs.cl,
        drag=qs * coeffs.cd,
        side=qs * coeffs.cy,
        moment=qs * segment.chord * coeffs.cm,
        cp=coeffs.cp,
    )


def _cp_position(segment: AeroSegment, cp: float, reference_height: float) -> NDArray[np.float64]:
    """Center of pressure in meters.

    Chord runs from the leading edge (+x) aft, so a CP behind the quarter
    chord moves toward -x. NED pitch-up turns +x toward -z, hence the
    negated pitch offset.
    """
    offset = -(cp - AERODYNAMIC_CENTER) * segment.chord / reference_height
    base_pitch = -np.radians(segment.pitch_offset_deg)
    off_x = offset * np.cos(base_pitch)
    off_z = offset * np.sin(base_pitch)

    rot = segment.chord_rotation_rad
    if abs(rot) > 1e-6:
        c, s = np.cos(rot), np.sin(rot)
        off_x, off_z = off_x * c - off_z * s, off_x * s + off_z * c

    x, y, z = segment.position
    return np.array([x + off_x, y, z + off_z]) * reference_height


def _body_force(result: SegmentForceResult, wind_dir, lift_dir, side_dir) -> NDArray[np.float64]:
    return result.lift * lift_dir - result.drag * wind_dir + result.side * side_dir


# =============================================================================
# System Aggregation
# =============================================================================


@beartype
def sum_all_segments(
    segments: Sequence[AeroSegment],
    segment_forces: Sequence[SegmentForceResult],
    cg: NDArray[np.float64],
    reference_height: float,
    wind_dir: NDArray[np.float64],
    lift_dir: NDArray[np.float64],
    side_dir: NDArray[np.float64],
) -> SystemForceMoment:
    """Sum segment forces into one force and moment about the CG.

    All segments share a single wind frame (static-airspeed path).

    Args:
        segments: Aero segments
        segment_forces: Matching force results, one per segment
        cg: System CG [m], NED body axes
        reference_height: Length that de-normalizes positions [m]
        wind_dir: Unit vector the air comes FROM
        lift_dir: Unit lift direction
        side_dir: Unit side direction (wind_dir x lift_dir)

    Returns:
        SystemForceMoment (zero for no segments)

    Raises:
        ValueError: If segments and segment_forces differ in length
    """
    if len(segments) != len(segment_forces):
        raise ValueError(
            f"Got {len(segments)} segments but {len(segment_forces)} force results"
        )

    n = len(segments)
    forces = np.zeros((n, 3))
    arms = np.zeros((n, 3))
    pitch_moments = np.zeros(n)

    cg = np.asarray(cg, dtype=np.float64)
    for i, (seg, result) in enumerate(zip(segments, segment_forces)):
        forces[i] = _body_force(result, wind_dir, lift_dir, side_dir)
        arms[i] = _cp_position(seg, result.cp, reference_height) - cg
        pitch_moments[i] = result.moment

    fx, fy, fz, mx, my, mz = _accumulate_loads(forces, arms, pitch_moments)
    return SystemForceMoment(force=np.array([fx, fy, fz]), moment=np.array([mx, my, mz]))


@beartype
def evaluate_aero_forces_detailed(
    segments: Sequence[AeroSegment],
    cg: NDArray[np.float64],
    reference_height: float,
    velocity_body: NDArray[np.float64],
    rates: NDArray[np.float64],
    controls: Controls | None = None,
    rho: float = 1.225,
) -> tuple[SystemForceMoment, list[SegmentAeroResult]]:
    """System loads with a per-segment omega x r flow correction.

    Each segment sees V_local = V_cg + omega x r_i, with r_i measured from
    the CG to the segment's aerodynamic center, and gets its own alpha,
    beta and wind frame. Body rotation therefore produces roll, pitch and
    yaw damping from geometry alone. With zero rates every segment sees the
    CG flow.

    Args:
        segments: Aero segments
        cg: System CG [m]
        reference_height: Length that de-normalizes positions [m]
        velocity_body: CG velocity [u, v, w] relative to the air [m/s]
        rates: Body rates [p, q, r] [rad/s]
        controls: Control inputs (neutral when omitted)
        rho: Air density [kg/m^3]

    Returns:
        (system loads, per-segment results)
    """
    controls = default_controls() if controls is None else controls
    cg = np.asarray(cg, dtype=np.float64)
    velocity_body = np.asarray(velocity_body, dtype=np.float64)
    omega = np.asarray(rates, dtype=np.float64)

    n = len(segments)
    forces = np.zeros((n, 3))
    arms = np.zeros((n, 3))
    pitch_moments = np.zeros(n)
    per_segment: list[SegmentAeroResult] = []

    for i, seg in enumerate(segments):
        position_m = seg.position * reference_height
        local_velocity = velocity_body + np.cross(omega, position_m - cg)
        u, v, w = local_velocity
        airspeed = float(np.linalg.norm(local_velocity))

        if airspeed > MIN_AIRSPEED:
            alpha_deg = float(np.degrees(np.arctan2(w, u)))
            beta_deg = float(np.degrees(np.arcsin(np.clip(v / airspeed, -1.0, 1.0))))
        else:
            alpha_deg = 0.0
            beta_deg = 0.0

        result = compute_segment_force(seg, alpha_deg, beta_deg, controls, rho, airspeed)
        frame = compute_wind_frame_ned(np.radians(alpha_deg), np.radians(beta_deg))

        forces[i] = _body_force(result, frame.wind_dir, frame.lift_dir, frame.side_dir)
        arms[i] = _cp_position(seg, result.cp, reference_height) - cg
        pitch_moments[i] = result.moment

        per_segment.append(SegmentAeroResult(
            name=seg.name,
            forces=result,
            local_velocity=local_velocity,
            local_airspeed=airspeed,
            local_alpha_deg=alpha_deg,
            local_beta_deg=beta_deg,
            position_m=position_m,
        ))

    fx, fy, fz, mx, my, mz = _accumulate_loads(forces, arms, pitch_moments)
    system = SystemForceMoment(force=np.array([fx, fy, fz]), moment=np.array([mx, my, mz]))
    return system, per_segment


@beartype
def evaluate_aero_forces(
    segments: Sequence[AeroSegment],
    cg: NDArray[np.float64],
    reference_height: float,
    velocity_body: NDArray[np.float64],
    rates: NDArray[np.float64],
    controls: Controls | None = None,
    rho: float = 1.225,
) -> SystemForceMoment:
    """System loads only; see evaluate_aero_forces_detailed."""
    system, _ = evaluate_aero_forces_detailed(
        segments, cg, reference_height, velocity_body, rates, controls, rho
    )
    return system


# =============================================================================
# Tabular Output
# =============================================================================


@beartype
def segment_table(per_segment: Sequence[SegmentAeroResult]) -> pl.DataFrame:
    """Per-segment results as a DataFrame for readouts and overlays."""
    return pl.DataFrame({
        "name": [r.name for r in per_segment],
        "x_m": [float(r.position_m[0]) for r in per_segment],
        "y_m": [float(r.position_m[1]) for r in per_segment],
        "z_m": [float(r.position_m[2]) for r in per_segment],
        "airspeed": [r.local_airspeed for r in per_segment],
        "alpha_deg": [r.local_alpha_deg for r in per_segment],
        "beta_deg": [r.local_beta_deg for r in per_segment],
        "lift": [r.forces.lift for r in per_segment],
        "drag": [r.forces.drag for r in per_segment],
        "side": [r.forces.side for r in per_segment],
        "moment": [r.forces.moment for r in per_segment],
        "cp": [r.forces.cp for r in per_segment],
    }, schema={
        "name": pl.Utf8,
        "x_m": pl.Float64,
        "y_m": pl.Float64,
        "z_m": pl.Float64,
        "airspeed": pl.Float64,
        "alpha_deg": pl.Float64,
        "beta_deg": pl.Float64,
        "lift": pl.Float64,
        "drag": pl.Float64,
        "side": pl.Float64,
        "moment": pl.Float64,
        "cp": pl.Float64,
    })
