"""Reference mass tables for a wingsuit pilot and a canopy + pilot system.

Positions are normalized by pilot height (1.875 m) and ratios are
fractions of the system mass (77.5 kg). NED body axes: x forward, y right,
z down.

Canopy system layout:
- The pilot hangs below the canopy with the head-to-toe axis along +z,
  trimmed 6 deg forward about the riser attachment.
- Seven canopy cells form an arc above the pilot. Each cell carries a
  structure mass (weight and inertia) and a trapped-air mass (inertia
  only, since the air is buoyant).

Example:
    >>> from polarflight.vehicle.reference import canopy_mass_segments
    >>>
    >>> weight, inertia = canopy_mass_segments(pilot_pitch_deg=10.0, deploy=0.5)
"""

import numpy as np

from polarflight.typecheck import beartype
from polarflight.vehicle.mass import MassSegment, rotate_segments_about_pivot

# =============================================================================
# Wingsuit Pilot
# =============================================================================

WINGSUIT_MASS_SEGMENTS: list[MassSegment] = [
    MassSegment.at("head", 0.14, 0.302049, 0.0, -0.01759),
    MassSegment.at("torso", 0.435, 0.078431, 0.0, 0.0),
    MassSegment.at("right_upper_arm", 0.0275, 0.174411, 0.158291, 0.0),
    MassSegment.at("right_forearm", 0.016, 0.141245, 0.247236, 0.0),
    MassSegment.at("right_hand", 0.008, 0.090994, 0.351759, 0.0),
    MassSegment.at("right_thigh", 0.1, -0.197951, 0.080402, 0.0),
    MassSegment.at("right_shin", 0.0465, -0.397951, 0.145729, 0.0),
    MassSegment.at("right_foot", 0.0145, -0.530112, 0.201005, -0.00503),
    MassSegment.at("left_upper_arm", 0.0275, 0.174411, -0.158291, 0.0),
    MassSegment.at("left_forearm", 0.016, 0.141245, -0.247236, 0.0),
    MassSegment.at("left_hand", 0.008, 0.090994, -0.351759, 0.0),
    MassSegment.at("left_thigh", 0.1, -0.197951, -0.080402, 0.0),
    MassSegment.at("left_shin", 0.0465, -0.397951, -0.145729, 0.0),
    MassSegment.at("left_foot", 0.0145, -0.530112, -0.201005, -0.00503),
]


# =============================================================================
# Canopy Pilot
# =============================================================================

TRIM_ANGLE_RAD: float = float(np.radians(6.0))

# Offsets from the riser attachment to the pilot body line (normalized)
PILOT_FWD_SHIFT: float = 0.28
PILOT_DOWN_SHIFT: float = 0.163

# Pre-trim positions: (name, mass_ratio, x, y, z), hanging pilot, arms up on toggles
_CANOPY_PILOT_RAW: list[tuple[str, float, float, float, float]] = [
    ("head", 0.14, 0.10, 0.0, 0.280),
    ("torso", 0.435, 0.10, 0.0, 0.480),
    ("right_upper_arm", 0.0275, 0.08, 0.090, 0.300),
    ("right_forearm", 0.016, 0.14, 0.080, 0.220),
    ("right_hand", 0.008, 0.18, 0.070, 0.160),
    ("right_thigh", 0.1, 0.10, 0.060, 0.720),
    ("right_shin", 0.0465, 0.08, 0.050, 0.900),
    ("right_foot", 0.0145, 0.06, 0.050, 1.010),
    ("left_upper_arm", 0.0275, 0.08, -0.090, 0.300),
    ("left_forearm", 0.016, 0.14, -0.080, 0.220),
    ("left_hand", 0.008, 0.18, -0.070, 0.160),
    ("left_thigh", 0.1, 0.10, -0.060, 0.720),
    ("left_shin", 0.0465, 0.08, -0.050, 0.900),
    ("left_foot", 0.0145, 0.06, -0.050, 1.010),
]


def _trim(x: float, z: float) -> tuple[float, float]:
    """Rotate a normalized x-z position forward by the trim angle."""
    c, s = np.cos(TRIM_ANGLE_RAD), np.sin(TRIM_ANGLE_RAD)
    return round(float(x * c + z * s), 4), round(float(-x * s + z * c), 4)


# Riser attachment: the pivot the pilot swings about
PILOT_PIVOT_X, PILOT_PIVOT_Z = _trim(PILOT_FWD_SHIFT, PILOT_DOWN_SHIFT)

def _trimmed_pilot_segment(name: str, ratio: float, x: float, y: float, z: float) -> MassSegment:
    x_trim, z_trim = _trim(x + PILOT_FWD_SHIFT, z + PILOT_DOWN_SHIFT)
    return MassSegment.at(name, ratio, x_trim, y, z_trim)


CANOPY_PILOT_SEGMENTS: list[MassSegment] = [
    _trimmed_pilot_segment(*raw) for raw in _CANOPY_PILOT_RAW
]


# =============================================================================
# Canopy Cells
# =============================================================================

# Arc of 7 cells, 12 deg apart on R = 1.55, trimmed 6 deg forward
_CANOPY_CELL_POSITIONS: list[tuple[str, float, float, float]] = [
    ("c", 0.165, 0.0, -1.196),
    ("r1", 0.161, 0.322, -1.162),
    ("l1", 0.161, -0.322, -1.162),
    ("r2", 0.151, 0.630, -1.062),
    ("l2", 0.151, -0.630, -1.062),
    ("r3", 0.134, 0.911, -0.901),
    ("l3", 0.134, -0.911, -0.901),
]

CANOPY_STRUCTURE_RATIO: float = 0.00643  # ~3.5 kg of fabric over 7 cells
CANOPY_AIR_RATIO: float = 0.011  # ~6 kg of trapped air over 7 cells

CANOPY_STRUCTURE_SEGMENTS: list[MassSegment] = [
    MassSegment.at(f"canopy_structure_{cell}", CANOPY_STRUCTURE_RATIO, x, y, z)
    for cell, x, y, z in _CANOPY_CELL_POSITIONS
]

CANOPY_AIR_SEGMENTS: list[MassSegment] = [
    MassSegment.at(f"canopy_air_{cell}", CANOPY_AIR_RATIO, x, y, z)
    for cell, x, y, z in _CANOPY_CELL_POSITIONS
]

# Weight excludes the buoyant trapped air; inertia includes it
CANOPY_WEIGHT_SEGMENTS: list[MassSegment] = CANOPY_PILOT_SEGMENTS + CANOPY_STRUCTURE_SEGMENTS
CANOPY_INERTIA_SEGMENTS: list[MassSegment] = CANOPY_WEIGHT_SEGMENTS + CANOPY_AIR_SEGMENTS

# Forward shift of canopy cells when packed (normalized, lerps to 0 at full deploy)
DEPLOY_CHORD_OFFSET: float = 0.15


# =============================================================================
# Configuration-Dependent Tables
# =============================================================================


@beartype
def scale_canopy_for_deploy(segments: list[MassSegment], deploy: float) -> list[MassSegment]:
    """Shrink canopy cells toward the centerline while the wing inflates.

    Span (y) scales by 0.1 + 0.9 * deploy and x shifts forward by
    DEPLOY_CHORD_OFFSET * (1 - deploy).
    """
    span_scale = 0.1 + 0.9 * deploy
    chord_offset = DEPLOY_CHORD_OFFSET * (1.0 - deploy)
    return [
        seg.with_position(seg.normalized_position * np.array([1.0, span_scale, 1.0])
                          + np.array([chord_offset, 0.0, 0.0]))
        for seg in segments
    ]


@beartype
def canopy_mass_segments(
    pilot_pitch_deg: float = 0.0,
    pivot: tuple[float, float] | None = None,
    deploy: float = 1.0,
) -> tuple[list[MassSegment], list[MassSegment]]:
    """Weight and inertia tables for a given pilot swing and deploy state.

    Args:
        pilot_pitch_deg: Pilot swing on top of the trim angle [deg],
            positive aft (feet forward)
        pivot: (x, z) normalized riser pivot; defaults to the riser attachment
        deploy: Canopy deployment fraction 0-1

    Returns:
        (weight_segments, inertia_segments)
    """
    no_pitch = abs(pilot_pitch_deg) < 0.01
    full_deploy = abs(deploy - 1.0) < 0.001

    if no_pitch and full_deploy:
        return list(CANOPY_WEIGHT_SEGMENTS), list(CANOPY_INERTIA_SEGMENTS)

    pivot_x, pivot_z = pivot if pivot is not None else (PILOT_PIVOT_X, PILOT_PIVOT_Z)

    pilot = list(CANOPY_PILOT_SEGMENTS)
    if not no_pitch:
        pilot = rotate_segments_about_pivot(pilot, float(np.radians(pilot_pitch_deg)), pivot_x, pivot_z)

    structure, air = CANOPY_STRUCTURE_SEGMENTS, CANOPY_AIR_SEGMENTS
    if not full_deploy:
        structure = scale_canopy_for_deploy(structure, deploy)
        air = scale_canopy_for_deploy(air, deploy)

    weight = pilot + list(structure)
    return weight, weight + list(air)
