"""Mass properties from discrete point-mass segments.

A flying body is described by a list of MassSegment entries, each a mass
fraction of the total system mass at a position normalized by a reference
length (usually pilot height). This module turns those tables into
physical quantities:

- Center of gravity [m]
- Full inertia tensor including products of inertia [kg*m^2]

All positions are NED body axes: x forward, y right, z down.

Point-mass approximation only: segments carry no self-inertia.

Example:
    >>> from polarflight.vehicle import compute_center_of_mass, compute_inertia
    >>> from polarflight.vehicle.reference import WINGSUIT_MASS_SEGMENTS
    >>>
    >>> cg = compute_center_of_mass(WINGSUIT_MASS_SEGMENTS, 1.875, 77.5)
    >>> inertia = compute_inertia(WINGSUIT_MASS_SEGMENTS, 1.875, 77.5, origin=cg)
    >>> print(f"Iyy about CG: {inertia.Iyy:.1f} kg*m^2")
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from polarflight.typecheck import beartype

logger = logging.getLogger(__name__)

# Default reference dimensions (average adult pilot)
DEFAULT_REFERENCE_LENGTH: float = 1.875  # [m]
DEFAULT_TOTAL_MASS: float = 77.5  # [kg]


# =============================================================================
# Segment and Tensor Types
# =============================================================================


@beartype
@dataclass(frozen=True, eq=False)
class MassSegment:
    """A named point mass in a normalized body frame.

    Attributes:
        name: Segment identifier (e.g. "head", "canopy_air_c")
        mass_ratio: Fraction of total system mass. Ratios of a table need
            not sum to 1 (buoyant air masses are listed separately).
        normalized_position: [x, y, z] divided by the reference length
    """
    name: str
    mass_ratio: float
    normalized_position: NDArray[np.float64]

    def __post_init__(self) -> None:
        position = np.array(self.normalized_position, dtype=np.float64)
        if position.shape != (3,):
            raise ValueError(f"Position must be shape (3,), got {position.shape}")
        position.setflags(write=False)
        object.__setattr__(self, "normalized_position", position)

    @classmethod
    def at(cls, name: str, mass_ratio: float, x: float, y: float, z: float) -> "MassSegment":
        """Create a segment from scalar coordinates."""
        return cls(name=name, mass_ratio=mass_ratio, normalized_position=np.array([x, y, z], dtype=np.float64))

    def with_position(self, position: NDArray[np.float64]) -> "MassSegment":
        """Copy of this segment moved to a new normalized position."""
        return MassSegment(name=self.name, mass_ratio=self.mass_ratio, normalized_position=position)


@beartype
@dataclass(frozen=True)
class InertiaComponents:
    """Six independent components of a symmetric inertia tensor [kg*m^2].

    Products of inertia are stored already negated (Ixy = -sum(m x y)), so
    the tensor is [[Ixx, Ixy, Ixz], [Ixy, Iyy, Iyz], [Ixz, Iyz, Izz]].

    Attributes:
        Ixx: Roll moment (about forward axis)
        Iyy: Pitch moment (about right axis)
        Izz: Yaw moment (about down axis)
        Ixy, Ixz, Iyz: Tensor products of inertia
    """
    Ixx: float
    Iyy: float
    Izz: float
    Ixy: float = 0.0
    Ixz: float = 0.0
    Iyz: float = 0.0

    @classmethod
    def zero(cls) -> "InertiaComponents":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def principal(cls, Ixx: float, Iyy: float, Izz: float) -> "InertiaComponents":
        """Diagonal tensor with zero products of inertia."""
        return cls(Ixx=Ixx, Iyy=Iyy, Izz=Izz)

    def matrix(self) -> NDArray[np.float64]:
        """Full symmetric 3x3 inertia tensor."""
        return np.array([
            [self.Ixx, self.Ixy, self.Ixz],
            [self.Ixy, self.Iyy, self.Iyz],
            [self.Ixz, self.Iyz, self.Izz],
        ])

    def __add__(self, other: "InertiaComponents") -> "InertiaComponents":
        return InertiaComponents(
            Ixx=self.Ixx + other.Ixx,
            Iyy=self.Iyy + other.Iyy,
            Izz=self.Izz + other.Izz,
            Ixy=self.Ixy + other.Ixy,
            Ixz=self.Ixz + other.Ixz,
            Iyz=self.Iyz + other.Iyz,
        )


# =============================================================================
# Segment Integration
# =============================================================================


def _segment_arrays(
    segments: Sequence[MassSegment],
    reference_length: float,
    total_mass: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Physical masses (n,) and positions (n, 3) of a segment table."""
    masses = np.array([s.mass_ratio * total_mass for s in segments], dtype=np.float64)
    positions = np.array([s.normalized_position for s in segments], dtype=np.float64).reshape(-1, 3)
    return masses, positions * reference_length


@beartype
def calculate_inertia_components(
    masses: NDArray[np.float64],
    positions: NDArray[np.float64],
) -> InertiaComponents:
    """Point-mass inertia about the coordinate origin.

        Ixx = sum m (y^2 + z^2)    Ixy = -sum m x y
        Iyy = sum m (x^2 + z^2)    Ixz = -sum m x z
        Izz = sum m (x^2 + y^2)    Iyz = -sum m y z

    Args:
        masses: Point masses (n,) [kg]
        positions: Positions (n, 3) [m]
    """
    if len(masses) == 0:
        return InertiaComponents.zero()

    x, y, z = positions[:, 0], positions[:, 1], positions[:, 2]
    return InertiaComponents(
        Ixx=float(np.sum(masses * (y * y + z * z))),
        Iyy=float(np.sum(masses * (x * x + z * z))),
        Izz=float(np.sum(masses * (x * x + y * y))),
        Ixy=float(-np.sum(masses * x * y)),
        Ixz=float(-np.sum(masses * x * z)),
        Iyz=float(-np.sum(masses * y * z)),
    )


@beartype
def compute_center_of_mass(
    segments: Sequence[MassSegment],
    reference_length: float = DEFAULT_REFERENCE_LENGTH,
    total_mass: float = DEFAULT_TOTAL_MASS,
) -> NDArray[np.float64]:
    """Mass-weighted centroid of a segment table.

    Args:
        segments: Mass segments with normalized positions
        reference_length: Length that de-normalizes positions [m]
        total_mass: System mass that scales the ratios [kg]

    Returns:
        CG [x, y, z] in meters. Zero vector when the table is empty or
        its summed mass is zero.
    """
    if len(segments) == 0:
        return np.zeros(3)

    masses, positions = _segment_arrays(segments, reference_length, total_mass)
    mass_sum = float(np.sum(masses))
    if mass_sum == 0.0:
        logger.debug("Zero summed mass over %d segments, CG set to origin", len(segments))
        return np.zeros(3)

    return masses @ positions / mass_sum


@beartype
def compute_inertia(
    segments: Sequence[MassSegment],
    reference_length: float = DEFAULT_REFERENCE_LENGTH,
    total_mass: float = DEFAULT_TOTAL_MASS,
    origin: NDArray[np.float64] | None = None,
) -> InertiaComponents:
    """Inertia tensor of a segment table about a caller-chosen point.

    Args:
        segments: Mass segments with normalized positions
        reference_length: Length that de-normalizes positions [m]
        total_mass: System mass that scales the ratios [kg]
        origin: Reference point in meters (body frame). Defaults to the
            coordinate origin; pass the CG for inertia about the CG or a
            riser pivot for pendulum inertia.

    Returns:
        InertiaComponents (all zero for an empty table)
    """
    if len(segments) == 0:
        return InertiaComponents.zero()

    masses, positions = _segment_arrays(segments, reference_length, total_mass)
    if origin is not None:
        positions = positions - np.asarray(origin, dtype=np.float64)
    return calculate_inertia_components(masses, positions)


@beartype
def physical_mass_positions(
    segments: Sequence[MassSegment],
    reference_length: float = DEFAULT_REFERENCE_LENGTH,
    total_mass: float = DEFAULT_TOTAL_MASS,
) -> list[tuple[str, float, NDArray[np.float64]]]:
    """De-normalized (name, mass [kg], position [m]) per segment."""
    return [
        (s.name, s.mass_ratio * total_mass, s.normalized_position * reference_length)
        for s in segments
    ]


@beartype
def rotate_segments_about_pivot(
    segments: Sequence[MassSegment],
    pitch: float,
    pivot_x: float,
    pivot_z: float,
) -> list[MassSegment]:
    """Rigidly pitch segments in the x-z plane about a normalized pivot.

    Positive pitch swings the body aft (feet forward under a canopy):

        x' = dx cos(pitch) - dz sin(pitch) + pivot_x
        z' = dx sin(pitch) + dz cos(pitch) + pivot_z

    Args:
        segments: Segments to rotate
        pitch: Rotation angle [rad]
        pivot_x: Pivot x (normalized)
        pivot_z: Pivot z (normalized)
    """
    c, s = np.cos(pitch), np.sin(pitch)
    rotated = []
    for seg in segments:
        x, y, z = seg.normalized_position
        dx, dz = x - pivot_x, z - pivot_z
        rotated.append(seg.with_position(np.array([
            dx * c - dz * s + pivot_x,
            y,
            dx * s + dz * c + pivot_z,
        ])))
    return rotated
