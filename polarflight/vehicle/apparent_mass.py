"""Apparent (added) mass of a ram-air canopy.

An accelerating canopy must also accelerate the air it displaces. The
effect is modelled as extra mass per body axis and extra inertia on the
diagonal of the tensor, both added to the physical values before the
equations of motion are evaluated.

Translational terms use the flat-plate potential-flow results, with span
b, chord c and thickness t = 0.1 c:

    m_z = (pi/4) rho c^2 b    (normal, dominant)
    m_y = (pi/4) rho b^2 c    (spanwise)
    m_x = (pi/4) rho t^2 b    (chordwise, small)

Rotational terms use uniform strip theory:

    I_xx = (pi/4) rho c^2 b^3 / 12
    I_yy = (pi/4) rho b c^3 / 12
    I_zz = (pi/4) rho t^2 b^3 / 12

Example:
    >>> from polarflight.vehicle.apparent_mass import (
    ...     apparent_mass_at_deploy, canopy_geometry_from_area,
    ... )
    >>>
    >>> geom = canopy_geometry_from_area(area=20.4, chord=2.5)
    >>> result = apparent_mass_at_deploy(geom, deploy=1.0, rho=1.225)
    >>> print(f"Normal apparent mass: {result.mass[2]:.1f} kg")
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from polarflight.typecheck import beartype
from polarflight.vehicle.mass import InertiaComponents

PI_4 = np.pi / 4

# Thickness-to-chord ratio for the in-plane terms
THICKNESS_RATIO: float = 0.10


# =============================================================================
# Types
# =============================================================================


@beartype
@dataclass(frozen=True)
class CanopyGeometry:
    """Planform of a canopy.

    Attributes:
        span: Projected span [m]
        chord: Mean aerodynamic chord [m]
        area: Projected planform area [m^2]
    """
    span: float
    chord: float
    area: float


@beartype
@dataclass(frozen=True, eq=False)
class ApparentMassResult:
    """Apparent mass per axis and apparent inertia diagonal.

    Attributes:
        mass: [m_x, m_y, m_z] [kg]
        inertia: [I_xx, I_yy, I_zz] [kg*m^2]
    """
    mass: NDArray[np.float64]
    inertia: NDArray[np.float64]


# =============================================================================
# Flat-Plate / Strip Theory
# =============================================================================


@beartype
def compute_apparent_mass(geom: CanopyGeometry, rho: float = 1.225) -> NDArray[np.float64]:
    """Translational apparent mass [m_x, m_y, m_z] [kg]."""
    b, c = geom.span, geom.chord
    t = THICKNESS_RATIO * c
    return np.array([
        PI_4 * rho * t * t * b,
        PI_4 * rho * b * b * c,
        PI_4 * rho * c * c * b,
    ])


@beartype
def compute_apparent_inertia(geom: CanopyGeometry, rho: float = 1.225) -> NDArray[np.float64]:
    """Rotational apparent inertia [I_xx, I_yy, I_zz] [kg*m^2]."""
    b, c = geom.span, geom.chord
    t = THICKNESS_RATIO * c
    return np.array([
        PI_4 * rho * c * c * b ** 3 / 12,
        PI_4 * rho * b * c ** 3 / 12,
        PI_4 * rho * t * t * b ** 3 / 12,
    ])


@beartype
def compute_apparent_mass_result(geom: CanopyGeometry, rho: float = 1.225) -> ApparentMassResult:
    return ApparentMassResult(
        mass=compute_apparent_mass(geom, rho),
        inertia=compute_apparent_inertia(geom, rho),
    )


@beartype
def canopy_geometry_from_area(area: float, chord: float) -> CanopyGeometry:
    """Rectangular planform with span = area / chord."""
    if chord <= 0:
        raise ValueError(f"Chord must be positive, got {chord}")
    return CanopyGeometry(span=area / chord, chord=chord, area=area)


@beartype
def apparent_mass_at_deploy(
    full_geom: CanopyGeometry,
    deploy: float,
    rho: float = 1.225,
) -> ApparentMassResult:
    """Apparent mass of a partially inflated canopy.

    Span scales by 0.1 + 0.9 d and chord by 0.2 + 0.8 d, with the deploy
    fraction d clamped to [0, 1].
    """
    d = min(max(deploy, 0.0), 1.0)
    span = full_geom.span * (0.1 + 0.9 * d)
    chord = full_geom.chord * (0.2 + 0.8 * d)
    return compute_apparent_mass_result(CanopyGeometry(span=span, chord=chord, area=span * chord), rho)


# =============================================================================
# Effective Mass / Inertia
# =============================================================================


@beartype
def effective_mass(physical_mass: float, apparent: NDArray[np.float64]) -> NDArray[np.float64]:
    """Per-axis effective mass m + m_a [kg]."""
    return physical_mass + np.asarray(apparent, dtype=np.float64)


@beartype
def effective_inertia(physical: InertiaComponents, apparent: NDArray[np.float64]) -> InertiaComponents:
    """Physical tensor with apparent inertia added to the diagonal only."""
    return physical + InertiaComponents.principal(
        float(apparent[0]), float(apparent[1]), float(apparent[2])
    )
