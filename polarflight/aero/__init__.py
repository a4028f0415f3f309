"""Aerodynamic segment evaluation and aggregation.

Example:
    >>> from polarflight.aero import sum_all_segments, compute_segment_force
"""

from polarflight.aero.segments import (
    AeroCoefficients,
    AeroSegment,
    CoefficientModel,
    Controls,
    SegmentAeroResult,
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

__all__ = [
    # Coefficients
    "AeroCoefficients",
    "CoefficientModel",
    "SimpleCoefficients",
    "Controls",
    "default_controls",
    # Segments
    "AeroSegment",
    "SegmentForceResult",
    "SegmentAeroResult",
    "SystemForceMoment",
    "compute_segment_force",
    # Aggregation
    "sum_all_segments",
    "evaluate_aero_forces",
    "evaluate_aero_forces_detailed",
    "segment_table",
]
