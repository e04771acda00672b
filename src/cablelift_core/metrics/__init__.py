"""Stateless per-rep analyzers."""

from __future__ import annotations

from cablelift_core.metrics.asymmetry import (
    BALANCED_THRESHOLD_PERCENT,
    asymmetry_percent,
    compute_asymmetry,
    dominant_side,
)
from cablelift_core.metrics.force_curve import (
    CURVE_POINTS,
    average_force_curve,
    classify_strength_profile,
    compute_force_curve,
    find_sticking_point,
    normalise_curve,
)
from cablelift_core.metrics.velocity import (
    ZONE_LOWER_BOUNDS,
    classify_zone,
    mean_concentric_velocity,
    peak_velocity,
    sample_speeds,
)

__all__ = [
    "BALANCED_THRESHOLD_PERCENT",
    "CURVE_POINTS",
    "ZONE_LOWER_BOUNDS",
    "asymmetry_percent",
    "average_force_curve",
    "classify_strength_profile",
    "classify_zone",
    "compute_asymmetry",
    "compute_force_curve",
    "dominant_side",
    "find_sticking_point",
    "mean_concentric_velocity",
    "normalise_curve",
    "peak_velocity",
    "sample_speeds",
]
