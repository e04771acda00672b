"""Core computation for dual-cable rep biomechanics.

The package turns one rep's worth of :class:`MetricSample` data into
velocity, asymmetry, force-curve and quality metrics. Everything here is
pure computation: no IO, no global state.
"""

from __future__ import annotations

from cablelift_core.engine import BiomechanicsEngine
from cablelift_core.metrics import (
    average_force_curve,
    classify_zone,
    compute_asymmetry,
    compute_force_curve,
)
from cablelift_core.models import (
    AsymmetryResult,
    BiomechanicsRepResult,
    BiomechanicsSetSummary,
    DominantSide,
    ForceCurveResult,
    QualityTrend,
    RepQualityScore,
    SetQualitySummary,
    StrengthProfile,
    VbtSetSummary,
    VelocityResult,
    VelocityZone,
)
from cablelift_core.samples import MetricSample, RepMetricData
from cablelift_core.tracking import RepQualityScorer, VbtTracker

__all__ = [
    "AsymmetryResult",
    "BiomechanicsEngine",
    "BiomechanicsRepResult",
    "BiomechanicsSetSummary",
    "DominantSide",
    "ForceCurveResult",
    "MetricSample",
    "QualityTrend",
    "RepMetricData",
    "RepQualityScore",
    "RepQualityScorer",
    "SetQualitySummary",
    "StrengthProfile",
    "VbtSetSummary",
    "VbtTracker",
    "VelocityResult",
    "VelocityZone",
    "average_force_curve",
    "classify_zone",
    "compute_asymmetry",
    "compute_force_curve",
]
