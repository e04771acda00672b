"""Result containers produced by the rep biomechanics analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

__all__ = [
    "AsymmetryResult",
    "BiomechanicsRepResult",
    "BiomechanicsSetSummary",
    "DominantSide",
    "ForceCurveResult",
    "QualityTrend",
    "RepQualityScore",
    "SetQualitySummary",
    "StrengthProfile",
    "VbtSetSummary",
    "VelocityResult",
    "VelocityZone",
]


class VelocityZone(str, Enum):
    """Mean concentric velocity bands, slowest first."""

    GRIND = "GRIND"
    SLOW = "SLOW"
    MODERATE = "MODERATE"
    FAST = "FAST"
    EXPLOSIVE = "EXPLOSIVE"


class DominantSide(str, Enum):
    A = "A"
    B = "B"
    BALANCED = "BALANCED"


class StrengthProfile(str, Enum):
    """Shape of the force curve across the range of motion.

    ``ASCENDING`` peaks at lockout, ``DESCENDING`` off the bottom,
    ``BELL_SHAPED`` mid-range and ``FLAT`` stays roughly constant.
    """

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"
    BELL_SHAPED = "BELL_SHAPED"
    FLAT = "FLAT"


class QualityTrend(str, Enum):
    IMPROVING = "IMPROVING"
    STABLE = "STABLE"
    DECLINING = "DECLINING"


def _zone_counts(distribution: Mapping[VelocityZone, int]) -> Dict[str, int]:
    return {zone.value: int(count) for zone, count in distribution.items()}


@dataclass(frozen=True, slots=True)
class VelocityResult:
    """Velocity-based training metrics for a single rep (mm/s)."""

    mean_concentric_velocity: float
    peak_velocity: float
    zone: VelocityZone
    velocity_loss_percent: Optional[float]
    estimated_reps_remaining: Optional[int]
    should_stop_set: bool
    rep_number: int

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "rep_number": self.rep_number,
            "mean_concentric_velocity": self.mean_concentric_velocity,
            "peak_velocity": self.peak_velocity,
            "zone": self.zone.value,
            "velocity_loss_percent": self.velocity_loss_percent,
            "estimated_reps_remaining": self.estimated_reps_remaining,
            "should_stop_set": self.should_stop_set,
        }


@dataclass(frozen=True, slots=True)
class AsymmetryResult:
    """Cable A/B load balance for a single rep."""

    avg_load_a: float
    avg_load_b: float
    asymmetry_percent: float
    dominant_side: DominantSide
    rep_number: int

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "rep_number": self.rep_number,
            "avg_load_a": self.avg_load_a,
            "avg_load_b": self.avg_load_b,
            "asymmetry_percent": self.asymmetry_percent,
            "dominant_side": self.dominant_side.value,
        }


@dataclass(frozen=True, slots=True)
class ForceCurveResult:
    """Force curve normalised to 101 points over the observed ROM.

    Both arrays are empty when the rep did not carry enough samples or range
    of motion to build a curve.
    """

    normalized_force: tuple[float, ...]
    normalized_position_pct: tuple[float, ...]
    sticking_point_pct: Optional[float]
    strength_profile: StrengthProfile
    rep_number: int

    @property
    def is_empty(self) -> bool:
        return not self.normalized_force

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "rep_number": self.rep_number,
            "normalized_force": list(self.normalized_force),
            "normalized_position_pct": list(self.normalized_position_pct),
            "sticking_point_pct": self.sticking_point_pct,
            "strength_profile": self.strength_profile.value,
        }


@dataclass(frozen=True, slots=True)
class RepQualityScore:
    """Composite 0-100 rep score and its four components."""

    composite: int
    rom_score: float
    velocity_score: float
    eccentric_control_score: float
    smoothness_score: float
    rep_number: int

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "rep_number": self.rep_number,
            "composite": self.composite,
            "rom_score": self.rom_score,
            "velocity_score": self.velocity_score,
            "eccentric_control_score": self.eccentric_control_score,
            "smoothness_score": self.smoothness_score,
        }


@dataclass(frozen=True, slots=True)
class SetQualitySummary:
    average_score: int
    best_score: int
    worst_score: int
    best_rep_number: int
    worst_rep_number: int
    trend: QualityTrend
    rep_scores: Sequence[RepQualityScore] = field(default_factory=tuple)

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "average_score": self.average_score,
            "best_score": self.best_score,
            "worst_score": self.worst_score,
            "best_rep_number": self.best_rep_number,
            "worst_rep_number": self.worst_rep_number,
            "trend": self.trend.value,
            "rep_scores": [score.as_dict() for score in self.rep_scores],
        }


@dataclass(frozen=True, slots=True)
class VbtSetSummary:
    """Velocity aggregates for every rep processed since the last reset."""

    avg_mcv: float
    peak_velocity: float
    total_velocity_loss_percent: Optional[float]
    zone_distribution: Mapping[VelocityZone, int]
    rep_count: int

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "avg_mcv": self.avg_mcv,
            "peak_velocity": self.peak_velocity,
            "total_velocity_loss_percent": self.total_velocity_loss_percent,
            "zone_distribution": _zone_counts(self.zone_distribution),
            "rep_count": self.rep_count,
        }


@dataclass(frozen=True, slots=True)
class BiomechanicsRepResult:
    velocity: VelocityResult
    force_curve: ForceCurveResult
    asymmetry: AsymmetryResult
    rep_number: int
    timestamp: int

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "rep_number": self.rep_number,
            "timestamp": self.timestamp,
            "velocity": self.velocity.as_dict(),
            "force_curve": self.force_curve.as_dict(),
            "asymmetry": self.asymmetry.as_dict(),
        }


@dataclass(frozen=True, slots=True)
class BiomechanicsSetSummary:
    """Set-level aggregate of every rep processed since the last reset."""

    rep_results: Sequence[BiomechanicsRepResult]
    avg_mcv: float
    peak_velocity: float
    total_velocity_loss_percent: Optional[float]
    zone_distribution: Mapping[VelocityZone, int]
    avg_asymmetry_percent: float
    dominant_side: DominantSide
    strength_profile: StrengthProfile
    avg_force_curve: Optional[ForceCurveResult]

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "rep_count": len(self.rep_results),
            "avg_mcv": self.avg_mcv,
            "peak_velocity": self.peak_velocity,
            "total_velocity_loss_percent": self.total_velocity_loss_percent,
            "zone_distribution": _zone_counts(self.zone_distribution),
            "avg_asymmetry_percent": self.avg_asymmetry_percent,
            "dominant_side": self.dominant_side.value,
            "strength_profile": self.strength_profile.value,
            "avg_force_curve": (
                self.avg_force_curve.as_dict()
                if self.avg_force_curve is not None
                else None
            ),
        }
