"""Force-vs-position curve normalisation and strength profiling.

Each rep's concentric samples are reduced to ``(position, force)`` pairs
where the position is the leading cable and the force the sum of both
cables. The pairs are resampled at 101 evenly spaced points across the
observed range of motion so curves from reps with different travel can be
compared point for point.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np

from cablelift_core.models import ForceCurveResult, StrengthProfile
from cablelift_core.samples import MetricSample

__all__ = [
    "CURVE_POINTS",
    "MIN_CURVE_SAMPLES",
    "MIN_ROM_MM",
    "PROFILE_MARGIN",
    "average_force_curve",
    "classify_strength_profile",
    "compute_force_curve",
    "find_sticking_point",
    "normalise_curve",
]

CURVE_POINTS = 101
MIN_CURVE_SAMPLES = 3
MIN_ROM_MM = 1.0
PROFILE_MARGIN = 1.15
STICKING_SEARCH_START = 5
STICKING_SEARCH_END = 95

_POSITION_PCT: tuple[float, ...] = tuple(float(pct) for pct in range(CURVE_POINTS))


def _empty_curve(rep_number: int) -> ForceCurveResult:
    return ForceCurveResult(
        normalized_force=(),
        normalized_position_pct=(),
        sticking_point_pct=None,
        strength_profile=StrengthProfile.FLAT,
        rep_number=rep_number,
    )


def normalise_curve(
    positions: Sequence[float], forces: Sequence[float]
) -> Optional[np.ndarray]:
    """Resample ``forces`` at every whole percent of the positional range.

    Samples are stably ordered by position. For each target position the
    force is linearly interpolated between the last sample at or below the
    target and the first sample at or above it; an exact hit or two samples
    sharing a position yield the lower sample's force. Returns ``None`` when
    fewer than :data:`MIN_CURVE_SAMPLES` pairs are supplied or the range is
    below :data:`MIN_ROM_MM`.
    """

    pos = np.asarray(positions, dtype=float)
    force = np.asarray(forces, dtype=float)
    if pos.size < MIN_CURVE_SAMPLES or pos.size != force.size:
        return None

    order = np.argsort(pos, kind="stable")
    pos = pos[order]
    force = force[order]

    low = float(pos[0])
    rom = float(pos[-1]) - low
    if rom < MIN_ROM_MM:
        return None

    targets = low + rom * np.arange(CURVE_POINTS, dtype=float) / 100.0
    lower = np.searchsorted(pos, targets, side="right") - 1
    upper = np.searchsorted(pos, targets, side="left")
    lower = np.clip(lower, 0, pos.size - 1)
    upper = np.clip(upper, 0, pos.size - 1)

    spacing = pos[upper] - pos[lower]
    bracketed = (upper != lower) & (spacing != 0.0)
    safe_spacing = np.where(bracketed, spacing, 1.0)
    weight = np.where(bracketed, (targets - pos[lower]) / safe_spacing, 0.0)
    return force[lower] + weight * (force[upper] - force[lower])


def find_sticking_point(normalized_force: Sequence[float]) -> Optional[float]:
    """ROM percent of the weakest point, ignoring the outer 5% at each end."""

    curve = np.asarray(normalized_force, dtype=float)
    if curve.size < CURVE_POINTS:
        return None
    window = curve[STICKING_SEARCH_START : STICKING_SEARCH_END + 1]
    if not np.all(np.isfinite(window)):
        return None
    return float(STICKING_SEARCH_START + int(np.argmin(window)))


def classify_strength_profile(normalized_force: Sequence[float]) -> StrengthProfile:
    """Compare average force over the bottom, middle and top thirds."""

    curve = np.asarray(normalized_force, dtype=float)
    if curve.size < CURVE_POINTS:
        return StrengthProfile.FLAT

    bottom = float(np.mean(curve[0:34]))
    middle = float(np.mean(curve[34:67]))
    top = float(np.mean(curve[67:101]))

    if top > bottom * PROFILE_MARGIN:
        return StrengthProfile.ASCENDING
    if bottom > top * PROFILE_MARGIN:
        return StrengthProfile.DESCENDING
    if middle > bottom * PROFILE_MARGIN and middle > top * PROFILE_MARGIN:
        return StrengthProfile.BELL_SHAPED
    return StrengthProfile.FLAT


def _analyse(rep_number: int, curve: np.ndarray) -> ForceCurveResult:
    return ForceCurveResult(
        normalized_force=tuple(float(value) for value in curve),
        normalized_position_pct=_POSITION_PCT,
        sticking_point_pct=find_sticking_point(curve),
        strength_profile=classify_strength_profile(curve),
        rep_number=rep_number,
    )


def compute_force_curve(
    rep_number: int, concentric_samples: Sequence[MetricSample]
) -> ForceCurveResult:
    """Build the normalised force curve for one rep's concentric phase."""

    curve = normalise_curve(
        [sample.position for sample in concentric_samples],
        [sample.force for sample in concentric_samples],
    )
    if curve is None:
        return _empty_curve(rep_number)
    return _analyse(rep_number, curve)


def average_force_curve(
    results: Iterable[ForceCurveResult], *, rep_number: int = 0
) -> Optional[ForceCurveResult]:
    """Point-wise mean of every non-empty curve, re-profiled as a whole."""

    curves = [
        np.asarray(result.normalized_force, dtype=float)
        for result in results
        if len(result.normalized_force) == CURVE_POINTS
    ]
    if not curves:
        return None
    return _analyse(rep_number, np.mean(np.vstack(curves), axis=0))
