"""Composite per-rep quality scoring.

Each rep is scored out of 100 from four components:

* range-of-motion consistency (30 points),
* concentric velocity consistency (25 points),
* eccentric control, i.e. lowering time relative to lifting time (25 points),
* movement smoothness of the concentric velocity trace (20 points).

ROM and velocity are judged against running means of the reps already scored
in the set, so the scorer is stateful and must be reset between sets.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from cablelift_core.models import QualityTrend, RepQualityScore, SetQualitySummary
from cablelift_core.samples import RepMetricData
from cablelift_core.tracking.running import RunningAverage

logger = logging.getLogger(__name__)

__all__ = [
    "ECCENTRIC_MAX_POINTS",
    "IDEAL_ECCENTRIC_RATIO",
    "ROM_MAX_POINTS",
    "RepQualityScorer",
    "SMOOTHNESS_MAX_POINTS",
    "TREND_MARGIN",
    "VELOCITY_MAX_POINTS",
    "consistency_score",
    "eccentric_control_score",
    "quality_trend",
    "smoothness_score",
]

ROM_MAX_POINTS = 30.0
VELOCITY_MAX_POINTS = 25.0
ECCENTRIC_MAX_POINTS = 25.0
SMOOTHNESS_MAX_POINTS = 20.0

# Score reaches zero once the deviation from baseline hits one third.
DEVIATION_MULTIPLIER = 3.0
IDEAL_ECCENTRIC_RATIO = 2.0
SMOOTHNESS_CV_MULTIPLIER = 2.0
SMOOTHNESS_NEUTRAL = 10.0
TREND_MARGIN = 5.0


def _clamp(value: float, upper: float) -> float:
    return float(min(max(value, 0.0), upper))


def consistency_score(actual: float, baseline: float, max_points: float) -> float:
    """Linear penalty for deviating from ``baseline``.

    A non-positive baseline cannot express a relative deviation and awards
    the full ``max_points``.
    """

    if baseline <= 0.0:
        return max_points
    deviation = abs(actual - baseline) / baseline
    return _clamp(max_points * (1.0 - DEVIATION_MULTIPLIER * deviation), max_points)


def eccentric_control_score(eccentric_ms: float, concentric_ms: float) -> float:
    """Symmetric ratio penalty around a 2:1 eccentric/concentric tempo."""

    if concentric_ms <= 0 or eccentric_ms <= 0:
        return 0.0
    ratio = float(eccentric_ms) / float(concentric_ms)
    score = (
        min(ratio, IDEAL_ECCENTRIC_RATIO)
        / max(ratio, IDEAL_ECCENTRIC_RATIO)
        * ECCENTRIC_MAX_POINTS
    )
    return _clamp(score, ECCENTRIC_MAX_POINTS)


def smoothness_score(velocities: Sequence[float]) -> float:
    """Map the coefficient of variation of ``velocities`` onto 0-20 points.

    A constant trace scores 20; a CV of 0.5 or more scores 0. Empty traces
    and traces averaging zero have no usable dispersion and score the
    neutral 10.
    """

    values = np.abs(np.asarray(velocities, dtype=float))
    if values.size == 0:
        return SMOOTHNESS_NEUTRAL
    mean = float(np.mean(values))
    if mean <= 0.0:
        return SMOOTHNESS_NEUTRAL
    cv = float(np.std(values)) / mean
    return _clamp(
        SMOOTHNESS_MAX_POINTS * (1.0 - cv * SMOOTHNESS_CV_MULTIPLIER),
        SMOOTHNESS_MAX_POINTS,
    )


def quality_trend(composites: Sequence[float]) -> QualityTrend:
    """Compare the mean composite of the second half against the first."""

    if len(composites) < 2:
        return QualityTrend.STABLE
    mid = len(composites) // 2
    first_half = float(np.mean(composites[:mid]))
    second_half = float(np.mean(composites[mid:]))
    if second_half > first_half + TREND_MARGIN:
        return QualityTrend.IMPROVING
    if second_half < first_half - TREND_MARGIN:
        return QualityTrend.DECLINING
    return QualityTrend.STABLE


class RepQualityScorer:
    """Stateful scorer accumulating ROM and velocity baselines for a set."""

    def __init__(self) -> None:
        self._rom_average = RunningAverage()
        self._velocity_average = RunningAverage()
        self._scores: List[RepQualityScore] = []

    @property
    def scores(self) -> Sequence[RepQualityScore]:
        return tuple(self._scores)

    def score_rep(self, rep_data: RepMetricData) -> RepQualityScore:
        """Score ``rep_data`` against the reps scored so far, then fold it in."""

        is_first_rep = self._rom_average.count == 0
        if is_first_rep:
            rom = ROM_MAX_POINTS
            velocity = VELOCITY_MAX_POINTS
        else:
            rom = consistency_score(
                rep_data.range_of_motion_mm,
                self._rom_average.average(),
                ROM_MAX_POINTS,
            )
            velocity = consistency_score(
                rep_data.avg_velocity_concentric,
                self._velocity_average.average(),
                VELOCITY_MAX_POINTS,
            )
        eccentric = eccentric_control_score(
            rep_data.eccentric_duration_ms, rep_data.concentric_duration_ms
        )
        smoothness = smoothness_score(rep_data.concentric_velocities)

        self._rom_average.add(rep_data.range_of_motion_mm)
        self._velocity_average.add(rep_data.avg_velocity_concentric)

        composite = int(min(max(round(rom + velocity + eccentric + smoothness), 0), 100))
        score = RepQualityScore(
            composite=composite,
            rom_score=rom,
            velocity_score=velocity,
            eccentric_control_score=eccentric,
            smoothness_score=smoothness,
            rep_number=rep_data.rep_number,
        )
        self._scores.append(score)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Scored rep quality",
                extra={
                    "rep_number": rep_data.rep_number,
                    "composite": composite,
                    "first_rep": is_first_rep,
                },
            )
        return score

    def get_trend(self) -> QualityTrend:
        return quality_trend([score.composite for score in self._scores])

    def get_set_summary(self) -> Optional[SetQualitySummary]:
        if not self._scores:
            return None
        # max/min keep the earliest rep on ties.
        best = max(self._scores, key=lambda score: score.composite)
        worst = min(self._scores, key=lambda score: score.composite)
        average = round(
            float(np.mean([score.composite for score in self._scores]))
        )
        return SetQualitySummary(
            average_score=int(average),
            best_score=best.composite,
            worst_score=worst.composite,
            best_rep_number=best.rep_number,
            worst_rep_number=worst.rep_number,
            trend=self.get_trend(),
            rep_scores=tuple(self._scores),
        )

    def reset(self) -> None:
        self._rom_average.reset()
        self._velocity_average.reset()
        self._scores.clear()
