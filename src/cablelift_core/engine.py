"""Per-set biomechanics engine combining every rep analyzer."""

from __future__ import annotations

import logging
from collections import Counter
from time import monotonic
from typing import Any, List, Mapping, Optional, Sequence

from cablelift_core.metrics.asymmetry import (
    asymmetry_percent,
    compute_asymmetry,
    dominant_side,
)
from cablelift_core.metrics.force_curve import average_force_curve, compute_force_curve
from cablelift_core.models import (
    BiomechanicsRepResult,
    BiomechanicsSetSummary,
    RepQualityScore,
    SetQualitySummary,
    StrengthProfile,
)
from cablelift_core.samples import MetricSample, RepMetricData
from cablelift_core.tracking.quality import RepQualityScorer
from cablelift_core.tracking.vbt import DEFAULT_VELOCITY_LOSS_THRESHOLD, VbtTracker

logger = logging.getLogger(__name__)

__all__ = ["BiomechanicsEngine"]


class BiomechanicsEngine:
    """Stateful analysis for one working set.

    One instance serves one workout session and is not thread-safe; callers
    serialise :meth:`process_rep`, :meth:`score_rep` and :meth:`reset`.
    Quality scoring is driven separately through :meth:`score_rep` because
    it needs per-phase rep data, but its state is owned here so that
    :meth:`reset` starts every analyzer on a fresh set together.
    """

    def __init__(
        self, velocity_loss_threshold: float = DEFAULT_VELOCITY_LOSS_THRESHOLD
    ) -> None:
        self._vbt = VbtTracker(velocity_loss_threshold)
        self._quality = RepQualityScorer()
        self._rep_results: List[BiomechanicsRepResult] = []
        self._latest: Optional[BiomechanicsRepResult] = None

    @classmethod
    def from_config(cls, params: Mapping[str, Any]) -> "BiomechanicsEngine":
        """Build an engine from a resolved parameter mapping."""

        threshold = params.get(
            "velocity_loss_threshold_percent", DEFAULT_VELOCITY_LOSS_THRESHOLD
        )
        return cls(velocity_loss_threshold=float(threshold))

    @property
    def velocity_loss_threshold(self) -> float:
        return self._vbt.velocity_loss_threshold

    @property
    def latest_rep_result(self) -> Optional[BiomechanicsRepResult]:
        """Result for the most recent rep, ``None`` at set start."""

        return self._latest

    @property
    def rep_results(self) -> Sequence[BiomechanicsRepResult]:
        return tuple(self._rep_results)

    def process_rep(
        self,
        rep_number: int,
        concentric_samples: Sequence[MetricSample],
        all_rep_samples: Sequence[MetricSample],
        timestamp: int,
    ) -> BiomechanicsRepResult:
        started = monotonic()
        velocity = self._vbt.process_rep(rep_number, concentric_samples)
        force_curve = compute_force_curve(rep_number, concentric_samples)
        asymmetry = compute_asymmetry(rep_number, all_rep_samples)

        result = BiomechanicsRepResult(
            velocity=velocity,
            force_curve=force_curve,
            asymmetry=asymmetry,
            rep_number=rep_number,
            timestamp=timestamp,
        )
        self._rep_results.append(result)
        self._latest = result

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Biomechanics rep processed",
                extra={
                    "rep_number": rep_number,
                    "concentric_samples": len(concentric_samples),
                    "rep_samples": len(all_rep_samples),
                    "strength_profile": force_curve.strength_profile.value,
                    "asymmetry_percent": asymmetry.asymmetry_percent,
                    "duration": monotonic() - started,
                },
            )
        return result

    def score_rep(self, rep_data: RepMetricData) -> RepQualityScore:
        return self._quality.score_rep(rep_data)

    def get_quality_summary(self) -> Optional[SetQualitySummary]:
        return self._quality.get_set_summary()

    def get_set_summary(self) -> Optional[BiomechanicsSetSummary]:
        """Aggregate every rep processed since the last reset."""

        vbt_summary = self._vbt.get_set_summary()
        if not self._rep_results or vbt_summary is None:
            return None

        results = self._rep_results
        avg_asymmetry = sum(r.asymmetry.asymmetry_percent for r in results) / len(
            results
        )
        total_load_a = sum(r.asymmetry.avg_load_a for r in results)
        total_load_b = sum(r.asymmetry.avg_load_b for r in results)
        overall_side = dominant_side(
            total_load_a,
            total_load_b,
            asymmetry_percent(total_load_a, total_load_b),
        )

        # Counter keeps first-seen order, so ties go to the earliest profile.
        profiles = Counter(r.force_curve.strength_profile for r in results)
        strength_profile = (
            profiles.most_common(1)[0][0] if profiles else StrengthProfile.FLAT
        )

        return BiomechanicsSetSummary(
            rep_results=tuple(results),
            avg_mcv=vbt_summary.avg_mcv,
            peak_velocity=vbt_summary.peak_velocity,
            total_velocity_loss_percent=vbt_summary.total_velocity_loss_percent,
            zone_distribution=vbt_summary.zone_distribution,
            avg_asymmetry_percent=avg_asymmetry,
            dominant_side=overall_side,
            strength_profile=strength_profile,
            avg_force_curve=average_force_curve(r.force_curve for r in results),
        )

    def reset(self) -> None:
        """Discard all per-set state ahead of a new set."""

        self._vbt.reset()
        self._quality.reset()
        self._rep_results.clear()
        self._latest = None
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Biomechanics engine reset")
