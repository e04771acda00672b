"""Velocity-based training tracker for a single working set."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from cablelift_core.metrics.velocity import (
    classify_zone,
    mean_concentric_velocity,
    peak_velocity,
)
from cablelift_core.models import VbtSetSummary, VelocityResult
from cablelift_core.samples import MetricSample

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_VELOCITY_LOSS_THRESHOLD",
    "MAX_PROJECTED_REPS",
    "VbtState",
    "VbtTracker",
    "estimate_reps_remaining",
    "velocity_loss_percent",
]

DEFAULT_VELOCITY_LOSS_THRESHOLD = 20.0
MAX_PROJECTED_REPS = 99


def velocity_loss_percent(baseline_mcv: float, mcv: float) -> Optional[float]:
    """Percentage drop from ``baseline_mcv``; faster reps clamp to zero.

    ``None`` when the baseline is not positive.
    """

    if baseline_mcv <= 0.0:
        return None
    loss = (baseline_mcv - mcv) * 100.0 / baseline_mcv
    return min(max(loss, 0.0), 100.0)


def estimate_reps_remaining(
    rep_number: int, loss_percent: Optional[float], threshold_percent: float
) -> Optional[int]:
    """Linear projection of reps left before ``threshold_percent`` is hit.

    The decay rate is the loss accumulated since the first rep divided by
    the number of reps performed after it.
    """

    if loss_percent is None:
        return None
    reps_since_baseline = rep_number - 1
    if reps_since_baseline <= 0:
        return None
    decay_rate = loss_percent / reps_since_baseline
    if decay_rate <= 0.0:
        return None
    projected = math.ceil((threshold_percent - loss_percent) / decay_rate)
    return int(min(max(projected, 0), MAX_PROJECTED_REPS))


@dataclass
class VbtState:
    """Mutable per-set state owned by one :class:`VbtTracker`."""

    first_rep_mcv: Optional[float] = None
    results: List[VelocityResult] = field(default_factory=list)

    def clear(self) -> None:
        self.first_rep_mcv = None
        self.results.clear()


class VbtTracker:
    """Track mean concentric velocity and fatigue across one set.

    The first rep processed after construction or :meth:`reset` becomes the
    baseline regardless of its ``rep_number``.
    """

    def __init__(
        self, velocity_loss_threshold: float = DEFAULT_VELOCITY_LOSS_THRESHOLD
    ) -> None:
        threshold = float(velocity_loss_threshold)
        if not math.isfinite(threshold) or threshold <= 0.0:
            raise ValueError(
                "velocity_loss_threshold must be a positive finite percentage"
            )
        self.velocity_loss_threshold = threshold
        self._state = VbtState()

    @property
    def first_rep_mcv(self) -> Optional[float]:
        return self._state.first_rep_mcv

    @property
    def rep_count(self) -> int:
        return len(self._state.results)

    def process_rep(
        self, rep_number: int, concentric_samples: Sequence[MetricSample]
    ) -> VelocityResult:
        mcv = mean_concentric_velocity(concentric_samples)
        peak = peak_velocity(concentric_samples)
        zone = classify_zone(mcv)

        if self._state.first_rep_mcv is None:
            self._state.first_rep_mcv = mcv
            loss: Optional[float] = None
            remaining: Optional[int] = None
            should_stop = False
        else:
            loss = velocity_loss_percent(self._state.first_rep_mcv, mcv)
            remaining = estimate_reps_remaining(
                rep_number, loss, self.velocity_loss_threshold
            )
            should_stop = loss is not None and loss >= self.velocity_loss_threshold

        result = VelocityResult(
            mean_concentric_velocity=mcv,
            peak_velocity=peak,
            zone=zone,
            velocity_loss_percent=loss,
            estimated_reps_remaining=remaining,
            should_stop_set=should_stop,
            rep_number=rep_number,
        )
        previously_stopped = any(prior.should_stop_set for prior in self._state.results)
        self._state.results.append(result)

        if should_stop and not previously_stopped:
            logger.info(
                "Velocity loss threshold reached",
                extra={
                    "rep_number": rep_number,
                    "velocity_loss_percent": loss,
                    "threshold_percent": self.velocity_loss_threshold,
                },
            )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Processed rep velocity",
                extra={
                    "rep_number": rep_number,
                    "sample_count": len(concentric_samples),
                    "mcv": mcv,
                    "zone": zone.value,
                },
            )
        return result

    def get_set_summary(self) -> Optional[VbtSetSummary]:
        results = self._state.results
        if not results:
            return None
        velocities = [result.mean_concentric_velocity for result in results]
        total_loss = (
            velocity_loss_percent(velocities[0], velocities[-1])
            if len(velocities) >= 2
            else None
        )
        return VbtSetSummary(
            avg_mcv=sum(velocities) / len(velocities),
            peak_velocity=max(result.peak_velocity for result in results),
            total_velocity_loss_percent=total_loss,
            zone_distribution=dict(Counter(result.zone for result in results)),
            rep_count=len(results),
        )

    def reset(self) -> None:
        self._state.clear()
