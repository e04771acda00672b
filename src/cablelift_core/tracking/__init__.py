"""Stateful trackers whose running baselines span a working set."""

from __future__ import annotations

from cablelift_core.tracking.quality import RepQualityScorer, quality_trend
from cablelift_core.tracking.running import RunningAverage
from cablelift_core.tracking.vbt import (
    DEFAULT_VELOCITY_LOSS_THRESHOLD,
    VbtTracker,
    estimate_reps_remaining,
    velocity_loss_percent,
)

__all__ = [
    "DEFAULT_VELOCITY_LOSS_THRESHOLD",
    "RepQualityScorer",
    "RunningAverage",
    "VbtTracker",
    "estimate_reps_remaining",
    "quality_trend",
    "velocity_loss_percent",
]
