"""Cable A/B load asymmetry analysis."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from cablelift_core.models import AsymmetryResult, DominantSide
from cablelift_core.samples import MetricSample

__all__ = [
    "BALANCED_THRESHOLD_PERCENT",
    "asymmetry_percent",
    "compute_asymmetry",
    "dominant_side",
]

# Imbalances strictly below this are treated as measurement noise.
BALANCED_THRESHOLD_PERCENT = 2.0


def asymmetry_percent(load_a: float, load_b: float) -> float:
    """Relative imbalance between two loads, clamped to ``[0, 100]``."""

    heavier = max(load_a, load_b)
    if heavier <= 0.0:
        return 0.0
    value = abs(load_a - load_b) * 100.0 / heavier
    return float(min(max(value, 0.0), 100.0))


def dominant_side(load_a: float, load_b: float, percent: float) -> DominantSide:
    if percent < BALANCED_THRESHOLD_PERCENT:
        return DominantSide.BALANCED
    if load_a > load_b:
        return DominantSide.A
    if load_b > load_a:
        return DominantSide.B
    return DominantSide.BALANCED


def compute_asymmetry(
    rep_number: int, samples: Sequence[MetricSample]
) -> AsymmetryResult:
    """Average each cable's load over ``samples`` and compare them."""

    if not samples:
        return AsymmetryResult(
            avg_load_a=0.0,
            avg_load_b=0.0,
            asymmetry_percent=0.0,
            dominant_side=DominantSide.BALANCED,
            rep_number=rep_number,
        )

    loads = np.asarray(
        [[sample.load_a, sample.load_b] for sample in samples], dtype=float
    )
    avg_load_a, avg_load_b = (float(value) for value in np.mean(loads, axis=0))
    percent = asymmetry_percent(avg_load_a, avg_load_b)
    return AsymmetryResult(
        avg_load_a=avg_load_a,
        avg_load_b=avg_load_b,
        asymmetry_percent=percent,
        dominant_side=dominant_side(avg_load_a, avg_load_b, percent),
        rep_number=rep_number,
    )
