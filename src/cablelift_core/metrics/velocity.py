"""Concentric velocity helpers and zone classification."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from cablelift_core.models import VelocityZone
from cablelift_core.samples import MetricSample

__all__ = [
    "ZONE_LOWER_BOUNDS",
    "classify_zone",
    "mean_concentric_velocity",
    "peak_velocity",
    "sample_speeds",
]

# Closed lower bounds in mm/s, fastest first.
ZONE_LOWER_BOUNDS: tuple[tuple[VelocityZone, float], ...] = (
    (VelocityZone.EXPLOSIVE, 1000.0),
    (VelocityZone.FAST, 750.0),
    (VelocityZone.MODERATE, 500.0),
    (VelocityZone.SLOW, 250.0),
)


def classify_zone(mcv: float) -> VelocityZone:
    """Return the :class:`VelocityZone` containing ``mcv`` (mm/s)."""

    for zone, lower_bound in ZONE_LOWER_BOUNDS:
        if mcv >= lower_bound:
            return zone
    return VelocityZone.GRIND


def sample_speeds(samples: Sequence[MetricSample]) -> np.ndarray:
    """Per-sample speed of the faster cable."""

    if not samples:
        return np.zeros(0, dtype=float)
    velocities = np.asarray(
        [[sample.velocity_a, sample.velocity_b] for sample in samples],
        dtype=float,
    )
    return np.max(np.abs(velocities), axis=1)


def mean_concentric_velocity(samples: Sequence[MetricSample]) -> float:
    speeds = sample_speeds(samples)
    if speeds.size == 0:
        return 0.0
    return float(np.mean(speeds))


def peak_velocity(samples: Sequence[MetricSample]) -> float:
    speeds = sample_speeds(samples)
    if speeds.size == 0:
        return 0.0
    return float(np.max(speeds))
