"""Sample records emitted by the dual-cable acquisition backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

__all__ = ["MetricSample", "RepMetricData"]


@dataclass(frozen=True, slots=True)
class MetricSample:
    """Single timestamped sample covering both cables.

    Positions are expressed in millimetres, loads in the machine's force
    units and velocities in mm/s (signed, the sign follows cable direction).
    """

    timestamp_ms: int
    load_a: float
    load_b: float
    position_a: float
    position_b: float
    velocity_a: float
    velocity_b: float

    @property
    def position(self) -> float:
        """Return the leading cable position."""

        return max(self.position_a, self.position_b)

    @property
    def force(self) -> float:
        """Return the combined load of both cables."""

        return self.load_a + self.load_b

    @property
    def speed(self) -> float:
        """Return the faster cable's absolute velocity."""

        return max(abs(self.velocity_a), abs(self.velocity_b))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "MetricSample":
        return cls(
            timestamp_ms=int(payload["timestamp_ms"]),
            load_a=float(payload["load_a"]),
            load_b=float(payload["load_b"]),
            position_a=float(payload["position_a"]),
            position_b=float(payload["position_b"]),
            velocity_a=float(payload["velocity_a"]),
            velocity_b=float(payload["velocity_b"]),
        )


def _column(samples: Sequence[MetricSample], attribute: str) -> tuple[float, ...]:
    return tuple(float(getattr(sample, attribute)) for sample in samples)


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def _peak(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.max(np.asarray(values, dtype=float)))


def _duration_ms(samples: Sequence[MetricSample]) -> int:
    if len(samples) < 2:
        return 0
    return int(samples[-1].timestamp_ms - samples[0].timestamp_ms)


@dataclass(frozen=True, slots=True)
class RepMetricData:
    """Per-rep record split by movement phase.

    The quality scorer only reads the range of motion, the average concentric
    velocity, both phase durations and the concentric velocity series; the
    remaining fields describe the rep for downstream consumers.
    """

    rep_number: int
    concentric_duration_ms: int
    eccentric_duration_ms: int
    range_of_motion_mm: float
    avg_velocity_concentric: float
    concentric_velocities: tuple[float, ...] = ()
    is_warmup: bool = False
    start_timestamp: int = 0
    end_timestamp: int = 0
    duration_ms: int = 0
    concentric_positions: tuple[float, ...] = ()
    concentric_loads_a: tuple[float, ...] = ()
    concentric_loads_b: tuple[float, ...] = ()
    concentric_timestamps: tuple[int, ...] = ()
    eccentric_positions: tuple[float, ...] = ()
    eccentric_loads_a: tuple[float, ...] = ()
    eccentric_loads_b: tuple[float, ...] = ()
    eccentric_velocities: tuple[float, ...] = ()
    eccentric_timestamps: tuple[int, ...] = ()
    peak_force_a: float = 0.0
    peak_force_b: float = 0.0
    avg_force_concentric_a: float = 0.0
    avg_force_concentric_b: float = 0.0
    avg_force_eccentric_a: float = 0.0
    avg_force_eccentric_b: float = 0.0
    peak_velocity: float = 0.0
    avg_velocity_eccentric: float = 0.0
    peak_power_watts: float = 0.0
    avg_power_watts: float = 0.0

    @classmethod
    def from_samples(
        cls,
        rep_number: int,
        concentric: Sequence[MetricSample],
        eccentric: Sequence[MetricSample] = (),
        *,
        is_warmup: bool = False,
    ) -> "RepMetricData":
        """Derive the per-rep record from one rep's phase sample lists."""

        concentric = list(concentric)
        eccentric = list(eccentric)
        every = concentric + eccentric

        concentric_positions = tuple(sample.position for sample in concentric)
        concentric_speeds = tuple(sample.speed for sample in concentric)
        eccentric_speeds = tuple(sample.speed for sample in eccentric)
        range_of_motion = (
            max(concentric_positions) - min(concentric_positions)
            if concentric_positions
            else 0.0
        )

        # Watts when loads are reported in newtons; speed is mm/s.
        powers = tuple(
            sample.force * sample.speed / 1000.0 for sample in concentric
        )
        timestamps = [sample.timestamp_ms for sample in every]

        return cls(
            rep_number=rep_number,
            is_warmup=is_warmup,
            start_timestamp=min(timestamps) if timestamps else 0,
            end_timestamp=max(timestamps) if timestamps else 0,
            duration_ms=(max(timestamps) - min(timestamps)) if timestamps else 0,
            concentric_duration_ms=_duration_ms(concentric),
            concentric_positions=concentric_positions,
            concentric_loads_a=_column(concentric, "load_a"),
            concentric_loads_b=_column(concentric, "load_b"),
            concentric_velocities=concentric_speeds,
            concentric_timestamps=tuple(s.timestamp_ms for s in concentric),
            eccentric_duration_ms=_duration_ms(eccentric),
            eccentric_positions=tuple(sample.position for sample in eccentric),
            eccentric_loads_a=_column(eccentric, "load_a"),
            eccentric_loads_b=_column(eccentric, "load_b"),
            eccentric_velocities=eccentric_speeds,
            eccentric_timestamps=tuple(s.timestamp_ms for s in eccentric),
            peak_force_a=_peak(_column(every, "load_a")),
            peak_force_b=_peak(_column(every, "load_b")),
            avg_force_concentric_a=_mean(_column(concentric, "load_a")),
            avg_force_concentric_b=_mean(_column(concentric, "load_b")),
            avg_force_eccentric_a=_mean(_column(eccentric, "load_a")),
            avg_force_eccentric_b=_mean(_column(eccentric, "load_b")),
            peak_velocity=_peak(concentric_speeds),
            avg_velocity_concentric=_mean(concentric_speeds),
            avg_velocity_eccentric=_mean(eccentric_speeds),
            range_of_motion_mm=float(range_of_motion),
            peak_power_watts=_peak(powers),
            avg_power_watts=_mean(powers),
        )
