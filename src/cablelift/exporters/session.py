"""Session payload assembly and rendering."""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from cablelift_core.models import (
    BiomechanicsRepResult,
    BiomechanicsSetSummary,
    RepQualityScore,
    SetQualitySummary,
)

__all__ = [
    "build_session_payload",
    "render_json",
    "render_sparkline",
    "render_text",
]

SPARKLINE_BLOCKS: Sequence[str] = "▁▂▃▄▅▆▇█"
_SPARKLINE_STRIDE = 5


def build_session_payload(
    rep_results: Sequence[BiomechanicsRepResult],
    quality_scores: Sequence[RepQualityScore],
    set_summary: Optional[BiomechanicsSetSummary],
    quality_summary: Optional[SetQualitySummary],
    *,
    exercise: str | None = None,
    velocity_loss_threshold: float | None = None,
    source: str | None = None,
) -> dict[str, Any]:
    """Combine per-rep results and both set summaries into plain data.

    Quality scores are attached to the rep result sharing their rep number;
    reps that were not scored carry ``None``.
    """

    scores_by_rep = {score.rep_number: score for score in quality_scores}
    reps: List[dict[str, Any]] = []
    for result in rep_results:
        entry = dict(result.as_dict())
        score = scores_by_rep.get(result.rep_number)
        entry["quality"] = dict(score.as_dict()) if score is not None else None
        reps.append(entry)

    return {
        "source": source,
        "exercise": exercise,
        "velocity_loss_threshold_percent": velocity_loss_threshold,
        "reps": reps,
        "set_summary": dict(set_summary.as_dict()) if set_summary is not None else None,
        "quality_summary": (
            dict(quality_summary.as_dict()) if quality_summary is not None else None
        ),
    }


def render_json(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def render_sparkline(values: Iterable[float]) -> str:
    """Render ``values`` as Unicode block characters scaled to their range."""

    data = [float(value) for value in values]
    if not data:
        return ""
    minimum = min(data)
    maximum = max(data)
    if maximum == minimum:
        return SPARKLINE_BLOCKS[0] * len(data)
    span = maximum - minimum
    last = len(SPARKLINE_BLOCKS) - 1
    return "".join(
        SPARKLINE_BLOCKS[int(round((value - minimum) / span * last))] for value in data
    )


def _fmt(value: Any, spec: str = ".1f", suffix: str = "") -> str:
    if value is None:
        return "n/a"
    return f"{value:{spec}}{suffix}"


def _rep_line(rep: Mapping[str, Any]) -> str:
    velocity = rep["velocity"]
    asymmetry = rep["asymmetry"]
    force_curve = rep["force_curve"]
    quality = rep.get("quality")
    parts = [
        f"Rep {rep['rep_number']:>2}",
        f"MCV {_fmt(velocity['mean_concentric_velocity'], '.0f', ' mm/s')}",
        f"{velocity['zone']}",
        f"loss {_fmt(velocity['velocity_loss_percent'], '.1f', '%')}",
        f"asym {_fmt(asymmetry['asymmetry_percent'], '.1f', '%')} {asymmetry['dominant_side']}",
        f"{force_curve['strength_profile']}",
    ]
    if quality is not None:
        parts.append(f"quality {quality['composite']}")
    if velocity["should_stop_set"]:
        parts.append("STOP")
    return " | ".join(parts)


def render_text(payload: Mapping[str, Any]) -> str:
    """Human-readable session report."""

    lines: List[str] = []
    header = "Cable session"
    if payload.get("exercise"):
        header += f" - {payload['exercise']}"
    lines.append(header)
    threshold = payload.get("velocity_loss_threshold_percent")
    if threshold is not None:
        lines.append(f"Velocity loss threshold: {threshold:.1f}%")

    reps = payload.get("reps") or []
    if not reps:
        lines.append("No reps recorded.")
        return "\n".join(lines)

    lines.append("")
    lines.extend(_rep_line(rep) for rep in reps)

    summary = payload.get("set_summary")
    if summary:
        lines.append("")
        lines.append(
            f"Set: {summary['rep_count']} reps, avg MCV "
            f"{_fmt(summary['avg_mcv'], '.0f', ' mm/s')}, peak "
            f"{_fmt(summary['peak_velocity'], '.0f', ' mm/s')}, total loss "
            f"{_fmt(summary['total_velocity_loss_percent'], '.1f', '%')}"
        )
        zones = ", ".join(
            f"{zone} {count}" for zone, count in summary["zone_distribution"].items()
        )
        lines.append(f"Zones: {zones}")
        lines.append(
            f"Asymmetry: {_fmt(summary['avg_asymmetry_percent'], '.1f', '%')} "
            f"({summary['dominant_side']})"
        )
        lines.append(f"Strength profile: {summary['strength_profile']}")
        curve = summary.get("avg_force_curve")
        if curve and curve["normalized_force"]:
            sampled = curve["normalized_force"][::_SPARKLINE_STRIDE]
            lines.append(f"Force curve: {render_sparkline(sampled)}")
            sticking = curve.get("sticking_point_pct")
            lines.append(f"Sticking point: {_fmt(sticking, '.0f', '% ROM')}")

    quality = payload.get("quality_summary")
    if quality:
        lines.append(
            f"Quality: avg {quality['average_score']}, best {quality['best_score']} "
            f"(rep {quality['best_rep_number']}), worst {quality['worst_score']} "
            f"(rep {quality['worst_rep_number']}), trend {quality['trend']}"
        )
    return "\n".join(lines)
