"""Command handlers for the cablelift CLI."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Mapping

from cablelift.cli.errors import CliError
from cablelift.cli.io import load_captures
from cablelift.config import THRESHOLD_KEY, get_params, load_engine_config
from cablelift.exporters import build_session_payload, exporters_registry
from cablelift_core import BiomechanicsEngine, RepMetricData

logger = logging.getLogger(__name__)

__all__ = ["build_engine", "handle_analyze"]


def build_engine(
    *,
    engine_config: Path | None,
    exercise: str | None,
    threshold: float | None,
) -> BiomechanicsEngine:
    """Resolve engine parameters and construct a :class:`BiomechanicsEngine`."""

    try:
        table = load_engine_config(engine_config)
    except FileNotFoundError as exc:
        raise CliError(
            f"Engine configuration {engine_config} does not exist",
            category="not_found",
            context={"path": str(engine_config)},
        ) from exc
    except (TypeError, ValueError) as exc:
        raise CliError(
            str(exc),
            category="usage",
            context={"path": str(engine_config) if engine_config else None},
        ) from exc

    try:
        params = dict(get_params(table, exercise=exercise))
        if threshold is not None:
            params[THRESHOLD_KEY] = threshold
        return BiomechanicsEngine.from_config(params)
    except (TypeError, ValueError) as exc:
        raise CliError(
            f"Invalid velocity loss threshold: {exc}",
            category="usage",
            context={"exercise": exercise, "threshold": threshold},
        ) from exc


def handle_analyze(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    capture_path = Path(namespace.capture)
    captures = load_captures(capture_path)
    engine = build_engine(
        engine_config=namespace.engine_config,
        exercise=namespace.exercise,
        threshold=namespace.threshold,
    )

    scores = []
    for capture in captures:
        engine.process_rep(
            capture.rep_number,
            capture.concentric,
            capture.all_samples,
            capture.timestamp,
        )
        rep_data = RepMetricData.from_samples(
            capture.rep_number, capture.concentric, capture.eccentric
        )
        scores.append(engine.score_rep(rep_data))

    payload = build_session_payload(
        engine.rep_results,
        scores,
        engine.get_set_summary(),
        engine.get_quality_summary(),
        exercise=namespace.exercise,
        velocity_loss_threshold=engine.velocity_loss_threshold,
        source=str(capture_path),
    )
    logger.info(
        "Capture analysed",
        extra={
            "event": "analyze.completed",
            "path": str(capture_path),
            "reps": len(captures),
            "exercise": namespace.exercise,
        },
    )
    return exporters_registry[namespace.format](payload)
