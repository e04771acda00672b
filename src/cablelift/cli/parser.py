"""Argument parsing helpers for the cablelift CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from cablelift.exporters import exporters_registry
from cablelift.cli.workflows import handle_analyze


def _section(config: Mapping[str, Any], name: str) -> dict[str, Any]:
    raw = config.get(name, {})
    return dict(raw) if isinstance(raw, Mapping) else {}


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = _section(config, "logging")
    analyze_cfg = _section(config, "analyze")

    parser = argparse.ArgumentParser(
        prog="cablelift",
        description="Rep biomechanics for dual-cable strength machines",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding a [tool.cablelift] table.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyse a recorded capture rep by rep and summarise the set.",
    )
    analyze_parser.add_argument(
        "capture",
        type=Path,
        help="CSV or JSON-lines capture of the set.",
    )
    analyze_parser.add_argument(
        "--exercise",
        default=analyze_cfg.get("exercise"),
        help="Exercise whose overrides apply from the engine configuration.",
    )
    analyze_parser.add_argument(
        "--threshold",
        type=float,
        default=analyze_cfg.get("threshold"),
        help="Velocity loss percentage that ends the set (overrides configuration).",
    )
    analyze_parser.add_argument(
        "--format",
        choices=tuple(exporters_registry),
        default=analyze_cfg.get("format", "text"),
        help="Output format (default: text).",
    )
    engine_config_default = analyze_cfg.get("engine_config")
    analyze_parser.add_argument(
        "--engine-config",
        dest="engine_config",
        type=Path,
        default=Path(engine_config_default) if engine_config_default else None,
        help="YAML engine configuration overriding the packaged defaults.",
    )
    analyze_parser.set_defaults(handler=handle_analyze)

    return parser
