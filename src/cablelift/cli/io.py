"""Configuration and capture loading for the cablelift CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from cablelift.cli.errors import CliError
from cablelift.configuration import (
    ProjectConfigError,
    iter_project_files,
    load_project_config,
)
from cablelift.io import CaptureFormatError, RepCapture, read_capture

__all__ = ["CONFIG_ENV_VAR", "load_captures", "load_cli_config"]

CONFIG_ENV_VAR = "CABLELIFT_CONFIG"


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from the ``[tool.cablelift]`` table.

    Lookup order: ``path``, the :data:`CONFIG_ENV_VAR` environment variable,
    then ``pyproject.toml`` in the working directory. The first
    ``pyproject.toml`` holding a ``[tool.cablelift]`` table wins; a
    malformed file is a usage error.
    """

    bases: List[Path] = []
    if path is not None:
        bases.append(path)
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    for project_file in iter_project_files(bases):
        try:
            loaded = load_project_config(project_file)
        except ProjectConfigError as exc:
            raise CliError(
                f"Cannot read CLI configuration {exc}",
                category="usage",
                context={"path": str(exc.path)},
            ) from exc
        if loaded is None:
            continue
        payload, resolved = loaded
        payload["_config_path"] = str(resolved)
        return payload

    return {"_config_path": None}


def load_captures(source: Path) -> List[RepCapture]:
    if not source.exists():
        raise CliError(
            f"Capture {source} does not exist",
            category="not_found",
            context={"path": str(source)},
        )
    try:
        return read_capture(source)
    except CaptureFormatError as exc:
        raise CliError(
            f"Cannot read capture {source}: {exc}",
            category="usage",
            context={"path": str(source)},
        ) from exc
    except OSError as exc:
        raise CliError(
            f"Cannot open capture {source}: {exc}",
            category="io",
            context={"path": str(source)},
        ) from exc
