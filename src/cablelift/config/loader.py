"""Resolve engine parameter overrides for a training session.

The engine table is a YAML document with two top-level keys::

    defaults:
      velocity_loss_threshold_percent: 20.0
    exercises:
      __default__: {}
      squat:
        velocity_loss_threshold_percent: 15.0

:func:`get_params` layers ``defaults``, ``exercises.__default__`` and the
entry for the requested exercise, later layers winning key by key.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping as MappingABC
from importlib import resources
from numbers import Real
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

__all__ = ["THRESHOLD_KEY", "exercise_key", "get_params", "load_engine_config"]


_ENGINE_RESOURCE_PACKAGE = "cablelift.resources.config"
_ENGINE_FILENAME = "engine.yaml"
_SHARED_OVERRIDES = "__default__"

THRESHOLD_KEY = "velocity_loss_threshold_percent"


def exercise_key(name: str) -> str:
    """Canonical exercise identifier: lower case, letters and digits only.

    ``"Bench Press"``, ``"bench-press"`` and ``"BENCH_PRESS"`` all map to
    ``"benchpress"``.
    """

    return "".join(char for char in str(name).lower() if char.isalnum())


def get_params(
    config: Mapping[str, Any],
    *,
    exercise: str | None = None,
) -> Mapping[str, Any]:
    """Return the read-only parameter set for ``exercise``.

    Raises :class:`ValueError` when the resolved velocity loss threshold is
    not a finite number.
    """

    layers: list[Any] = [config.get("defaults")]
    exercises = config.get("exercises")
    if isinstance(exercises, MappingABC):
        layers.append(_exercise_overrides(exercises, _SHARED_OVERRIDES))
        if exercise is not None:
            layers.append(_exercise_overrides(exercises, exercise))

    params: dict[str, Any] = {}
    for layer in layers:
        if isinstance(layer, MappingABC):
            params = _overlay(params, layer)

    if THRESHOLD_KEY in params:
        params[THRESHOLD_KEY] = _numeric_threshold(params[THRESHOLD_KEY], exercise)
    return MappingProxyType(params)


def load_engine_config(
    path: str | Path | None = None,
    *,
    search_paths: Iterable[str | Path] | None = None,
) -> Mapping[str, Any]:
    """Load the engine parameter table honouring site-specific fallbacks.

    Parameters
    ----------
    path:
        Absolute or relative path to a YAML file. When supplied the loader
        skips the search order and reads this file directly.
    search_paths:
        Optional iterable of directories or files to inspect. Entries pointing
        to directories are resolved against ``engine.yaml``. The first
        existing file wins; otherwise the packaged defaults are used.
    """

    if path is not None:
        source = Path(path).expanduser()
        if not source.is_file():
            raise FileNotFoundError(source)
    else:
        source = _first_site_table(search_paths or ())

    if source is None:
        packaged = resources.files(_ENGINE_RESOURCE_PACKAGE).joinpath(_ENGINE_FILENAME)
        return _parse_engine_table(packaged.read_text(encoding="utf-8"), str(packaged))
    return _parse_engine_table(source.read_text(encoding="utf-8"), str(source))


def _first_site_table(search_paths: Iterable[str | Path]) -> Path | None:
    for entry in search_paths:
        candidate = Path(entry).expanduser()
        if candidate.is_dir():
            candidate = candidate / _ENGINE_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _parse_engine_table(text: str, source: str) -> Mapping[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in engine configuration: {source}") from exc

    if data is None:
        return MappingProxyType({})
    if not isinstance(data, MappingABC):
        raise TypeError(f"Engine configuration in {source} must decode to a mapping")
    return MappingProxyType(_overlay({}, data))


def _overlay(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``base`` with ``override`` applied; nested tables merge."""

    merged = dict(base)
    for key, value in override.items():
        name = str(key)
        if isinstance(value, MappingABC):
            current = merged.get(name)
            merged[name] = _overlay(
                current if isinstance(current, MappingABC) else {}, value
            )
        else:
            merged[name] = value
    return merged


def _exercise_overrides(
    exercises: Mapping[str, Any], name: str
) -> Mapping[str, Any] | None:
    overrides = exercises.get(name)
    if isinstance(overrides, MappingABC):
        return overrides
    wanted = exercise_key(name)
    if not wanted:
        return None
    for raw_name, candidate in exercises.items():
        if isinstance(candidate, MappingABC) and exercise_key(raw_name) == wanted:
            return candidate
    return None


def _numeric_threshold(value: Any, exercise: str | None) -> float:
    scope = f"exercise {exercise!r}" if exercise is not None else "defaults"
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"{THRESHOLD_KEY} for {scope} must be a number, got {value!r}")
    threshold = float(value)
    if not math.isfinite(threshold):
        raise ValueError(f"{THRESHOLD_KEY} for {scope} must be finite, got {value!r}")
    return threshold
