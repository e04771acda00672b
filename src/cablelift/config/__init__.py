"""Engine configuration loading."""

from __future__ import annotations

from cablelift.config.loader import (
    THRESHOLD_KEY,
    exercise_key,
    get_params,
    load_engine_config,
)

__all__ = ["THRESHOLD_KEY", "exercise_key", "get_params", "load_engine_config"]
