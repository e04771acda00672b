"""Serialise analysed sessions into exportable payloads."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from cablelift.exporters.session import (
    build_session_payload,
    render_json,
    render_sparkline,
    render_text,
)

Exporter = Callable[[Mapping[str, Any]], str]

exporters_registry: Dict[str, Exporter] = {
    "json": render_json,
    "text": render_text,
}

__all__ = [
    "Exporter",
    "build_session_payload",
    "exporters_registry",
    "render_json",
    "render_sparkline",
    "render_text",
]
