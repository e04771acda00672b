from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from cablelift.logging import JsonFormatter, setup_logging


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf8").splitlines()


def test_json_output_includes_structured_extras(tmp_path: Path) -> None:
    destination = tmp_path / "logs" / "session.log"
    handler = setup_logging({"logging": {"level": "debug", "output": str(destination), "format": "json"}})

    logging.getLogger("cablelift_core.tracking.vbt").debug(
        "Processed rep velocity", extra={"rep_number": 3, "zone": "FAST"}
    )
    handler.flush()

    (line,) = _read_lines(destination)
    entry = json.loads(line)
    assert entry["message"] == "Processed rep velocity"
    assert entry["level"] == "debug"
    assert entry["logger"] == "cablelift_core.tracking.vbt"
    assert entry["rep_number"] == 3
    assert entry["zone"] == "FAST"


def test_text_output_and_level_filter(tmp_path: Path) -> None:
    destination = tmp_path / "session.log"
    handler = setup_logging({"logging": {"level": "warning", "output": str(destination), "format": "text"}})

    logger = logging.getLogger("cablelift.cli")
    logger.info("hidden")
    logger.warning("shown")
    handler.flush()

    (line,) = _read_lines(destination)
    assert "WARNING cablelift.cli: shown" in line


def test_repeated_setup_replaces_handler(tmp_path: Path) -> None:
    config = {"logging": {"output": str(tmp_path / "a.log")}}

    setup_logging(config)
    setup_logging(config)

    handlers = [
        handler
        for handler in logging.getLogger("cablelift").handlers
        if getattr(handler, "_cablelift_handler", False)
    ]
    assert len(handlers) == 1


@pytest.mark.parametrize(
    "logging_cfg",
    [{"level": "chatty"}, {"format": "xml"}],
    ids=["level", "format"],
)
def test_invalid_settings_rejected(logging_cfg: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        setup_logging({"logging": logging_cfg})


def test_formatter_serialises_exceptions() -> None:
    try:
        raise RuntimeError("kaput")
    except RuntimeError:
        record = logging.getLogger("cablelift").makeRecord(
            "cablelift", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    entry = json.loads(JsonFormatter().format(record))

    assert entry["message"] == "failed"
    assert "RuntimeError: kaput" in entry["exc_info"]
