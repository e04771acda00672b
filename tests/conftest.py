from __future__ import annotations

import logging
import sys
from pathlib import Path
from textwrap import dedent
from typing import Iterator

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from cablelift.logging.config import LOGGER_NAMES  # noqa: E402


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


@pytest.fixture(autouse=True)
def _isolate_package_logging() -> Iterator[None]:
    """Drop handlers that ``setup_logging`` attached during a test."""

    yield
    for name in LOGGER_NAMES:
        target = logging.getLogger(name)
        for handler in list(target.handlers):
            if getattr(handler, "_cablelift_handler", False):
                target.removeHandler(handler)
                handler.close()
        target.setLevel(logging.NOTSET)


@pytest.fixture
def cli_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Working directory without a ``pyproject.toml`` or config override."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CABLELIFT_CONFIG", raising=False)
    return tmp_path
