"""Read the ``[tool.cablelift]`` table from ``pyproject.toml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore

__all__ = [
    "PROJECT_FILENAME",
    "ProjectConfigError",
    "iter_project_files",
    "load_project_config",
]

PROJECT_FILENAME = "pyproject.toml"
TOOL_SECTION = "cablelift"
# Sub-tables the CLI reads; each must be a TOML table when present.
KNOWN_TABLES = ("logging", "analyze")


class ProjectConfigError(ValueError):
    """Raised when ``pyproject.toml`` cannot provide CLI defaults."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


def _project_file(candidate: Path) -> Path | None:
    candidate = candidate.expanduser()
    if candidate.name == PROJECT_FILENAME:
        return candidate.resolve(strict=False)
    if candidate.suffix:
        return None
    return (candidate / PROJECT_FILENAME).resolve(strict=False)


def iter_project_files(bases: Iterable[Path]) -> Iterator[Path]:
    """Yield each distinct existing ``pyproject.toml`` among ``bases``.

    Each base may be the file itself or the directory holding it. Bases with
    any other suffix are skipped.
    """

    seen: set[Path] = set()
    for base in bases:
        candidate = _project_file(base)
        if candidate is None or candidate in seen or not candidate.is_file():
            continue
        seen.add(candidate)
        yield candidate


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load the ``[tool.cablelift]`` section from ``pyproject.toml``.

    ``path`` may point at the file itself or at the directory holding it.
    Returns ``None`` when the file or the section is missing and raises
    :class:`ProjectConfigError` when the file is not valid TOML or a known
    sub-table has the wrong shape.
    """

    project_file = _project_file(path)
    if project_file is None or not project_file.is_file():
        return None

    with project_file.open("rb") as handle:
        try:
            document = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ProjectConfigError(project_file, f"invalid TOML ({exc})") from exc

    tool = document.get("tool")
    section = tool.get(TOOL_SECTION) if isinstance(tool, dict) else None
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ProjectConfigError(project_file, f"[tool.{TOOL_SECTION}] must be a table")
    for name in KNOWN_TABLES:
        table = section.get(name)
        if table is not None and not isinstance(table, dict):
            raise ProjectConfigError(
                project_file, f"[tool.{TOOL_SECTION}.{name}] must be a table"
            )
    return dict(section), project_file
