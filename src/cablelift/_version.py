"""Utilities for retrieving and validating the package version."""

from __future__ import annotations

import os
import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

__all__ = ["__version__"]

_PACKAGE_NAME = "cablelift"
_RELEASE_ENV_VAR = "PYTHON_SEMANTIC_RELEASE_VERSION"


def _version_from_sources() -> str:
    """Return the version parsed from repository sources.

    This is a fallback mechanism for development environments where the
    distribution metadata has not been generated yet.
    """

    candidates = []
    parents = Path(__file__).resolve().parents
    if len(parents) >= 2:
        candidates.append(parents[1] / "CHANGELOG.md")
    if len(parents) >= 3:
        candidates.append(parents[2] / "CHANGELOG.md")

    for changelog in candidates:
        if not changelog.is_file():
            continue
        for line in changelog.read_text(encoding="utf-8").splitlines():
            match = re.match(r"^## v(?P<version>\d+\.\d+\.\d+)\b", line)
            if match:
                return match.group("version")

    raise RuntimeError(
        "Unable to determine the 'cablelift' version from package metadata or "
        "repository sources."
    )


def _load_version() -> str:
    """Return the validated package version.

    A semantic-release override takes precedence over the installed
    distribution metadata. The result must follow ``MAJOR.MINOR.PATCH``.
    """

    raw_version = os.environ.get(_RELEASE_ENV_VAR)
    if not raw_version:
        try:
            raw_version = metadata.version(_PACKAGE_NAME)
        except metadata.PackageNotFoundError:
            raw_version = _version_from_sources()

    try:
        parsed = Version(raw_version)
    except InvalidVersion as exc:
        raise RuntimeError(
            "Invalid version string for 'cablelift': "
            f"{raw_version!r}. Expected a semantic version."
        ) from exc

    if len(parsed.release) != 3:
        raise RuntimeError(
            "The 'cablelift' version must follow the MAJOR.MINOR.PATCH format. "
            f"Found: {raw_version!r}."
        )

    return raw_version


__version__ = _load_version()
