"""Tooling around the :mod:`cablelift_core` rep biomechanics engine.

This package loads engine configuration, reads recorded sample captures,
renders set reports and exposes the ``cablelift`` command line interface.
The analysis itself lives in :mod:`cablelift_core`.
"""

from __future__ import annotations

from cablelift._version import __version__

__all__ = ["__version__"]
