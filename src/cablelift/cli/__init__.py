"""Command line interface for cablelift."""

from cablelift.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
