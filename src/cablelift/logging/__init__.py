"""Logging utilities for cablelift."""

from cablelift.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
