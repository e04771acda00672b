"""Bundled resources distributed with cablelift."""
