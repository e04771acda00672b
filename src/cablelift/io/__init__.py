"""Readers for recorded cable sample captures."""

from __future__ import annotations

from cablelift.io.capture import (
    CAPTURE_COLUMNS,
    CaptureFormatError,
    RepCapture,
    read_capture,
)

__all__ = ["CAPTURE_COLUMNS", "CaptureFormatError", "RepCapture", "read_capture"]
