"""Recorded sample captures grouped into reps.

A capture is a flat table of :class:`~cablelift_core.samples.MetricSample`
rows, each tagged with the rep it belongs to and its movement phase. Two
encodings are accepted: CSV with a header row and JSON lines with one
object per sample. Both carry the columns listed in :data:`CAPTURE_COLUMNS`.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, TextIO, Tuple

from cablelift_core.samples import MetricSample

__all__ = [
    "CAPTURE_COLUMNS",
    "CaptureFormatError",
    "PHASES",
    "RepCapture",
    "read_capture",
]

CAPTURE_COLUMNS: tuple[str, ...] = (
    "timestamp_ms",
    "rep",
    "phase",
    "load_a",
    "load_b",
    "position_a",
    "position_b",
    "velocity_a",
    "velocity_b",
)
PHASES: tuple[str, ...] = ("concentric", "eccentric")

_CSV_SUFFIXES = {".csv"}
_JSONL_SUFFIXES = {".jsonl", ".ndjson"}


class CaptureFormatError(ValueError):
    """Raised when a capture row cannot be parsed."""


@dataclass(frozen=True, slots=True)
class RepCapture:
    """Samples recorded for one rep, split by phase."""

    rep_number: int
    concentric: Tuple[MetricSample, ...] = field(default_factory=tuple)
    eccentric: Tuple[MetricSample, ...] = field(default_factory=tuple)

    @property
    def all_samples(self) -> Tuple[MetricSample, ...]:
        """Every sample of the rep in timestamp order."""

        return tuple(
            sorted(self.concentric + self.eccentric, key=lambda s: s.timestamp_ms)
        )

    @property
    def timestamp(self) -> int:
        """Timestamp of the last sample, ``0`` for an empty rep."""

        samples = self.concentric + self.eccentric
        if not samples:
            return 0
        return max(sample.timestamp_ms for sample in samples)


def _parse_row(row: Mapping[str, Any], line: int) -> Tuple[int, str, MetricSample]:
    missing = [column for column in CAPTURE_COLUMNS if row.get(column) in (None, "")]
    if missing:
        raise CaptureFormatError(f"Line {line}: missing columns {missing!r}")
    phase = str(row["phase"]).strip().lower()
    if phase not in PHASES:
        raise CaptureFormatError(
            f"Line {line}: unknown phase {row['phase']!r}; expected one of {PHASES!r}"
        )
    try:
        rep = int(row["rep"])
        sample = MetricSample.from_mapping(row)
    except (TypeError, ValueError) as exc:
        raise CaptureFormatError(f"Line {line}: cannot parse sample values") from exc
    return rep, phase, sample


def _iter_csv_rows(lines: Iterable[str]) -> Iterator[Tuple[int, Mapping[str, Any]]]:
    reader = csv.DictReader(lines)
    if reader.fieldnames is None:
        return
    header = [name.strip() for name in reader.fieldnames]
    absent = [column for column in CAPTURE_COLUMNS if column not in header]
    if absent:
        raise CaptureFormatError(f"Line 1: header is missing columns {absent!r}")
    reader.fieldnames = header
    for row in reader:
        if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
            continue
        yield reader.line_num, row


def _iter_jsonl_rows(lines: Iterable[str]) -> Iterator[Tuple[int, Mapping[str, Any]]]:
    for index, raw in enumerate(lines, start=1):
        if not raw.strip():
            continue
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CaptureFormatError(f"Line {index}: invalid JSON") from exc
        if not isinstance(payload, Mapping):
            raise CaptureFormatError(f"Line {index}: expected a JSON object")
        yield index, payload


def _detect_format(source: Path) -> str:
    suffix = source.suffix.lower()
    if suffix in _CSV_SUFFIXES:
        return "csv"
    if suffix in _JSONL_SUFFIXES:
        return "jsonl"
    raise CaptureFormatError(f"Unsupported capture format: {source}")


def _group(rows: Iterable[Tuple[int, Mapping[str, Any]]]) -> List[RepCapture]:
    grouped: Dict[int, Dict[str, List[MetricSample]]] = {}
    for line, row in rows:
        rep, phase, sample = _parse_row(row, line)
        phases = grouped.setdefault(rep, {name: [] for name in PHASES})
        phases[phase].append(sample)

    # Reps keep first-appearance order; samples are ordered by time per phase.
    return [
        RepCapture(
            rep_number=rep,
            concentric=tuple(sorted(phases["concentric"], key=lambda s: s.timestamp_ms)),
            eccentric=tuple(sorted(phases["eccentric"], key=lambda s: s.timestamp_ms)),
        )
        for rep, phases in grouped.items()
    ]


def read_capture(
    source: str | Path | TextIO | Sequence[str],
    *,
    fmt: str | None = None,
) -> List[RepCapture]:
    """Parse a capture into :class:`RepCapture` groups.

    ``source`` may be a filesystem path, whose suffix selects the encoding
    unless ``fmt`` is given, or an iterable of text lines, in which case
    ``fmt`` defaults to ``"csv"``.
    """

    if isinstance(source, (str, Path)):
        path = Path(source)
        resolved_fmt = fmt or _detect_format(path)
        with path.open("r", encoding="utf8", newline="") as handle:
            return _read_lines(handle, resolved_fmt)
    return _read_lines(source, fmt or "csv")


def _read_lines(lines: Iterable[str], fmt: str) -> List[RepCapture]:
    if fmt == "csv":
        return _group(_iter_csv_rows(lines))
    if fmt == "jsonl":
        return _group(_iter_jsonl_rows(lines))
    raise CaptureFormatError(f"Unsupported capture format: {fmt!r}")
