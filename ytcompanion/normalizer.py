"""Normalize raw caption records into canonical segments.

Caption data reaches us from more than one transport and in more than one
shape. A record is either *nested* (timing and text under a ``snippet``
mapping) or *flat* (fields directly on the record), and the timing may sit
under any of several field names in either seconds or milliseconds.

Field names are resolved through priority-ordered tables. The unit of a
field is decided by its name alone, never by the magnitude of its value:
``startMs=15000`` is 15 seconds, ``start=15000`` is 15000 seconds.

A record that cannot yield a finite ``start >= 0`` and a finite
``duration > 0`` is rejected (``None``), never raised.
"""

import math
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from ytcompanion.config import Config
from ytcompanion.models import Segment


MS = 1000.0
SECONDS = 1.0

# Candidate field names in priority order
START_FIELDS: Tuple[str, ...] = (
    'startOffsetMs', 'start_offset_ms', 'start_ms', 'startMs',
    'startTimeMs', 'start_time_ms', 'start',
)
END_FIELDS: Tuple[str, ...] = (
    'endOffsetMs', 'end_offset_ms', 'end_ms', 'endMs',
    'endTimeMs', 'end_time_ms', 'end',
)
DURATION_FIELDS: Tuple[str, ...] = ('duration', 'dur')

# Divisor that converts each field's value to seconds
FIELD_UNITS = {
    'startOffsetMs': MS, 'start_offset_ms': MS, 'start_ms': MS, 'startMs': MS,
    'startTimeMs': MS, 'start_time_ms': MS, 'start': SECONDS,
    'endOffsetMs': MS, 'end_offset_ms': MS, 'end_ms': MS, 'endMs': MS,
    'endTimeMs': MS, 'end_time_ms': MS, 'end': SECONDS,
    'duration': SECONDS, 'dur': SECONDS,
}


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of normalizing one batch of raw caption records."""
    segments: Tuple[Segment, ...]
    total: int

    @property
    def rejected(self) -> int:
        return self.total - len(self.segments)

    @property
    def all_rejected(self) -> bool:
        """True when a non-empty batch produced no usable segment."""
        return self.total > 0 and not self.segments


def parse_time_value(value: Any) -> Optional[float]:
    """
    Parse a numeric or numeric-string time value.

    Returns None when the value cannot be read as a number. Non-finite
    numbers are returned as-is so validation can reject them; integers too
    large for a float become infinity.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf
    if isinstance(value, str):
        # float() also reads "1_000"; digit separators are not time values
        if '_' in value:
            return None
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def resolve_field(record: Mapping, candidates: Tuple[str, ...]) -> Tuple[Optional[str], Optional[float]]:
    """
    Find the first present candidate field and convert it to seconds.

    A present zero counts as present. Only the first present field is
    consulted; if it does not parse, the value is None (absent).

    Returns:
        Tuple of (field_name, seconds); (None, None) if no candidate is present
    """
    for name in candidates:
        if record.get(name) is None:
            continue
        value = parse_time_value(record[name])
        if value is None:
            return name, None
        return name, value / FIELD_UNITS[name]
    return None, None


def _working_record(raw: Any) -> Optional[Mapping]:
    if not isinstance(raw, Mapping):
        return None
    snippet = raw.get('snippet')
    data = snippet if snippet else raw
    if not isinstance(data, Mapping):
        return None
    return data


def _extract_text(data: Mapping, raw: Mapping) -> str:
    text = data.get('text')
    if not text:
        text = raw.get('text')
    if text is None:
        return ""
    return str(text)


def _report_first_record(data: Mapping, start_field, start, end_field, end, duration) -> None:
    print(f"[Transcript] First record keys: {sorted(str(key) for key in data.keys())}", file=sys.stderr)
    print(
        f"[Transcript] Resolved start={start} ({start_field}), end={end} ({end_field}), "
        f"duration={duration}",
        file=sys.stderr
    )
    if start_field is None and end_field is None:
        print("[Transcript] ⚠ No timestamp field found in first record", file=sys.stderr)


def normalize_segment(raw: Any, index: int) -> Optional[Segment]:
    """
    Convert one raw caption record into a canonical Segment.

    Args:
        raw: Caption record in nested (``snippet``) or flat form
        index: Position of the record in its batch (diagnostics only)

    Returns:
        Segment, or None if the record is rejected
    """
    data = _working_record(raw)
    if data is None:
        if index == 0 and Config.DEBUG_TRANSCRIPT:
            print(f"[Transcript] ⚠ Record {index} is not a mapping: {raw!r}", file=sys.stderr)
        return None

    start_field, start = resolve_field(data, START_FIELDS)
    if start is None:
        start = 0.0

    end_field, end = resolve_field(data, END_FIELDS)
    if end is None:
        end_field, duration_value = resolve_field(data, DURATION_FIELDS)
        if duration_value is not None:
            end = start + duration_value

    duration = max(0.0, end - start) if end is not None else 0.0

    if index == 0 and Config.DEBUG_TRANSCRIPT:
        _report_first_record(data, start_field, start, end_field, end, duration)

    if not math.isfinite(start) or start < 0:
        return None
    if not math.isfinite(duration) or duration <= 0:
        return None

    return Segment(text=_extract_text(data, raw), start=start, duration=duration)


def normalize_segments(raw_records: Iterable[Any]) -> NormalizationResult:
    """
    Normalize a batch of raw caption records, keeping upstream order.

    Rejected records are dropped; the batch never aborts on a bad record.
    """
    segments = []
    total = 0
    for index, raw in enumerate(raw_records):
        total += 1
        segment = normalize_segment(raw, index)
        if segment is not None:
            segments.append(segment)
    return NormalizationResult(segments=tuple(segments), total=total)
