"""Display timestamps for playback positions."""

import math
import re

_TIMESTAMP_RE = re.compile(r'^(?:(\d+):)?(\d{1,2}):(\d{2})$')


def format_timestamp(seconds: float) -> str:
    """Format seconds as H:MM:SS, or M:SS under an hour. Sub-seconds are dropped."""
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_timestamp(text: str) -> int:
    """
    Parse an M:SS, MM:SS or H:MM:SS timestamp into whole seconds.

    Raises:
        ValueError: If the text is not a timestamp
    """
    match = _TIMESTAMP_RE.match(text.strip().strip('[]'))
    if not match:
        raise ValueError(f"Not a timestamp: {text!r}")
    hours, minutes, secs = match.groups()
    if int(secs) >= 60 or (hours is not None and int(minutes) >= 60):
        raise ValueError(f"Not a timestamp: {text!r}")
    return int(hours or 0) * 3600 + int(minutes) * 60 + int(secs)
