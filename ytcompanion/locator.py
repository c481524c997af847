"""Find the active segment or chapter for a playback position."""

import math
from bisect import bisect_right
from typing import Optional, Sequence

from ytcompanion.models import Chapter, Segment


def locate_segment(segments: Sequence[Segment], query_time: float) -> Optional[int]:
    """
    Return the index of the segment active at ``query_time``.

    ``segments`` must be sorted ascending by start. A segment whose
    half-open interval [start, start + duration) contains the time wins;
    after a match the search keeps narrowing toward the lower bound and
    returns the earliest overlapping match it visits. In a gap between
    captions the last segment that has already started stays active.
    Before the first segment, or with no segments, returns None.
    """
    if not segments or not math.isfinite(query_time):
        return None

    lo, hi = 0, len(segments) - 1
    found = None
    while lo <= hi:
        mid = (lo + hi) // 2
        segment = segments[mid]
        if segment.start <= query_time < segment.end:
            found = mid
            hi = mid - 1
        elif segment.start > query_time:
            hi = mid - 1
        else:
            lo = mid + 1

    if found is not None:
        return found
    # hi is now the last segment with start <= query_time
    return hi if hi >= 0 else None


def locate_chapter(chapters: Sequence[Chapter], query_time: float) -> Optional[int]:
    """
    Return the index of the chapter active at ``query_time``.

    A chapter runs until the next one starts; the last chapter runs to the
    end of the video.
    """
    if not chapters or not math.isfinite(query_time):
        return None
    index = bisect_right(chapters, query_time, key=lambda chapter: chapter.start_time) - 1
    return index if index >= 0 else None


class PlaybackTracker:
    """Track the active segment across playback position updates.

    The player reports its position a couple of times per second; each
    update is one binary search. ``changed`` is True when the active index
    moved on the last update.
    """

    def __init__(self, segments: Sequence[Segment]):
        self._segments = segments
        self.active: Optional[int] = None
        self.changed = False

    def update(self, query_time: float) -> Optional[int]:
        index = locate_segment(self._segments, query_time)
        self.changed = index != self.active
        self.active = index
        return index

    def reset(self) -> None:
        """Forget the active segment, e.g. after loading another video."""
        self.active = None
        self.changed = False
