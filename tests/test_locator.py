"""Tests for locator module."""

import pytest
from ytcompanion.locator import PlaybackTracker, locate_chapter, locate_segment
from ytcompanion.models import Chapter, Segment
from ytcompanion.normalizer import normalize_segments


@pytest.fixture
def hello_world():
    raw = [
        {"snippet": {"text": "Hello", "start_ms": 0, "end_ms": 2000}},
        {"snippet": {"text": "World", "start_ms": 2000, "end_ms": 5000}},
    ]
    return normalize_segments(raw).segments


@pytest.fixture
def gappy():
    # [0, 1) gap [3, 4) gap [10, 12)
    return (
        Segment("a", 0.0, 1.0),
        Segment("b", 3.0, 1.0),
        Segment("c", 10.0, 2.0),
    )


def test_end_to_end_lookup(hello_world):
    assert locate_segment(hello_world, 1.5) == 0
    assert locate_segment(hello_world, 2.0) == 1
    assert locate_segment(hello_world, 10) == 1
    assert locate_segment(hello_world, -1) is None


def test_empty_segments():
    assert locate_segment([], 0) is None
    assert locate_segment((), 123.4) is None


def test_before_first_segment():
    late = (Segment("x", 5.0, 1.0),)
    assert locate_segment(late, 4.99) is None
    assert locate_segment(late, 5.0) == 0


def test_gap_sticks_to_last_elapsed_segment(gappy):
    assert locate_segment(gappy, 1.0) == 0
    assert locate_segment(gappy, 2.5) == 0
    assert locate_segment(gappy, 4.0) == 1
    assert locate_segment(gappy, 9.999) == 1
    assert locate_segment(gappy, 100) == 2


def test_interval_is_half_open(gappy):
    assert locate_segment(gappy, 0.0) == 0
    assert locate_segment(gappy, 3.0) == 1
    assert locate_segment(gappy, 11.999) == 2


def test_overlapping_segments_prefer_lower_index():
    segments = (
        Segment("long", 0.0, 10.0),
        Segment("inside", 2.0, 1.0),
        Segment("later", 5.0, 1.0),
    )
    assert locate_segment(segments, 2.5) == 0


def test_identical_starts_prefer_lower_index():
    segments = (
        Segment("first", 1.0, 2.0),
        Segment("second", 1.0, 2.0),
        Segment("third", 1.0, 2.0),
    )
    assert locate_segment(segments, 1.5) == 0


def test_non_finite_query(gappy):
    assert locate_segment(gappy, float("nan")) is None
    assert locate_segment(gappy, float("inf")) is None


def test_lookup_is_monotonic():
    segments = tuple(
        Segment(str(i), start, 0.4)
        for i, start in enumerate([0.0, 1.0, 1.5, 4.0, 4.5, 9.0, 20.0])
    )
    previous = None
    for step in range(0, 260):
        index = locate_segment(segments, step / 10)
        if previous is not None and index is not None:
            assert index >= previous
        if index is not None:
            previous = index


def test_lookup_matches_linear_scan():
    segments = tuple(Segment(str(i), i * 1.5, 1.0) for i in range(50))

    def linear(t):
        for i, segment in enumerate(segments):
            if segment.start <= t < segment.end:
                return i
        elapsed = [i for i, segment in enumerate(segments) if segment.start <= t]
        return elapsed[-1] if elapsed else None

    for step in range(-10, 800):
        t = step / 10
        assert locate_segment(segments, t) == linear(t)


def test_locate_chapter():
    chapters = [
        Chapter("Intro", 0.0),
        Chapter("Setup", 60.0),
        Chapter("Wrap up", 300.0),
    ]
    assert locate_chapter(chapters, 0) == 0
    assert locate_chapter(chapters, 59.9) == 0
    assert locate_chapter(chapters, 60) == 1
    assert locate_chapter(chapters, 10000) == 2
    assert locate_chapter(chapters, -1) is None
    assert locate_chapter([], 5) is None


def test_locate_chapter_with_late_first_chapter():
    assert locate_chapter([Chapter("Later", 30.0)], 10) is None


def test_playback_tracker_reports_changes(hello_world):
    tracker = PlaybackTracker(hello_world)

    assert tracker.update(0.5) == 0
    assert tracker.changed
    assert tracker.update(1.0) == 0
    assert not tracker.changed
    assert tracker.update(2.5) == 1
    assert tracker.changed
    assert tracker.update(7.0) == 1
    assert not tracker.changed
    assert tracker.active == 1


def test_playback_tracker_seek_backwards(hello_world):
    tracker = PlaybackTracker(hello_world)
    tracker.update(3.0)
    assert tracker.update(0.1) == 0
    assert tracker.changed

    tracker.reset()
    assert tracker.active is None
    assert not tracker.changed


def test_tracker_does_not_mutate_segments(hello_world):
    before = tuple(hello_world)
    tracker = PlaybackTracker(hello_world)
    for t in (0, 1, 2, 3, 100, -5):
        tracker.update(t)
    assert tuple(hello_world) == before
