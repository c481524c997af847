"""Tests for models module."""

import dataclasses

import pytest
from ytcompanion.models import Chapter, Segment, Transcript


def test_segment_end():
    assert Segment("x", 1.5, 2.0).end == 3.5


def test_segment_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Segment("x", 0.0, 1.0).start = 5.0


def test_segment_dict_form():
    segment = Segment.from_dict({"text": None, "start": "2", "duration": 1})
    assert segment == Segment("", 2.0, 1.0)
    assert segment.to_dict() == {"text": "", "start": 2.0, "duration": 1.0}


def test_chapter_accepts_both_key_styles():
    assert Chapter.from_dict({"title": "A", "startTime": 12}) == Chapter("A", 12.0, "")
    assert Chapter.from_dict({"title": "A", "start_time": 12}) == Chapter("A", 12.0, "")


def test_transcript_segments_are_a_tuple():
    segments = [Segment("a", 0.0, 1.0)]
    transcript = Transcript(video_id="v", url="u", segments=segments)
    segments.append(Segment("b", 1.0, 1.0))
    assert transcript.segments == (Segment("a", 0.0, 1.0),)


def test_full_text():
    transcript = Transcript(video_id="v", url="u",
                            segments=[Segment("Hello", 0.0, 1.0), Segment("World", 1.0, 1.0)])
    assert transcript.full_text() == "Hello World"
    assert Transcript(video_id="v", url="u").full_text() == ""
