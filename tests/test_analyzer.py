"""Tests for analyzer and chat helpers."""

import pytest
from ytcompanion import analyzer
from ytcompanion.analyzer import (
    analyze_chapters,
    format_transcript_for_analysis,
    format_transcript_for_chat,
    group_segments,
    parse_analysis_response,
)
from ytcompanion.chat import build_chat_messages
from ytcompanion.models import Chapter, Segment, Transcript


SEGMENTS = (
    Segment("Welcome to the course", 0.0, 2.0),
    Segment("today we cover sorting.", 2.0, 3.0),
    Segment("First", 65.0, 1.0),
    Segment("bubble sort", 66.0, 1.0),
)


def test_group_segments_breaks_on_sentence_end():
    assert group_segments(SEGMENTS, max_chars=200) == [
        (0.0, "Welcome to the course today we cover sorting."),
        (65.0, "First bubble sort"),
    ]


def test_group_segments_breaks_on_length():
    blocks = group_segments(SEGMENTS, max_chars=10)
    assert blocks[0] == (0.0, "Welcome to the course")
    assert [start for start, _ in blocks] == [0.0, 2.0, 65.0]


def test_group_segments_handles_japanese_punctuation():
    segments = (Segment("こんにちは。", 0.0, 1.0), Segment("今日は", 1.0, 1.0))
    assert group_segments(segments, max_chars=200) == [(0.0, "こんにちは。"), (1.0, "今日は")]


def test_group_segments_empty():
    assert group_segments((), max_chars=200) == []


def test_format_transcript_for_analysis():
    assert format_transcript_for_analysis(SEGMENTS, max_chars=200) == (
        "[0:00] Welcome to the course today we cover sorting.\n"
        "[1:05] First bubble sort"
    )


def test_chat_format_uses_its_own_threshold(monkeypatch):
    monkeypatch.setattr(analyzer.Config, "CHAT_BLOCK_CHARS", 10)
    assert format_transcript_for_chat(SEGMENTS).splitlines()[0] == "[0:00] Welcome to the course"


def test_parse_analysis_response_fenced():
    text = """Here you go:
```json
{"chapters": [
  {"title": "Sorting", "startTime": 65, "summary": "Bubble sort"},
  {"title": "Intro", "startTime": 0, "summary": "Welcome"}
], "overallSummary": "A lesson on sorting."}
```"""
    chapters, summary = parse_analysis_response(text)
    assert chapters == [Chapter("Intro", 0.0, "Welcome"), Chapter("Sorting", 65.0, "Bubble sort")]
    assert summary == "A lesson on sorting."


def test_parse_analysis_response_plain_json():
    chapters, summary = parse_analysis_response('{"chapters": [], "overallSummary": ""}')
    assert chapters == []
    assert summary == ""


@pytest.mark.parametrize("text", ["not json", '{"overallSummary": "x"}', "[1, 2]"])
def test_parse_analysis_response_rejects_bad_output(text):
    with pytest.raises(ValueError):
        parse_analysis_response(text)


def test_analyze_chapters_replaces_outline(monkeypatch):
    sent = []

    def fake_complete(messages, client=None, desc=None):
        sent.append(messages)
        return '{"chapters": [{"title": "Intro", "startTime": 0, "summary": "s"}], "overallSummary": "sum"}'

    monkeypatch.setattr(analyzer, "complete", fake_complete)
    transcript = Transcript(video_id="v", url="u", title="Sorting", duration=120,
                            segments=SEGMENTS, chapters=[Chapter("Old", 5.0)])

    analyze_chapters(transcript)

    assert transcript.chapters == [Chapter("Intro", 0.0, "s")]
    assert transcript.summary == "sum"
    user_message = sent[0][1]["content"]
    assert "[1:05] First bubble sort" in user_message
    assert "2 minutes" in user_message


def test_analyze_chapters_needs_captions():
    with pytest.raises(ValueError):
        analyze_chapters(Transcript(video_id="v", url="u"))


def test_chat_messages_carry_timestamped_transcript():
    transcript = Transcript(video_id="v", url="u", title="Sorting", segments=SEGMENTS)
    messages = build_chat_messages(transcript)
    assert len(messages) == 1
    assert messages[0]["role"] == "system"
    assert "Video title: Sorting" in messages[0]["content"]
    assert "[1:05] First bubble sort" in messages[0]["content"]


def test_explicit_zero_block_size_is_not_replaced_by_default():
    assert format_transcript_for_analysis(SEGMENTS, max_chars=0).splitlines() == [
        "[0:00] Welcome to the course",
        "[0:02] today we cover sorting.",
        "[1:05] First",
        "[1:06] bubble sort",
    ]


def test_parse_analysis_response_drops_non_finite_start_times():
    text = ('{"chapters": ['
            '{"title": "Broken", "startTime": "nan"},'
            '{"title": "Later", "startTime": 60},'
            '{"title": "Endless", "startTime": "inf"},'
            '{"title": "Intro", "startTime": 0}'
            '], "overallSummary": ""}')
    chapters, _ = parse_analysis_response(text)
    assert [chapter.title for chapter in chapters] == ["Intro", "Later"]


def test_parse_analysis_response_rejects_unreadable_start_time():
    with pytest.raises(ValueError):
        parse_analysis_response('{"chapters": [{"title": "A", "startTime": "soon"}]}')
