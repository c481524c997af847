"""Chapter analysis of transcripts with OpenAI GPT."""

import json
import math
import re
from typing import List, Optional, Sequence, Tuple

from ytcompanion.config import Config
from ytcompanion.llm import complete
from ytcompanion.models import Chapter, Segment, Transcript
from ytcompanion.timecode import format_timestamp


# Chapter analysis system prompt
CHAPTER_ANALYSIS_PROMPT = """You are an expert at analyzing YouTube video transcripts for learners.

Split the video into chapters that follow its topics and summarize it.

Rules:
1.  **Chapters**: 3-10 chapters in playback order. Each starts at the timestamp of the transcript block where its topic begins.
2.  **Timestamps**: Give startTime in seconds as a number, taken from the [M:SS] or [H:MM:SS] tags in the transcript.
3.  **Content**: Only use what the transcript says. Never guess.
4.  **Language**: Write titles and summaries in the language of the transcript.

Respond with JSON only, in exactly this format:
{
  "chapters": [
    {"title": "Chapter title", "startTime": 0, "summary": "One or two sentence summary"}
  ],
  "overallSummary": "Summary of the whole video in 3-5 sentences"
}
"""

# A block ends after a sentence-final mark (Japanese or Latin)
SENTENCE_END_RE = re.compile(r'[。．！？.!?]$')

_JSON_BLOCK_RE = re.compile(r'```(?:json)?\s*([\s\S]*?)\s*```')


def group_segments(segments: Sequence[Segment], max_chars: int) -> List[Tuple[float, str]]:
    """
    Group consecutive segments into readable blocks.

    A block closes once its text exceeds ``max_chars`` or a segment ends a
    sentence.

    Returns:
        List of (start_seconds, text) tuples
    """
    blocks = []
    current_text = ""
    current_start = 0.0

    for segment in segments:
        if current_text == "":
            current_start = segment.start
        current_text += segment.text + " "

        if len(current_text) > max_chars or SENTENCE_END_RE.search(segment.text):
            blocks.append((current_start, current_text.strip()))
            current_text = ""

    if current_text.strip():
        blocks.append((current_start, current_text.strip()))

    return blocks


def _format_blocks(segments: Sequence[Segment], max_chars: int) -> str:
    return "\n".join(
        f"[{format_timestamp(start)}] {text}"
        for start, text in group_segments(segments, max_chars)
    )


def format_transcript_for_analysis(segments: Sequence[Segment], max_chars: Optional[int] = None) -> str:
    """Timestamp-tagged transcript text for chapter analysis."""
    return _format_blocks(segments, Config.ANALYSIS_BLOCK_CHARS if max_chars is None else max_chars)


def format_transcript_for_chat(segments: Sequence[Segment], max_chars: Optional[int] = None) -> str:
    """Timestamp-tagged transcript text for Q&A context."""
    return _format_blocks(segments, Config.CHAT_BLOCK_CHARS if max_chars is None else max_chars)


def parse_analysis_response(text: str) -> Tuple[List[Chapter], str]:
    """
    Extract chapters and the overall summary from a model response.

    The JSON may be wrapped in a ```json fence.

    Raises:
        ValueError: If the response holds no valid analysis JSON
    """
    match = _JSON_BLOCK_RE.search(text)
    json_str = match.group(1) if match else text

    try:
        data = json.loads(json_str.strip())
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse analysis result: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get('chapters'), list):
        raise ValueError("Analysis result has no chapter list")

    try:
        chapters = [Chapter.from_dict(item) for item in data['chapters'] if isinstance(item, dict)]
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Analysis result has an invalid chapter: {e}") from e
    # NaN or infinite start times would break the chapter ordering
    chapters = [chapter for chapter in chapters if math.isfinite(chapter.start_time)]
    chapters.sort(key=lambda chapter: chapter.start_time)
    return chapters, str(data.get('overallSummary') or '')


def analyze_chapters(transcript: Transcript) -> Transcript:
    """
    Generate a chapter outline and summary for a transcript.

    Args:
        transcript: Transcript object with segments

    Returns:
        The same transcript with chapters and summary replaced
    """
    if not transcript.segments:
        raise ValueError("Transcript not available: the video has no captions")

    formatted = format_transcript_for_analysis(transcript.segments)
    if transcript.duration:
        length = f"{int(transcript.duration) // 60} minutes"
    else:
        length = "unknown"

    messages = [
        {"role": "system", "content": CHAPTER_ANALYSIS_PROMPT},
        {
            "role": "user",
            "content": (
                f"Transcript of the video \"{transcript.title or transcript.video_id}\".\n\n"
                f"Video length: {length}\n\n"
                f"TRANSCRIPT:\n{formatted}"
            )
        }
    ]

    print("Analyzing transcript with GPT...")
    response_text = complete(messages, desc="Analyzing")
    chapters, summary = parse_analysis_response(response_text)

    transcript.chapters = chapters
    transcript.summary = summary
    print(f"✓ Analysis complete: {len(chapters)} chapters")
    return transcript
