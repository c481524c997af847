"""Stored transcripts: one JSON document per video directory."""

import json
from pathlib import Path

from ytcompanion.models import Chapter, Segment, Transcript
from ytcompanion.writers.json_writer import write_json


TRANSCRIPT_FILE = "transcript.json"


def save_transcript(transcript: Transcript, output_dir: Path) -> Path:
    """Store a transcript, replacing any earlier import of the same video."""
    path = output_dir / TRANSCRIPT_FILE
    write_json(transcript, path)
    return path


def load_transcript(output_dir: Path) -> Transcript:
    """
    Load a stored transcript verbatim.

    Raises:
        FileNotFoundError: If the video has not been imported
    """
    path = output_dir / TRANSCRIPT_FILE
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return Transcript(
        video_id=data['video_id'],
        url=data.get('url', ''),
        title=data.get('title'),
        channel=data.get('channel'),
        duration=data.get('duration'),
        source=data.get('source'),
        segments=[Segment.from_dict(s) for s in data.get('segments', [])],
        chapters=[Chapter.from_dict(c) for c in data.get('chapters', [])],
        summary=data.get('summary')
    )
