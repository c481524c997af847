"""Writer for TXT format with timestamps."""

from pathlib import Path
from ytcompanion.models import Transcript
from ytcompanion.timecode import format_timestamp


def write_txt(transcript: Transcript, output_path: Path) -> None:
    """
    Write transcript to TXT file with timestamps.

    Format: [M:SS] text
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        for segment in transcript.segments:
            f.write(f"[{format_timestamp(segment.start)}] {segment.text}\n")


def write_chapters(transcript: Transcript, output_path: Path) -> None:
    """Write the chapter outline and overall summary to a text file."""
    with open(output_path, 'w', encoding='utf-8') as f:
        if transcript.summary:
            f.write(f"{transcript.summary}\n\n")
        for chapter in transcript.chapters:
            f.write(f"[{format_timestamp(chapter.start_time)}] {chapter.title}\n")
            if chapter.summary:
                f.write(f"    {chapter.summary}\n")
