"""Writer for JSON format."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict
from ytcompanion.models import Transcript


def transcript_to_dict(transcript: Transcript) -> Dict[str, Any]:
    """Serialize a transcript to the stored document layout."""
    return {
        'video_id': transcript.video_id,
        'url': transcript.url,
        'title': transcript.title,
        'channel': transcript.channel,
        'duration': transcript.duration,
        'source': transcript.source,
        'summary': transcript.summary,
        'segments': [segment.to_dict() for segment in transcript.segments],
        'chapters': [chapter.to_dict() for chapter in transcript.chapters],
    }


def write_json(transcript: Transcript, output_path: Path) -> None:
    """Write transcript to JSON file, replacing any previous file as a whole."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = transcript_to_dict(transcript)

    fd, temp_name = tempfile.mkstemp(dir=output_path.parent, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(temp_name, output_path)
    except BaseException:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise
