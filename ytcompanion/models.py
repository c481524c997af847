"""Data models for transcripts, segments and chapters."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Segment:
    """A single caption line with canonical timing information."""
    text: str
    start: float     # Start time in seconds
    duration: float  # Display time in seconds

    @property
    def end(self) -> float:
        return self.start + self.duration

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'start': self.start, 'duration': self.duration}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Segment":
        """Rebuild a stored segment. Stored data is trusted as canonical."""
        return cls(
            text=str(data.get('text') or ''),
            start=float(data['start']),
            duration=float(data['duration'])
        )


@dataclass(frozen=True)
class Chapter:
    """An entry of the generated chapter outline."""
    title: str
    start_time: float  # Seconds
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'startTime': self.start_time, 'summary': self.summary}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chapter":
        return cls(
            title=str(data.get('title') or ''),
            start_time=float(data.get('startTime', data.get('start_time', 0)) or 0),
            summary=str(data.get('summary') or '')
        )


@dataclass
class Transcript:
    """Complete transcript of one video with metadata.

    ``segments`` is a tuple and is never patched in place; a re-import
    builds a new Transcript.
    """
    video_id: str
    url: str
    title: Optional[str] = None
    channel: Optional[str] = None
    duration: Optional[int] = None  # Duration in seconds
    source: Optional[str] = None    # Caption transport that produced the segments
    segments: tuple = ()
    chapters: list = field(default_factory=list)
    summary: Optional[str] = None

    def __post_init__(self):
        """Freeze segments into a tuple."""
        self.segments = tuple(self.segments or ())

    def full_text(self) -> str:
        """All caption text joined with spaces."""
        return " ".join(segment.text for segment in self.segments)
