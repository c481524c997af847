"""Import YouTube videos: metadata via yt-dlp plus normalized captions."""

import re
from pathlib import Path
from typing import Dict, Optional
import yt_dlp
from ytcompanion.config import Config
from ytcompanion.captions import CaptionClient, get_transcript
from ytcompanion.models import Transcript
from ytcompanion.store import load_transcript, save_transcript


VIDEO_ID_RE = re.compile(r'^[A-Za-z0-9_-]{11}$')


def extract_video_id(url: str) -> str:
    """Extract video ID from various YouTube URL formats, or accept a bare ID."""
    url = url.strip()
    if VIDEO_ID_RE.match(url):
        return url

    patterns = [
        r'(?:youtube\.com\/watch\?v=|youtu\.be\/|youtube\.com\/embed\/|youtube\.com\/shorts\/)([^&\n?#/]+)',
        r'youtube\.com\/watch\?.*v=([^&\n?#]+)',
    ]

    for pattern in patterns:
        match = re.search(pattern, url)
        if match:
            return match.group(1)

    raise ValueError(f"Could not extract video ID from URL: {url}")


def get_output_dir(video_id: str) -> Path:
    """Get the directory that holds a video's stored transcript."""
    return Config.OUT_DIR / video_id


def fetch_video_metadata(url: str) -> Dict:
    """
    Look up title, channel and duration without downloading media.

    Args:
        url: YouTube video URL

    Returns:
        Metadata dictionary
    """
    ydl_opts = {
        'quiet': True,
        'no_warnings': True,
        'skip_download': True,
        'noplaylist': True,
    }
    with yt_dlp.YoutubeDL(ydl_opts) as ydl:
        info = ydl.extract_info(url, download=False) or {}

    return {
        'url': url,
        'video_id': info.get('id'),
        'title': info.get('title'),
        'channel': info.get('uploader') or info.get('channel'),
        'duration': info.get('duration'),
        'upload_date': info.get('upload_date'),
    }


def import_video(
    url: str,
    client: CaptionClient,
    force: bool = False,
    metadata: Optional[Dict] = None
) -> Transcript:
    """
    Import a video: fetch metadata and captions, then store the transcript.

    Args:
        url: YouTube video URL
        client: Caption client shared across imports
        force: If True, re-import even if a stored transcript exists.
            The stored transcript is replaced as a whole.
        metadata: Pre-fetched metadata; looked up with yt-dlp when omitted

    Returns:
        Transcript object with normalized segments
    """
    video_id = extract_video_id(url)
    output_dir = get_output_dir(video_id)

    if not force and (output_dir / "transcript.json").exists():
        print(f"✓ Using stored transcript for video {video_id}")
        return load_transcript(output_dir)

    if metadata is None:
        print("Fetching video metadata...")
        metadata = fetch_video_metadata(f"https://www.youtube.com/watch?v={video_id}")

    segments, source = get_transcript(video_id, client)
    if not segments:
        print("⚠ No captions available for this video")

    transcript = Transcript(
        video_id=video_id,
        url=url,
        title=metadata.get('title'),
        channel=metadata.get('channel'),
        duration=metadata.get('duration'),
        source=source,
        segments=segments
    )

    save_transcript(transcript, output_dir)
    print(f"✓ Transcript stored: {len(transcript.segments)} segments")
    return transcript
