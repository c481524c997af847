"""Caption retrieval from YouTube with a fallback between two transports.

1. Structured caption API (youtube-transcript-api), flat records with
   ``start`` / ``duration`` in seconds.
2. Raw timed-text XML track located through yt-dlp, flat records with
   ``start`` / ``dur`` attributes as strings.

Both transports only produce raw records. Every batch goes through
``normalize_segments`` before it is used.
"""

import html
import re
from typing import Dict, List, Optional, Sequence, Tuple

import yt_dlp
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api import CouldNotRetrieveTranscript

from ytcompanion.config import Config
from ytcompanion.models import Segment
from ytcompanion.normalizer import normalize_segments


SOURCE_CAPTION_API = "caption_api"
SOURCE_CAPTION_TRACK = "caption_track"

_TEXT_ELEMENT_RE = re.compile(r'<text\b([^>]*)>(.*?)</text>', re.DOTALL)
_ATTRIBUTE_RE = re.compile(r'(\w+)="([^"]*)"')


class CaptionUnavailableError(RuntimeError):
    """A caption transport produced no usable records for a video."""


class CaptionClient:
    """Owns the structured caption API handle.

    The handle is created on first use and reused for every later fetch.
    It needs no teardown.
    """

    def __init__(self, api: Optional[YouTubeTranscriptApi] = None):
        self._api = api

    @property
    def api(self) -> YouTubeTranscriptApi:
        if self._api is None:
            self._api = YouTubeTranscriptApi()
        return self._api


def fetch_caption_info(
    video_id: str,
    client: CaptionClient,
    languages: Optional[Sequence[str]] = None
) -> List[Dict]:
    """
    Fetch raw caption records through the structured caption API.

    Returns:
        List of raw records, e.g. {'text': ..., 'start': 1.5, 'duration': 2.0}
    """
    languages = list(languages or Config.CAPTION_LANGUAGES)
    try:
        fetched = client.api.fetch(video_id, languages=languages)
    except CouldNotRetrieveTranscript as e:
        raise CaptionUnavailableError(f"Caption API has no transcript: {e}") from e

    records = fetched.to_raw_data()
    if not records:
        raise CaptionUnavailableError("Caption API returned no records")
    return records


def _pick_track(caption_dict: Dict, languages: Sequence[str]) -> Optional[List[Dict]]:
    """Formats of the preferred-language track, else of the first track."""
    if not caption_dict:
        return None
    for lang in languages:
        if caption_dict.get(lang):
            return caption_dict[lang]
    for formats in caption_dict.values():
        if formats:
            return formats
    return None


def fetch_caption_track_xml(video_id: str, languages: Optional[Sequence[str]] = None) -> str:
    """
    Download a caption track as timed-text XML, located through yt-dlp.

    Manual subtitles are preferred over automatic captions.

    Returns:
        XML document text
    """
    languages = list(languages or Config.CAPTION_LANGUAGES)
    url = f"https://www.youtube.com/watch?v={video_id}"
    ydl_opts = {
        'quiet': True,
        'no_warnings': True,
        'skip_download': True,
        'noplaylist': True,
    }

    with yt_dlp.YoutubeDL(ydl_opts) as ydl:
        info = ydl.extract_info(url, download=False)

        formats = (
            _pick_track(info.get('subtitles') or {}, languages)
            or _pick_track(info.get('automatic_captions') or {}, languages)
        )
        if not formats:
            raise CaptionUnavailableError("No caption tracks available")

        track = next((fmt for fmt in formats if fmt.get('ext') == 'srv1'), None)
        if not track or not track.get('url'):
            raise CaptionUnavailableError("Caption track has no timed-text XML URL")

        with ydl.urlopen(track['url']) as response:
            xml = response.read().decode('utf-8', errors='replace')

    if not xml.strip():
        raise CaptionUnavailableError("Empty response from caption track URL")
    return xml


def parse_caption_xml(xml: str) -> List[Dict]:
    """
    Parse ``<text start=".." dur="..">`` elements into raw caption records.

    Entities are decoded and line breaks collapsed. Elements with blank
    text are skipped. Timing attributes are passed on as strings.
    """
    records = []
    for match in _TEXT_ELEMENT_RE.finditer(xml):
        attributes = dict(_ATTRIBUTE_RE.findall(match.group(1)))
        # Captions are often entity-encoded twice (&amp;#39;)
        text = html.unescape(html.unescape(match.group(2)))
        text = re.sub(r'\s+', ' ', text).strip()
        if not text:
            continue
        record = {'text': text}
        if 'start' in attributes:
            record['start'] = attributes['start']
        if 'dur' in attributes:
            record['dur'] = attributes['dur']
        records.append(record)
    return records


def _fetch_from_caption_api(video_id, client, languages):
    return fetch_caption_info(video_id, client, languages)


def _fetch_from_caption_track(video_id, client, languages):
    return parse_caption_xml(fetch_caption_track_xml(video_id, languages))


TRANSPORTS = (
    (SOURCE_CAPTION_API, _fetch_from_caption_api),
    (SOURCE_CAPTION_TRACK, _fetch_from_caption_track),
)


def get_transcript(
    video_id: str,
    client: CaptionClient,
    languages: Optional[Sequence[str]] = None,
    transports=TRANSPORTS
) -> Tuple[Tuple[Segment, ...], Optional[str]]:
    """
    Fetch and normalize captions, falling back between transports.

    A transport counts as successful only if at least one of its records
    survives normalization.

    Returns:
        Tuple of (segments, source); ((), None) if every transport failed
    """
    for source, fetch in transports:
        print(f"Fetching captions via {source} for {video_id}...")
        try:
            raw_records = fetch(video_id, client, languages)
        except Exception as e:
            print(f"⚠ {source} failed: {e}")
            continue

        result = normalize_segments(raw_records)
        if result.all_rejected:
            print(f"⚠ {source}: all {result.total} caption records had invalid timestamps")
            continue
        if not result.segments:
            print(f"⚠ {source}: no caption records")
            continue

        if result.rejected:
            print(f"  Dropped {result.rejected}/{result.total} caption records with invalid timestamps")
        print(f"✓ Captions via {source}: {len(result.segments)} segments")
        return result.segments, source

    print(f"✗ No captions available for {video_id}")
    return (), None
