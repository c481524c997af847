"""Interactive main entry point for the learning companion."""

import sys
from typing import Iterable, Iterator, Optional
from ytcompanion.config import Config
from ytcompanion.captions import CaptionClient
from ytcompanion.downloader import import_video, get_output_dir
from ytcompanion.analyzer import analyze_chapters
from ytcompanion.chat import start_chat_session
from ytcompanion.locator import PlaybackTracker, locate_chapter
from ytcompanion.models import Transcript
from ytcompanion.store import save_transcript
from ytcompanion.timecode import format_timestamp
from ytcompanion.writers.txt_writer import write_chapters, write_txt


def process_video(url: str, client: CaptionClient, force: bool = False, analyze: bool = False) -> Transcript:
    """
    Import a single video and write its outputs.

    Args:
        url: YouTube video URL
        client: Caption client shared across videos
        force: If True, re-import even if stored
        analyze: If True, generate a chapter outline with GPT

    Returns:
        Transcript object
    """
    try:
        transcript = import_video(url, client, force=force)
        output_dir = get_output_dir(transcript.video_id)

        print("Writing transcript files...")
        write_txt(transcript, output_dir / "transcript.txt")

        if analyze and transcript.segments:
            print()
            try:
                analyze_chapters(transcript)
                save_transcript(transcript, output_dir)
                write_chapters(transcript, output_dir / "chapters.txt")
                print("✓ Chapter outline saved to: chapters.txt")
            except (RuntimeError, ValueError) as e:
                print(f"⚠ Error analyzing transcript: {str(e)}")
                print("Continuing without chapters...")

        print("✓ All files saved successfully!")
        return transcript

    except Exception as e:
        print(f"\n✗ Error processing video: {str(e)}", file=sys.stderr)
        raise


def print_outline(transcript: Transcript) -> None:
    """Print the chapter outline and summary."""
    print()
    print("=" * 60)
    print("CHAPTERS")
    print("=" * 60)
    if transcript.summary:
        print(transcript.summary)
        print()
    for chapter in transcript.chapters:
        print(f"[{format_timestamp(chapter.start_time)}] {chapter.title}")
    print("=" * 60)


def playback_positions(transcript: Transcript, step: float = 0.5) -> Iterator[float]:
    """Playback positions from 0 to the end of the last caption, ``step`` seconds apart."""
    if not transcript.segments:
        return
    end = max(segment.end for segment in transcript.segments)
    count = int(end / step)
    for tick in range(count + 1):
        yield tick * step


def follow_along(transcript: Transcript, times: Iterable[float]) -> Optional[int]:
    """
    Replay playback positions and print each line as it becomes active.

    Returns:
        Index of the segment active at the last position
    """
    tracker = PlaybackTracker(transcript.segments)
    for position in times:
        index = tracker.update(position)
        if not tracker.changed or index is None:
            continue
        segment = transcript.segments[index]
        chapter_index = locate_chapter(transcript.chapters, position)
        prefix = ""
        if chapter_index is not None:
            prefix = f"({transcript.chapters[chapter_index].title}) "
        print(f"▶ [{format_timestamp(segment.start)}] {prefix}{segment.text}")
    return tracker.active


def main():
    """Interactive main function."""
    print("=" * 60)
    print("YouTube Learning Companion")
    print("=" * 60)
    print()

    Config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    client = CaptionClient()

    while True:
        print()
        print("-" * 60)
        url = input("Please paste the URL of the YouTube video you want to study: ").strip()

        if not url:
            print("No URL provided. Exiting...")
            break

        print()
        analyze = input("Generate a chapter outline with GPT? (y/n): ").strip().lower() in ('y', 'yes')
        if analyze:
            try:
                Config.validate()
            except ValueError as e:
                print(f"✗ Configuration Error: {str(e)}", file=sys.stderr)
                analyze = False

        print()
        print("Importing video...")
        print()

        try:
            transcript = process_video(url, client, force=False, analyze=analyze)

            print()
            print("=" * 60)
            if transcript.segments:
                print(f"✓ Import complete: {len(transcript.segments)} caption lines")
            else:
                print("⚠ Import complete, but no captions are available for this video")
            print(f"Files saved to: {get_output_dir(transcript.video_id)}")
            print("=" * 60)

            if transcript.chapters:
                print_outline(transcript)

            if transcript.segments:
                print()
                replay_choice = input("Replay the captions in follow-along mode? (y/n): ").strip().lower()
                if replay_choice in ('y', 'yes'):
                    print()
                    follow_along(transcript, playback_positions(transcript))

                print()
                chat_choice = input("Would you like to ask questions about the video? (y/n): ").strip().lower()
                if chat_choice in ('y', 'yes'):
                    try:
                        start_chat_session(transcript)
                    except (RuntimeError, ValueError) as e:
                        print(f"\n⚠ Error starting chat session: {str(e)}")

        except Exception as e:
            print()
            print("=" * 60)
            print(f"✗ Failed to import video: {str(e)}")
            print("=" * 60)

        print()
        another = input("Would you like to import another video? (y/n): ").strip().lower()
        if another not in ('y', 'yes'):
            break

    print()
    print("Thank you for using YouTube Learning Companion!")


if __name__ == "__main__":
    main()
