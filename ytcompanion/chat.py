"""Interactive chat interface for asking questions about a video."""

import re
from typing import Dict, List, Tuple

from ytcompanion.analyzer import format_transcript_for_chat
from ytcompanion.llm import complete, create_client
from ytcompanion.locator import locate_chapter
from ytcompanion.models import Chapter, Transcript
from ytcompanion.timecode import format_timestamp, parse_timestamp


CHAT_SYSTEM_PROMPT = """You are an assistant that answers questions about the content of a YouTube video.

Rules:
1. Base every answer only on the transcript provided.
2. Point to the relevant part of the video with an M:SS timestamp (e.g. "explained from 3:45").
3. If the transcript does not contain the information, say so honestly. Never guess.
4. Briefly explain technical terms when needed.
5. Answer concisely and clearly, in the language of the question."""

EXIT_COMMANDS = ('quit', 'exit', 'q')

# M:SS or H:MM:SS not embedded in a longer run of digits and colons
_CITATION_RE = re.compile(r'(?<![\d:])(?:\d+:)?\d{1,2}:\d{2}(?![\d:])')


def build_chat_messages(transcript: Transcript) -> List[Dict[str, str]]:
    """Initial conversation with the timestamped transcript as system context."""
    return [
        {
            "role": "system",
            "content": (
                f"{CHAT_SYSTEM_PROMPT}\n\n"
                f"Video title: {transcript.title or transcript.video_id}\n\n"
                "Here is the transcript of the video. Answer questions based on it.\n\n"
                f"---\n{format_transcript_for_chat(transcript.segments)}\n---"
            )
        }
    ]


def cited_chapters(transcript: Transcript, answer: str) -> List[Tuple[int, Chapter]]:
    """
    Find the timestamps cited in an answer and the chapter each falls in.

    Returns:
        List of (seconds, chapter) tuples in order of first citation
    """
    citations = []
    seen = set()
    for match in _CITATION_RE.finditer(answer):
        try:
            seconds = parse_timestamp(match.group())
        except ValueError:
            continue
        if seconds in seen:
            continue
        seen.add(seconds)
        index = locate_chapter(transcript.chapters, seconds)
        if index is not None:
            citations.append((seconds, transcript.chapters[index]))
    return citations


def start_chat_session(transcript: Transcript) -> None:
    """
    Start an interactive chat session where user can ask questions about the video.

    Args:
        transcript: Transcript object with segments
    """
    if not transcript.segments:
        print("⚠ Transcript not available: the video has no captions")
        return

    client = create_client()
    messages = build_chat_messages(transcript)

    print()
    print("=" * 60)
    print("INTERACTIVE Q&A MODE")
    print("=" * 60)
    print()
    print("You can now ask questions about the video.")
    print("Answers point to the part of the video they come from.")
    print("Type 'quit', 'exit', or 'q' to end the session.")
    print()

    conversation_count = 0

    while True:
        try:
            question = input("Your question: ").strip()

            if not question:
                continue

            if question.lower() in EXIT_COMMANDS:
                print("\nEnding chat session. Goodbye!")
                break

            messages.append({
                "role": "user",
                "content": question
            })

            print("Thinking...", end="", flush=True)
            response_text = complete(messages, client=client)

            print("\r" + " " * 50 + "\r", end="")  # Clear line
            print(f"AI: {response_text}\n")
            for seconds, chapter in cited_chapters(transcript, response_text):
                print(f"  ↳ {format_timestamp(seconds)} is in chapter: {chapter.title}")

            messages.append({
                "role": "assistant",
                "content": response_text
            })

            conversation_count += 1

            # Warn if conversation is getting long (to avoid token limits)
            if conversation_count > 20:
                print("⚠ Note: Long conversation detected. Consider starting a new session for better performance.\n")

        except KeyboardInterrupt:
            print("\n\nInterrupted by user. Ending chat session.")
            break
        except RuntimeError as e:
            print(f"\n✗ Error: {str(e)}")
            print("You can continue asking questions or type 'quit' to exit.\n")
            # Remove the last user message if there was an error
            if messages and messages[-1]["role"] == "user":
                messages.pop()
