"""Configuration management and environment variable loading."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file (don't override existing env vars)
load_dotenv(override=False)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Config:
    """Application configuration."""

    # Text-generation service (chapter analysis and Q&A)
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "gpt-4o-mini")
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "2"))
    OUT_DIR: Path = Path(os.getenv("OUT_DIR", "./out")).resolve()

    # Caption languages in preference order; the first track found wins
    CAPTION_LANGUAGES: list[str] = _env_list("CAPTION_LANGUAGES", "ja,en")

    # Grouping thresholds (characters) for timestamp-tagged transcript text
    ANALYSIS_BLOCK_CHARS: int = int(os.getenv("ANALYSIS_BLOCK_CHARS", "200"))
    CHAT_BLOCK_CHARS: int = int(os.getenv("CHAT_BLOCK_CHARS", "150"))

    # Print the shape of the first caption record while normalizing
    DEBUG_TRANSCRIPT: bool = _env_flag("DEBUG_TRANSCRIPT")

    @classmethod
    def validate(cls) -> None:
        """Validate that required configuration is present."""
        if not cls.OPENAI_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY is required. Please set it in your .env file or environment variables."
            )
