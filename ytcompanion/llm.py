"""OpenAI chat completions with retries, shared by chapter analysis and Q&A."""

import threading
import time
from typing import Dict, List, Optional
from openai import OpenAI
from openai import APIError, RateLimitError, APIConnectionError
from tqdm import tqdm

from ytcompanion.config import Config


def create_client() -> OpenAI:
    """Create an OpenAI client from configuration."""
    Config.validate()
    return OpenAI(
        api_key=Config.OPENAI_API_KEY,
        timeout=300.0  # 5 minute timeout
    )


def _request(client: OpenAI, messages: List[Dict[str, str]], model: str) -> str:
    request_params = {
        "model": model,
        "messages": messages
    }

    # Only set temperature if model supports it (gpt-5 models only support default)
    if not model.startswith("gpt-5"):
        request_params["temperature"] = 0.3

    response = client.chat.completions.create(**request_params)
    return response.choices[0].message.content


def _request_with_progress(client: OpenAI, messages: List[Dict[str, str]], model: str, desc: str) -> str:
    with tqdm(
        total=100,
        desc=desc,
        unit="%",
        bar_format="{desc}: {percentage:3.0f}%|{bar}| {elapsed}",
        ncols=80,
        leave=False
    ) as pbar:
        progress_complete = False

        def update_progress():
            """Simulate progress since API doesn't provide real-time updates."""
            current = 0
            while not progress_complete and current < 95:
                time.sleep(0.2)
                current = min(current + 2, 95)
                pbar.n = int(current)
                pbar.refresh()

        progress_thread = threading.Thread(target=update_progress, daemon=True)
        progress_thread.start()
        try:
            text = _request(client, messages, model)
            pbar.n = 100
            pbar.refresh()
            return text
        finally:
            progress_complete = True
            progress_thread.join(timeout=0.5)


def complete(
    messages: List[Dict[str, str]],
    client: Optional[OpenAI] = None,
    desc: Optional[str] = None
) -> str:
    """
    Run a chat completion with retries.

    Args:
        messages: Chat messages in OpenAI format
        client: OpenAI client; created from configuration when omitted
        desc: Progress bar label; no progress bar when omitted

    Returns:
        Assistant message text
    """
    if client is None:
        client = create_client()
    model = Config.ANALYSIS_MODEL

    last_error = None
    for attempt in range(Config.MAX_RETRIES + 1):
        try:
            if desc:
                return _request_with_progress(client, messages, model, desc)
            return _request(client, messages, model)

        except RateLimitError as e:
            last_error = e
            if attempt < Config.MAX_RETRIES:
                wait_time = 2 ** attempt  # Exponential backoff
                print(f"Rate limit hit. Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue
            raise RuntimeError(
                f"Rate limit exceeded after {Config.MAX_RETRIES + 1} attempts. "
                f"Please try again later."
            ) from e

        except APIConnectionError as e:
            last_error = e
            if attempt < Config.MAX_RETRIES:
                wait_time = 2 ** attempt
                print(f"Connection error. Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue
            raise RuntimeError(
                f"Connection error after {Config.MAX_RETRIES + 1} attempts: {str(e)}"
            ) from e

        except APIError as e:
            error_msg = str(e)

            # 502/503 gateway errors arrive as HTML pages
            is_html_error = "<!DOCTYPE html>" in error_msg or "<html" in error_msg.lower()
            status_code = getattr(e, 'status_code', None)
            is_5xx_error = bool(status_code) and 500 <= status_code < 600

            if (is_html_error or is_5xx_error) and attempt < Config.MAX_RETRIES:
                last_error = e
                wait_time = 2 ** attempt
                print(f"Server error ({status_code or 502}). Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue

            if "quota" in error_msg.lower() or "billing" in error_msg.lower():
                raise RuntimeError(
                    f"OpenAI API quota/billing error: {error_msg}. "
                    f"Please check your OpenAI account."
                ) from e

            if is_html_error:
                raise RuntimeError(
                    "OpenAI API server error (502 Bad Gateway). "
                    "This is a temporary issue on OpenAI's servers. Please try again in a few minutes."
                ) from e

            raise RuntimeError(f"OpenAI API error: {error_msg}") from e

    raise RuntimeError(f"Failed after {Config.MAX_RETRIES + 1} attempts") from last_error
