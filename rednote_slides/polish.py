"""
Rewrite raw post text with Gemini into a title and body.
"""

import json
import logging
import os
from typing import Any

from dotenv import load_dotenv
from google import genai
from google.genai import types

from .cleaning import normalize_line_breaks
from .errors import PolishError
from .models import ContentData

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

PROMPT_TEMPLATE = """
You are an expert Xiaohongshu (RedNote) copywriter.
Please rewrite the following text to be engaging, aesthetic, and formatted for a slide deck.

1. Extract or create a catchy, short title (max 10 chars).
2. Polish the body text. Use emotive language, correct punctuation, and ensure it flows well.
3. The tone should be "chill", "aesthetic", and "literary".
4. Return ONLY a valid JSON object with the following structure:
{{
  "title": "String",
  "body": "String (use \\n for line breaks)"
}}

Original Text:
{text}
"""


def get_api_key() -> str | None:
    """Return the Gemini key from ``GEMINI_API_KEY`` or ``API_KEY``."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def build_prompt(text: str) -> str:
    return PROMPT_TEMPLATE.format(text=text)


def parse_polished(raw: str | None) -> ContentData:
    """
    Validate the model's JSON answer.

    Args:
        raw: Response text from the model

    Returns:
        ContentData with normalised line breaks in the body

    Raises:
        PolishError: If the text is empty, not JSON, or lacks string
            ``title``/``body`` fields
    """
    if not raw:
        raise PolishError("No response from AI")
    try:
        data: Any = json.loads(raw)
    except ValueError as exc:
        raise PolishError(f"AI response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PolishError("AI response must be a JSON object")
    title, body = data.get("title"), data.get("body")
    if not isinstance(title, str) or not isinstance(body, str):
        raise PolishError("AI response must contain string 'title' and 'body' fields")
    return ContentData(title=title.strip(), body=normalize_line_breaks(body).strip())


def polish_content(
    text: str,
    *,
    api_key: str | None = None,
    model: str | None = None,
    client: Any = None,
) -> ContentData:
    """
    Rewrite ``text`` into a catchy title and a polished body.

    Args:
        text: Combined title and body text
        api_key: Gemini key; defaults to the environment
        model: Model name; defaults to ``GEMINI_MODEL`` or DEFAULT_MODEL
        client: Pre-built ``genai.Client`` (mainly for tests)

    Returns:
        Rewritten ContentData

    Raises:
        PolishError: On missing credentials, request failures, or an
            unusable response
    """
    if client is None:
        key = api_key or get_api_key()
        if not key:
            raise PolishError("API Key not found")
        client = genai.Client(api_key=key)
    model_name = model or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL

    try:
        response = client.models.generate_content(
            model=model_name,
            contents=build_prompt(text),
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
    except Exception as exc:
        logger.error(f"Gemini polish request failed: {exc}")
        raise PolishError(f"Gemini request failed: {exc}") from exc

    polished = parse_polished(getattr(response, "text", None))
    logger.info(f"Polished content: title={polished.title!r}, {len(polished.body)} body chars")
    return polished
