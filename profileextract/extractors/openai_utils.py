"""
Shared helpers for reading OpenAI chat responses.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from ..errors import ExtractionParseError


def strip_markdown_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json") :]
    elif text.startswith("```"):
        text = text[len("```") :]
    if text.endswith("```"):
        text = text[: -len("```")]
    return text.strip()


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse model output as a single JSON object.

    Markdown fences are tolerated; anything else around the object is not.
    """
    if not isinstance(text, str) or not text.strip():
        raise ExtractionParseError(detail="empty response from generation service")

    cleaned = strip_markdown_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionParseError(detail=f"{e}; response was: {cleaned[:500]}") from e

    if not isinstance(data, dict):
        raise ExtractionParseError(detail="response must be a JSON object")
    return data


def first_message_content(response: Any) -> str:
    """Content of the first choice of a chat completion, or an empty string."""
    choices = getattr(response, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""
