"""Prompt extraction from inbound requests."""
import json
from typing import Mapping, Optional

from app.errors import ValidationError
from app.models import MAX_PROMPT_CHARS, PromptRequest


def _prompt_from_body(body: bytes) -> str:
    # Unparseable or non-object bodies count as an empty prompt
    try:
        data = json.loads(body.decode("utf-8")) if body else {}
    except (UnicodeDecodeError, json.JSONDecodeError):
        return ""
    if not isinstance(data, dict):
        return ""
    value = data.get("prompt")
    return value if isinstance(value, str) else ""


def extract_prompt(method: str, query: Mapping[str, str], body: Optional[bytes] = None) -> str:
    """
    Read the prompt from a request.

    GET requests use the ``prompt`` query parameter, every other method the
    ``prompt`` field of a JSON body. The value is trimmed and cut to the first
    MAX_PROMPT_CHARS characters.

    Raises:
        ValidationError: if nothing is left after trimming
    """
    if method.upper() == "GET":
        # Repeated ?prompt= keeps the first value
        if hasattr(query, "getlist"):
            values = query.getlist("prompt")
            raw = values[0] if values else ""
        else:
            raw = query.get("prompt") or ""
    else:
        raw = _prompt_from_body(body or b"")

    prompt = raw.strip()[:MAX_PROMPT_CHARS]
    if not prompt:
        raise ValidationError("prompt is empty")
    return PromptRequest(prompt=prompt).prompt
