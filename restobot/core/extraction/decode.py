# restobot/core/extraction/decode.py
"""Decoding of extraction collaborator output into JSON."""

import json
import re
from typing import Any

_FENCE_START = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_END = re.compile(r"\s*```$")


class ExtractionError(ValueError):
    """Extraction collaborator output could not be used."""

    pass


def strip_json_fences(raw: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    text = (raw or "").strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


def _embedded_json(text: str) -> str:
    # Prose around the payload: keep the outermost [...] or {...}
    starts = [i for i in (text.find("["), text.find("{")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    end = max(text.rfind("]"), text.rfind("}"))
    if end <= start:
        return text
    return text[start : end + 1]


def decode_json(raw: str) -> Any:
    """
    Parse model output as JSON after stripping fences.

    Raises:
        ExtractionError: If nothing parseable remains
    """
    text = strip_json_fences(raw)
    if not text:
        raise ExtractionError("Extraction returned an empty response")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    candidate = _embedded_json(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ExtractionError(
            f"Extraction returned invalid JSON at position {e.pos}: {e.msg}"
        ) from e
