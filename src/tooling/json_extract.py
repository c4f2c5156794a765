"""Pull a JSON object out of free-form model output."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_BRACE_SPAN = re.compile(r"{[\s\S]*}")


class JSONExtractionError(ValueError):
    """Raised when no parseable JSON can be located in a text block."""


def extract_json(text: str) -> Any:
    """Return the JSON value embedded in ``text``.

    A fenced block labelled ``json`` wins; otherwise the span from the first
    ``{`` to the last ``}`` is tried. A candidate that does not parse is an
    error rather than a reason to keep looking.
    """

    match = _FENCED_JSON.search(text)
    candidate = match.group(1) if match else None
    if candidate is None:
        match = _BRACE_SPAN.search(text)
        candidate = match.group(0) if match else None
    if candidate is None:
        raise JSONExtractionError("No JSON found in response")
    try:
        return json.loads(candidate)
    except ValueError as exc:
        raise JSONExtractionError("Invalid JSON format in response") from exc
