"""Decode the JSON object returned by the model."""

import json
import logging
from typing import Any, Optional

from recipe_clipper.utils.exceptions import ParseError

logger = logging.getLogger(__name__)


def find_first_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced top-level ``{...}`` span in ``text``.

    Braces inside JSON string literals are ignored, so a ``}`` inside an
    ingredient name does not end the object early.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None


def parse_model_output(text: str) -> Any:
    """
    Decode model output as JSON, falling back to the first embedded object.

    Raises:
        ParseError: If neither the whole text nor an embedded object decodes
    """
    text = (text or "").strip()
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        pass

    candidate = find_first_json_object(text)
    if candidate is not None:
        try:
            return json.loads(candidate)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Embedded JSON object failed to decode: {e}")

    logger.error(
        "Gemini returned invalid JSON",
        extra={"response_preview": text[:500]},
    )
    raise ParseError("AI returned an unreadable format.")
