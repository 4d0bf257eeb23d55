"""Reclassify Gemini failure messages into structured errors."""

from typing import NamedTuple, Optional, Tuple, Type

from recipe_clipper.utils.exceptions import (
    ConfigurationError,
    ExtractionError,
    RecipeClipperException,
)


class ErrorPattern(NamedTuple):
    key: str
    needles: Tuple[str, ...]
    error_cls: Type[RecipeClipperException]
    status_code: int
    message: str


# Checked top to bottom; the first match wins. API key problems must be
# recognised before the generic network patterns.
ERROR_PATTERNS: Tuple[ErrorPattern, ...] = (
    ErrorPattern(
        "api_key",
        ("api key", "api_key_invalid", "api_key"),
        ConfigurationError,
        500,
        "Server Configuration Error: the AI API key was rejected.",
    ),
    ErrorPattern(
        "quota",
        ("quota", "resource_exhausted", "rate limit", "429"),
        ExtractionError,
        429,
        "AI service quota exceeded. Please try again later.",
    ),
    ErrorPattern(
        "permission",
        ("permission_denied", "permission denied", "403"),
        ExtractionError,
        403,
        "AI service denied the request.",
    ),
    ErrorPattern(
        "invalid_argument",
        ("invalid_argument", "invalid argument", "400"),
        ExtractionError,
        400,
        "AI service rejected the request as invalid.",
    ),
    ErrorPattern(
        "network",
        ("timeout", "timed out", "connection", "network", "unavailable", "503"),
        ExtractionError,
        503,
        "AI service is temporarily unreachable.",
    ),
)


def match_error_pattern(message: str) -> Optional[ErrorPattern]:
    """Return the first pattern whose needles appear in ``message``."""
    lowered = (message or "").lower()
    for pattern in ERROR_PATTERNS:
        if any(needle in lowered for needle in pattern.needles):
            return pattern
    return None


def classify_extraction_error(message: str) -> RecipeClipperException:
    """Build the structured error for a failed model invocation.

    The original message is appended so operators can still see what the
    Gemini SDK reported.
    """
    pattern = match_error_pattern(message)
    if pattern is None:
        return ExtractionError(f"Failed to extract recipe: {message}", status_code=500)
    return pattern.error_cls(f"{pattern.message} ({message})", status_code=pattern.status_code)
