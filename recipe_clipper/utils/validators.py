"""Input validation utilities."""

from typing import Any
from urllib.parse import urlparse

from recipe_clipper.utils.exceptions import ValidationError


def validate_url(url: Any) -> str:
    """
    Validate a recipe URL submitted by the client.

    Args:
        url: URL to validate

    Returns:
        Validated URL string (surrounding whitespace removed)

    Raises:
        ValidationError: If URL is missing or not an absolute http(s) URL
    """
    if url is None or (isinstance(url, str) and not url.strip()):
        raise ValidationError("URL is required")

    if not isinstance(url, str):
        raise ValidationError("Invalid URL format")

    url = url.strip()

    try:
        parsed = urlparse(url)
        # Accessing .port validates the netloc (raises on e.g. "host:abc")
        parsed.port
    except ValueError as e:
        raise ValidationError(f"Invalid URL format: {str(e)}") from e

    if parsed.scheme not in ("http", "https"):
        raise ValidationError("Invalid URL format")

    if not parsed.hostname:
        raise ValidationError("Invalid URL format")

    if any(ch.isspace() for ch in url):
        raise ValidationError("Invalid URL format")

    return url
