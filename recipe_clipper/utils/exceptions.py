"""Custom exception classes."""

from typing import Optional


class RecipeClipperException(Exception):
    """Base exception for the Recipe Clipper application.

    Every error that leaves the scrape pipeline is one of these, carrying a
    stable HTTP status code and a human-readable message.
    """

    default_status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code

    @property
    def kind(self) -> str:
        """Name of the error kind (e.g. ``FetchError``)."""
        return type(self).__name__


class ValidationError(RecipeClipperException):
    """Raised when input or model output fails validation."""

    default_status_code = 400


class ConfigurationError(RecipeClipperException):
    """Raised when required server configuration is missing."""

    default_status_code = 500


class FetchError(RecipeClipperException):
    """Raised when the recipe page cannot be fetched."""

    default_status_code = 502


class ExtractionError(RecipeClipperException):
    """Raised when the Gemini API call fails."""

    default_status_code = 500


class ParseError(RecipeClipperException):
    """Raised when the model output cannot be decoded as JSON."""

    default_status_code = 500
