"""
Gemini LLM service for recipe extraction.

The model is asked for JSON output (response_mime_type=application/json).
Decoding and validation of that JSON happen in the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from google import genai
from google.genai import types

from recipe_clipper.utils.error_classification import classify_extraction_error
from recipe_clipper.utils.exceptions import ExtractionError, RecipeClipperException

logger = logging.getLogger(__name__)

_UNSUPPORTED_MODEL_HINTS = ("not found", "not supported", "unsupported", "is not available")


def is_unsupported_model_error(exc: Exception) -> bool:
    """True when Gemini rejected the model identifier itself."""
    if getattr(exc, "code", None) == 404:
        return True
    message = str(exc).lower()
    return "model" in message and any(hint in message for hint in _UNSUPPORTED_MODEL_HINTS)


class GeminiService:
    """Service for interacting with Gemini API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        fallback_model: Optional[str] = None,
        temperature: float = 0.0,
        timeout: Optional[float] = None,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.fallback_model = fallback_model
        self.temperature = temperature
        self.timeout = timeout  # seconds; None leaves the call unbounded
        self._client = client

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client (lazy initialization)."""
        if self._client is None:
            http_options = None
            if self.timeout:
                http_options = types.HttpOptions(timeout=int(self.timeout * 1000))
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    def _models_to_try(self) -> List[str]:
        models = [self.model]
        if self.fallback_model and self.fallback_model != self.model:
            models.append(self.fallback_model)
        return models

    async def generate_json(self, prompt: str) -> str:
        """
        Send ``prompt`` to Gemini in JSON mode and return the raw text.

        If the configured model is rejected as unsupported, the fallback model
        is tried once.

        Raises:
            ExtractionError / ConfigurationError: Classified from the SDK error
        """
        models = self._models_to_try()

        for index, model in enumerate(models):
            try:
                logger.info(f"Sending extraction prompt to Gemini ({model})", extra={"model": model})
                return await self._call_gemini(model=model, contents=prompt)
            except RecipeClipperException:
                raise
            except Exception as e:
                if index + 1 < len(models) and is_unsupported_model_error(e):
                    logger.warning(
                        f"Model '{model}' rejected as unsupported, retrying with '{models[index + 1]}'",
                        extra={"model": model, "error": str(e)},
                    )
                    continue

                logger.error(f"Gemini API call failed: {e}", extra={"model": model}, exc_info=True)
                raise classify_extraction_error(str(e)) from e

        # Unreachable: the loop either returns or raises.
        raise ExtractionError("No Gemini model available")

    async def _call_gemini(self, *, model: str, contents: Any) -> str:
        """Single Gemini call in JSON mode."""

        def _sync_call() -> Any:
            return self.client.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    temperature=self.temperature,
                ),
            )

        try:
            resp = await asyncio.wait_for(asyncio.to_thread(_sync_call), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini call timed out after {self.timeout}s", extra={"model": model})
            raise classify_extraction_error(f"Gemini request timed out after {self.timeout}s") from e

        text = getattr(resp, "text", None)
        if not text or not text.strip():
            raise ExtractionError("Gemini returned empty response")
        logger.debug("Gemini raw response:\n%s", text)
        return text.strip()
