"""HTTP client for the scrape endpoint."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from recipe_clipper.models.recipe import Recipe

logger = logging.getLogger(__name__)

SCRAPE_PATH = "/api/scrape"


class ScrapeClientError(Exception):
    """Raised when the scrape endpoint cannot deliver a recipe.

    ``status_message`` is the server's ``statusMessage`` when it sent one.
    """

    def __init__(self, status_message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(status_message or f"Scrape request failed (status={status_code})")
        self.status_message = status_message
        self.status_code = status_code


class ScrapeClient:
    """Calls ``POST /api/scrape`` and returns the recipe."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 90.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        # The server may spend a fetch timeout plus a Gemini call on one request
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ScrapeClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def scrape(self, url: str) -> Recipe:
        """
        Scrape ``url`` through the API.

        Raises:
            ScrapeClientError: On transport failure, error status or bad payload
        """
        try:
            response = self._http.post(SCRAPE_PATH, json={"url": url})
        except httpx.HTTPError as e:
            logger.warning(f"Scrape request failed: {e}")
            raise ScrapeClientError() from e

        if not response.is_success:
            raise ScrapeClientError(_status_message(response), response.status_code)

        try:
            return Recipe.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Scrape response is not a recipe: {e}")
            raise ScrapeClientError(status_code=response.status_code) from e


def _status_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("statusMessage")
        if isinstance(message, str) and message.strip():
            return message
    return None
