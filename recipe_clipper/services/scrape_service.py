"""Scrape pipeline: fetch -> sanitize -> prompt -> parse -> normalize."""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional

from recipe_clipper.config import Settings
from recipe_clipper.models.recipe import Recipe
from recipe_clipper.services.fetcher import PageFetcher
from recipe_clipper.services.gemini_service import GeminiService
from recipe_clipper.services.prompt import build_extraction_prompt
from recipe_clipper.utils.exceptions import ConfigurationError, RecipeClipperException
from recipe_clipper.utils.html import extract_page_image, sanitize_html
from recipe_clipper.utils.json_parsing import parse_model_output
from recipe_clipper.utils.recipe_normalization import normalize_recipe
from recipe_clipper.utils.validators import validate_url

logger = logging.getLogger(__name__)


class ScrapeService:
    """Turns a recipe URL into a canonical Recipe.

    Stateless between calls; every failure leaves as a
    ``RecipeClipperException`` with its HTTP status attached.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: Optional[PageFetcher] = None,
        gemini_service: Optional[GeminiService] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or PageFetcher(
            timeout=settings.http_timeout,
            retries=settings.http_retries,
        )
        self._gemini_service = gemini_service

    @property
    def gemini_service(self) -> GeminiService:
        if self._gemini_service is None:
            self._gemini_service = GeminiService(
                api_key=self.settings.gemini_api_key,
                model=self.settings.gemini_model,
                fallback_model=self.settings.gemini_fallback_model,
                temperature=self.settings.gemini_temperature,
                timeout=self.settings.gemini_timeout,
            )
        return self._gemini_service

    def _check_configuration(self) -> None:
        if not self.settings.has_gemini_api_key:
            logger.critical("GEMINI_API_KEY is missing from runtime config.")
            raise ConfigurationError("Server Configuration Error: API Key not found.")

    async def scrape(self, url: Optional[str]) -> Recipe:
        """
        Scrape a recipe URL.

        Raises:
            ValidationError: Bad URL or model output that is not a recipe
            ConfigurationError: Gemini API key missing or rejected
            FetchError: The recipe site could not be read
            ExtractionError: The Gemini call failed
            ParseError: The Gemini output was not JSON
        """
        validated_url = validate_url(url)
        self._check_configuration()

        start_time = time.perf_counter()
        timings: Dict[str, float] = {}

        try:
            # STEP 1: Fetch HTML
            logger.info(f"Step 1: Fetching recipe page: {validated_url}")
            step_start = time.perf_counter()
            html = await self.fetcher.fetch(validated_url)
            timings["fetch"] = time.perf_counter() - step_start

            # STEP 2: Strip markup
            logger.info("Step 2: Sanitizing HTML")
            step_start = time.perf_counter()
            page_text = sanitize_html(html, max_chars=self.settings.max_content_chars)
            image_hint = extract_page_image(html)
            timings["sanitize"] = time.perf_counter() - step_start
            logger.info(
                "Page text ready",
                extra={"html_chars": len(html), "text_chars": len(page_text)},
            )

            # STEP 3: Ask Gemini
            logger.info("Step 3: Extracting recipe data with Gemini")
            step_start = time.perf_counter()
            prompt = build_extraction_prompt(page_text, validated_url, image_hint=image_hint)
            response_text = await self.gemini_service.generate_json(prompt)
            timings["gemini"] = time.perf_counter() - step_start

            # STEP 4: Decode JSON
            logger.info("Step 4: Parsing JSON response")
            data = parse_model_output(response_text)

            # STEP 5: Canonical recipe
            logger.info("Step 5: Normalizing recipe")
            recipe = normalize_recipe(data, url=validated_url)

        except RecipeClipperException as e:
            logger.error(
                f"Scrape failed: {e.message}",
                extra={
                    "url": validated_url,
                    "error_kind": e.kind,
                    "status_code": e.status_code,
                },
                exc_info=True,
            )
            raise

        timings["total"] = time.perf_counter() - start_time
        logger.info(
            f"Recipe scraped: {recipe.title}",
            extra={
                "url": validated_url,
                "components": len(recipe.components),
                "timings_s": {k: round(v, 3) for k, v in timings.items()},
            },
        )
        return recipe
