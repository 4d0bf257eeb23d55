"""Recipe scrape endpoint."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from recipe_clipper.api.dependencies import get_scrape_service
from recipe_clipper.middleware.rate_limit import SCRAPE_RATE_LIMIT, limiter
from recipe_clipper.models.recipe import ErrorResponse, Recipe, ScrapeRequest
from recipe_clipper.services.scrape_service import ScrapeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["scrape"])

_ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (400, 403, 429, 500, 502, 503)
}


async def _read_url(request: Request) -> Any:
    """Pull ``url`` out of the JSON body; anything unreadable counts as missing."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    return body.get("url")


@router.post(
    "/scrape",
    response_model=Recipe,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
    # The body is read by hand so malformed input maps to "URL is required"
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ScrapeRequest.model_json_schema()}},
        }
    },
)
@limiter.limit(SCRAPE_RATE_LIMIT)
async def scrape_recipe(
    request: Request,
    scrape_service: ScrapeService = Depends(get_scrape_service),
) -> Recipe:
    """
    Scrape a recipe from a public URL.

    - **url**: Recipe page URL (JSON body `{"url": "..."}`)
    - Returns the canonical recipe, or `{"statusMessage": ...}` with an error status
    """
    recipe_url = await _read_url(request)

    logger.info(
        "Route /api/scrape called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/api/scrape",
            "params": {"url": str(recipe_url)[:200] if recipe_url is not None else None},
        },
    )

    return await scrape_service.scrape(recipe_url)
