"""Pydantic models."""

from recipe_clipper.models.recipe import (
    DEFAULT_COMPONENT_NAME,
    ErrorResponse,
    Recipe,
    RecipeComponent,
    ScrapeRequest,
)

__all__ = [
    "DEFAULT_COMPONENT_NAME",
    "ErrorResponse",
    "Recipe",
    "RecipeComponent",
    "ScrapeRequest",
]
