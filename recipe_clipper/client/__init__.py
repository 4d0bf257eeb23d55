"""Client-side recipe view-model, HTTP client and exports."""

from recipe_clipper.client.export import (
    export_grocery_list_html,
    export_grocery_list_markdown,
    export_recipe_markdown,
)
from recipe_clipper.client.scrape_client import ScrapeClient, ScrapeClientError
from recipe_clipper.client.view_model import RecipeViewModel

__all__ = [
    "RecipeViewModel",
    "ScrapeClient",
    "ScrapeClientError",
    "export_grocery_list_html",
    "export_grocery_list_markdown",
    "export_recipe_markdown",
]
