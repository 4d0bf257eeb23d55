"""Recipe view-model: scrape state plus the views derived from it."""

import logging
from typing import Dict, List, Optional

from recipe_clipper.client.scrape_client import ScrapeClient, ScrapeClientError
from recipe_clipper.models.recipe import Recipe, RecipeComponent

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Failed to load recipe. Ensure the URL is valid."

# Component index -> visible flag; missing indices are visible
ComponentVisibility = Dict[int, bool]


def is_visible(visibility: ComponentVisibility, index: int) -> bool:
    return visibility.get(index) is not False


def has_component_ingredients(recipe: Optional[Recipe]) -> bool:
    """True when at least one component carries its own ingredients."""
    if recipe is None:
        return False
    return any(component.ingredients for component in recipe.components)


def active_components(recipe: Optional[Recipe], visibility: ComponentVisibility) -> List[RecipeComponent]:
    """Components not explicitly hidden, in recipe order."""
    if recipe is None:
        return []
    return [
        component
        for index, component in enumerate(recipe.components)
        if is_visible(visibility, index)
    ]


def active_ingredients(recipe: Optional[Recipe], visibility: ComponentVisibility) -> List[str]:
    """
    Ingredients of the visible components, or the top-level list.

    When any component carries ingredients, the visible components'
    ingredients are concatenated in order; otherwise the recipe's top-level
    ingredients are returned whatever the visibility.
    """
    if recipe is None:
        return []
    if not has_component_ingredients(recipe):
        return list(recipe.ingredients)

    ingredients: List[str] = []
    for component in active_components(recipe, visibility):
        ingredients.extend(component.ingredients or [])
    return ingredients


class RecipeViewModel:
    """State behind the recipe page.

    ``submit()`` never raises for endpoint failures; the message lands in
    ``error`` instead. Overlapping submissions are not guarded against.
    """

    def __init__(self, client: ScrapeClient, url: str = "") -> None:
        self.client = client
        self.url = url
        self.loading = False
        self.error: Optional[str] = None
        self.recipe: Optional[Recipe] = None
        self.visibility: ComponentVisibility = {}

    def submit(self) -> Optional[Recipe]:
        """Scrape ``self.url`` and store the recipe or the error message."""
        self.loading = True
        self.error = None
        self.recipe = None
        self.visibility = {}

        try:
            recipe = self.client.scrape(self.url)
            self.recipe = recipe
            self.visibility = {index: True for index in range(len(recipe.components))}
        except ScrapeClientError as e:
            logger.info(f"Scrape failed for {self.url!r}: {e}")
            self.error = e.status_message or GENERIC_ERROR_MESSAGE
        finally:
            self.loading = False

        return self.recipe

    def toggle_component(self, index: int) -> None:
        """Flip one component's visibility; unknown indices are ignored."""
        if self.recipe is None or not 0 <= index < len(self.recipe.components):
            return
        self.visibility[index] = not is_visible(self.visibility, index)

    def select_all(self) -> None:
        self._set_all(True)

    def deselect_all(self) -> None:
        self._set_all(False)

    def _set_all(self, visible: bool) -> None:
        if self.recipe is None:
            return
        for index in range(len(self.recipe.components)):
            self.visibility[index] = visible

    @property
    def has_component_ingredients(self) -> bool:
        return has_component_ingredients(self.recipe)

    @property
    def active_ingredients(self) -> List[str]:
        return active_ingredients(self.recipe, self.visibility)

    @property
    def active_components(self) -> List[RecipeComponent]:
        return active_components(self.recipe, self.visibility)
