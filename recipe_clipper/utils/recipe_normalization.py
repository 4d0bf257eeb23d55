"""Normalize model output into the canonical Recipe model."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from recipe_clipper.models.recipe import DEFAULT_COMPONENT_NAME, Recipe, RecipeComponent
from recipe_clipper.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

INVALID_STRUCTURE_MESSAGE = "Invalid recipe structure"


def _clean_lines(values: Any) -> List[str]:
    """Keep non-blank string entries, stripped."""
    if not isinstance(values, list):
        return []
    cleaned = []
    for value in values:
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            cleaned.append(text)
    return cleaned


def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def placeholder_component() -> Dict[str, Any]:
    return {"name": DEFAULT_COMPONENT_NAME, "steps": []}


def _normalize_component(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, RecipeComponent):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        return None

    name = _optional_text(raw.get("name")) or DEFAULT_COMPONENT_NAME
    component: Dict[str, Any] = {"name": name, "steps": _clean_lines(raw.get("steps"))}

    ingredients = raw.get("ingredients")
    if ingredients is not None:
        component["ingredients"] = _clean_lines(ingredients)

    return component


def normalize_recipe(data: Any, url: str) -> Recipe:
    """
    Build a canonical Recipe from decoded model output.

    - ``title``, ``ingredients`` and ``components`` must be present
    - blank ingredient and step entries are removed
    - components without steps are dropped; when none remain a single
      placeholder ``{"name": "Instructions", "steps": []}`` is kept
    - ``url`` always overrides whatever the model returned

    Normalizing an already-normalized recipe returns an equal recipe.

    Raises:
        ValidationError: If the structure is not a recipe
    """
    if isinstance(data, Recipe):
        data = data.model_dump()

    if not isinstance(data, dict):
        raise ValidationError(INVALID_STRUCTURE_MESSAGE)

    title = _optional_text(data.get("title"))
    ingredients = data.get("ingredients")
    components = data.get("components")

    if not title or not isinstance(ingredients, list) or not isinstance(components, list):
        logger.warning(
            "Model output is missing required recipe fields",
            extra={"keys": sorted(str(k) for k in data.keys())},
        )
        raise ValidationError(INVALID_STRUCTURE_MESSAGE)

    normalized_components = []
    for raw in components:
        component = _normalize_component(raw)
        if component is None:
            continue
        if not component["steps"]:
            logger.debug(f"Dropping component without steps: {component['name']}")
            continue
        normalized_components.append(component)

    if not normalized_components:
        normalized_components = [placeholder_component()]

    try:
        return Recipe(
            title=title,
            description=_optional_text(data.get("description")),
            image=_optional_text(data.get("image")),
            ingredients=_clean_lines(ingredients),
            components=normalized_components,
            url=url,
        )
    except PydanticValidationError as e:
        raise ValidationError(f"{INVALID_STRUCTURE_MESSAGE}: {e}") from e
