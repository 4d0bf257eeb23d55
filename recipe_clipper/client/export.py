"""Markdown and printable HTML exports of a scraped recipe."""

from html import escape
from typing import List, Tuple

from recipe_clipper.client.view_model import (
    ComponentVisibility,
    active_components,
    active_ingredients,
    has_component_ingredients,
)
from recipe_clipper.models.recipe import Recipe
from recipe_clipper.utils.html import clean_text

DEFAULT_SECTION_NAME = "Ingredients"


def _numbered(steps: List[str]) -> str:
    return "\n".join(f"{i}. {clean_text(step)}" for i, step in enumerate(steps, start=1))


def _bulleted(items: List[str], prefix: str = "- ") -> str:
    return "\n".join(f"{prefix}{item}" for item in items)


def export_recipe_markdown(recipe: Recipe, visibility: ComponentVisibility) -> str:
    """Render the visible parts of a recipe as Markdown."""
    components = active_components(recipe, visibility)
    md = f"# {recipe.title}\n\n"

    if has_component_ingredients(recipe) and components:
        for component in components:
            md += f"### {component.name}\n\n"
            if component.ingredients:
                md += f"#### Ingredients\n{_bulleted(component.ingredients)}\n\n"
            md += f"#### Instructions\n{_numbered(component.steps)}\n\n"
    else:
        md += f"## Ingredients\n{_bulleted(active_ingredients(recipe, visibility))}\n\n"
        md += "## Instructions\n"
        for component in components:
            md += f"### {component.name}\n\n{_numbered(component.steps)}\n\n"

    md += f"\n[Source]({recipe.url})"
    return md


def _grocery_sections(recipe: Recipe, visibility: ComponentVisibility) -> List[Tuple[str, List[str]]]:
    """(section name, ingredients) pairs for the grocery list."""
    components = active_components(recipe, visibility)
    if has_component_ingredients(recipe) and components:
        return [
            (component.name, list(component.ingredients))
            for component in components
            if component.ingredients
        ]
    return [(DEFAULT_SECTION_NAME, active_ingredients(recipe, visibility))]


def export_grocery_list_markdown(recipe: Recipe, visibility: ComponentVisibility) -> str:
    """Render a Markdown checklist of the visible ingredients."""
    md = f"# Grocery List: {recipe.title}\n\n"

    if has_component_ingredients(recipe) and active_components(recipe, visibility):
        for name, ingredients in _grocery_sections(recipe, visibility):
            md += f"## {name}\n\n{_bulleted(ingredients, '- [ ] ')}\n\n"
    else:
        for ingredient in active_ingredients(recipe, visibility):
            md += f"- [ ] {ingredient}\n"

    md += f"\n[Source]({recipe.url})"
    return md


_PRINT_CSS = """
    @media print {
      @page { margin: 20mm; size: letter; }
      body { background: white; }
    }
    body { font-family: system-ui, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; color: #1c1917; }
    h1 { font-size: 2rem; font-weight: bold; margin-bottom: 1rem; color: #ea580c; }
    h2 { font-size: 1.5rem; font-weight: bold; margin-top: 1.5rem; margin-bottom: 0.5rem; color: #f97316; }
    ul { list-style: none; padding-left: 0; }
    li { margin: 0.5rem 0; padding: 0.5rem; border-bottom: 1px solid #fde68a; }
    label { display: flex; align-items: center; }
    input[type="checkbox"] { width: 20px; height: 20px; margin-right: 10px; accent-color: #ea580c; }
    span { font-size: 1.1rem; }
    .source { margin-top: 2rem; font-size: 0.9rem; color: #78716c; font-style: italic; }
"""


def export_grocery_list_html(recipe: Recipe, visibility: ComponentVisibility) -> str:
    """
    Render a printable HTML grocery list with checkboxes.

    Section headings are only shown when the list has more than one section.
    All recipe text is HTML-escaped.
    """
    sections = _grocery_sections(recipe, visibility)
    title = escape(recipe.title)

    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '  <meta charset="utf-8">',
        f"  <title>Grocery List: {title}</title>",
        f"  <style>{_PRINT_CSS}  </style>",
        "</head>",
        "<body>",
        f"  <h1>Grocery List: {title}</h1>",
    ]

    for name, ingredients in sections:
        if len(sections) > 1 and name != DEFAULT_SECTION_NAME:
            parts.append(f"  <h2>{escape(name)}</h2>")
        parts.append("  <ul>")
        for ingredient in ingredients:
            parts.append(
                f'    <li><label><input type="checkbox"><span>{escape(ingredient)}</span></label></li>'
            )
        parts.append("  </ul>")

    parts.extend(
        [
            f'  <p class="source">Source: {escape(recipe.url)}</p>',
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(parts) + "\n"
